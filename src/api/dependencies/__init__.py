from datetime import datetime
from typing import Annotated, Generator

from fastapi import Depends, Query, Request
from fastapi.exceptions import RequestValidationError
from sqlalchemy.orm import Session

from config import config
from db.repositories import PriceRepository
from domain.base_types import parse_iso_datetime
from services.price_service import ApplicablePriceService


def get_session(request: Request) -> Generator[Session, None, None]:
    with request.app.state.sessionmaker() as session:
        yield session


def get_price_repository(session: Annotated[Session, Depends(get_session)]) -> PriceRepository:
    return PriceRepository(session)


def get_price_service(repository: Annotated[PriceRepository, Depends(get_price_repository)]) -> ApplicablePriceService:
    return ApplicablePriceService(repository, push_down=config().push_down_selection)


def get_query_instant(
    date: Annotated[str, Query(description="ISO-8601 date-time, e.g. 2020-06-14T10:00:00")],
) -> datetime:
    try:
        return parse_iso_datetime(date)
    except ValueError as exc:
        raise RequestValidationError(
            [{"type": "datetime_parsing", "loc": ("query", "date"), "msg": str(exc), "input": date}]
        ) from exc
