import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from http import HTTPStatus
from time import perf_counter
from typing import Annotated, AsyncGenerator, Awaitable, Callable

from fastapi import Depends, FastAPI, Query, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.orm import sessionmaker

from api.dependencies import get_price_service, get_query_instant
from api.schemas import ErrorResponse, PriceResponse
from config import config
from db.db import create_db_engine
from domain.base_types import ChainId, ProductId
from domain.pricing import PriceNotFoundError
from services.price_service import ApplicablePriceService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(fastapi_app: FastAPI) -> AsyncGenerator[None, None]:
    settings = config()
    engine = create_db_engine(settings.db_file, echo=settings.sql_echo)
    fastapi_app.state.sessionmaker = sessionmaker(engine)
    yield
    engine.dispose()


app = FastAPI(title="Chain prices", lifespan=lifespan)


@app.middleware("http")
async def log_process_time(request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
    start_time = perf_counter()
    response = await call_next(request)
    process_time = perf_counter() - start_time
    logger.info("Request time: %s %s -> %d: %.4fs", request.method, request.url, response.status_code, process_time)
    return response


def _error_response(request: Request, status: HTTPStatus, message: str) -> JSONResponse:
    body = ErrorResponse(
        timestamp=datetime.now(timezone.utc),
        status=status.value,
        error=status.phrase,
        message=message,
        path=request.url.path,
    )
    return JSONResponse(status_code=status.value, content=body.model_dump(mode="json"))


@app.exception_handler(PriceNotFoundError)
async def price_not_found_handler(request: Request, exc: PriceNotFoundError) -> JSONResponse:
    return _error_response(request, HTTPStatus.NOT_FOUND, str(exc))


@app.exception_handler(RequestValidationError)
async def invalid_request_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    problems = "; ".join(f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors())
    return _error_response(request, HTTPStatus.BAD_REQUEST, problems or "Invalid request")


@app.get(
    "/prices",
    responses={
        HTTPStatus.NOT_FOUND.value: {"model": ErrorResponse},
        HTTPStatus.BAD_REQUEST.value: {"model": ErrorResponse},
    },
)
def get_price(
    service: Annotated[ApplicablePriceService, Depends(get_price_service)],
    chain_id: Annotated[int, Query(alias="chainId", gt=0)],
    product_id: Annotated[int, Query(alias="productId", gt=0)],
    at: Annotated[datetime, Depends(get_query_instant)],
) -> PriceResponse:
    record = service.get(ChainId(chain_id), ProductId(product_id), at)
    return PriceResponse.from_record(record)
