from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy.orm import Query, Session

from db import models
from domain.base_types import ChainId, PriceListId, PriceRecord, ProductId, ensure_utc
from services.price_store import HighestPriorityPriceStore


class PriceRepository(HighestPriorityPriceStore):
    """SQL-backed price store.

    Rows come back in insertion (primary key) order, and the pushed-down query
    breaks priority ties the same way, so both lookups agree with
    `select_highest_priority`.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def create_many(self, records: list[PriceRecord]) -> list[PriceRecord]:
        orm_prices = [
            models.PriceOrm(
                chain_id=record.chain_id,
                product_id=record.product_id,
                price_list_id=record.price_list_id,
                valid_from=record.valid_from,
                valid_to=record.valid_to,
                priority=record.priority,
                amount=record.amount,
                currency_code=record.currency_code,
            )
            for record in records
        ]
        self._session.add_all(orm_prices)
        self._session.commit()
        return records

    def list(self) -> list[PriceRecord]:
        orm_prices = self._session.query(models.PriceOrm).order_by(models.PriceOrm.id.asc()).all()
        return [self._to_domain(price) for price in orm_prices]

    def find_applicable(self, chain_id: ChainId, product_id: ProductId, at: datetime) -> list[PriceRecord]:
        orm_prices = self._applicable(chain_id, product_id, at).order_by(models.PriceOrm.id.asc()).all()
        return [self._to_domain(price) for price in orm_prices]

    def find_highest_priority_applicable(
        self, chain_id: ChainId, product_id: ProductId, at: datetime
    ) -> PriceRecord | None:
        orm_price = (
            self._applicable(chain_id, product_id, at)
            .order_by(models.PriceOrm.priority.desc(), models.PriceOrm.id.asc())
            .first()
        )
        if orm_price is None:
            return None
        return self._to_domain(orm_price)

    def _applicable(self, chain_id: ChainId, product_id: ProductId, at: datetime) -> Query[models.PriceOrm]:
        ts = ensure_utc(at)
        return self._session.query(models.PriceOrm).filter(
            models.PriceOrm.chain_id == chain_id,
            models.PriceOrm.product_id == product_id,
            models.PriceOrm.valid_from <= ts,
            models.PriceOrm.valid_to >= ts,
        )

    @staticmethod
    def _to_domain(orm_price: models.PriceOrm) -> PriceRecord:
        # SQLite drops the offset; stored values are UTC.
        valid_from = orm_price.valid_from
        if valid_from.tzinfo is None:
            valid_from = valid_from.replace(tzinfo=timezone.utc)
        valid_to = orm_price.valid_to
        if valid_to.tzinfo is None:
            valid_to = valid_to.replace(tzinfo=timezone.utc)

        return PriceRecord(
            chain_id=ChainId(orm_price.chain_id),
            product_id=ProductId(orm_price.product_id),
            price_list_id=PriceListId(orm_price.price_list_id),
            valid_from=valid_from,
            valid_to=valid_to,
            priority=orm_price.priority,
            amount=orm_price.amount,
            currency_code=orm_price.currency_code,
        )
