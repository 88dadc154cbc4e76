from __future__ import annotations

from datetime import datetime

from domain.base_types import ChainId, PriceRecord, ProductId
from services.price_store import PriceStore


class InMemoryPriceStore(PriceStore):
    """Keeps records in a list and filters them on every lookup."""

    def __init__(self, records: list[PriceRecord] | None = None) -> None:
        self.records = list(records or [])
        self.calls = 0

    def find_applicable(self, chain_id: ChainId, product_id: ProductId, at: datetime) -> list[PriceRecord]:
        self.calls += 1
        return [
            record
            for record in self.records
            if record.chain_id == chain_id and record.product_id == product_id and record.applies_at(at)
        ]


class FailingPriceStore(PriceStore):
    def __init__(self, error: Exception) -> None:
        self.error = error

    def find_applicable(self, chain_id: ChainId, product_id: ProductId, at: datetime) -> list[PriceRecord]:
        raise self.error
