from __future__ import annotations

import json
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from domain.base_types import ChainId, PriceListId, PriceRecord, ProductId, ensure_utc


class PriceStore(Protocol):
    """Lookup of the price records of a chain and product valid at an instant.

    Bounds are inclusive. An empty list means nothing applies; the order of the
    result is the store's own storage order.
    """

    def find_applicable(self, chain_id: ChainId, product_id: ProductId, at: datetime) -> list[PriceRecord]: ...


@runtime_checkable
class HighestPriorityPriceStore(PriceStore, Protocol):
    """Store able to run the priority selection itself.

    Must return the record `select_highest_priority` would pick from
    `find_applicable` over the same data, ties included.
    """

    def find_highest_priority_applicable(
        self, chain_id: ChainId, product_id: ProductId, at: datetime
    ) -> PriceRecord | None: ...


class JsonlPriceStore(PriceStore):
    def __init__(self, *, root_dir: Path) -> None:
        self.root_dir = root_dir

    def write(self, record: PriceRecord) -> None:
        path = self._file_path(record.chain_id, record.product_id)
        path.parent.mkdir(parents=True, exist_ok=True)
        line = {
            "chain_id": record.chain_id,
            "product_id": record.product_id,
            "price_list_id": record.price_list_id,
            "valid_from": record.valid_from.isoformat(),
            "valid_to": record.valid_to.isoformat(),
            "priority": record.priority,
            "amount": str(record.amount),
            "currency_code": record.currency_code,
        }
        with path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(line))
            handle.write("\n")

    def find_applicable(self, chain_id: ChainId, product_id: ProductId, at: datetime) -> list[PriceRecord]:
        path = self._file_path(chain_id, product_id)
        if not path.exists():
            return []

        target_ts = ensure_utc(at)
        applicable: list[PriceRecord] = []
        with path.open("r", encoding="utf-8") as handle:
            for line in handle:
                line = line.strip()
                if not line:
                    continue
                record = self._to_domain(json.loads(line))
                if record.valid_from <= target_ts <= record.valid_to:
                    applicable.append(record)
        return applicable

    @staticmethod
    def _to_domain(raw: dict[str, Any]) -> PriceRecord:
        return PriceRecord(
            chain_id=ChainId(int(raw["chain_id"])),
            product_id=ProductId(int(raw["product_id"])),
            price_list_id=PriceListId(int(raw["price_list_id"])),
            valid_from=datetime.fromisoformat(raw["valid_from"]),
            valid_to=datetime.fromisoformat(raw["valid_to"]),
            priority=int(raw["priority"]),
            amount=Decimal(raw["amount"]),
            currency_code=raw["currency_code"],
        )

    def _file_path(self, chain_id: ChainId, product_id: ProductId) -> Path:
        return self.root_dir / "prices" / f"{chain_id}-{product_id}.jsonl"


__all__ = ["HighestPriorityPriceStore", "JsonlPriceStore", "PriceStore"]
