from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import NewType

from pydantic import BaseModel, ConfigDict, field_validator

ChainId = NewType("ChainId", int)
ProductId = NewType("ProductId", int)
PriceListId = NewType("PriceListId", int)


def ensure_utc(ts: datetime) -> datetime:
    """Naive timestamps are taken as UTC, aware ones are converted to UTC."""
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


def parse_iso_datetime(raw: str) -> datetime:
    """Parse an ISO-8601 date-time such as 2020-06-14T10:00:00.

    Bare dates and epoch numbers are rejected; a trailing Z means UTC.
    """
    normalized = raw.strip()
    if len(normalized) <= 10 or normalized[10] not in "Tt ":
        raise ValueError(f"invalid ISO-8601 date-time: {raw!r}")
    if normalized.endswith(("Z", "z")):
        normalized = f"{normalized[:-1]}+00:00"
    try:
        return datetime.fromisoformat(normalized)
    except ValueError as exc:
        raise ValueError(f"invalid ISO-8601 date-time: {raw!r}") from exc


class PriceRecord(BaseModel):
    """One price-list entry applicable over a closed interval.

    Both `valid_from` and `valid_to` are inclusive. When several entries of the
    same chain and product overlap, the one with the larger `priority` wins.
    Overlaps and equal priorities are legal; `valid_from <= valid_to` is assumed
    here and checked at ingestion time.
    """

    model_config = ConfigDict(frozen=True)

    chain_id: ChainId
    product_id: ProductId
    price_list_id: PriceListId
    valid_from: datetime
    valid_to: datetime
    priority: int
    amount: Decimal
    currency_code: str

    @field_validator("valid_from", "valid_to")
    @classmethod
    def _normalize_timestamp(cls, value: datetime) -> datetime:
        return ensure_utc(value)

    def applies_at(self, at: datetime) -> bool:
        return self.valid_from <= ensure_utc(at) <= self.valid_to
