from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from domain.base_types import PriceRecord


class PriceResponse(BaseModel):
    """Applicable price as returned to callers. Amount is kept exact."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    product_id: int
    chain_id: int
    price_list_id: int
    valid_from: datetime
    valid_to: datetime
    amount: Decimal
    currency_code: str

    @classmethod
    def from_record(cls, record: PriceRecord) -> PriceResponse:
        return cls(
            product_id=record.product_id,
            chain_id=record.chain_id,
            price_list_id=record.price_list_id,
            valid_from=record.valid_from,
            valid_to=record.valid_to,
            amount=record.amount,
            currency_code=record.currency_code,
        )


class ErrorResponse(BaseModel):
    timestamp: datetime
    status: int
    error: str
    message: str
    path: str
