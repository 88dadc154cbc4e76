from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

from domain.base_types import ChainId, PriceListId, PriceRecord, ProductId

CHAIN = ChainId(1)
PRODUCT = ProductId(35455)
END_OF_YEAR = datetime(2020, 12, 31, 23, 59, 59, tzinfo=timezone.utc)


def make_price(
    *,
    priority: int = 0,
    amount: str = "10.00",
    price_list_id: int = 1,
    valid_from: datetime = datetime(2020, 6, 14, 0, 0, tzinfo=timezone.utc),
    valid_to: datetime = END_OF_YEAR,
    chain_id: ChainId = CHAIN,
    product_id: ProductId = PRODUCT,
    currency_code: str = "EUR",
) -> PriceRecord:
    return PriceRecord(
        chain_id=chain_id,
        product_id=product_id,
        price_list_id=PriceListId(price_list_id),
        valid_from=valid_from,
        valid_to=valid_to,
        priority=priority,
        amount=Decimal(amount),
        currency_code=currency_code,
    )


def at(day: int, hour: int, minute: int = 0, second: int = 0) -> datetime:
    return datetime(2020, 6, day, hour, minute, second, tzinfo=timezone.utc)


def reference_prices() -> list[PriceRecord]:
    """The tariff shipped in data/prices.csv, in file order."""
    return [
        make_price(priority=0, amount="35.50", price_list_id=1, valid_from=at(14, 0), valid_to=END_OF_YEAR),
        make_price(priority=1, amount="25.45", price_list_id=2, valid_from=at(14, 15), valid_to=at(14, 18, 30)),
        make_price(priority=1, amount="30.50", price_list_id=3, valid_from=at(15, 0), valid_to=at(15, 11)),
        make_price(priority=1, amount="38.95", price_list_id=4, valid_from=at(15, 16), valid_to=END_OF_YEAR),
    ]


# (query instant, expected amount, expected price list)
REFERENCE_QUERIES = [
    (at(14, 10), Decimal("35.50"), 1),
    (at(14, 16), Decimal("25.45"), 2),
    (at(14, 21), Decimal("35.50"), 1),
    (at(15, 10), Decimal("30.50"), 3),
    (at(16, 21), Decimal("38.95"), 4),
]
