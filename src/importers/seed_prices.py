from __future__ import annotations

import csv
from datetime import datetime
from decimal import Decimal, InvalidOperation
from pathlib import Path

from domain.base_types import ChainId, PriceListId, PriceRecord, ProductId, ensure_utc, parse_iso_datetime

REQUIRED_COLUMNS = (
    "chain_id",
    "product_id",
    "price_list_id",
    "valid_from",
    "valid_to",
    "priority",
    "amount",
    "currency_code",
)


def load_price_records(csv_path: Path) -> list[PriceRecord]:
    """Load price-list entries from a CSV file.

    Each row should contain:
    chain_id,product_id,price_list_id,valid_from,valid_to,priority,amount,currency_code
    Timestamps are ISO-8601; naive values are taken as UTC.
    """

    if not csv_path.exists():
        return []

    with csv_path.open(newline="") as f:
        reader = csv.DictReader(f)
        if reader.fieldnames is None:
            raise ValueError(f"Price CSV {csv_path} is empty or missing headers")

        missing = set(REQUIRED_COLUMNS) - set(reader.fieldnames)
        if missing:
            raise ValueError(f"Price CSV {csv_path} missing required columns: {', '.join(sorted(missing))}")

        records: list[PriceRecord] = []
        for row in reader:
            values = {column: (row.get(column) or "").strip() for column in REQUIRED_COLUMNS}
            try:
                records.append(_parse_row(values))
            except ValueError as exc:
                raise ValueError(f"Price CSV {csv_path} line {reader.line_num}: {exc}") from exc

    return records


def _parse_row(values: dict[str, str]) -> PriceRecord:
    blank = [column for column in REQUIRED_COLUMNS if not values[column]]
    if blank:
        raise ValueError(f"missing values for: {', '.join(blank)}")

    valid_from = _parse_timestamp(values["valid_from"])
    valid_to = _parse_timestamp(values["valid_to"])
    if valid_from > valid_to:
        raise ValueError("valid_from must not be after valid_to")

    try:
        amount = Decimal(values["amount"])
    except InvalidOperation as exc:
        raise ValueError(f"amount {values['amount']!r} is not a decimal number") from exc
    if not amount.is_finite() or amount < 0:
        raise ValueError("amount must be a finite value >= 0")

    currency_code = values["currency_code"].upper()
    if len(currency_code) != 3 or not currency_code.isalpha():
        raise ValueError(f"currency_code {values['currency_code']!r} is not a three-letter code")

    return PriceRecord(
        chain_id=ChainId(_parse_identifier(values, "chain_id")),
        product_id=ProductId(_parse_identifier(values, "product_id")),
        price_list_id=PriceListId(_parse_identifier(values, "price_list_id")),
        valid_from=valid_from,
        valid_to=valid_to,
        priority=int(values["priority"]),
        amount=amount,
        currency_code=currency_code,
    )


def _parse_identifier(values: dict[str, str], name: str) -> int:
    value = int(values[name])
    if value <= 0:
        raise ValueError(f"{name} must be positive")
    return value


def _parse_timestamp(raw: str) -> datetime:
    return ensure_utc(parse_iso_datetime(raw))
