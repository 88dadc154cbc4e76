from __future__ import annotations

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from pydantic import ValidationError

from domain.base_types import ensure_utc, parse_iso_datetime
from tests.helpers.prices import at, make_price


def test_price_record_is_immutable() -> None:
    record = make_price(priority=1)

    with pytest.raises(ValidationError):
        record.priority = 2  # type: ignore[misc]


def test_naive_bounds_are_taken_as_utc() -> None:
    record = make_price(valid_from=datetime(2020, 6, 14, 10, 0), valid_to=datetime(2020, 6, 14, 12, 0))

    assert record.valid_from == datetime(2020, 6, 14, 10, 0, tzinfo=timezone.utc)
    assert record.valid_from.tzinfo == timezone.utc


def test_aware_bounds_are_converted_to_utc() -> None:
    madrid_summer = timezone(timedelta(hours=2))
    record = make_price(valid_from=datetime(2020, 6, 14, 12, 0, tzinfo=madrid_summer))

    assert record.valid_from == datetime(2020, 6, 14, 10, 0, tzinfo=timezone.utc)
    assert record.valid_from.utcoffset() == timedelta(0)


def test_amount_keeps_exact_decimal_value() -> None:
    record = make_price(amount="35.50")

    assert record.amount == Decimal("35.50")
    assert str(record.amount) == "35.50"


def test_records_with_same_fields_are_equal() -> None:
    assert make_price(priority=3, amount="9.99") == make_price(priority=3, amount="9.99")
    assert make_price(priority=3) != make_price(priority=4)


@pytest.mark.parametrize(
    ("instant", "expected"),
    [
        (at(14, 15), True),
        (at(14, 18, 30), True),
        (at(14, 16), True),
        (at(14, 14, 59, 59), False),
        (at(14, 18, 30, 1), False),
    ],
)
def test_applies_at_uses_inclusive_bounds(instant: datetime, expected: bool) -> None:
    record = make_price(valid_from=at(14, 15), valid_to=at(14, 18, 30))

    assert record.applies_at(instant) is expected


def test_ensure_utc_accepts_naive_and_aware() -> None:
    naive = datetime(2020, 6, 14, 10, 0)
    aware = datetime(2020, 6, 14, 11, 0, tzinfo=timezone(timedelta(hours=1)))

    assert ensure_utc(naive) == ensure_utc(aware)
    assert ensure_utc(naive).tzinfo == timezone.utc


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("2020-06-14T10:00:00", datetime(2020, 6, 14, 10, 0)),
        ("2020-06-14 10:00", datetime(2020, 6, 14, 10, 0)),
        ("2020-06-14T10:00:00Z", datetime(2020, 6, 14, 10, 0, tzinfo=timezone.utc)),
        ("2020-06-14T12:00:00+02:00", datetime(2020, 6, 14, 10, 0, tzinfo=timezone.utc)),
    ],
)
def test_parse_iso_datetime(raw: str, expected: datetime) -> None:
    assert parse_iso_datetime(raw) == expected


@pytest.mark.parametrize("raw", ["0", "1592128800", "2020-06-14", "not-a-date", "2020-06-14Tnoon", ""])
def test_parse_iso_datetime_rejects_non_date_times(raw: str) -> None:
    with pytest.raises(ValueError, match="invalid ISO-8601 date-time"):
        parse_iso_datetime(raw)
