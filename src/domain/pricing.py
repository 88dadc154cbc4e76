from __future__ import annotations

from operator import attrgetter
from typing import Sequence

from domain.base_types import PriceRecord

NO_APPLICABLE_PRICE = "No applicable price"


class PriceNotFoundError(LookupError):
    """No price record applies to the requested chain, product and instant."""

    def __init__(self, message: str = NO_APPLICABLE_PRICE) -> None:
        super().__init__(message)


def select_highest_priority(records: Sequence[PriceRecord] | None) -> PriceRecord:
    """Pick the applicable record with the highest priority.

    Records sharing the maximal priority are not ranked any further: the first
    of them in input order is returned, so the result only depends on the
    order the store handed the candidates over.
    """
    if not records:
        raise PriceNotFoundError()
    return max(records, key=attrgetter("priority"))
