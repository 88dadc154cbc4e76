from __future__ import annotations

import logging
from datetime import datetime

from domain.base_types import ChainId, PriceRecord, ProductId, ensure_utc
from domain.pricing import PriceNotFoundError, select_highest_priority

from .price_store import HighestPriorityPriceStore, PriceStore

logger = logging.getLogger(__name__)


class ApplicablePriceService:
    """Resolves the price to charge for a product of a chain at an instant.

    With `push_down` the store's own highest-priority query is used instead of
    selecting among all applicable records in memory.
    """

    def __init__(self, store: PriceStore, *, push_down: bool = False) -> None:
        self.store = store
        self._selecting_store: HighestPriorityPriceStore | None = None
        if push_down:
            if not isinstance(store, HighestPriorityPriceStore):
                msg = f"{type(store).__name__} does not support pushed-down priority selection"
                raise ValueError(msg)
            self._selecting_store = store

    @property
    def push_down(self) -> bool:
        return self._selecting_store is not None

    def get(self, chain_id: ChainId, product_id: ProductId, at: datetime) -> PriceRecord:
        ts = ensure_utc(at)
        logger.debug("Resolving price chain=%s product=%s at=%s push_down=%s", chain_id, product_id, ts, self.push_down)

        if self._selecting_store is not None:
            found = self._selecting_store.find_highest_priority_applicable(chain_id, product_id, ts)
            if found is None:
                logger.info("No applicable price for chain=%s product=%s at=%s", chain_id, product_id, ts)
                raise PriceNotFoundError()
            return found

        candidates = self.store.find_applicable(chain_id, product_id, ts)
        if not candidates:
            logger.info("No applicable price for chain=%s product=%s at=%s", chain_id, product_id, ts)
        return select_highest_priority(candidates)
