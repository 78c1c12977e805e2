"""Per-page catalog state: loaded records, current criteria, and the last-request-wins fetch guard."""

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from green_globe_catalog.adapter import CatalogLoadError
from green_globe_catalog.filtering import (
    compute_visible_page,
    reset_criteria,
    unique_locations,
    update_criteria,
)
from green_globe_catalog.models import (
    DEFAULT_MAX_PRICE,
    DEFAULT_PAGE_SIZE,
    CatalogPage,
    CatalogType,
    FilterCriteria,
    ListingRecord,
)

logger = logging.getLogger(__name__)


@dataclass
class CatalogSession:
    """State owned by one listing page view. Created on mount, discarded on navigation away.

    loaded turns True once the latest fetch has finished, even with zero rows or an error.
    """

    catalog_type: CatalogType = "tour"
    page_size: int = DEFAULT_PAGE_SIZE
    max_price: float = DEFAULT_MAX_PRICE
    records: list[ListingRecord] = field(default_factory=list)
    criteria: Optional[FilterCriteria] = None
    load_error: Optional[str] = None
    loaded: bool = False
    _generation: int = field(default=0, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.criteria is None:
            self.criteria = reset_criteria(self.max_price)

    def begin_fetch(self) -> int:
        """Register a new fetch and return its token. Any older in-flight fetch becomes stale."""
        with self._lock:
            self._generation += 1
            return self._generation

    def complete_fetch(self, token: int, records: list[ListingRecord]) -> bool:
        """Replace records if token is still the latest fetch. Returns False for a stale result."""
        with self._lock:
            if token != self._generation:
                logger.debug("Discarding stale %s fetch %d (latest %d)", self.catalog_type, token, self._generation)
                return False
            self.records = list(records)
            self.load_error = None
            self.loaded = True
            return True

    def fail_fetch(self, token: int, error: str) -> bool:
        """Record a load failure for the latest fetch; previous records stay in place."""
        with self._lock:
            if token != self._generation:
                return False
            self.load_error = error
            self.loaded = True
            return True

    def refresh(self, fetch: Callable[[], list[ListingRecord]]) -> bool:
        """Run one fetch through the guard. No retry: a failure leaves the old records and sets load_error."""
        token = self.begin_fetch()
        try:
            records = fetch()
        except CatalogLoadError as e:
            logger.warning("Loading %s catalog failed: %s", self.catalog_type, e)
            self.fail_fetch(token, str(e))
            return False
        return self.complete_fetch(token, records)

    def update(self, **changes: Any) -> FilterCriteria:
        """Apply criteria changes; any filter or sort change also resets the page to 1."""
        with self._lock:
            self.criteria = update_criteria(self.criteria, **changes)
            return self.criteria

    def reset(self) -> FilterCriteria:
        with self._lock:
            self.criteria = reset_criteria(self.max_price)
            return self.criteria

    def visible_page(self) -> CatalogPage:
        with self._lock:
            records, criteria = self.records, self.criteria
        return compute_visible_page(records, criteria, self.page_size)

    def locations(self) -> list[str]:
        """Location options for the current records; recomputed on every call."""
        with self._lock:
            records, location_field = self.records, self.criteria.location_field
        return unique_locations(records, location_field)
