"""In-memory filter, sort and paginate for catalog listings. Used by listing pages and the query_catalog tool."""

import math
from typing import Any, Optional

from green_globe_catalog.models import (
    ALL,
    DEFAULT_MAX_PRICE,
    DEFAULT_PAGE_SIZE,
    CatalogPage,
    FilterCriteria,
    ListingRecord,
)

# Sort keys the engine reorders by; "recommended" keeps insertion order
SORT_KEYS = frozenset({"recommended", "price-asc", "price-desc", "rating"})


def search_matches(record: ListingRecord, search_text: str) -> bool:
    """Case-insensitive substring match on name and city. Empty search matches everything."""
    if not search_text:
        return True
    needle = search_text.lower()
    return needle in record.name.lower() or needle in record.location_city.lower()


def duration_matches(record: ListingRecord, duration: str) -> bool:
    """Duration bucket match: plain substring of the free-text label."""
    if not duration or duration == ALL:
        return True
    return duration in record.duration_label


def _record_matches(record: ListingRecord, criteria: FilterCriteria) -> bool:
    """Return True if record satisfies every criterion."""
    if not search_matches(record, criteria.search_text):
        return False
    if criteria.location != ALL and getattr(record, criteria.location_field) != criteria.location:
        return False
    if record.numeric_price > criteria.max_price:
        return False
    if not duration_matches(record, criteria.duration):
        return False
    return True


def sort_records(records: list[ListingRecord], sort_key: str) -> list[ListingRecord]:
    """Return a new list ordered by sort_key. sorted() is stable, so equal keys keep input order."""
    if sort_key == "price-asc":
        return sorted(records, key=lambda r: r.numeric_price)
    if sort_key == "price-desc":
        return sorted(records, key=lambda r: r.numeric_price, reverse=True)
    if sort_key == "rating":
        return sorted(records, key=lambda r: r.sort_rating, reverse=True)
    return list(records)


def _as_records(records: list[ListingRecord] | list[dict]) -> list[ListingRecord]:
    return [ListingRecord.model_validate(r) if isinstance(r, dict) else r for r in records]


def compute_visible_page(
    records: list[ListingRecord] | list[dict],
    criteria: FilterCriteria | dict,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> CatalogPage:
    """Filter, sort and slice records for the page in criteria.current_page.

    Pure: same inputs, same output. A page past the end yields an empty slice;
    clamping is the caller's job.
    """
    if page_size < 1:
        raise ValueError("page_size must be a positive integer.")
    if isinstance(criteria, dict):
        criteria = FilterCriteria.model_validate(criteria)

    filtered = [r for r in _as_records(records) if _record_matches(r, criteria)]
    ordered = sort_records(filtered, criteria.sort_key)

    total_pages = math.ceil(len(ordered) / page_size)
    start = (criteria.current_page - 1) * page_size
    return CatalogPage(
        listings=ordered[start : start + page_size],
        total_count=len(ordered),
        total_pages=total_pages,
        current_page=criteria.current_page,
        page_size=page_size,
    )


def reset_criteria(max_price: float = DEFAULT_MAX_PRICE) -> FilterCriteria:
    """Criteria with every control back at its default and the cursor on page 1."""
    return FilterCriteria(max_price=max_price)


def update_criteria(criteria: FilterCriteria, **changes: Any) -> FilterCriteria:
    """Apply changes and return new criteria.

    Changing anything other than current_page moves the cursor back to page 1
    in the same update, so a shrunken result never leaves a stale page behind.
    """
    data = criteria.model_dump()
    data.update(changes)
    if any(k != "current_page" and data[k] != getattr(criteria, k) for k in changes if k in data):
        data["current_page"] = 1
    return FilterCriteria.model_validate(data)


def unique_locations(
    records: list[ListingRecord] | list[dict],
    field: str = "location_city",
) -> list[str]:
    """Sorted, duplicate-free, non-empty values of field for a location selector."""
    values = {getattr(r, field, None) for r in _as_records(records)}
    return sorted(v for v in values if v)


def clamp_page(page: int, total_pages: int) -> int:
    """Clamp a page cursor into 1..total_pages (1 when there are no pages)."""
    return max(1, min(page, max(total_pages, 1)))


def page_window(current_page: int, total_pages: int) -> list[Optional[int]]:
    """Page buttons to show: first, last, current ±1; None marks an ellipsis.

    Empty when there is at most one page (no controls needed).
    """
    if total_pages <= 1:
        return []
    window: list[Optional[int]] = []
    for page in range(1, total_pages + 1):
        if (page == current_page - 2 and current_page > 3) or (
            page == current_page + 2 and current_page < total_pages - 2
        ):
            window.append(None)
        elif page == 1 or page == total_pages or current_page - 1 <= page <= current_page + 1:
            window.append(page)
    return window
