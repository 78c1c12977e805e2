"""Compute structured statistics for a catalog. Used by summarize_catalog tool and the listing page header."""

import statistics
from typing import Any

from green_globe_catalog.models import ListingRecord


def _get(record: ListingRecord | dict, attr: str) -> Any:
    """Extract attribute from record (dict or ListingRecord)."""
    if isinstance(record, dict):
        return record.get(attr)
    return getattr(record, attr, None)


def summarize_catalog(records: list[ListingRecord] | list[dict]) -> dict:
    """Compute statistics for records. Returns structured dict for summary."""
    if not records:
        return {
            "count": 0,
            "price": None,
            "rating": {"count_with_data": 0, "min": None, "median": None, "mean": None, "max": None},
            "review_count": 0,
            "locations": {},
        }

    prices = [float(_get(r, "numeric_price")) for r in records if _get(r, "numeric_price") is not None]
    ratings = [float(_get(r, "rating")) for r in records if _get(r, "rating") is not None]
    cities = [_get(r, "location_city") for r in records if _get(r, "location_city")]

    result: dict[str, Any] = {
        "count": len(records),
    }

    # Price
    if prices:
        result["price"] = {
            "min": round(min(prices), 2),
            "median": round(statistics.median(prices), 2),
            "mean": round(statistics.mean(prices), 2),
            "max": round(max(prices), 2),
        }
    else:
        result["price"] = None

    # Rating: unrated records are left out of the stats
    result["rating"] = {
        "count_with_data": len(ratings),
        "min": round(min(ratings), 1) if ratings else None,
        "median": round(statistics.median(ratings), 1) if ratings else None,
        "mean": round(statistics.mean(ratings), 1) if ratings else None,
        "max": round(max(ratings), 1) if ratings else None,
    }

    result["review_count"] = sum(int(_get(r, "review_count") or 0) for r in records)

    # Cities, most listings first
    city_counts: dict[str, int] = {}
    for c in cities:
        s = str(c).strip()
        if s:
            city_counts[s] = city_counts.get(s, 0) + 1
    result["locations"] = dict(sorted(city_counts.items(), key=lambda x: -x[1]))

    return result
