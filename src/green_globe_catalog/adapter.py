"""Catalog data source adapter: Supabase table rows → ListingRecord."""

import logging
import math
import re
from typing import Any, Iterable, Optional

import pandas as pd
from pydantic import ValidationError
from supabase import Client, create_client

from green_globe_catalog.models import PLACEHOLDER_IMAGES, Amenities, CatalogType, ListingRecord

logger = logging.getLogger(__name__)

CATALOG_TABLES: dict[str, str] = {
    "tour": "tours",
    "dispensary": "dispensaries",
    "hotel": "hotels",
}

# Home market; used when a row carries neither a city nor a parseable address
DEFAULT_CITY = "Denver"
DEFAULT_REGION = "Colorado"

# Checked in order; the first non-empty one is the price text
_PRICE_FIELDS = ("price", "price_range")


class CatalogLoadError(Exception):
    """Raised when the catalog backend fails. Do not return an empty list instead."""

    pass


def _is_missing(val: Any) -> bool:
    return val is None or (isinstance(val, float) and pd.isna(val))


def _clean_str(val: Any) -> Optional[str]:
    """Stripped string, or None for missing/blank values."""
    if _is_missing(val):
        return None
    s = str(val).strip()
    return s or None


def parse_price(val: Any) -> float:
    """Parse a free-text price ('$25.00', '$1,200.50', 'Free') to a non-negative float.

    Every character other than digits and '.' is stripped before parsing.
    Missing, unparseable, negative or non-finite values give 0.
    """
    if _is_missing(val) or isinstance(val, bool):
        return 0.0
    if isinstance(val, (int, float)):
        price = float(val)
    else:
        try:
            price = float(re.sub(r"[^\d.]", "", str(val)))
        except ValueError:
            return 0.0
    if not math.isfinite(price) or price < 0:
        return 0.0
    return price


def _format_price_display(val: Any, price: float) -> Optional[str]:
    """Keep the source text when it is text (e.g. '$25.00', 'Free'); else format the number."""
    if isinstance(val, str) and val.strip():
        return val.strip()
    return f"${price:,.2f}" if price else None


def _parse_rating(val: Any) -> Optional[float]:
    """Rating in [0, 5]; anything else is treated as unrated."""
    if _is_missing(val):
        return None
    try:
        rating = float(val)
    except (TypeError, ValueError):
        return None
    if not 0 <= rating <= 5:
        return None
    return rating


def _parse_count(val: Any) -> int:
    if _is_missing(val):
        return 0
    try:
        count = float(val)
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(count):
        return 0
    return max(int(count), 0)


def _parse_coord(val: Any) -> Optional[float]:
    if _is_missing(val) or not str(val).strip():
        return None
    try:
        coord = float(val)
    except (TypeError, ValueError):
        return None
    return coord if math.isfinite(coord) else None


def _parse_amenities(val: Any) -> Optional[Amenities]:
    """Only dict blobs are understood; other shapes (lists of labels, strings) are ignored."""
    if not isinstance(val, dict):
        return None
    try:
        return Amenities.model_validate(val)
    except ValidationError as e:
        logger.debug("Ignoring malformed amenities %r: %s", val, e)
        return None


def _parse_highlights(val: Any) -> list[str]:
    if not isinstance(val, (list, tuple)):
        return []
    return [s for s in (_clean_str(v) for v in val) if s]


def infer_city(address: Optional[str]) -> Optional[str]:
    """City from a 'street, city, state zip' address, e.g. '400 S Logan St, Denver, CO 80209' → 'Denver'."""
    if not address:
        return None
    parts = [p.strip() for p in address.split(",") if p.strip()]
    if len(parts) < 3:
        return None
    return parts[-2]


def _image_url(row: Any, catalog_type: str) -> str:
    image = _clean_str(row.get("image"))
    if image:
        return image
    images = row.get("images")
    if isinstance(images, (list, tuple)):
        for candidate in images:
            url = _clean_str(candidate)
            if url:
                return url
    return PLACEHOLDER_IMAGES.get(catalog_type, PLACEHOLDER_IMAGES["tour"])


def row_to_record(
    row: dict | pd.Series,
    catalog_type: CatalogType,
    *,
    default_city: str = DEFAULT_CITY,
    default_region: str = DEFAULT_REGION,
) -> ListingRecord:
    """Map one table row to ListingRecord. Malformed fields fall back to their defaults."""
    amenities = _parse_amenities(row.get("amenities"))

    price_val = None
    for key in _PRICE_FIELDS:
        candidate = row.get(key)
        if not _is_missing(candidate) and str(candidate).strip():
            price_val = candidate
            break
    if price_val is None and amenities is not None and amenities.price_range:
        price_val = amenities.price_range
    price = parse_price(price_val)

    address = _clean_str(row.get("address"))
    city = _clean_str(row.get("city")) or infer_city(address) or default_city
    region = _clean_str(row.get("state")) or _clean_str(row.get("region")) or default_region

    return ListingRecord(
        id=_clean_str(row.get("id")),
        name=_clean_str(row.get("name")),
        catalog_type=catalog_type,
        slug=_clean_str(row.get("slug")),
        location_city=city,
        location_region=region,
        numeric_price=price,
        price_display=_format_price_display(price_val, price),
        rating=_parse_rating(row.get("rating")),
        review_count=_parse_count(row.get("review_count")),
        duration_label=_clean_str(row.get("duration")) or "",
        image_url=_image_url(row, catalog_type),
        address=address,
        website=_clean_str(row.get("website")) or _clean_str(row.get("booking_url")),
        description=_clean_str(row.get("description")),
        latitude=_parse_coord(row.get("latitude")),
        longitude=_parse_coord(row.get("longitude")),
        highlights=_parse_highlights(row.get("highlights")),
        amenities=amenities,
    )


def rows_to_records(
    rows: Iterable[dict],
    catalog_type: CatalogType,
    *,
    default_city: str = DEFAULT_CITY,
    default_region: str = DEFAULT_REGION,
) -> list[ListingRecord]:
    """Normalize raw rows once at load time. Rows without id/name, or with a duplicate id, are skipped."""
    rows = list(rows)
    if not rows:
        return []
    # object dtype keeps ids and counts as delivered (no int → float upcasting around nulls)
    df = pd.DataFrame(rows, dtype=object)

    records: list[ListingRecord] = []
    seen: set[str] = set()
    for idx, row in df.iterrows():
        if _clean_str(row.get("id")) is None or _clean_str(row.get("name")) is None:
            logger.warning("Skipping %s row %s: missing id or name", catalog_type, idx)
            continue
        try:
            record = row_to_record(row, catalog_type, default_city=default_city, default_region=default_region)
        except ValidationError as e:
            logger.warning("Skipping %s row %s: %s", catalog_type, idx, e)
            continue
        if record.id in seen:
            logger.warning("Skipping %s row %s: duplicate id %s", catalog_type, idx, record.id)
            continue
        seen.add(record.id)
        records.append(record)
    return records


def make_client(url: str, key: str) -> Client:
    """Build a Supabase client from project URL and anon key."""
    if not url or not key:
        raise CatalogLoadError("SUPABASE_URL and SUPABASE_ANON_KEY must be set.")
    try:
        return create_client(url, key)
    except Exception as e:
        logger.warning("Supabase client setup failed: %s: %s", type(e).__name__, e)
        raise CatalogLoadError("The catalog is temporarily unavailable.") from e


def fetch_catalog(
    client: Client,
    catalog_type: CatalogType,
    order_by: Optional[str] = None,
    ascending: bool = True,
) -> list[ListingRecord]:
    """
    Fetch all rows of one catalog table, optionally ordered, and normalize them.
    On backend failure, raises CatalogLoadError (do not return empty list).
    """
    table = CATALOG_TABLES.get(catalog_type)
    if table is None:
        raise ValueError(f"Unknown catalog type: {catalog_type!r}")

    try:
        query = client.table(table).select("*")
        if order_by:
            query = query.order(order_by, desc=not ascending)
        response = query.execute()
    except Exception as e:
        logger.warning("Catalog fetch failed (%s): %s: %s", table, type(e).__name__, e)
        raise CatalogLoadError("The catalog is temporarily unavailable.") from e

    rows = getattr(response, "data", None) or []
    logger.debug("Fetched %d rows from %s", len(rows), table)
    return rows_to_records(rows, catalog_type)
