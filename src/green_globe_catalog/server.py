"""MCP server: fetch_catalog, query_catalog, list_locations, criteria helpers, summarize_catalog, check_user_agent."""

import logging
from typing import Any, Optional

from mcp.server.fastmcp import FastMCP
from pydantic import ValidationError

from green_globe_catalog.adapter import CatalogLoadError, make_client
from green_globe_catalog.adapter import fetch_catalog as do_fetch_catalog
from green_globe_catalog.agegate import is_bot, requires_age_gate
from green_globe_catalog.config import ensure_env_loaded, get_settings
from green_globe_catalog.filtering import (
    compute_visible_page,
    reset_criteria,
    unique_locations,
    update_criteria,
)
from green_globe_catalog.models import (
    DEFAULT_PAGE_SIZE,
    CatalogPage,
    FilterCriteria,
    ListingRecord,
)
from green_globe_catalog.summarizer import summarize_catalog as do_summarize_catalog

logger = logging.getLogger(__name__)

mcp = FastMCP(
    "Green Globe Catalog",
    json_response=True,
)

LOCATION_FIELDS = ("location_city", "location_region")


def _validate_listings(listings: list[dict[str, Any]]) -> list[ListingRecord]:
    if not isinstance(listings, list):
        raise ValueError("listings must be a list of listing objects.")
    try:
        return [ListingRecord.model_validate(item) for item in listings]
    except ValidationError as e:
        raise ValueError(f"Invalid listings: {e}") from e


def _validate_criteria(criteria: Optional[dict[str, Any]]) -> FilterCriteria:
    try:
        return FilterCriteria.model_validate(criteria or {})
    except ValidationError as e:
        raise ValueError(f"Invalid criteria: {e}") from e


@mcp.tool()
def fetch_catalog(
    catalog_type: str,
    order_by: Optional[str] = None,
    ascending: bool = True,
) -> dict[str, Any]:
    """Fetch every listing of one catalog (tour, dispensary or hotel), optionally ordered by a column. Returns listings and total_count. On backend failure returns an error (never empty list)."""
    settings = get_settings()
    try:
        client = make_client(settings.supabase_url, settings.supabase_anon_key)
        records = do_fetch_catalog(client, catalog_type, order_by=order_by, ascending=ascending)
    except CatalogLoadError as e:
        raise ValueError(str(e)) from e
    return {"listings": [r.model_dump() for r in records], "total_count": len(records)}


@mcp.tool()
def query_catalog(
    listings: list[dict[str, Any]],
    criteria: Optional[dict[str, Any]] = None,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> CatalogPage:
    """Filter, sort and paginate listings (from fetch_catalog). criteria keys: search_text, location, location_field, max_price, duration, sort_key (recommended, price-asc, price-desc, rating), current_page. Returns the visible page with total_count and total_pages."""
    if page_size < 1:
        raise ValueError("page_size must be a positive integer.")
    records = _validate_listings(listings)
    return compute_visible_page(records, _validate_criteria(criteria), page_size)


@mcp.tool()
def list_locations(listings: list[dict[str, Any]], field: str = "location_city") -> dict[str, Any]:
    """Sorted distinct cities (field=location_city) or regions (field=location_region) present in listings, for a location selector."""
    if field not in LOCATION_FIELDS:
        raise ValueError(f"field must be one of {', '.join(LOCATION_FIELDS)}.")
    return {"locations": unique_locations(_validate_listings(listings), field)}


@mcp.tool()
def default_criteria(max_price: Optional[float] = None) -> dict[str, Any]:
    """Criteria with every control at its default (empty search, all locations, all durations, recommended order, page 1)."""
    ceiling = get_settings().max_price if max_price is None else max_price
    if ceiling < 0:
        raise ValueError("max_price must be non-negative.")
    return reset_criteria(ceiling).model_dump()


@mcp.tool()
def update_filters(criteria: dict[str, Any], changes: dict[str, Any]) -> dict[str, Any]:
    """Apply changes to criteria. Any change other than current_page alone resets current_page to 1."""
    unknown = set(changes or {}) - set(FilterCriteria.model_fields)
    if unknown:
        raise ValueError(f"Unknown criteria keys: {', '.join(sorted(unknown))}.")
    try:
        return update_criteria(_validate_criteria(criteria), **(changes or {})).model_dump()
    except ValidationError as e:
        raise ValueError(f"Invalid criteria: {e}") from e


@mcp.tool()
def summarize_catalog(listings: list[dict[str, Any]]) -> dict[str, Any]:
    """Compute statistics (price min/median/mean/max, rating stats, total reviews, listings per city) for the current listings."""
    if not listings or not isinstance(listings, list):
        raise ValueError("listings is required and must be a non-empty list of listing objects.")
    return do_summarize_catalog(listings)


@mcp.tool()
def check_user_agent(user_agent: str, age_verified: bool = False) -> dict[str, Any]:
    """Report whether a user agent is a known crawler and whether the age gate should be shown."""
    return {
        "is_bot": is_bot(user_agent),
        "requires_age_gate": requires_age_gate(user_agent, verified=age_verified),
    }


def main() -> None:
    """Run the MCP server (stdio by default)."""
    ensure_env_loaded()
    mcp.run()


if __name__ == "__main__":
    main()
