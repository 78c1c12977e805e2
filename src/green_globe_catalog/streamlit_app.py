"""Streamlit listing page for tours, dispensaries and hotels. Uses CatalogSession from session state."""

import html
from pathlib import Path
from typing import Optional

import streamlit as st

from green_globe_catalog.adapter import fetch_catalog, make_client
from green_globe_catalog.config import Settings, ensure_env_loaded
from green_globe_catalog.filtering import clamp_page, page_window
from green_globe_catalog.models import ALL, CatalogType, ListingRecord
from green_globe_catalog.session import CatalogSession

CATALOG_LABELS: dict[str, str] = {
    "tour": "Tours & Experiences",
    "dispensary": "Dispensaries",
    "hotel": "420-Friendly Stays",
}

SORT_LABELS: dict[str, str] = {
    "recommended": "Recommended",
    "price-asc": "Price: Low to High",
    "price-desc": "Price: High to Low",
    "rating": "Highest Rated",
}

# Column the upstream query orders by, so "Recommended" has a stable meaning per catalog
ORDER_COLUMNS: dict[str, str] = {
    "tour": "name",
    "dispensary": "name",
    "hotel": "name",
}

GRID_COLUMNS = 3

# Widget keys per catalog; cleared on reset so the controls show defaults again
_WIDGET_KEYS = ("search", "location", "max_price", "duration", "sort")


def _widget_key(catalog_type: str, name: str) -> str:
    return f"{catalog_type}_{name}"


def _format_price(record: ListingRecord | dict) -> str:
    """Card price text: source text when present, else the parsed number, else a dash."""
    if isinstance(record, dict):
        display, price = record.get("price_display"), record.get("numeric_price") or 0
    else:
        display, price = record.price_display, record.numeric_price
    if display:
        return display
    return f"${price:,.2f}" if price else "—"


def _format_rating(rating: Optional[float], review_count: int = 0) -> str:
    """'★★★★☆ 4.2 (120 reviews)' style text; 'Not yet rated' when absent."""
    if rating is None:
        return "Not yet rated"
    full = int(rating)
    half = "½" if rating - full >= 0.5 else ""
    stars = "★" * full + half
    reviews = f" ({review_count} review{'s' if review_count != 1 else ''})" if review_count else ""
    return f"{stars} {rating:.1f}{reviews}"


def _duration_options(records: list[ListingRecord]) -> list[str]:
    """Duration choices present in the data, 'all' first."""
    labels = sorted({r.duration_label for r in records if r.duration_label})
    return [ALL] + labels


def _card_html(record: ListingRecord) -> str:
    """Minimal card body; all values are escaped."""
    name = html.escape(record.name)
    place = html.escape(", ".join(p for p in (record.location_city, record.location_region) if p))
    img = html.escape(record.image_url)
    link = html.escape(record.website or "")
    title = f'<a href="{link}" target="_blank" rel="noopener">{name}</a>' if link else name
    return (
        f'<img src="{img}" style="width:100%;height:160px;object-fit:cover;border-radius:8px;" alt="{name}"/>'
        f"<h4 style='margin:8px 0 2px 0'>{title}</h4>"
        f"<div style='color:#888'>{place}</div>"
    )


def _get_session(catalog_type: CatalogType, settings: Settings) -> CatalogSession:
    """One CatalogSession per catalog, kept for the lifetime of the browser session."""
    key = f"catalog_session_{catalog_type}"
    if key not in st.session_state:
        st.session_state[key] = CatalogSession(
            catalog_type=catalog_type,
            page_size=settings.page_size,
            max_price=settings.max_price,
        )
    return st.session_state[key]


def _load_records(session: CatalogSession, settings: Settings) -> bool:
    """Fetch the catalog through the session guard. Returns False on failure or stale result."""

    def fetch() -> list[ListingRecord]:
        client = make_client(settings.supabase_url, settings.supabase_anon_key)
        return fetch_catalog(client, session.catalog_type, order_by=ORDER_COLUMNS.get(session.catalog_type))

    return session.refresh(fetch)


def _reset_widgets(catalog_type: str) -> None:
    for name in _WIDGET_KEYS:
        st.session_state.pop(_widget_key(catalog_type, name), None)


def _render_filters_sidebar(session: CatalogSession, settings: Settings) -> None:
    """Sidebar controls. A single update call so any changed control puts the cursor back on page 1."""
    catalog_type = session.catalog_type
    criteria = session.criteria
    with st.sidebar:
        st.subheader("Filter")
        search_text = st.text_input(
            "Search",
            value=criteria.search_text,
            placeholder="Name or city",
            key=_widget_key(catalog_type, "search"),
        )
        locations = [ALL] + session.locations()
        location = st.selectbox(
            "City",
            locations,
            index=locations.index(criteria.location) if criteria.location in locations else 0,
            format_func=lambda v: "All cities" if v == ALL else v,
            key=_widget_key(catalog_type, "location"),
        )
        max_price = st.slider(
            "Max price ($)",
            min_value=0.0,
            max_value=float(settings.max_price),
            value=min(float(criteria.max_price), float(settings.max_price)),
            step=5.0,
            key=_widget_key(catalog_type, "max_price"),
        )
        durations = _duration_options(session.records)
        duration = st.selectbox(
            "Duration",
            durations,
            index=durations.index(criteria.duration) if criteria.duration in durations else 0,
            format_func=lambda v: "Any duration" if v == ALL else v,
            key=_widget_key(catalog_type, "duration"),
        )
        sort_keys = list(SORT_LABELS)
        sort_key = st.selectbox(
            "Sort by",
            sort_keys,
            index=sort_keys.index(criteria.sort_key),
            format_func=SORT_LABELS.get,
            key=_widget_key(catalog_type, "sort"),
        )
        session.update(
            search_text=search_text.strip(),
            location=location,
            max_price=max_price,
            duration=duration,
            sort_key=sort_key,
        )

        if st.button("Reset filters", use_container_width=True):
            session.reset()
            _reset_widgets(catalog_type)
            st.rerun()
        if st.button("Reload listings", use_container_width=True):
            _load_records(session, settings)
            st.rerun()


def _render_grid(records: list[ListingRecord]) -> None:
    for start in range(0, len(records), GRID_COLUMNS):
        columns = st.columns(GRID_COLUMNS)
        for column, record in zip(columns, records[start : start + GRID_COLUMNS]):
            with column:
                st.markdown(_card_html(record), unsafe_allow_html=True)
                st.caption(_format_rating(record.rating, record.review_count))
                details = _format_price(record)
                if record.duration_label:
                    details += f" · {record.duration_label}"
                st.write(details)


def _render_pagination(session: CatalogSession, current_page: int, total_pages: int) -> None:
    window = page_window(current_page, total_pages)
    if not window:
        return
    columns = st.columns(len(window) + 2)
    if columns[0].button("Previous", disabled=current_page <= 1, key="page_prev"):
        session.update(current_page=current_page - 1)
        st.rerun()
    for column, page in zip(columns[1:-1], window):
        if page is None:
            column.markdown("…")
            continue
        if column.button(str(page), disabled=page == current_page, key=f"page_{page}"):
            session.update(current_page=page)
            st.rerun()
    if columns[-1].button("Next", disabled=current_page >= total_pages, key="page_next"):
        session.update(current_page=current_page + 1)
        st.rerun()


def main() -> None:
    st.set_page_config(page_title="Green Globe Guide", page_icon="🌿", layout="wide")
    settings = ensure_env_loaded()

    with st.sidebar:
        catalog_type = st.radio(
            "Browse",
            list(CATALOG_LABELS),
            format_func=CATALOG_LABELS.get,
            key="catalog_type",
        )
    session = _get_session(catalog_type, settings)
    st.title(CATALOG_LABELS[catalog_type])

    if not session.loaded:
        with st.spinner("Loading listings..."):
            _load_records(session, settings)
    if session.load_error:
        st.error(f"Could not load listings: {session.load_error}")

    _render_filters_sidebar(session, settings)

    page = session.visible_page()
    if page.total_pages and page.current_page > page.total_pages:
        session.update(current_page=clamp_page(page.current_page, page.total_pages))
        page = session.visible_page()

    st.caption(f"{page.total_count} of {len(session.records)} listings")
    if not page.listings:
        st.info("No listings match your filters.")
        return
    _render_grid(page.listings)
    _render_pagination(session, page.current_page, page.total_pages)


def run_ui() -> None:
    """Entry point for green-globe-catalog-ui script: start Streamlit server."""
    import sys
    import streamlit.web.cli as st_cli
    app_path = Path(__file__).resolve()
    sys.argv = ["streamlit", "run", str(app_path), "--server.headless", "true"]
    st_cli.main()


if __name__ == "__main__":
    main()
