"""Data models for catalog listings, filter criteria and query results."""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

CatalogType = Literal["tour", "dispensary", "hotel"]
SortKey = Literal["recommended", "price-asc", "price-desc", "rating"]
LocationField = Literal["location_city", "location_region"]

# Sentinel for "no restriction" in location and duration selectors
ALL = "all"
DEFAULT_MAX_PRICE = 200.0
DEFAULT_PAGE_SIZE = 9

PLACEHOLDER_IMAGES: dict[str, str] = {
    "tour": "/assets/placeholder-tour.jpg",
    "dispensary": "/assets/placeholder-dispensary.jpg",
    "hotel": "/assets/placeholder-hotel.jpg",
}


class Amenities(BaseModel):
    """Known keys of the free-form amenities blob. Unknown keys are dropped."""

    model_config = ConfigDict(extra="ignore")

    smoking: Optional[bool] = Field(None, description="Smoking allowed on premises.")
    vaping: Optional[bool] = Field(None, description="Vaping allowed on premises.")
    edibles: Optional[bool] = Field(None, description="Edibles allowed on premises.")
    price_range: Optional[str] = Field(None, description="Price tier text, e.g. '$$' or '$120/night'.")


class ListingRecord(BaseModel):
    """One tour, dispensary or hotel as consumed by the query engine."""

    model_config = ConfigDict(extra="ignore")

    id: str = Field(..., min_length=1, description="Unique identifier within one fetch.")
    name: str = Field(..., min_length=1, description="Display name.")
    catalog_type: CatalogType = Field("tour", description="Which catalog the record belongs to.")
    slug: Optional[str] = Field(None, description="URL slug for the detail page.")
    location_city: str = Field("", description="City used for grouping and search.")
    location_region: str = Field("", description="State or region used for grouping.")
    numeric_price: float = Field(0.0, ge=0, description="Price parsed from the free-text price field.")
    price_display: Optional[str] = Field(None, description="Original price text for display.")
    rating: Optional[float] = Field(None, ge=0, le=5, description="Star rating; None means unrated.")
    review_count: int = Field(0, ge=0, description="Number of reviews.")
    duration_label: str = Field("", description="Free-text duration, e.g. '2 hours'.")
    image_url: str = Field(PLACEHOLDER_IMAGES["tour"], description="Card image or placeholder.")
    address: Optional[str] = Field(None, description="Street address.")
    website: Optional[str] = Field(None, description="Booking or venue website.")
    description: Optional[str] = Field(None, description="Long description.")
    latitude: Optional[float] = Field(None, description="Latitude.")
    longitude: Optional[float] = Field(None, description="Longitude.")
    highlights: list[str] = Field(default_factory=list, description="Short highlight bullets.")
    amenities: Optional[Amenities] = Field(None, description="Known amenity flags, if any.")

    @property
    def sort_rating(self) -> float:
        """Rating used for ordering; unrated counts as zero."""
        return self.rating if self.rating is not None else 0.0

    def to_short_label(self, index: Optional[int] = None) -> str:
        """Short label for lists, e.g. '[1] Beyond Light Show (Denver) — $25'."""
        prefix = f"[{index}] " if index is not None else ""
        city = f" ({self.location_city})" if self.location_city else ""
        return f"{prefix}{self.name}{city} — ${self.numeric_price:g}"


class FilterCriteria(BaseModel):
    """User-selected filter, sort and page state. Owned by the caller."""

    model_config = ConfigDict(extra="ignore")

    search_text: str = Field("", description="Case-insensitive substring on name and city.")
    location: str = Field(ALL, description="Exact location value, or 'all'.")
    location_field: LocationField = Field("location_city", description="Record field the location selector targets.")
    max_price: float = Field(DEFAULT_MAX_PRICE, ge=0, description="Inclusive upper bound on numeric_price.")
    duration: str = Field(ALL, description="Substring of duration_label, or 'all'.")
    sort_key: SortKey = Field("recommended", description="Ordering of the filtered result.")
    current_page: int = Field(1, ge=1, description="1-based page cursor.")


class CatalogPage(BaseModel):
    """Result of one engine pass: the visible slice plus paging totals."""

    listings: list[ListingRecord] = Field(..., description="Records on the current page.")
    total_count: int = Field(..., ge=0, description="Number of records after filtering.")
    total_pages: int = Field(..., ge=0, description="Number of pages; 0 when nothing matched.")
    current_page: int = Field(..., ge=1, description="Page the slice was taken from.")
    page_size: int = Field(..., ge=1, description="Records per page.")
