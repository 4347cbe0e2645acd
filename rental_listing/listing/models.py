"""Pydantic models for equipment records, facets, filters and pages."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class PurchaseOption(str, Enum):
    """Purchase capability flags a listing can be filtered by."""

    RENT_TO_PURCHASE = "rpoEnabled"
    BUY_IT_NOW = "buyItNowEnabled"


class SortKey(str, Enum):
    """Supported listing sort orders."""

    LOCATION_CLOSEST = "location-closest"
    YEAR_NEWEST = "year-newest"
    YEAR_OLDEST = "year-oldest"
    RECENTLY_ADDED = "recently-added"
    RENTAL_RATE_LOW = "rental-rate-low"
    RENTAL_RATE_HIGH = "rental-rate-high"
    BUY_NOW_LOW = "buy-now-low"
    BUY_NOW_HIGH = "buy-now-high"


class _IndexModel(BaseModel):
    """Base for models read from the search index (camelCase keys)."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)


class ApiModel(BaseModel):
    """Base for API response models (camelCase keys, like index documents)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RentalRate(_IndexModel):
    daily: float | None = None
    weekly: float | None = None
    monthly: float | None = None


class RateSchedule(_IndexModel):
    label: str = ""
    num_days: int = Field(0, alias="numDays")
    cost: float = 0
    discount: float | None = None
    discount_percent: float | None = Field(None, alias="discountPercent")


class Address(_IndexModel):
    city: str | None = None
    state_province: str | None = Field(None, alias="stateProvince")
    postal_code: str | None = Field(None, alias="postalCode")
    address1: str | None = None


class GeoPoint(_IndexModel):
    """GeoJSON point; coordinates are ``[longitude, latitude]``."""

    type: str = "Point"
    coordinates: tuple[float, float]


class Location(_IndexModel):
    latitude: float | None = None
    longitude: float | None = None
    formatted_address: str | None = Field(None, alias="formattedAddress")
    name: str | None = None
    address: Address | None = None
    point: GeoPoint | None = None
    city: str | None = None
    state: str | None = None


class SearchLocation(_IndexModel):
    distance: float | None = None


class RentalRates(BaseModel):
    """Resolved daily/weekly/monthly rates; ``None`` means not offered."""

    daily: float | None = None
    weekly: float | None = None
    monthly: float | None = None


def _positive(value: float | None) -> float | None:
    return value if value is not None and value > 0 else None


class EquipmentRecord(_IndexModel):
    """One rentable or purchasable machine as returned by the search index.

    Records are immutable snapshots. Classification fields are compared as
    opaque strings; callers normalize them beforehand if they need to.
    """

    id: str
    machine_id: str | None = Field(None, alias="machineId")
    display_name: str | None = Field(None, alias="displayName")
    primary_type: str | None = Field(None, alias="primaryType")
    make: str | None = None
    model: str | None = None
    year: int | None = None
    hours: float | None = None
    usage: float | None = None
    usage_label: str | None = Field(None, alias="usageLabel")

    rental_rate: float | RentalRate | None = Field(None, alias="rentalRate")
    rate_schedules: list[RateSchedule] = Field(
        default_factory=list, alias="rateSchedules"
    )
    rpo_enabled: bool | None = Field(None, alias="rpoEnabled")
    buy_it_now_enabled: bool | None = Field(None, alias="buyItNowEnabled")
    buy_it_now_price: float | None = Field(None, alias="buyItNowPrice")
    buy_it_now_only: bool = Field(False, alias="buyItNowOnly")

    location: Location | None = None
    distance_from_user: float | None = Field(None, alias="distanceFromUser")
    search_location: SearchLocation | None = Field(None, alias="@search.location")
    search_score: float | None = Field(None, alias="@search.score")
    created_at: datetime | None = Field(None, alias="createdAt")

    images: list[str] = Field(default_factory=list)
    thumbnails: list[str] = Field(default_factory=list)

    @property
    def effective_hours(self) -> float:
        return self.hours or 0

    @property
    def distance(self) -> float | None:
        """Precomputed distance from the searcher, if the index supplied one."""
        if self.distance_from_user is not None:
            return self.distance_from_user
        if self.search_location is not None:
            return self.search_location.distance
        return None

    @property
    def preferred_images(self) -> list[str]:
        return self.thumbnails or self.images

    @property
    def coordinates(self) -> tuple[float, float] | None:
        """Return ``(latitude, longitude)`` from whichever format is present."""
        if self.location is None:
            return None
        if self.location.point is not None:
            lon, lat = self.location.point.coordinates
            return lat, lon
        if self.location.latitude and self.location.longitude:
            return self.location.latitude, self.location.longitude
        return None

    def rental_rates(self) -> RentalRates:
        """Resolve rental rates from the flat rate and the rate schedules.

        A bare numeric ``rentalRate`` is a monthly rate. Schedules override the
        flat values: a one-day ``DAY`` schedule is the daily rate, a seven-day
        ``WEEK`` schedule is the weekly rate, and any ``MOS`` or 28+ day
        schedule is the monthly rate (preferring schedules of at most 31 days).
        """
        daily = weekly = monthly = None

        if isinstance(self.rental_rate, RentalRate):
            daily = self.rental_rate.daily
            weekly = self.rental_rate.weekly
            monthly = self.rental_rate.monthly
        elif self.rental_rate is not None:
            monthly = self.rental_rate

        for schedule in self.rate_schedules:
            if schedule.label == "DAY" and schedule.num_days == 1:
                daily = schedule.cost
            elif schedule.label == "WEEK" and schedule.num_days == 7:
                weekly = schedule.cost
            elif "MOS" in schedule.label or schedule.num_days >= 28:
                if not monthly or schedule.num_days <= 31:
                    monthly = schedule.cost

        return RentalRates(
            daily=_positive(daily),
            weekly=_positive(weekly),
            monthly=_positive(monthly),
        )

    @property
    def monthly_rate(self) -> float | None:
        return self.rental_rates().monthly

    @property
    def has_rental_rate(self) -> bool:
        rates = self.rental_rates()
        return any(r is not None for r in (rates.daily, rates.weekly, rates.monthly))

    @property
    def buy_it_now_amount(self) -> float | None:
        """Buy-it-now price when the machine can actually be bought outright."""
        if self.buy_it_now_enabled is not True:
            return None
        return _positive(self.buy_it_now_price)


class FacetBucket(ApiModel):
    """A single facet value with count."""

    value: str | bool = Field(
        ...,
        description="Facet value (e.g., equipment type or flag state)",
        json_schema_extra={"example": "Excavator"},
    )
    count: int = Field(
        ...,
        description="Number of machines with this value",
        json_schema_extra={"example": 12},
    )


class FacetSet(ApiModel):
    """Facet counts per tracked dimension, most frequent first."""

    primary_type: list[FacetBucket] = Field(
        default=[], description="Equipment types with machine counts"
    )
    make: list[FacetBucket] = Field(default=[], description="Makes with counts")
    model: list[FacetBucket] = Field(default=[], description="Models with counts")
    rpo_enabled: list[FacetBucket] = Field(
        default=[], description="Rent-to-purchase flag states with counts"
    )
    buy_it_now_enabled: list[FacetBucket] = Field(
        default=[], description="Buy-it-now flag states with counts"
    )


class FilterSelection(BaseModel):
    """The user's current filter intent.

    An empty dimension places no constraint on the results.
    """

    categories: list[str] = Field(default=[], description="Primary types (OR)")
    makes: list[str] = Field(default=[], description="Makes (OR)")
    models: list[str] = Field(default=[], description="Models (OR)")
    purchase_options: list[PurchaseOption] = Field(
        default=[], description="Purchase capability flags (OR)"
    )
    min_hours: float | None = Field(None, description="Minimum hours (inclusive)")
    max_hours: float | None = Field(None, description="Maximum hours (inclusive)")
    query: str | None = Field(None, description="Free-text match on name or type")
    price_ranges: list[str] = Field(
        default=[], description="Buy-it-now price band keys (OR)"
    )


class PageWindow(ApiModel):
    """Page links to display for the current page."""

    page: int = Field(..., description="Current page after clamping")
    total_pages: int = Field(..., description="Total number of pages")
    tokens: list[int | str] = Field(
        default=[], description="Page numbers with '...' between gaps"
    )
    has_previous: bool = Field(False, description="Previous page link enabled")
    has_next: bool = Field(False, description="Next page link enabled")
    visible: bool = Field(False, description="Whether pagination is shown at all")


class ListingPage(ApiModel):
    """One page of filtered, sorted machines with facets for the whole set."""

    total: int = Field(..., description="Machines matching the filters")
    page: int = Field(..., description="Current page number")
    size: int = Field(..., description="Machines per page")
    sort: SortKey = Field(..., description="Sort order applied")
    results: list[EquipmentRecord] = Field(..., description="Machines on this page")
    facets: FacetSet = Field(..., description="Facet counts before filtering")
    pagination: PageWindow = Field(..., description="Page links to display")
