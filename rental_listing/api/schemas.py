"""Pydantic schemas for API requests and responses."""

from pydantic import BaseModel, ConfigDict, Field

from rental_listing.listing.models import ApiModel, EquipmentRecord
from rental_listing.search.query import MachineSearchCriteria


class MachineSearchRequest(BaseModel):
    """Body of a machine search request."""

    criteria: MachineSearchCriteria = Field(
        ...,
        description="Search criteria (defaults to the service area location)",
    )
    single: bool = Field(
        False, description="Return only the best match instead of a list"
    )


class MachineListResponse(ApiModel):
    """Machines matching a search."""

    model_config = ConfigDict(extra="forbid")

    machines: list[EquipmentRecord] = Field(
        default=[], description="Matching machines"
    )
    total_count: int = Field(
        0,
        description="Total matches reported by the search index",
        json_schema_extra={"example": 42},
    )


class BuyNowResponse(ApiModel):
    """Machines that can be bought outright."""

    machines: list[EquipmentRecord] = Field(
        default=[],
        description=(
            "Local machines cheapest first, followed by machines from outside "
            "the service area marked as buy it now only"
        ),
    )
    total_count: int = Field(0, description="Number of machines returned")


class TypeGroupResponse(ApiModel):
    """Machines matching any of several equipment types."""

    machines: list[EquipmentRecord] = Field(
        default=[], description="Matching machines, nearest first"
    )
    total_count: int = Field(0, description="Number of machines returned")
    category_counts: dict[str, int] = Field(
        default={},
        description="Machines per equipment type, keyed by type slug",
        json_schema_extra={"example": {"scissor-lift": 3, "boom-lift": 2}},
    )


class ErrorResponse(ApiModel):
    """Error details."""

    detail: str = Field(
        ...,
        description="Error message",
        json_schema_extra={"example": "Service not configured"},
    )


class OptionLabel(ApiModel):
    """A selectable filter or sort value with its display label."""

    value: str = Field(..., json_schema_extra={"example": "year-newest"})
    label: str = Field(..., json_schema_extra={"example": "Year: newest to oldest"})


class ListingOptions(ApiModel):
    """Values accepted by the listing endpoint, for building filter controls."""

    sort: list[OptionLabel] = Field(default=[], description="Sort orders")
    purchase_options: list[OptionLabel] = Field(
        default=[], description="Values for purchaseOptions"
    )
    price_ranges: list[OptionLabel] = Field(
        default=[], description="Values for priceRange"
    )
    max_hours: int = Field(..., description="Upper bound of the hours filter")
