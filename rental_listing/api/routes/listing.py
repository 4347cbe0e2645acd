"""Listing page endpoint: nearby machines with facets, filters and pages."""

import httpx
from fastapi import APIRouter, Depends, Query
from fastapi.concurrency import run_in_threadpool

from rental_listing.api.dependencies import get_search_service, to_http_error
from rental_listing.api.schemas import ListingOptions, OptionLabel
from rental_listing.config import settings
from rental_listing.listing.constants import (
    MAX_HOURS,
    PRICE_BANDS,
    PURCHASE_OPTION_LABELS,
    SORT_OPTION_LABELS,
)
from rental_listing.listing.filters import parse_filter_selection
from rental_listing.listing.models import ListingPage
from rental_listing.listing.pipeline import build_listing_page
from rental_listing.listing.sorting import parse_sort_key
from rental_listing.search.client import SearchIndexError, SearchNotConfiguredError
from rental_listing.search.query import tokenize_keywords
from rental_listing.search.service import MachineSearchService

router = APIRouter(prefix="/api/v1", tags=["listing"])


@router.get("/machines", response_model=ListingPage, summary="List machines")
async def list_machines(
    category: list[str] | None = Query(
        None,
        description="Filter by equipment type(s). Can specify multiple.",
        examples=["Excavator"],
    ),
    make: list[str] | None = Query(
        None, description="Filter by make(s). Can specify multiple.", examples=["CAT"]
    ),
    model: list[str] | None = Query(
        None, description="Filter by model(s). Can specify multiple."
    ),
    purchase_options: list[str] | None = Query(
        None,
        alias="purchaseOptions",
        description="Purchase capabilities: rpoEnabled, buyItNowEnabled. Multiple.",
        examples=["buyItNowEnabled"],
    ),
    price_range: list[str] | None = Query(
        None,
        alias="priceRange",
        description="Buy-it-now price band(s): under5k, 5kTo10k, 10kTo25k, ...",
        examples=["10kTo25k"],
    ),
    min_hours: str | None = Query(
        None, alias="minHours", description="Minimum hours (inclusive)"
    ),
    max_hours: str | None = Query(
        None, alias="maxHours", description="Maximum hours (inclusive)"
    ),
    q: str | None = Query(
        None, description="Keyword search sent to the index", examples=["mini ex"]
    ),
    sort: str | None = Query(
        None,
        description=(
            "Sort order: location-closest, year-newest, year-oldest, "
            "recently-added, rental-rate-low, rental-rate-high, buy-now-low, "
            "buy-now-high. Unknown values fall back to location-closest."
        ),
    ),
    page: int = Query(1, ge=1, description="Page number (1-indexed)"),
    size: int = Query(
        settings.default_page_size,
        ge=1,
        le=100,
        description="Number of machines per page (max 100)",
    ),
    lat: float | None = Query(None, ge=-90, le=90, description="Search latitude"),
    lon: float | None = Query(None, ge=-180, le=180, description="Search longitude"),
    radius: float | None = Query(None, gt=0, description="Search radius in miles"),
    limit: int = Query(
        settings.listing_fetch_limit,
        ge=1,
        le=1000,
        description="Machines fetched from the index before filtering",
    ),
    service: MachineSearchService = Depends(get_search_service),
) -> ListingPage:
    """
    List machines near a location, filtered, sorted and paginated.

    - **Facets**: counted over every fetched machine, before filtering
    - **Filters**: OR within a dimension, AND across dimensions
    - **Malformed filter values** are ignored rather than rejected

    Defaults to the service area when no coordinates are given.
    """
    selection = parse_filter_selection(
        {
            "category": category or [],
            "make": make or [],
            "model": model or [],
            "purchaseOptions": purchase_options or [],
            "priceRange": price_range or [],
            "minHours": min_hours,
            "maxHours": max_hours,
        }
    )
    sort_key = parse_sort_key(sort)
    keywords = tokenize_keywords(q) if q else None

    try:
        result = await run_in_threadpool(
            service.search_nearby,
            lat=lat,
            lon=lon,
            radius_miles=radius,
            keywords=keywords or None,
            limit=limit,
        )
    except (SearchNotConfiguredError, SearchIndexError, httpx.HTTPError) as exc:
        raise to_http_error(exc) from exc

    return build_listing_page(
        result.machines,
        selection=selection,
        sort_key=sort_key,
        page=page,
        page_size=size,
    )


@router.get(
    "/machines/options",
    response_model=ListingOptions,
    summary="List filter and sort options",
)
async def listing_options():
    """Values accepted by the listing endpoint, with display labels."""
    return ListingOptions(
        sort=[
            OptionLabel(value=value, label=label)
            for value, label in SORT_OPTION_LABELS.items()
        ],
        purchase_options=[
            OptionLabel(value=value, label=label)
            for value, label in PURCHASE_OPTION_LABELS.items()
        ],
        price_ranges=[
            OptionLabel(value=str(band["key"]), label=str(band["label"]))
            for band in PRICE_BANDS
        ],
        max_hours=MAX_HOURS,
    )
