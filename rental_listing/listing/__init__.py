"""Listing query and facet engine over in-memory machine records."""

from rental_listing.listing.facets import compute_facets
from rental_listing.listing.filters import filter_records, parse_filter_selection
from rental_listing.listing.models import (
    EquipmentRecord,
    FacetSet,
    FilterSelection,
    ListingPage,
    PurchaseOption,
    SortKey,
)
from rental_listing.listing.pagination import build_page_window, compute_page_window
from rental_listing.listing.pipeline import build_listing_page
from rental_listing.listing.sorting import parse_sort_key, sort_records

__all__ = [
    "EquipmentRecord",
    "FacetSet",
    "FilterSelection",
    "ListingPage",
    "PurchaseOption",
    "SortKey",
    "build_listing_page",
    "build_page_window",
    "compute_facets",
    "compute_page_window",
    "filter_records",
    "parse_filter_selection",
    "parse_sort_key",
    "sort_records",
]
