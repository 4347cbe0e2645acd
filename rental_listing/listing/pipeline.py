"""Compose faceting, filtering, sorting and pagination into a listing page."""

from collections.abc import Sequence

from rental_listing.listing.facets import compute_facets
from rental_listing.listing.filters import filter_records
from rental_listing.listing.models import (
    EquipmentRecord,
    FilterSelection,
    ListingPage,
    SortKey,
)
from rental_listing.listing.pagination import build_page_window, paginate, total_pages
from rental_listing.listing.sorting import DEFAULT_SORT, sort_records


def build_listing_page(
    records: Sequence[EquipmentRecord],
    selection: FilterSelection | None = None,
    sort_key: SortKey = DEFAULT_SORT,
    page: int = 1,
    page_size: int = 9,
) -> ListingPage:
    """Produce one page of results for the given filters and sort order.

    Facets are counted over the unfiltered records so the filter UI can
    offer every value; results are filtered, sorted, then paginated.
    """
    selection = selection or FilterSelection()

    facets = compute_facets(records)
    ordered = sort_records(filter_records(records, selection), sort_key)
    window = build_page_window(page, total_pages(len(ordered), page_size))

    return ListingPage(
        total=len(ordered),
        page=window.page,
        size=page_size,
        sort=sort_key,
        results=paginate(ordered, window.page, page_size),
        facets=facets,
        pagination=window,
    )
