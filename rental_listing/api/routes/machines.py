"""Machine search and lookup endpoints backed by the search index."""

import logging

import httpx
from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.concurrency import run_in_threadpool

from rental_listing.api.dependencies import get_search_service, to_http_error
from rental_listing.api.schemas import (
    BuyNowResponse,
    ErrorResponse,
    MachineListResponse,
    MachineSearchRequest,
    TypeGroupResponse,
)
from rental_listing.listing.models import EquipmentRecord
from rental_listing.search.client import (
    MachineNotFoundError,
    SearchIndexError,
    SearchNotConfiguredError,
)
from rental_listing.search.query import (
    GeoRadius,
    MachineSearchCriteria,
    tokenize_keywords,
)
from rental_listing.search.service import MachineSearchService, category_counts

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["machines"])

SEARCH_ERRORS = (SearchNotConfiguredError, SearchIndexError, httpx.HTTPError)

ERROR_RESPONSES = {
    404: {"model": ErrorResponse, "description": "No matching machine"},
    500: {"model": ErrorResponse, "description": "Service not configured"},
    502: {"model": ErrorResponse, "description": "Search index error"},
}


async def _run_search(
    service: MachineSearchService,
    criteria: MachineSearchCriteria,
    single: bool,
) -> MachineListResponse | EquipmentRecord:
    try:
        if not single:
            result = await run_in_threadpool(service.search, criteria)
            return MachineListResponse(
                machines=result.machines, total_count=result.total_count
            )
        machine = await run_in_threadpool(service.search_single, criteria)
    except SEARCH_ERRORS as exc:
        raise to_http_error(exc) from exc

    if machine is None:
        raise HTTPException(
            status_code=404, detail="No machine found matching criteria"
        )
    return machine


@router.get(
    "/machine/search",
    response_model=MachineListResponse | EquipmentRecord,
    responses=ERROR_RESPONSES,
    summary="Search machines",
)
async def search_machines(
    primary_type: str | None = Query(
        None,
        alias="type",
        description="Primary equipment type",
        examples=["Dozer"],
    ),
    make: str | None = Query(None, description="Equipment make", examples=["CAT"]),
    model: str | None = Query(None, description="Equipment model"),
    keywords: str | None = Query(
        None, description="Comma-separated keywords", examples=["boom,lift"]
    ),
    cat_class: str | None = Query(
        None,
        alias="catClass",
        description="Catalog class number",
        examples=["300-2000"],
    ),
    lat: float | None = Query(None, ge=-90, le=90, description="Search latitude"),
    lon: float | None = Query(None, ge=-180, le=180, description="Search longitude"),
    radius: float | None = Query(None, gt=0, description="Search radius in miles"),
    min_capacity: float | None = Query(
        None, alias="minCapacity", description="Minimum capacity"
    ),
    max_capacity: float | None = Query(
        None, alias="maxCapacity", description="Maximum capacity"
    ),
    limit: int = Query(10, ge=1, le=1000, description="Maximum results"),
    single: bool = Query(False, description="Return only the best match"),
    service: MachineSearchService = Depends(get_search_service),
) -> MachineListResponse | EquipmentRecord:
    """
    Search machines by type, make, model, keywords or catalog class.

    - **Catalog class only**: returns the machine for that class in the
      service area, preferring a model or name containing the class
    - **single**: returns the best match, or 404 when nothing matches

    Searches around the service area unless both lat and lon are given.
    """
    keyword_list = [k.strip() for k in (keywords or "").split(",") if k.strip()]

    if cat_class and not (primary_type or make or model or keyword_list):
        try:
            machine = await run_in_threadpool(
                service.search_by_catalog_class, cat_class
            )
        except SEARCH_ERRORS as exc:
            raise to_http_error(exc) from exc
        if machine is None:
            raise HTTPException(
                status_code=404,
                detail=f"No machine found with catalog class {cat_class}",
            )
        return machine

    if lat is not None and lon is not None:
        location = GeoRadius(lat=lat, lon=lon, radius_miles=radius or 50)
    else:
        location = service.default_radius(radius)

    criteria = MachineSearchCriteria(
        primary_type=primary_type,
        make=make,
        model=model,
        keywords=keyword_list or None,
        cat_class=cat_class,
        location=location,
        min_capacity=min_capacity,
        max_capacity=max_capacity,
        max_results=limit,
    )
    return await _run_search(service, criteria, single)


@router.post(
    "/machine/search",
    response_model=MachineListResponse | EquipmentRecord,
    responses=ERROR_RESPONSES,
    summary="Search machines with a criteria body",
)
async def search_machines_by_body(
    request: MachineSearchRequest,
    service: MachineSearchService = Depends(get_search_service),
) -> MachineListResponse | EquipmentRecord:
    """
    Search machines using a JSON body for complex criteria.

    The service area is used when the criteria carry no location.
    """
    criteria = request.criteria
    if criteria.location is None:
        criteria = criteria.model_copy(update={"location": service.default_radius()})
    return await _run_search(service, criteria, request.single)


@router.get(
    "/machine/nearby",
    response_model=MachineListResponse,
    responses=ERROR_RESPONSES,
    summary="Machines near a location",
)
async def nearby_machines(
    lat: float | None = Query(None, ge=-90, le=90, description="Search latitude"),
    lon: float | None = Query(None, ge=-180, le=180, description="Search longitude"),
    radius: float = Query(50, gt=0, description="Search radius in miles"),
    q: str | None = Query(
        None, description="Free text, split into keywords", examples=["mini ex"]
    ),
    primary_type: str | None = Query(
        None, alias="type", description="Primary equipment type"
    ),
    make: str | None = Query(None, description="Equipment make"),
    model: str | None = Query(None, description="Equipment model"),
    limit: int = Query(50, ge=1, le=1000, description="Maximum results"),
    rentals_only: bool = Query(
        False,
        alias="rentalsOnly",
        description="Only machines that have a rental rate",
    ),
    service: MachineSearchService = Depends(get_search_service),
) -> MachineListResponse:
    """
    Search machines around a point, nearest first.

    Missing coordinates default to the service area center.
    """
    keywords = tokenize_keywords(q.strip()) if q and q.strip() else None

    try:
        result = await run_in_threadpool(
            service.search_nearby,
            lat=lat,
            lon=lon,
            radius_miles=radius,
            keywords=keywords,
            primary_type=primary_type,
            make=make,
            model=model,
            limit=limit,
            rentals_only=rentals_only,
        )
    except SEARCH_ERRORS as exc:
        raise to_http_error(exc) from exc

    return MachineListResponse(
        machines=result.machines, total_count=result.total_count
    )


@router.get(
    "/machine/{machine_id}",
    response_model=EquipmentRecord,
    responses=ERROR_RESPONSES,
    summary="Get machine by ID",
)
async def get_machine(
    machine_id: str,
    service: MachineSearchService = Depends(get_search_service),
) -> EquipmentRecord:
    """
    Get a single machine by its ID.

    Always fetched fresh from the index. Machines outside the service area
    that can be bought outright are marked as buy it now only.
    """
    try:
        return await run_in_threadpool(service.get_machine, machine_id)
    except MachineNotFoundError as exc:
        logger.info("Machine not found", extra={"machine_id": machine_id})
        raise to_http_error(exc) from exc
    except SEARCH_ERRORS as exc:
        raise to_http_error(exc) from exc


@router.get(
    "/equipment/buynow",
    response_model=BuyNowResponse,
    responses=ERROR_RESPONSES,
    summary="Machines available to buy now",
)
async def buy_now_machines(
    service: MachineSearchService = Depends(get_search_service),
) -> BuyNowResponse:
    """
    List machines that can be bought outright.

    Machines in the service area come first, cheapest first, followed by
    machines from elsewhere shown at the service city.
    """
    try:
        machines = await run_in_threadpool(service.buy_it_now_machines)
    except SEARCH_ERRORS as exc:
        raise to_http_error(exc) from exc

    return BuyNowResponse(machines=machines, total_count=len(machines))


@router.get(
    "/equipment/popular",
    response_model=MachineListResponse,
    responses=ERROR_RESPONSES,
    summary="Popular rentals near the service area",
)
async def popular_rentals(
    limit: int = Query(10, ge=1, le=100, description="Maximum results"),
    service: MachineSearchService = Depends(get_search_service),
) -> MachineListResponse:
    """
    List the rentable machines closest to the service area center.
    """
    try:
        result = await run_in_threadpool(service.popular_rentals, limit)
    except SEARCH_ERRORS as exc:
        raise to_http_error(exc) from exc

    return MachineListResponse(
        machines=result.machines, total_count=result.total_count
    )


@router.get(
    "/equipment/popularity",
    response_model=dict[str, int],
    responses=ERROR_RESPONSES,
    summary="Rentable machine counts per equipment type",
)
async def equipment_popularity(
    service: MachineSearchService = Depends(get_search_service),
) -> dict[str, int]:
    """
    Count rentable machines in the service area for each equipment type.

    Keys are lower-cased equipment types, e.g. `{"excavator": 12}`.
    """
    try:
        return await run_in_threadpool(service.equipment_popularity)
    except SEARCH_ERRORS as exc:
        raise to_http_error(exc) from exc


@router.get(
    "/equipment/by-type",
    response_model=TypeGroupResponse,
    responses=ERROR_RESPONSES,
    summary="Machines of several equipment types",
)
async def machines_by_type(
    primary_types: list[str] | None = Query(
        None,
        alias="type",
        description="Equipment type(s). Can specify multiple.",
        examples=["Scissor Lift"],
    ),
    per_type: int = Query(
        12, alias="perType", ge=1, le=40, description="Results wanted per type"
    ),
    service: MachineSearchService = Depends(get_search_service),
) -> TypeGroupResponse:
    """
    Find service area machines matching any of the given equipment types.

    Used to show a group of related categories (for example all the
    equipment one industry needs) with a count per category.
    """
    try:
        result = await run_in_threadpool(
            service.search_by_types, primary_types or [], per_type
        )
    except SEARCH_ERRORS as exc:
        raise to_http_error(exc) from exc

    return TypeGroupResponse(
        machines=result.machines,
        total_count=result.total_count,
        category_counts=category_counts(result.machines),
    )
