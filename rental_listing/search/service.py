"""Machine search service on top of the search index client."""

import json
import logging
import re
import time

import httpx
from pydantic import BaseModel, Field

from rental_listing.listing.models import EquipmentRecord
from rental_listing.search.cache import TTLCache
from rental_listing.search.client import SearchIndexClient, SearchIndexError
from rental_listing.search.location import ServiceArea
from rental_listing.search.query import (
    GeoRadius,
    MachineSearchCriteria,
    any_primary_type_clause,
    build_search_body,
)

logger = logging.getLogger(__name__)

BUY_IT_NOW_FILTERS = ["(buyItNowEnabled eq true)", "(buyItNowPrice gt 0)"]
BUY_IT_NOW_LOCAL_LIMIT = 25
BUY_IT_NOW_GLOBAL_FETCH = 1000
BUY_IT_NOW_ORDER = "buyItNowPrice asc"

RENTABLE_FILTER = "(rentalRate ne 0)"
POPULAR_RENTALS_LIMIT = 10
POPULARITY_FACET = "primaryType,count:100"

# Per-type fetch size and overall cap for a grouped type search
TYPE_GROUP_PER_TYPE = 12
TYPE_GROUP_MAX_RESULTS = 40

_NON_SLUG = re.compile(r"[^a-z0-9]+")


class MachineSearchResult(BaseModel):
    """Machines returned for one search."""

    machines: list[EquipmentRecord] = Field(default=[], description="Matches")
    total_count: int = Field(0, description="Total matches reported by the index")
    facets: dict[str, list[dict]] = Field(
        default={}, description="Facet buckets by field, when requested"
    )


class MachineSearchService:
    """Search machines, applying caching and service area rules.

    The cache is passed in so a single instance can be shared per process.
    """

    def __init__(
        self,
        client: SearchIndexClient,
        cache: TTLCache,
        area: ServiceArea,
    ):
        self.client = client
        self.cache = cache
        self.area = area

    def default_radius(self, radius_miles: float | None = None) -> GeoRadius:
        return GeoRadius(
            lat=self.area.latitude,
            lon=self.area.longitude,
            radius_miles=radius_miles or self.area.radius_miles,
        )

    def _parse(self, payload: dict) -> MachineSearchResult:
        machines = [
            self.area.relabel_buy_it_now_only(EquipmentRecord.model_validate(doc))
            for doc in payload.get("value") or []
        ]
        return MachineSearchResult(
            machines=machines,
            total_count=payload.get("@odata.count") or 0,
            facets=payload.get("@search.facets") or {},
        )

    def search(
        self,
        criteria: MachineSearchCriteria,
        extra_filters: list[str] | None = None,
        order_by: str | None = None,
        facets: list[str] | None = None,
        top: int | None = None,
    ) -> MachineSearchResult:
        """Search the index, serving repeated requests from the cache.

        Raises:
            SearchNotConfiguredError: If no API key is set.
            SearchIndexError: If the index returns an error status.
        """
        body = build_search_body(criteria, extra_filters, order_by, facets, top)
        cache_key = json.dumps(body, sort_keys=True)
        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached

        start_time = time.time()
        payload = self.client.search(body)
        result = self._parse(payload)
        self.cache.set(cache_key, result)

        logger.info(
            "Machine search completed",
            extra={
                "type": criteria.primary_type or "multi",
                "count": result.total_count,
                "took_ms": int((time.time() - start_time) * 1000),
            },
        )
        return result

    def search_single(
        self, criteria: MachineSearchCriteria
    ) -> EquipmentRecord | None:
        """Return the best match for the criteria, or None."""
        result = self.search(criteria.model_copy(update={"max_results": 1}))
        if not result.machines:
            logger.info("No machine found matching criteria")
            return None
        return result.machines[0]

    def search_by_catalog_class(self, cat_class: str) -> EquipmentRecord | None:
        """Find the machine for a catalog class number within the service area.

        Prefers a machine whose model or display name contains the class.
        """
        criteria = MachineSearchCriteria(
            keywords=[cat_class], max_results=5, location=self.default_radius()
        )
        machines = self.search(criteria).machines
        for machine in machines:
            if cat_class in (machine.model or "") or cat_class in (
                machine.display_name or ""
            ):
                return machine
        return machines[0] if machines else None

    def search_nearby(
        self,
        lat: float | None = None,
        lon: float | None = None,
        radius_miles: float | None = None,
        keywords: list[str] | None = None,
        primary_type: str | None = None,
        make: str | None = None,
        model: str | None = None,
        limit: int = 50,
        rentals_only: bool = False,
    ) -> MachineSearchResult:
        """Search around a point, defaulting to the service area center.

        With ``rentals_only`` set, machines without any rental rate are dropped.
        """
        location = GeoRadius(
            lat=self.area.latitude if lat is None else lat,
            lon=self.area.longitude if lon is None else lon,
            radius_miles=radius_miles or self.area.radius_miles,
        )
        result = self.search(
            MachineSearchCriteria(
                location=location,
                keywords=keywords,
                primary_type=primary_type,
                make=make,
                model=model,
                max_results=limit,
            )
        )
        if not rentals_only:
            return result
        return MachineSearchResult(
            machines=[m for m in result.machines if m.has_rental_rate],
            total_count=result.total_count,
        )

    def get_machine(self, machine_id: str) -> EquipmentRecord:
        """Fetch one machine, always bypassing the cache.

        Raises:
            MachineNotFoundError: If the index has no such machine.
        """
        document = self.client.get_document(machine_id)
        return self.area.relabel_buy_it_now_only(
            EquipmentRecord.model_validate(document)
        )

    def buy_it_now_machines(self) -> list[EquipmentRecord]:
        """Machines that can be bought outright.

        Local machines inside the service area come first, cheapest first.
        They are followed by machines from outside the area, which are
        relabeled as buy-it-now only. An error status from the local search
        leaves the local list empty; any failure of the out-of-area search is
        logged and skipped.

        Raises:
            SearchNotConfiguredError: If no API key is set.
            httpx.HTTPError: If the index cannot be reached for the local search.
        """
        try:
            local = self.search(
                MachineSearchCriteria(
                    location=self.default_radius(),
                    max_results=BUY_IT_NOW_LOCAL_LIMIT,
                ),
                extra_filters=BUY_IT_NOW_FILTERS,
                order_by=BUY_IT_NOW_ORDER,
            ).machines
        except SearchIndexError as exc:
            logger.warning(
                "Local buy it now search failed",
                extra={"status": exc.status_code},
            )
            local = []

        try:
            everywhere = self.search(
                MachineSearchCriteria(max_results=BUY_IT_NOW_GLOBAL_FETCH),
                extra_filters=BUY_IT_NOW_FILTERS,
                order_by=BUY_IT_NOW_ORDER,
            ).machines
        except (SearchIndexError, httpx.HTTPError) as exc:
            logger.warning(
                "Out-of-area buy it now search failed",
                extra={"error": str(exc)},
            )
            everywhere = []

        outside = [m for m in everywhere if not self.area.contains(m)]
        remote = [
            self.area.mark_buy_it_now_only(m)
            for m in outside[:BUY_IT_NOW_LOCAL_LIMIT]
        ]
        return local + remote

    def popular_rentals(
        self, limit: int = POPULAR_RENTALS_LIMIT
    ) -> MachineSearchResult:
        """Nearest machines in the service area that have a rental rate."""
        return self.search(
            MachineSearchCriteria(location=self.default_radius(), max_results=limit),
            extra_filters=[RENTABLE_FILTER],
        )

    def equipment_popularity(self) -> dict[str, int]:
        """Count rentable machines in the service area per equipment type.

        Keys are lower-cased primary types.
        """
        result = self.search(
            MachineSearchCriteria(location=self.default_radius()),
            extra_filters=[RENTABLE_FILTER],
            facets=[POPULARITY_FACET],
            top=0,
        )
        return {
            str(bucket["value"]).lower(): bucket["count"]
            for bucket in result.facets.get("primaryType", [])
            if bucket.get("value") is not None
        }

    def search_by_types(
        self,
        primary_types: list[str],
        per_type: int = TYPE_GROUP_PER_TYPE,
    ) -> MachineSearchResult:
        """Machines in the service area matching any of several types.

        Several types are fetched with one OR-ed query, nearest first. If the
        index rejects it, each type is searched on its own and the results are
        merged without duplicates.
        """
        types = list(dict.fromkeys(t for t in primary_types if t))
        if not types:
            return MachineSearchResult()

        if len(types) > 1:
            try:
                result = self.search(
                    MachineSearchCriteria(
                        location=self.default_radius(),
                        max_results=min(
                            per_type * len(types), TYPE_GROUP_MAX_RESULTS
                        ),
                    ),
                    extra_filters=[any_primary_type_clause(types)],
                )
                return MachineSearchResult(
                    machines=result.machines, total_count=len(result.machines)
                )
            except SearchIndexError as exc:
                logger.warning(
                    "Combined type search failed, searching per type",
                    extra={"status": exc.status_code, "types": len(types)},
                )

        merged: dict[str, EquipmentRecord] = {}
        for primary_type in types:
            result = self.search(
                MachineSearchCriteria(
                    primary_type=primary_type,
                    location=self.default_radius(),
                    max_results=per_type,
                )
            )
            for machine in result.machines:
                merged.setdefault(machine.id, machine)

        machines = list(merged.values())
        return MachineSearchResult(machines=machines, total_count=len(machines))


def category_counts(machines: list[EquipmentRecord]) -> dict[str, int]:
    """Count machines per primary type, keyed by the type's URL slug."""
    counts: dict[str, int] = {}
    for machine in machines:
        if machine.primary_type:
            slug = _NON_SLUG.sub("-", machine.primary_type.lower())
            counts[slug] = counts.get(slug, 0) + 1
    return counts
