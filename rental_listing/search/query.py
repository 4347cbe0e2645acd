"""Build search index request bodies (OData filters, Lucene search text)."""

import re

from pydantic import BaseModel, Field

KM_PER_MILE = 1.60934

# Only machines that can actually be listed
BASE_FILTER_CLAUSES = [
    "(status eq 'Available' or status eq 'Onboarding')",
    "(requiresAdminApproval eq false)",
    "(approvalStatus eq 'Approved' or approvalStatus eq null)",
]

_NON_WORD = re.compile(r"[^\w-]", re.UNICODE)


class GeoRadius(BaseModel):
    """Circle to search within."""

    lat: float = Field(..., ge=-90, le=90, description="Latitude of the center")
    lon: float = Field(..., ge=-180, le=180, description="Longitude of the center")
    radius_miles: float = Field(50, gt=0, description="Search radius in miles")


class MachineSearchCriteria(BaseModel):
    """Criteria for finding machines in the search index."""

    primary_type: str | None = Field(
        None,
        description="Primary equipment type",
        json_schema_extra={"example": "Scissor Lift"},
    )
    make: str | None = Field(None, description="Equipment make/manufacturer")
    model: str | None = Field(None, description="Equipment model")
    keywords: list[str] | None = Field(
        None, description="Keywords to search in title/description"
    )
    location: GeoRadius | None = Field(None, description="Location-based search")
    min_capacity: float | None = Field(None, description="Minimum capacity")
    max_capacity: float | None = Field(None, description="Maximum capacity")
    cat_class: str | None = Field(
        None,
        description="Catalog class number",
        json_schema_extra={"example": "300-2000"},
    )
    max_results: int = Field(50, ge=1, le=1000, description="Maximum results")


def quote(value: str) -> str:
    """Quote a string literal for an OData filter."""
    return "'" + value.replace("'", "''") + "'"


def geo_distance(lat: float, lon: float) -> str:
    """OData distance expression from the machine's point to (lat, lon)."""
    return f"geo.distance(location/point, geography'POINT({lon} {lat})')"


def build_filter_clauses(criteria: MachineSearchCriteria) -> list[str]:
    """Build OData filter clauses from search criteria."""
    filters = list(BASE_FILTER_CLAUSES)

    if criteria.location:
        radius_km = criteria.location.radius_miles * KM_PER_MILE
        distance = geo_distance(criteria.location.lat, criteria.location.lon)
        filters.append(f"({distance} le {radius_km})")

    if criteria.primary_type:
        filters.append(f"(primaryType eq {quote(criteria.primary_type)})")

    if criteria.make:
        filters.append(f"(make eq {quote(criteria.make)})")

    if criteria.model:
        filters.append(f"(model eq {quote(criteria.model)})")

    if criteria.min_capacity is not None:
        filters.append(f"(capacity ge {criteria.min_capacity})")

    if criteria.max_capacity is not None:
        filters.append(f"(capacity le {criteria.max_capacity})")

    return filters


def build_search_text(keywords: list[str] | None) -> str:
    """Expand keywords into a full Lucene query.

    Each token matches as a prefix, and tokens of three or more characters
    also match with an edit distance of one: ``contain`` becomes
    ``(contain* OR contain~1)``.
    """
    if not keywords:
        return ""

    expanded = []
    for raw in keywords:
        base = str(raw).strip()
        if base.endswith("*"):
            base = base[:-1]
        if not base:
            continue
        if len(base) >= 3:
            expanded.append(f"({base}* OR {base}~1)")
        else:
            expanded.append(f"{base}*")

    return " OR ".join(expanded)


def tokenize_keywords(query: str, max_tokens: int = 6) -> list[str]:
    """Split free text into prefix-search keywords.

    Keeps letters, digits and dashes; tokens of two or more characters get a
    trailing ``*``.
    """
    tokens = []
    for raw in query.split():
        token = _NON_WORD.sub("", raw).replace("_", "")
        if not token:
            continue
        tokens.append(f"{token}*" if len(token) >= 2 else token)
    return tokens[:max_tokens]


def build_search_body(
    criteria: MachineSearchCriteria,
    extra_filters: list[str] | None = None,
    order_by: str | None = None,
    facets: list[str] | None = None,
    top: int | None = None,
) -> dict:
    """Build the search request body for the index.

    Results are ordered by distance when a location is given, unless
    ``order_by`` overrides it. ``top`` overrides ``criteria.max_results``;
    pass 0 with ``facets`` to fetch only facet counts.
    """
    filters = build_filter_clauses(criteria) + (extra_filters or [])
    search = build_search_text(criteria.keywords)

    body: dict = {
        "count": True,
        "filter": " and ".join(filters),
        "search": search,
        "searchMode": "any" if search else "all",
        "top": criteria.max_results if top is None else top,
        "facets": list(facets or []),
    }
    if search:
        body["queryType"] = "full"

    if order_by:
        body["orderby"] = order_by
    elif criteria.location:
        distance = geo_distance(criteria.location.lat, criteria.location.lon)
        body["orderby"] = f"{distance} asc"

    return body


def any_primary_type_clause(primary_types: list[str]) -> str:
    """OData clause matching any of the given primary types."""
    return (
        "("
        + " or ".join(f"(primaryType eq {quote(t)})" for t in primary_types)
        + ")"
    )
