"""Shared FastAPI dependencies."""

from functools import lru_cache

import httpx
from fastapi import HTTPException

from rental_listing.config import settings
from rental_listing.search.cache import TTLCache
from rental_listing.search.client import (
    MachineNotFoundError,
    SearchIndexError,
    SearchNotConfiguredError,
    create_client,
)
from rental_listing.search.location import default_service_area
from rental_listing.search.service import MachineSearchService


@lru_cache
def get_search_service() -> MachineSearchService:
    """One search service (and response cache) per process."""
    return MachineSearchService(
        client=create_client(),
        cache=TTLCache(settings.search_cache_ttl),
        area=default_service_area(),
    )


def to_http_error(exc: Exception) -> HTTPException:
    """Translate search layer errors into HTTP errors."""
    if isinstance(exc, SearchNotConfiguredError):
        return HTTPException(status_code=500, detail="Service not configured")
    if isinstance(exc, MachineNotFoundError):
        return HTTPException(status_code=404, detail=exc.detail)
    if isinstance(exc, SearchIndexError):
        return HTTPException(
            status_code=502,
            detail=f"Search index error (status {exc.status_code})",
        )
    if isinstance(exc, httpx.HTTPError):
        return HTTPException(status_code=502, detail="Search index unreachable")
    return HTTPException(status_code=500, detail="Internal server error")
