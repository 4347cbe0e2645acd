"""HTTP client for the external machine search index."""

import logging
import random
import time
from collections.abc import Callable
from urllib.parse import quote

import httpx

from rental_listing.config import settings

logger = logging.getLogger(__name__)

RETRY_STATUS_CODES = frozenset({429, 503})


class SearchIndexError(Exception):
    """The search index answered with an error status."""

    def __init__(self, status_code: int, detail: str = ""):
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"Search failed with status {status_code}")


class MachineNotFoundError(SearchIndexError):
    """No machine document exists for the requested ID."""

    def __init__(self, machine_id: str):
        self.machine_id = machine_id
        super().__init__(404, f"Machine with ID {machine_id} not found")


class SearchNotConfiguredError(RuntimeError):
    """No API key is configured for the search index."""


class SearchIndexClient:
    """Synchronous client for the machine index documents endpoint."""

    def __init__(
        self,
        base_url: str,
        api_key: str | None,
        api_version: str = "2020-06-30",
        timeout: float = 30.0,
        max_retries: int = 3,
        retry_base_delay: float = 0.25,
        transport: httpx.BaseTransport | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """Initialize the search index client.

        Args:
            base_url: Documents URL of the index, e.g.
                https://<service>.search.windows.net/indexes/machines/docs
            api_key: Query key for the index
            api_version: Search API version sent with every request
            timeout: Request timeout in seconds
            max_retries: Retries after a 429/503 response
            retry_base_delay: First backoff delay in seconds, doubled per retry
            transport: Optional httpx transport (used by tests)
            sleep: Function used to wait between retries
        """
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.api_version = api_version
        self.max_retries = max_retries
        self.retry_base_delay = retry_base_delay
        self._sleep = sleep
        self._client = httpx.Client(timeout=timeout, transport=transport)

    def _headers(self) -> dict[str, str]:
        if not self.api_key:
            raise SearchNotConfiguredError("Search API key is not configured")
        return {"api-key": self.api_key, "Content-Type": "application/json"}

    def _request(
        self, method: str, path: str, json: dict | None = None
    ) -> httpx.Response:
        """Send a request, backing off exponentially on 429/503."""
        headers = self._headers()
        url = f"{self.base_url}{path}"
        params = {"api-version": self.api_version}

        response = None
        for attempt in range(self.max_retries + 1):
            response = self._client.request(
                method, url, params=params, json=json, headers=headers
            )
            if response.status_code not in RETRY_STATUS_CODES:
                break
            if attempt < self.max_retries:
                delay = self.retry_base_delay * 2**attempt + random.uniform(0, 0.1)
                logger.warning(
                    "Search index throttled, retrying",
                    extra={"status": response.status_code, "delay_s": delay},
                )
                self._sleep(delay)

        return response

    def search(self, body: dict) -> dict:
        """Run a search request and return the raw response payload.

        Raises:
            SearchNotConfiguredError: If no API key is set.
            SearchIndexError: If the index returns an error status.
        """
        response = self._request("POST", "/search", json=body)
        if response.is_error:
            logger.error(
                "Machine search failed",
                extra={"status": response.status_code, "body": response.text[:500]},
            )
            raise SearchIndexError(response.status_code, response.text)
        return response.json()

    def get_document(self, machine_id: str) -> dict:
        """Fetch a single machine document by ID.

        Raises:
            MachineNotFoundError: If the index has no such document.
            SearchIndexError: For any other error status.
        """
        response = self._request("GET", f"/{quote(machine_id, safe='')}")
        if response.status_code == 404:
            raise MachineNotFoundError(machine_id)
        if response.is_error:
            logger.error(
                "Machine lookup failed",
                extra={"machine_id": machine_id, "status": response.status_code},
            )
            raise SearchIndexError(response.status_code, response.text)
        return response.json()

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._client.close()


def create_client() -> SearchIndexClient:
    """Build a client from application settings."""
    return SearchIndexClient(
        base_url=settings.search_url,
        api_key=settings.search_api_key,
        api_version=settings.search_api_version,
        timeout=settings.search_timeout,
        max_retries=settings.search_max_retries,
        retry_base_delay=settings.search_retry_base_delay,
    )
