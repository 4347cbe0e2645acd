"""Smoke tests for the API.

These tests require a running API server with a search API key configured.
Run with: pytest tests/smoke -m smoke

Start the server first:
    uv run uvicorn rental_listing.api.app:app --port 9019
"""

import httpx
import pytest

from rental_listing.config import settings

API_BASE_URL = f"http://localhost:{settings.api_port}"


@pytest.fixture(scope="module")
def client():
    """Create an HTTP client for testing."""
    with httpx.Client(base_url=API_BASE_URL, timeout=30.0) as client:
        yield client


@pytest.mark.smoke
class TestHealthCheck:
    """Test health check endpoint."""

    def test_health_endpoint(self, client: httpx.Client):
        """Test that health endpoint returns OK."""
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"


@pytest.mark.smoke
class TestListingEndpoint:
    """Test listing endpoint."""

    def test_listing_without_filters(self, client: httpx.Client):
        """Test listing endpoint without filters returns a page."""
        response = client.get("/api/v1/machines")
        assert response.status_code == 200
        data = response.json()
        assert "total" in data
        assert "results" in data
        assert "facets" in data
        assert data["page"] == 1
        assert data["size"] == 9

    def test_listing_with_pagination(self, client: httpx.Client):
        """Test listing endpoint with page size."""
        response = client.get("/api/v1/machines", params={"size": 3})
        assert response.status_code == 200
        data = response.json()
        assert len(data["results"]) <= 3
        assert data["pagination"]["page"] == data["page"]

    def test_listing_with_category_filter(self, client: httpx.Client):
        """Test listing endpoint with category filter."""
        facets = client.get("/api/v1/machines").json()["facets"]["primaryType"]
        if not facets:
            pytest.skip("No machines in the service area")
        category = facets[0]["value"]

        response = client.get("/api/v1/machines", params={"category": category})
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == facets[0]["count"]
        for result in data["results"]:
            assert result["primaryType"] == category

    def test_listing_sorted_by_year(self, client: httpx.Client):
        """Test newest first ordering."""
        response = client.get("/api/v1/machines", params={"sort": "year-newest"})
        assert response.status_code == 200
        years = [r.get("year") or 0 for r in response.json()["results"]]
        assert years == sorted(years, reverse=True)

    def test_listing_invalid_size(self, client: httpx.Client):
        """Test listing endpoint with invalid size."""
        response = client.get("/api/v1/machines", params={"size": 200})
        assert response.status_code == 422  # Validation error


@pytest.mark.smoke
class TestMachineEndpoints:
    """Test machine search and lookup endpoints."""

    def test_nearby(self, client: httpx.Client):
        """Test nearby search around the service area."""
        response = client.get("/api/v1/machine/nearby", params={"limit": 5})
        assert response.status_code == 200
        data = response.json()
        assert len(data["machines"]) <= 5

    def test_machine_lookup_roundtrip(self, client: httpx.Client):
        """Test that a machine from search can be fetched by id."""
        machines = client.get(
            "/api/v1/machine/search", params={"limit": 1}
        ).json()["machines"]
        if not machines:
            pytest.skip("No machines in the service area")

        response = client.get(f"/api/v1/machine/{machines[0]['id']}")
        assert response.status_code == 200
        assert response.json()["id"] == machines[0]["id"]

    def test_unknown_machine(self, client: httpx.Client):
        """Test 404 for an unknown machine id."""
        response = client.get("/api/v1/machine/does-not-exist-0000")
        assert response.status_code == 404

    def test_buy_now(self, client: httpx.Client):
        """Test buy now listing."""
        response = client.get("/api/v1/equipment/buynow")
        assert response.status_code == 200
        data = response.json()
        assert data["totalCount"] == len(data["machines"])

    def test_popular_rentals(self, client: httpx.Client):
        """Test popular rentals are all rentable."""
        response = client.get("/api/v1/equipment/popular")
        assert response.status_code == 200
        data = response.json()
        assert len(data["machines"]) <= 10

    def test_popularity(self, client: httpx.Client):
        """Test popularity keys are lower-cased types."""
        response = client.get("/api/v1/equipment/popularity")
        assert response.status_code == 200
        for key, count in response.json().items():
            assert key == key.lower()
            assert count > 0
