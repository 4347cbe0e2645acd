"""Unit tests for service area rules."""

import pytest

from rental_listing.search.location import default_service_area, haversine_miles

NEW_ORLEANS = {"point": {"coordinates": [-90.0715, 29.9511]}}
BREAUX_BRIDGE = {"latitude": 30.2735, "longitude": -91.8993}


@pytest.mark.unit
class TestHaversine:
    """Tests for haversine_miles function."""

    def test_same_point(self):
        """Test zero distance between identical points."""
        assert haversine_miles(30.2241, -92.0198, 30.2241, -92.0198) == 0

    def test_lafayette_to_new_orleans(self):
        """Test a known distance of roughly 117 miles."""
        distance = haversine_miles(30.2241, -92.0198, 29.9511, -90.0715)
        assert 110 < distance < 125


@pytest.mark.unit
class TestServiceArea:
    """Tests for ServiceArea."""

    def test_default_area_from_settings(self):
        """Test the configured default area."""
        area = default_service_area()
        assert area.city == "Lafayette"
        assert area.state == "LA"
        assert area.radius_miles == 50

    def test_contains(self, service_area, make_record):
        """Test radius membership."""
        assert service_area.contains(make_record(location=BREAUX_BRIDGE))
        assert not service_area.contains(make_record(location=NEW_ORLEANS))

    def test_contains_custom_radius(self, service_area, make_record):
        """Test membership with an explicit radius."""
        record = make_record(location=NEW_ORLEANS)
        assert service_area.contains(record, radius_miles=150)

    def test_no_coordinates_is_outside(self, service_area, make_record):
        """Test that machines without coordinates are not in the area."""
        assert not service_area.contains(make_record())

    def test_relabel_outside_buy_it_now(self, service_area, make_record):
        """Test that distant buy-it-now machines ship from the service city."""
        record = make_record(
            buyItNowEnabled=True,
            location={**NEW_ORLEANS, "city": "New Orleans", "state": "LA"},
        )
        relabeled = service_area.relabel_buy_it_now_only(record)
        assert relabeled.buy_it_now_only is True
        assert relabeled.location.city == "Lafayette"
        assert relabeled.location.address.city == "Lafayette"
        assert relabeled.location.address.state_province == "LA"
        assert relabeled.coordinates == record.coordinates
        assert record.buy_it_now_only is False

    def test_inside_not_relabeled(self, service_area, make_record):
        """Test that local machines are returned unchanged."""
        record = make_record(buyItNowEnabled=True, location=BREAUX_BRIDGE)
        assert service_area.relabel_buy_it_now_only(record) is record

    def test_outside_without_buy_it_now_not_relabeled(
        self, service_area, make_record
    ):
        """Test that distant rental-only machines are left alone."""
        record = make_record(buyItNowEnabled=False, location=NEW_ORLEANS)
        assert service_area.relabel_buy_it_now_only(record) is record

    def test_no_coordinates_not_relabeled(self, service_area, make_record):
        """Test that machines without coordinates keep their location."""
        record = make_record(buyItNowEnabled=True)
        assert service_area.relabel_buy_it_now_only(record) is record

    def test_mark_without_location(self, service_area, make_record):
        """Test marking a machine that has no location at all."""
        marked = service_area.mark_buy_it_now_only(make_record())
        assert marked.buy_it_now_only is True
        assert marked.location.state == "LA"
