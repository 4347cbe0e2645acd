"""Unit tests for EquipmentRecord parsing and derived values."""

import pytest
from pydantic import ValidationError

from rental_listing.listing.models import EquipmentRecord


@pytest.mark.unit
class TestEquipmentRecord:
    """Tests for EquipmentRecord model."""

    def test_parse_index_document(self, sample_machine_json: dict):
        """Test parsing a camelCase index document."""
        record = EquipmentRecord.model_validate(sample_machine_json)
        assert record.id == "m-1001"
        assert record.primary_type == "Excavator"
        assert record.display_name == "2019 CAT 308 CR"
        assert record.rpo_enabled is True
        assert record.search_score == 1.0
        assert record.created_at is not None

    def test_minimal_document(self):
        """Test that only the id is required."""
        record = EquipmentRecord.model_validate({"id": "x"})
        assert record.primary_type is None
        assert record.effective_hours == 0
        assert record.distance is None
        assert record.coordinates is None
        assert record.buy_it_now_only is False

    def test_missing_id_rejected(self):
        """Test that documents without an id are invalid."""
        with pytest.raises(ValidationError):
            EquipmentRecord.model_validate({"make": "CAT"})

    def test_records_are_immutable(self, sample_machine_json: dict):
        """Test that records cannot be changed in place."""
        record = EquipmentRecord.model_validate(sample_machine_json)
        with pytest.raises(ValidationError):
            record.make = "Deere"

    def test_serializes_with_index_keys(self, sample_machine_json: dict):
        """Test dumping by alias restores the index field names."""
        record = EquipmentRecord.model_validate(sample_machine_json)
        data = record.model_dump(by_alias=True)
        assert data["primaryType"] == "Excavator"
        assert data["buyItNowPrice"] == 62500

    def test_coordinates_from_point(self, sample_machine_json: dict):
        """Test that GeoJSON [lon, lat] becomes (lat, lon)."""
        record = EquipmentRecord.model_validate(sample_machine_json)
        assert record.coordinates == (30.2241, -92.0198)

    def test_coordinates_from_lat_lon(self):
        """Test coordinates from plain latitude/longitude fields."""
        record = EquipmentRecord.model_validate(
            {"id": "x", "location": {"latitude": 29.95, "longitude": -90.07}}
        )
        assert record.coordinates == (29.95, -90.07)

    def test_preferred_images(self, sample_machine_json: dict):
        """Test that thumbnails win over full images."""
        record = EquipmentRecord.model_validate(sample_machine_json)
        assert record.preferred_images == ["https://img.example.com/1001/thumb.jpg"]
        no_thumbs = record.model_copy(update={"thumbnails": []})
        assert no_thumbs.preferred_images == ["https://img.example.com/1001/full.jpg"]


@pytest.mark.unit
class TestRentalRates:
    """Tests for rental rate resolution."""

    def test_numeric_rate_is_monthly(self):
        """Test that a bare number is the monthly rate."""
        rates = EquipmentRecord.model_validate(
            {"id": "x", "rentalRate": 2500}
        ).rental_rates()
        assert rates.monthly == 2500
        assert rates.daily is None
        assert rates.weekly is None

    def test_structured_rate(self):
        """Test daily/weekly/monthly object."""
        record = EquipmentRecord.model_validate(
            {"id": "x", "rentalRate": {"daily": 100, "weekly": 350, "monthly": 900}}
        )
        rates = record.rental_rates()
        assert (rates.daily, rates.weekly, rates.monthly) == (100, 350, 900)
        assert record.monthly_rate == 900

    def test_schedules_override_flat_rates(self, sample_machine_json: dict):
        """Test that DAY, WEEK and MOS schedules replace the flat values."""
        rates = EquipmentRecord.model_validate(sample_machine_json).rental_rates()
        assert rates.daily == 425
        assert rates.weekly == 1300
        assert rates.monthly == 3600

    def test_month_schedule_prefers_short_period(self):
        """Test that a 28-31 day schedule beats a longer one."""
        record = EquipmentRecord.model_validate(
            {
                "id": "x",
                "rateSchedules": [
                    {"label": "MOS", "numDays": 30, "cost": 3000},
                    {"label": "3 MOS", "numDays": 90, "cost": 8000},
                ],
            }
        )
        assert record.monthly_rate == 3000

    def test_zero_rates_are_missing(self):
        """Test that zero rates count as not offered."""
        record = EquipmentRecord.model_validate(
            {"id": "x", "rentalRate": {"daily": 0, "weekly": 0, "monthly": 0}}
        )
        assert record.has_rental_rate is False
        assert record.monthly_rate is None

    def test_has_rental_rate(self):
        """Test rental availability from any resolved rate."""
        record = EquipmentRecord.model_validate(
            {
                "id": "x",
                "rateSchedules": [{"label": "DAY", "numDays": 1, "cost": 90}],
            }
        )
        assert record.has_rental_rate is True


@pytest.mark.unit
class TestBuyItNowAmount:
    """Tests for buy_it_now_amount property."""

    @pytest.mark.parametrize(
        "enabled,price,expected",
        [
            (True, 15000, 15000),
            (False, 15000, None),
            (None, 15000, None),
            (True, 0, None),
            (True, None, None),
        ],
    )
    def test_amount(self, enabled, price, expected):
        """Test that only enabled, positive prices count."""
        record = EquipmentRecord.model_validate(
            {"id": "x", "buyItNowEnabled": enabled, "buyItNowPrice": price}
        )
        assert record.buy_it_now_amount == expected
