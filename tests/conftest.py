"""Shared test fixtures."""

import json
from itertools import count

import pytest

from rental_listing.listing.models import EquipmentRecord
from rental_listing.search.location import ServiceArea


@pytest.fixture
def sample_machine_json() -> dict:
    """Sample machine document as returned by the search index."""
    return {
        "id": "m-1001",
        "machineId": "1001",
        "displayName": "2019 CAT 308 CR",
        "primaryType": "Excavator",
        "make": "CAT",
        "model": "308 CR",
        "year": 2019,
        "hours": 1450,
        "usageLabel": "hours",
        "rentalRate": {"daily": 450, "weekly": 1350, "monthly": 3800},
        "rateSchedules": [
            {"label": "DAY", "numDays": 1, "cost": 425},
            {"label": "WEEK", "numDays": 7, "cost": 1300},
            {"label": "4 WEEKS / MOS", "numDays": 28, "cost": 3600},
        ],
        "rpoEnabled": True,
        "buyItNowEnabled": True,
        "buyItNowPrice": 62500,
        "location": {
            "city": "Lafayette",
            "state": "LA",
            "address": {"city": "Lafayette", "stateProvince": "LA"},
            "point": {"type": "Point", "coordinates": [-92.0198, 30.2241]},
        },
        "@search.score": 1.0,
        "createdAt": "2024-03-01T12:00:00Z",
        "images": ["https://img.example.com/1001/full.jpg"],
        "thumbnails": ["https://img.example.com/1001/thumb.jpg"],
        "status": "Available",
    }


@pytest.fixture
def sample_machine_jsonl(sample_machine_json: dict, tmp_path) -> str:
    """Create a temporary JSONL file with two machines."""
    file_path = tmp_path / "machines.jsonl"
    with open(file_path, "w") as f:
        f.write(json.dumps(sample_machine_json) + "\n")
        # Add a second machine
        machine2 = sample_machine_json.copy()
        machine2["id"] = "m-1002"
        machine2["make"] = "Kubota"
        f.write(json.dumps(machine2) + "\n")
    return str(file_path)


@pytest.fixture
def make_record():
    """Factory for EquipmentRecords with only the fields a test cares about."""
    ids = count(1)

    def _make(**fields) -> EquipmentRecord:
        fields.setdefault("id", f"m-{next(ids)}")
        return EquipmentRecord.model_validate(fields)

    return _make


@pytest.fixture
def sample_records(make_record) -> list[EquipmentRecord]:
    """A small mixed inventory."""
    return [
        make_record(
            primaryType="Excavator",
            make="CAT",
            model="308",
            year=2019,
            hours=1200,
            rentalRate=3800,
            rpoEnabled=True,
            buyItNowEnabled=False,
            distanceFromUser=12.5,
        ),
        make_record(
            primaryType="Skid Steer",
            make="Bobcat",
            model="S650",
            year=2021,
            hours=300,
            rentalRate=2400,
            rpoEnabled=False,
            buyItNowEnabled=True,
            buyItNowPrice=38000,
            distanceFromUser=4.0,
        ),
        make_record(
            primaryType="Excavator",
            make="Kubota",
            model="KX040",
            year=2017,
            hours=4100,
            rpoEnabled=True,
            buyItNowEnabled=True,
            buyItNowPrice=8500,
            distanceFromUser=30.0,
        ),
        make_record(
            primaryType="Scissor Lift",
            make="Genie",
            model="GS-1930",
            hours=None,
            rentalRate={"daily": 120, "weekly": 300, "monthly": 700},
            distanceFromUser=None,
        ),
    ]


@pytest.fixture
def service_area() -> ServiceArea:
    """Lafayette, LA with a 50 mile radius."""
    return ServiceArea(
        city="Lafayette",
        state="LA",
        latitude=30.2241,
        longitude=-92.0198,
        radius_miles=50,
    )
