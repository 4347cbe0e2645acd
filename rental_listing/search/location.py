"""Service area rules: distances and buy-it-now-only relabeling."""

import math

from pydantic import BaseModel

from rental_listing.config import settings
from rental_listing.listing.models import Address, EquipmentRecord, Location

EARTH_RADIUS_MILES = 3959


def haversine_miles(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance between two coordinates in miles."""
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1))
        * math.cos(math.radians(lat2))
        * math.sin(d_lon / 2) ** 2
    )
    return EARTH_RADIUS_MILES * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


class ServiceArea(BaseModel):
    """The area the business delivers rentals to."""

    city: str
    state: str
    latitude: float
    longitude: float
    radius_miles: float = 50

    def contains(
        self, record: EquipmentRecord, radius_miles: float | None = None
    ) -> bool:
        """True if the machine is within the radius.

        Machines without coordinates are treated as outside.
        """
        coords = record.coordinates
        if coords is None:
            return False
        radius = self.radius_miles if radius_miles is None else radius_miles
        return haversine_miles(self.latitude, self.longitude, *coords) <= radius

    def relabel_buy_it_now_only(self, record: EquipmentRecord) -> EquipmentRecord:
        """Mark out-of-area buy-it-now machines as buy-it-now only.

        Such machines ship from the service city, so their displayed city and
        state are replaced. Returns a copy; other records are returned as is.
        """
        coords = record.coordinates
        outside = coords is not None and not self.contains(record)
        if not (outside and record.buy_it_now_enabled):
            return record
        return self.mark_buy_it_now_only(record)

    def mark_buy_it_now_only(self, record: EquipmentRecord) -> EquipmentRecord:
        """Copy of the record flagged buy-it-now only, shown at the service city."""
        location = record.location or Location()
        address = (location.address or Address()).model_copy(
            update={"city": self.city, "state_province": self.state}
        )
        location = location.model_copy(
            update={"city": self.city, "state": self.state, "address": address}
        )
        return record.model_copy(
            update={"buy_it_now_only": True, "location": location}
        )


def default_service_area() -> ServiceArea:
    return ServiceArea(
        city=settings.service_city,
        state=settings.service_state,
        latitude=settings.service_latitude,
        longitude=settings.service_longitude,
        radius_miles=settings.service_radius_miles,
    )
