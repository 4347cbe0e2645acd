"""Sort orders for listing results."""

import logging
from collections.abc import Callable, Iterable

from rental_listing.listing.models import EquipmentRecord, SortKey

logger = logging.getLogger(__name__)

DEFAULT_SORT = SortKey.LOCATION_CLOSEST

_SORT_ALIASES = {"closest": SortKey.LOCATION_CLOSEST}


def parse_sort_key(value: str | None) -> SortKey:
    """Resolve a ``sort`` query value, falling back to closest first."""
    if not value:
        return DEFAULT_SORT
    if value in _SORT_ALIASES:
        return _SORT_ALIASES[value]
    try:
        return SortKey(value)
    except ValueError:
        logger.debug("Unknown sort key, using default", extra={"sort": value})
        return DEFAULT_SORT


def _missing_last(value: float | None, descending: bool = False) -> tuple:
    # Missing values sort after present ones whatever the direction
    if value is None:
        return (1, 0.0)
    return (0, -value if descending else value)


def _by_distance(record: EquipmentRecord) -> tuple:
    distance = record.distance
    return (float("inf") if distance is None else distance,)


def _by_year_descending(record: EquipmentRecord) -> tuple:
    return (-(record.year or 0),)


def _by_year_ascending(record: EquipmentRecord) -> tuple:
    return (record.year or 0,)


def _by_created_at(record: EquipmentRecord) -> tuple:
    if record.created_at is None:
        return (1, 0.0)
    return (0, -record.created_at.timestamp())


_SORT_KEYS: dict[SortKey, Callable[[EquipmentRecord], tuple]] = {
    SortKey.LOCATION_CLOSEST: _by_distance,
    SortKey.YEAR_NEWEST: _by_year_descending,
    SortKey.YEAR_OLDEST: _by_year_ascending,
    SortKey.RECENTLY_ADDED: _by_created_at,
    SortKey.RENTAL_RATE_LOW: lambda r: _missing_last(r.monthly_rate),
    SortKey.RENTAL_RATE_HIGH: lambda r: _missing_last(r.monthly_rate, True),
    SortKey.BUY_NOW_LOW: lambda r: _missing_last(r.buy_it_now_amount),
    SortKey.BUY_NOW_HIGH: lambda r: _missing_last(r.buy_it_now_amount, True),
}


def sort_records(
    records: Iterable[EquipmentRecord], sort_key: SortKey = DEFAULT_SORT
) -> list[EquipmentRecord]:
    """Return a new list ordered by ``sort_key``.

    The sort is stable: records that compare equal keep their relative input
    order. Missing years count as 0, so they come first when sorting oldest
    first and last when sorting newest first. Missing distances, rates and
    buy-it-now prices always sort last. ``recently-added`` orders by
    ``created_at``; records without one keep their input order at the end.
    """
    return sorted(records, key=_SORT_KEYS[sort_key])
