"""Filter predicates over an in-memory list of machines."""

import logging
import math
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from rental_listing.listing.constants import (
    MAX_HOURS,
    PRICE_BAND_KEYS,
    price_band_bounds,
)
from rental_listing.listing.models import (
    EquipmentRecord,
    FilterSelection,
    PurchaseOption,
)

logger = logging.getLogger(__name__)


def _matches_any(value: str | None, selected: Sequence[str]) -> bool:
    if not selected:
        return True
    return value is not None and value in selected


def _matches_purchase_options(
    record: EquipmentRecord, options: Sequence[PurchaseOption]
) -> bool:
    if not options:
        return True
    for option in options:
        if option is PurchaseOption.RENT_TO_PURCHASE and record.rpo_enabled is True:
            return True
        if option is PurchaseOption.BUY_IT_NOW and record.buy_it_now_enabled is True:
            return True
    return False


def _matches_hours(record: EquipmentRecord, selection: FilterSelection) -> bool:
    if selection.min_hours is None and selection.max_hours is None:
        return True
    low = selection.min_hours if selection.min_hours is not None else 0
    high = selection.max_hours if selection.max_hours is not None else MAX_HOURS
    return low <= record.effective_hours <= high


def _matches_query(record: EquipmentRecord, query: str | None) -> bool:
    if not query:
        return True
    needle = query.lower()
    name = f"{record.year or ''} {record.make or ''} {record.model or ''}".lower()
    return needle in name or needle in (record.primary_type or "").lower()


def _matches_price_ranges(record: EquipmentRecord, keys: Sequence[str]) -> bool:
    if not keys:
        return True
    price = record.buy_it_now_price or 0
    for key in keys:
        bounds = price_band_bounds(key)
        if bounds is not None and bounds[0] <= price < bounds[1]:
            return True
    return False


def matches(record: EquipmentRecord, selection: FilterSelection) -> bool:
    """Return True if the record passes every filter dimension."""
    return (
        _matches_any(record.primary_type, selection.categories)
        and _matches_any(record.make, selection.makes)
        and _matches_any(record.model, selection.models)
        and _matches_purchase_options(record, selection.purchase_options)
        and _matches_hours(record, selection)
        and _matches_query(record, selection.query)
        and _matches_price_ranges(record, selection.price_ranges)
    )


def filter_records(
    records: Iterable[EquipmentRecord], selection: FilterSelection
) -> list[EquipmentRecord]:
    """Keep the records matching all active dimensions, in input order.

    Within a dimension the selected values are OR-ed; across dimensions the
    tests are AND-ed. Empty dimensions do not constrain the result.
    """
    return [record for record in records if matches(record, selection)]


def _get_all(params: Mapping[str, Any], key: str) -> list[str]:
    """Read every value for a query key, whatever the mapping flavour."""
    if hasattr(params, "getlist"):
        values = params.getlist(key)
    else:
        raw = params.get(key)
        if raw is None:
            values = []
        elif isinstance(raw, str):
            values = [raw]
        else:
            values = list(raw)
    return [v.strip() for v in values if isinstance(v, str) and v.strip()]


def _get_number(params: Mapping[str, Any], key: str) -> float | None:
    values = _get_all(params, key)
    if not values:
        return None
    try:
        number = float(values[0])
    except ValueError:
        number = None
    if number is None or not math.isfinite(number):
        logger.debug("Ignoring non-numeric filter bound", extra={key: values[0]})
        return None
    return number


def parse_filter_selection(params: Mapping[str, Any]) -> FilterSelection:
    """Build a FilterSelection from query parameters.

    Accepts a multi-dict (anything with ``getlist``) or a plain mapping of
    keys to a string or a list of strings. Recognized keys are ``category``,
    ``make``, ``model``, ``purchaseOptions`` and ``priceRange`` (repeatable)
    and ``minHours``, ``maxHours`` and ``q``.

    Malformed values are dropped so the matching dimension stays unconstrained.
    """
    purchase_options = []
    for raw in _get_all(params, "purchaseOptions"):
        try:
            option = PurchaseOption(raw)
        except ValueError:
            logger.debug("Ignoring unknown purchase option", extra={"option": raw})
            continue
        if option not in purchase_options:
            purchase_options.append(option)

    queries = _get_all(params, "q")

    return FilterSelection(
        categories=_get_all(params, "category"),
        makes=_get_all(params, "make"),
        models=_get_all(params, "model"),
        purchase_options=purchase_options,
        min_hours=_get_number(params, "minHours"),
        max_hours=_get_number(params, "maxHours"),
        query=queries[0] if queries else None,
        price_ranges=[
            key for key in _get_all(params, "priceRange") if key in PRICE_BAND_KEYS
        ],
    )
