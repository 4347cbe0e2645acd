"""Facet counting over an in-memory list of machines."""

from collections.abc import Iterable

from rental_listing.listing.models import EquipmentRecord, FacetBucket, FacetSet

FACET_FIELDS = ("primary_type", "make", "model", "rpo_enabled", "buy_it_now_enabled")


def _to_buckets(counts: dict[str | bool, int]) -> list[FacetBucket]:
    # sorted() is stable, so ties keep first-encounter (dict insertion) order
    ordered = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return [FacetBucket(value=value, count=count) for value, count in ordered]


def compute_facets(records: Iterable[EquipmentRecord]) -> FacetSet:
    """Count how often each value occurs per facet dimension.

    Absent values are skipped rather than counted as a bucket. Boolean flags
    count both ``True`` and ``False`` when the record states them.

    Args:
        records: Machines to summarize.

    Returns:
        FacetSet with each dimension ordered by count descending.
    """
    counts: dict[str, dict[str | bool, int]] = {name: {} for name in FACET_FIELDS}

    for record in records:
        for name in FACET_FIELDS:
            value = getattr(record, name)
            if value is None or value == "":
                continue
            bucket = counts[name]
            bucket[value] = bucket.get(value, 0) + 1

    return FacetSet(**{name: _to_buckets(counts[name]) for name in FACET_FIELDS})
