"""Shared listing constants for facets, filtering and sorting."""

# Upper bound applied when only a minimum hours filter is given
MAX_HOURS = 375000

# Number of consecutive page links shown around the current page
PAGE_WINDOW_SIZE = 5

# Placeholder token between non-adjacent page numbers
ELLIPSIS = "..."

# Purchase option labels
PURCHASE_OPTION_LABELS: dict[str, str] = {
    "rpoEnabled": "Rent to purchase",
    "buyItNowEnabled": "Buy it now",
}

# Sort option labels, in display order
SORT_OPTION_LABELS: dict[str, str] = {
    "location-closest": "Location: closest",
    "year-newest": "Year: newest to oldest",
    "year-oldest": "Year: oldest to newest",
    "recently-added": "Recently added",
    "rental-rate-low": "Rental rate: low to high",
    "rental-rate-high": "Rental rate: high to low",
    "buy-now-low": "Buy it now: low to high",
    "buy-now-high": "Buy it now: high to low",
}

# Buy-it-now price band definitions ("to" is exclusive)
PRICE_BANDS: list[dict[str, int | float | str | None]] = [
    {"key": "under5k", "label": "Under $5,000", "from": 0, "to": 5000},
    {"key": "5kTo10k", "label": "$5,000 - $10,000", "from": 5000, "to": 10000},
    {"key": "10kTo25k", "label": "$10,000 - $25,000", "from": 10000, "to": 25000},
    {"key": "25kTo50k", "label": "$25,000 - $50,000", "from": 25000, "to": 50000},
    {"key": "over50k", "label": "Over $50,000", "from": 50000, "to": None},
]

PRICE_BAND_KEYS = frozenset(str(band["key"]) for band in PRICE_BANDS)


def price_band_bounds(key: str) -> tuple[float, float] | None:
    """Return the (inclusive, exclusive) bounds for a price band key."""
    for band in PRICE_BANDS:
        if band["key"] == key:
            upper = band["to"]
            return float(band["from"]), float("inf") if upper is None else float(upper)
    return None
