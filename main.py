#!/usr/bin/env python3
"""Render one listing page from a file of machine records."""

import argparse
import logging
import sys
from urllib.parse import parse_qs

from rental_listing.config import settings
from rental_listing.listing.filters import parse_filter_selection
from rental_listing.listing.loader import load_records
from rental_listing.listing.pipeline import build_listing_page
from rental_listing.listing.sorting import parse_sort_key


def parse_page(values: list[str] | None) -> int:
    """First ``page`` value as a positive integer, defaulting to 1."""
    try:
        return max(int(values[0]), 1) if values else 1
    except ValueError:
        return 1


def main():
    parser = argparse.ArgumentParser(
        description="Filter, sort and paginate machine records from a JSON file"
    )
    parser.add_argument("input", help="JSON array, index response or JSON Lines file")
    parser.add_argument(
        "query",
        nargs="?",
        default="",
        help="URL query string, e.g. 'category=Excavator&sort=year-newest&page=2'",
    )
    parser.add_argument(
        "--page-size",
        type=int,
        default=settings.default_page_size,
        help="Machines per page",
    )
    parser.add_argument(
        "--output",
        help="Write the listing page here instead of stdout",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    if args.page_size < 1:
        parser.error("--page-size must be at least 1")

    params = parse_qs(args.query.lstrip("?"))
    selection = parse_filter_selection(params)
    sort_key = parse_sort_key((params.get("sort") or [None])[0])
    page = parse_page(params.get("page"))

    print(f"Loading {args.input}", file=sys.stderr)
    try:
        records = load_records(args.input)
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    listing = build_listing_page(
        records,
        selection=selection,
        sort_key=sort_key,
        page=page,
        page_size=args.page_size,
    )
    output = listing.model_dump_json(by_alias=True, indent=2)

    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(output)
            f.write("\n")
        print(f"Listing page saved to {args.output}", file=sys.stderr)
    else:
        print(output)

    print(
        f"Done. {listing.total:,} of {len(records):,} machines match, "
        f"page {listing.page} of {listing.pagination.total_pages}.",
        file=sys.stderr,
    )


if __name__ == "__main__":
    main()
