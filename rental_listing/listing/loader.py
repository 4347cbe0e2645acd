"""Load machine records from JSON Lines or JSON index dumps."""

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from rental_listing.listing.models import EquipmentRecord

logger = logging.getLogger(__name__)


def parse_record(data: dict) -> EquipmentRecord:
    """Validate one raw index document into an EquipmentRecord."""
    return EquipmentRecord.model_validate(data)


def _raw_documents(path: Path) -> list[dict]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return []

    # A search response ({"value": [...]}), a JSON array or a single document
    try:
        payload = json.loads(text)
    except json.JSONDecodeError:
        payload = None
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        return payload["value"] if "value" in payload else [payload]

    documents = []
    for line_no, line in enumerate(text.splitlines(), start=1):
        if not line.strip():
            continue
        try:
            documents.append(json.loads(line))
        except json.JSONDecodeError as exc:
            raise ValueError(f"{path}:{line_no}: invalid JSON ({exc.msg})") from exc
    return documents


def load_records(file_path: str | Path) -> list[EquipmentRecord]:
    """Read machines from a file.

    Accepts JSON Lines (one document per line), a JSON array, or a raw search
    response with the documents under ``value``. Documents that fail
    validation are logged and skipped.

    Raises:
        ValueError: If a line is not valid JSON.
    """
    path = Path(file_path)
    records = []
    skipped = 0

    for data in _raw_documents(path):
        try:
            records.append(parse_record(data))
        except ValidationError as exc:
            skipped += 1
            logger.warning(
                "Skipping invalid machine record",
                extra={"file": str(path), "errors": exc.error_count()},
            )

    logger.info(
        "Loaded machine records",
        extra={"file": str(path), "count": len(records), "skipped": skipped},
    )
    return records
