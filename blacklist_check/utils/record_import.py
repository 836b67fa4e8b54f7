"""
Reading blacklist records from CSV or JSON export files.

Accepted columns / keys: nik, name, birth_place, birth_date (YYYY-MM-DD),
reason. Blank values are treated as absent.
"""

import csv
import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Tuple

from pydantic import ValidationError

from ..models.blacklist import CandidateRecord

RECORD_FIELDS = ("nik", "name", "birth_place", "birth_date", "reason")


def _clean_row(row: Dict[str, Any]) -> Dict[str, Any]:
    cleaned = {}
    for field in RECORD_FIELDS:
        value = row.get(field)
        if isinstance(value, str):
            value = value.strip()
        cleaned[field] = value if value not in ("", None) else None
    if cleaned["reason"] is None:
        cleaned["reason"] = ""
    return cleaned


def _iter_rows(path: Path) -> Iterable[Dict[str, Any]]:
    suffix = path.suffix.lower()
    if suffix == ".csv":
        with path.open("r", encoding="utf-8", newline="") as f:
            yield from csv.DictReader(f)
    elif suffix == ".json":
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
        if isinstance(data, dict):
            data = data.get("records", [])
        yield from data
    else:
        raise ValueError(f"Unsupported file type: {path.suffix}")


def read_records(path: Path) -> Tuple[List[CandidateRecord], List[str]]:
    """
    Parse a CSV or JSON file into blacklist records.

    Args:
        path: File to read

    Returns:
        (valid records, error messages for rows that were skipped)
    """
    records: List[CandidateRecord] = []
    errors: List[str] = []

    for index, row in enumerate(_iter_rows(path), start=1):
        if not isinstance(row, dict):
            errors.append(f"Row {index}: expected an object")
            continue
        try:
            record = CandidateRecord(**_clean_row(row))
        except ValidationError as e:
            errors.append(f"Row {index}: {e.errors()[0]['msg']}")
            continue
        if not record.name:
            errors.append(f"Row {index}: missing name")
            continue
        records.append(record)

    return records, errors
