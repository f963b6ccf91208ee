"""
Distribution Artifacts IO
File: io.py

Purpose: Read allocation inputs and read/write claims files on disk.

Accepted allocation inputs:
- JSON list of rows: [{"address": "0x..", "claimCap": "100", "referral": ".."}, ...]
- JSON object with an "allocations" list of rows
- JSON balance map: {"0x..": "100", ...} (plain distributions only)
- CSV with a header row naming address, claimCap and optionally referral
"""

from __future__ import annotations

import csv
import json
import os
import tempfile
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from core.schemas.claims import ClaimsFile
from core.schemas.errors import ClaimsFileException


ALLOCATION_FIELDS = ("address", "claimCap", "referral")


class ClaimsIOError(Exception):
    """Error reading or writing distribution files."""
    pass


def _read_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        raise ClaimsIOError(f"File not found: {path}") from None
    except json.JSONDecodeError as e:
        raise ClaimsIOError(f"Invalid JSON in {path}: {e}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise ClaimsIOError(f"Cannot read {path}: {e}") from e


def rows_from_json(data: Any) -> list[dict[str, Any]]:
    """Normalize any supported JSON allocation layout to a list of rows."""
    if isinstance(data, dict) and "allocations" in data:
        data = data["allocations"]
    if isinstance(data, list):
        return [dict(row) if isinstance(row, dict) else row for row in data]
    if isinstance(data, dict):
        return [{"address": address, "claimCap": cap} for address, cap in data.items()]
    raise ClaimsIOError("Allocation JSON must be a list of rows or an address -> claimCap map")


def rows_from_csv(path: Path) -> list[dict[str, Any]]:
    """Read CSV rows; header names are matched case-sensitively after stripping."""
    try:
        with open(path, "r", encoding="utf-8", newline="") as f:
            reader = csv.DictReader(f)
            if reader.fieldnames is None:
                raise ClaimsIOError(f"CSV file has no header row: {path}")
            fieldnames = [name.strip() for name in reader.fieldnames]
            if "address" not in fieldnames or "claimCap" not in fieldnames:
                raise ClaimsIOError(
                    f"CSV header must include 'address' and 'claimCap', got {fieldnames}"
                )
            rows = []
            for raw in reader:
                row = {name.strip(): value for name, value in raw.items() if name is not None}
                rows.append({k: row[k] for k in ALLOCATION_FIELDS if k in row})
            return rows
    except FileNotFoundError:
        raise ClaimsIOError(f"File not found: {path}") from None
    except (OSError, UnicodeDecodeError) as e:
        raise ClaimsIOError(f"Cannot read {path}: {e}") from e


def load_allocation_rows(path: str | Path) -> list[dict[str, Any]]:
    """
    Load raw allocation rows from a JSON or CSV file.

    Rows are returned unvalidated; the allocation parser owns validation.

    Raises:
        ClaimsIOError: If the file is missing, unreadable or of unknown type
    """
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix == ".json":
        return rows_from_json(_read_json(path))
    if suffix == ".csv":
        return rows_from_csv(path)
    raise ClaimsIOError(f"Unsupported allocation file type: {path} (expected .json or .csv)")


def dump_claims_file(claims: ClaimsFile, indent: int | None = 2) -> str:
    """Serialize a claims file to its wire JSON."""
    return json.dumps(claims.to_json_dict(), indent=indent, ensure_ascii=False) + "\n"


def save_claims_file(claims: ClaimsFile, path: str | Path, indent: int | None = 2) -> Path:
    """
    Write a claims file.

    The file is written to a temporary sibling and renamed into place, so a
    reader never sees a partial artifact.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    content = dump_claims_file(claims, indent=indent)

    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    return path


def load_claims_file(path: str | Path) -> ClaimsFile:
    """
    Load and schema-check a claims file.

    Raises:
        ClaimsIOError: If the file is missing or not JSON
        ClaimsFileException: If the JSON does not have the claims file shape
    """
    path = Path(path)
    data = _read_json(path)
    if not isinstance(data, dict):
        raise ClaimsFileException(f"Claims file must be a JSON object: {path}")
    try:
        return ClaimsFile.from_json_dict(data)
    except ValidationError as e:
        raise ClaimsFileException(
            f"Claims file {path} is malformed: {e.error_count()} schema error(s)",
            details={"errors": [err["msg"] for err in e.errors()]},
        ) from e


__all__ = [
    "ALLOCATION_FIELDS",
    "ClaimsIOError",
    "rows_from_json",
    "rows_from_csv",
    "load_allocation_rows",
    "dump_claims_file",
    "save_claims_file",
    "load_claims_file",
]
