"""
Distribution Artifacts IO

Reading allocation inputs and reading/writing claims files.
"""

from distribution.artifacts.io import (
    ALLOCATION_FIELDS,
    ClaimsIOError,
    rows_from_json,
    rows_from_csv,
    load_allocation_rows,
    dump_claims_file,
    save_claims_file,
    load_claims_file,
)


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
