"""
Allocation Set Parser
Validates raw allocation rows and turns them into a claims file.

This is the only entry point for building a distribution:

1. Validate each row in input order: address, then key uniqueness,
   then capacity. The first bad row aborts the parse.
2. Sort the composite keys (account, or account-referral) and assign
   each record its rank as index.
3. Encode leaves, build the tree, emit one proof per record.

Because indices come from the sorted keys, the output does not depend
on the order of the input rows.
"""
from __future__ import annotations

import logging
import re
from typing import Any, Iterable, Mapping, Optional

from eth_utils import (
    is_address,
    is_checksum_address,
    is_checksum_formatted_address,
    to_checksum_address,
)

from core.claims.claims_tree import ClaimsTree
from core.claims.encoding import ClaimVariant, LeafEncoder, get_encoder
from core.schemas.allocation import KEY_SEPARATOR, UINT256_LIMIT, AllocationRecord
from core.schemas.claims import ClaimEntry, ClaimsFile, format_capacity
from core.schemas.errors import (
    ConstructionException,
    ErrorCodes,
    InputValidationException,
)


logger = logging.getLogger(__name__)


_DECIMAL_RE = re.compile(r"^-?[0-9]+$")
_HEX_RE = re.compile(r"^0[xX][0-9a-fA-F]+$")


def normalize_address(raw: Any, row: int | None = None) -> str:
    """
    Return the EIP-55 checksum form of an address.

    Raises:
        InputValidationException: If raw is not a valid address. Mixed-case
            input with a wrong checksum is rejected too.
    """
    if not isinstance(raw, str) or not is_address(raw):
        raise InputValidationException(
            f"Found invalid address: {raw!r}",
            code=ErrorCodes.INVALID_ADDRESS,
            row=row,
            raw_value=raw,
        )
    # Mixed case carries an EIP-55 checksum; is_address alone does not check it
    if is_checksum_formatted_address(raw) and not is_checksum_address(raw):
        raise InputValidationException(
            f"Found invalid address (bad checksum): {raw!r}",
            code=ErrorCodes.INVALID_ADDRESS,
            row=row,
            raw_value=raw,
        )
    return to_checksum_address(raw)


def parse_capacity(raw: Any, row: int | None = None, account: Any = None) -> int:
    """
    Parse a claim cap given as an int, a decimal string or a 0x hex string.

    Raises:
        InputValidationException: If the value is not an integer, is
            negative, or does not fit in uint256
    """
    if isinstance(raw, bool):
        value = None
    elif isinstance(raw, int):
        value = raw
    elif isinstance(raw, str) and _HEX_RE.match(raw.strip()):
        value = int(raw.strip(), 16)
    elif isinstance(raw, str) and _DECIMAL_RE.match(raw.strip()):
        value = int(raw.strip(), 10)
    else:
        value = None

    if value is None:
        raise InputValidationException(
            f"Claim cap is not an integer for account {account}: {raw!r}",
            code=ErrorCodes.INVALID_CAPACITY,
            row=row,
            raw_value=raw,
        )
    if value < 0:
        raise InputValidationException(
            f"Invalid claim cap for account: {account}",
            code=ErrorCodes.INVALID_CAPACITY,
            row=row,
            raw_value=raw,
        )
    if value >= UINT256_LIMIT:
        raise InputValidationException(
            f"Claim cap does not fit in uint256 for account: {account}",
            code=ErrorCodes.INVALID_CAPACITY,
            row=row,
            raw_value=raw,
        )
    return value


def parse_referral(raw: Any, row: int | None = None) -> str:
    """A missing referral is the empty string; anything else must be a string."""
    if raw is None:
        return ""
    if not isinstance(raw, str):
        raise InputValidationException(
            f"Referral must be a string: {raw!r}",
            code=ErrorCodes.INVALID_REFERRAL,
            row=row,
            raw_value=raw,
        )
    return raw


def validate_rows(
    rows: Iterable[Mapping[str, Any]],
    variant: ClaimVariant = ClaimVariant.PLAIN,
) -> dict[str, AllocationRecord]:
    """
    Validate raw rows and index the resulting records by claim key.

    Raises:
        InputValidationException: On the first invalid row
    """
    records: dict[str, AllocationRecord] = {}

    for row_number, row in enumerate(rows):
        if not isinstance(row, Mapping):
            raise InputValidationException(
                f"Allocation row {row_number} is not an object",
                code=ErrorCodes.INVALID_ROW,
                row=row_number,
                raw_value=row,
            )

        raw_address = row.get("address")
        account = normalize_address(raw_address, row_number)

        referral: Optional[str] = None
        if variant is ClaimVariant.REFERRAL:
            referral = parse_referral(row.get("referral"), row_number)
            key = f"{account}{KEY_SEPARATOR}{referral}"
        else:
            key = account

        if key in records:
            what = "key" if referral is not None else "address"
            raise InputValidationException(
                f"Duplicate {what}: {key}",
                code=ErrorCodes.DUPLICATE_KEY,
                row=row_number,
                raw_value=raw_address,
            )

        capacity = parse_capacity(row.get("claimCap"), row_number, raw_address)
        records[key] = AllocationRecord(account=account, capacity=capacity, referral=referral)

    return records


def parse_allocations(
    rows: Iterable[Mapping[str, Any]],
    variant: ClaimVariant | str = ClaimVariant.PLAIN,
    encoder: Optional[LeafEncoder] = None,
    sort_leaves: bool = False,
) -> ClaimsFile:
    """
    Build a claims file from raw allocation rows.

    Args:
        rows: Mappings with `address`, `claimCap` and, for referral
              distributions, `referral`
        variant: Leaf layout of the distribution
        encoder: Override the variant's default leaf encoder
        sort_leaves: Lay leaves out by hash value instead of index

    Returns:
        ClaimsFile with the hex root and one entry per row

    Raises:
        ConstructionException: If rows is empty, or encoder does not match variant
        InputValidationException: If any row is invalid
    """
    variant = ClaimVariant(variant)
    encoder = encoder or get_encoder(variant)
    if encoder.uses_referral != (variant is ClaimVariant.REFERRAL):
        raise ConstructionException(
            f"Leaf encoder {encoder.abi_types} does not fit a {variant.value} distribution",
            code=ErrorCodes.INVALID_ENCODER,
        )

    rows = list(rows)
    if not rows:
        raise ConstructionException("Allocation set is empty, nothing to commit to")

    records_by_key = validate_rows(rows, variant)
    sorted_keys = sorted(records_by_key)

    tree = ClaimsTree(
        [records_by_key[key] for key in sorted_keys],
        encoder=encoder,
        sort_leaves=sort_leaves,
    )

    claims: dict[str, ClaimEntry] = {}
    for index, key in enumerate(sorted_keys):
        record = records_by_key[key]
        claims[key] = ClaimEntry(
            index=index,
            claim_cap=format_capacity(record.capacity),
            referral=record.referral,
            proof=tree.get_proof(index, record),
        )

    logger.info(
        f"Built {variant.value} distribution: {len(claims)} entries, root {tree.hex_root}"
    )
    return ClaimsFile(merkle_root=tree.hex_root, claims=claims)


__all__ = [
    "normalize_address",
    "parse_capacity",
    "parse_referral",
    "validate_rows",
    "parse_allocations",
]
