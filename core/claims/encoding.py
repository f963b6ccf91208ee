"""
Leaf Encoding
Turns one allocation record plus its canonical index into a 32-byte leaf.

leaf = keccak256(abi.encodePacked(<fields in declared order>))

The encoder is a value object: an ordered tuple of typed fields. Plain
and referral distributions are two instances, differing only in whether
a trailing `string referral` field is packed.

Packed encoding has no length prefixes. It stays unambiguous only while
every field except the last has a fixed width, so a variable-length
field is rejected anywhere but the final position.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from eth_utils import to_checksum_address
from web3 import Web3

from core.schemas.allocation import AllocationRecord
from core.schemas.errors import ConstructionException, ErrorCodes


class ClaimVariant(str, Enum):
    """Which leaf layout a distribution uses."""
    PLAIN = "plain"  # (index, account, capacity)
    REFERRAL = "referral"  # (index, account, capacity, referral)


# Names an encoder field may refer to
LEAF_FIELD_NAMES = frozenset({"index", "account", "capacity", "referral"})

_VARIABLE_LENGTH_TYPES = frozenset({"string", "bytes"})


@dataclass(frozen=True)
class LeafField:
    """One packed field: the record attribute it reads and its ABI type."""
    name: str
    abi_type: str


@dataclass(frozen=True)
class LeafEncoder:
    """
    Packs leaf fields with Solidity's tight encoding and hashes them.

    Must match the claim contract's
    keccak256(abi.encodePacked(index, account, claimCap[, referral])).
    """
    fields: tuple[LeafField, ...]

    def __post_init__(self) -> None:
        if not self.fields:
            raise ConstructionException(
                "Leaf encoder needs at least one field",
                code=ErrorCodes.INVALID_ENCODER,
            )
        for field in self.fields:
            if field.name not in LEAF_FIELD_NAMES:
                raise ConstructionException(
                    f"Unknown leaf field: {field.name}",
                    code=ErrorCodes.INVALID_ENCODER,
                )
        for field in self.fields[:-1]:
            if field.abi_type in _VARIABLE_LENGTH_TYPES:
                raise ConstructionException(
                    f"Variable-length field '{field.name}' must be the last packed field",
                    code=ErrorCodes.INVALID_ENCODER,
                )

    @property
    def abi_types(self) -> list[str]:
        return [field.abi_type for field in self.fields]

    @property
    def uses_referral(self) -> bool:
        return any(field.name == "referral" for field in self.fields)

    def encode(
        self,
        index: int,
        account: str,
        capacity: int,
        referral: Optional[str] = None,
    ) -> bytes:
        """
        Compute the leaf for one entry.

        The account is checksummed before packing; packed addresses are raw
        20 bytes, so case never changes the leaf.

        Raises:
            ValueError: If account is not an address, or a referral encoder
                is given no referral
            TypeError: If a value does not fit its ABI type
        """
        if self.uses_referral and referral is None:
            raise ValueError("Referral encoder requires a referral value")

        values = {
            "index": index,
            "account": to_checksum_address(account),
            "capacity": capacity,
            "referral": referral,
        }
        packed = [values[field.name] for field in self.fields]
        return bytes(Web3.solidity_keccak(self.abi_types, packed))

    def encode_record(self, index: int, record: AllocationRecord) -> bytes:
        return self.encode(index, record.account, record.capacity, record.referral)


PLAIN_ENCODER = LeafEncoder(fields=(
    LeafField("index", "uint256"),
    LeafField("account", "address"),
    LeafField("capacity", "uint256"),
))

REFERRAL_ENCODER = LeafEncoder(fields=PLAIN_ENCODER.fields + (
    LeafField("referral", "string"),
))


def get_encoder(variant: ClaimVariant | str) -> LeafEncoder:
    """Encoder for a distribution variant."""
    if ClaimVariant(variant) is ClaimVariant.REFERRAL:
        return REFERRAL_ENCODER
    return PLAIN_ENCODER


__all__ = [
    "ClaimVariant",
    "LEAF_FIELD_NAMES",
    "LeafField",
    "LeafEncoder",
    "PLAIN_ENCODER",
    "REFERRAL_ENCODER",
    "get_encoder",
]
