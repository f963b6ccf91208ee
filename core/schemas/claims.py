"""
Schemas
File: claims.py

Purpose: The distributable claims file.

Wire shape (bit-exact, read by claim front-ends and auditors):

    {
      "merkleRoot": "0x" + 64 hex,
      "claims": {
        "<address>" | "<address>-<referral>": {
          "index": <int>,
          "claimCap": "<hex, no 0x>",
          "referral": "<string>",        # referral distributions only
          "proof": ["0x" + 64 hex, ...]
        }
      }
    }

claimCap is hex text so capacities above 2**53 survive JSON readers that
parse numbers as doubles.
"""

import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.crypto.hashing import from_hex32

HEX32_PATTERN = r"^0x[0-9a-fA-F]{64}$"
_HEX32_RE = re.compile(HEX32_PATTERN)


def format_capacity(capacity: int) -> str:
    """Lowercase hex without prefix, as written to claimCap."""
    return format(capacity, "x")


class ClaimEntry(BaseModel):
    """A single claim: its canonical index, capacity and inclusion proof."""

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    index: int = Field(..., ge=0, description="Rank of the entry in canonical key order")
    claim_cap: str = Field(
        ...,
        alias="claimCap",
        pattern=r"^[0-9a-fA-F]+$",
        description="Capacity as hex without 0x prefix",
    )
    referral: str | None = Field(default=None, description="Referral tag (referral distributions only)")
    proof: list[str] = Field(default_factory=list, description="Sibling hashes, leaf to root")

    @field_validator("proof", mode="after")
    @classmethod
    def validate_proof_nodes(cls, v: list[str]) -> list[str]:
        for position, node in enumerate(v):
            if not _HEX32_RE.match(node):
                raise ValueError(f"proof[{position}] is not a 0x-prefixed 32-byte hex string")
        return v

    @property
    def capacity(self) -> int:
        return int(self.claim_cap, 16)

    def proof_bytes(self) -> list[bytes]:
        return [from_hex32(node) for node in self.proof]


class ClaimsFile(BaseModel):
    """Merkle root plus one ClaimEntry per allocation key."""

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    merkle_root: str = Field(..., alias="merkleRoot", pattern=HEX32_PATTERN)
    claims: dict[str, ClaimEntry] = Field(default_factory=dict)

    @property
    def root_bytes(self) -> bytes:
        return from_hex32(self.merkle_root)

    def to_json_dict(self) -> dict[str, Any]:
        """Serialize with wire aliases; `referral` is omitted where unset."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    @classmethod
    def from_json_dict(cls, data: Any) -> "ClaimsFile":
        return cls.model_validate(data)
