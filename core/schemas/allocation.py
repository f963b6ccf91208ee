"""
Schemas
File: allocation.py

Purpose: The validated allocation record a leaf is built from.
Records are produced by the allocation parser after address
canonicalization and capacity parsing; they are never mutated.
"""

from pydantic import BaseModel, ConfigDict, Field

# abi uint256 upper bound (exclusive)
UINT256_LIMIT: int = 2**256

# Separator between account and referral in variant B claim keys
KEY_SEPARATOR: str = "-"


class AllocationRecord(BaseModel):
    """
    One entitlement to claim.

    `account` is already in EIP-55 checksum form. `referral` is None for
    plain distributions and a (possibly empty) string for referral ones.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    account: str = Field(
        ...,
        description="EIP-55 checksummed 20-byte address",
        pattern=r"^0x[0-9a-fA-F]{40}$",
    )
    capacity: int = Field(
        ...,
        description="Maximum claimable amount (uint256)",
        ge=0,
        lt=UINT256_LIMIT,
    )
    referral: str | None = Field(
        default=None,
        description="Referral tag, carried through hashing verbatim",
    )

    @property
    def key(self) -> str:
        """Claims file key: the account, or account-referral when a referral is set."""
        if self.referral is None:
            return self.account
        return f"{self.account}{KEY_SEPARATOR}{self.referral}"
