"""
Common test fixtures shared by all modules.

Provides factory functions for allocation inputs and claims files:
- Allocation rows (plain and referral)
- Built ClaimsFile objects
- Manually packed leaves, independent of the encoder under test

Addresses are the well-known development accounts, lowercased here and
checksummed by the parser.
"""

from typing import Any, Optional

from eth_utils import keccak, to_checksum_address

from core.claims import ClaimVariant, parse_allocations
from core.schemas.claims import ClaimsFile


ACCOUNTS = [
    to_checksum_address(address)
    for address in (
        "0xf39fd6e51aad88f6f4ce6ab8827279cfffb92266",
        "0x70997970c51812dc3a010c7d01b50e0d17dc79c8",
        "0x3c44cdddb6a900fa2b585dd299e03d12fa4293bc",
        "0x90f79bf6eb2c4f870365e785982e1f101e93b906",
        "0x15d34aaf54267db7d7c367839aaf71a00a2c6a65",
        "0x9965507d1a55bcc2695c58ba16fb37d819b0a4dc",
        "0x976ea74026e726554db657fa54763abd0c3a0aa9",
    )
]


def pack_leaf(index: int, account: str, capacity: int, referral: Optional[str] = None) -> bytes:
    """abi.encodePacked by hand: uint256 | address | uint256 [| string]."""
    packed = (
        index.to_bytes(32, "big")
        + bytes.fromhex(account[2:])
        + capacity.to_bytes(32, "big")
    )
    if referral is not None:
        packed += referral.encode("utf-8")
    return keccak(packed)


def make_rows(
    count: int = 3,
    capacities: Optional[list[Any]] = None,
) -> list[dict[str, Any]]:
    """Plain allocation rows for the first `count` accounts."""
    if capacities is None:
        capacities = [str(1000 * (i + 1)) for i in range(count)]
    return [
        {"address": ACCOUNTS[i].lower(), "claimCap": capacities[i]}
        for i in range(count)
    ]


def make_referral_rows() -> list[dict[str, Any]]:
    """Referral rows, including one account under two referral tags."""
    return [
        {"address": ACCOUNTS[0], "claimCap": "500", "referral": "alpha"},
        {"address": ACCOUNTS[0], "claimCap": "250", "referral": "beta"},
        {"address": ACCOUNTS[1], "claimCap": "0x64", "referral": ""},
        {"address": ACCOUNTS[2], "claimCap": 7},
    ]


def make_claims_file(
    count: int = 3,
    variant: ClaimVariant = ClaimVariant.PLAIN,
    sort_leaves: bool = False,
) -> ClaimsFile:
    """A valid claims file built through the parser."""
    rows = make_referral_rows() if variant is ClaimVariant.REFERRAL else make_rows(count)
    return parse_allocations(rows, variant=variant, sort_leaves=sort_leaves)


def replace_entry(claims: ClaimsFile, key: str, **changes: Any) -> ClaimsFile:
    """Copy of a claims file with one entry's fields changed."""
    data = claims.to_json_dict()
    data["claims"][key].update(changes)
    return ClaimsFile.from_json_dict(data)
