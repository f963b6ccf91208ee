"""
Hashing Utilities
Keccak-256 primitives shared by the leaf encoder and the Merkle tree.

This module provides:
- Keccak-256 hashing for raw bytes (the EVM's keccak256, not NIST SHA3-256)
- Sorted-pair hashing used for every internal tree node
- Hex encoding/decoding with 0x prefix

Security/Determinism Notes:
- Pair hashing orders its operands by unsigned byte value, so
  hash_pair(a, b) == hash_pair(b, a). On-chain verifiers built on
  OpenZeppelin's MerkleProof library recompute nodes the same way.
- All operations are deterministic
"""
from __future__ import annotations

from eth_utils import keccak


HASH_SIZE = 32


def keccak256(data: bytes) -> bytes:
    """
    Compute the Keccak-256 hash of raw bytes.

    Args:
        data: Raw bytes to hash

    Returns:
        32-byte Keccak-256 digest

    Example:
        >>> keccak256(b"").hex()
        'c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470'
    """
    return keccak(data)


def hash_pair(left: bytes, right: bytes) -> bytes:
    """
    Hash two node values in canonical (sorted) order.

    parent = keccak256(min(left, right) + max(left, right))

    Python compares bytes lexicographically by unsigned value, which for
    equal-length values is big-endian numeric order.
    """
    lo, hi = (left, right) if left <= right else (right, left)
    return keccak256(lo + hi)


def to_hex(data: bytes) -> str:
    """
    Convert bytes to hexadecimal string with 0x prefix.

    Example:
        >>> to_hex(bytes.fromhex("deadbeef"))
        '0xdeadbeef'
    """
    return "0x" + data.hex()


def from_hex(hex_string: str) -> bytes:
    """
    Convert hexadecimal string (with 0x prefix) to bytes.

    Raises:
        ValueError: If string doesn't start with 0x, has odd length,
                   or contains invalid hex characters
    """
    if not hex_string.startswith("0x"):
        raise ValueError(
            f"Hex string must start with '0x' prefix, got: {hex_string[:10]}..."
        )

    hex_content = hex_string[2:]

    if len(hex_content) % 2 != 0:
        raise ValueError(
            f"Hex string must have even length after 0x prefix, "
            f"got length {len(hex_content)}"
        )

    try:
        return bytes.fromhex(hex_content)
    except ValueError as e:
        raise ValueError(f"Invalid hex characters in string: {e}") from e


def from_hex32(hex_string: str) -> bytes:
    """Decode a 0x-prefixed hex string that must hold exactly one 32-byte node."""
    data = from_hex(hex_string)
    if len(data) != HASH_SIZE:
        raise ValueError(f"Expected {HASH_SIZE} bytes, got {len(data)}")
    return data


__all__ = [
    "HASH_SIZE",
    "keccak256",
    "hash_pair",
    "to_hex",
    "from_hex",
    "from_hex32",
]
