"""
Core cryptographic utilities.

Keccak-256 hashing and hex helpers used by the Merkle tree and leaf encoders.
"""
from .hashing import (
    HASH_SIZE,
    keccak256,
    hash_pair,
    to_hex,
    from_hex,
    from_hex32,
)

__all__ = [
    "HASH_SIZE",
    "keccak256",
    "hash_pair",
    "to_hex",
    "from_hex",
    "from_hex32",
]
