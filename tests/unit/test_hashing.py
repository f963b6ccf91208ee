"""
Hashing Unit Tests
Tests for core/crypto/hashing.py

Tests:
- keccak256 known vectors (EVM keccak, not NIST SHA3)
- hash_pair operand ordering
- to_hex/from_hex/from_hex32 behavior
"""
import hashlib

import pytest

from core.crypto.hashing import (
    HASH_SIZE,
    keccak256,
    hash_pair,
    to_hex,
    from_hex,
    from_hex32,
)


class TestKeccak256:
    """Tests for keccak256() function."""

    def test_empty_bytes_known_value(self):
        expected = "c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470"
        assert keccak256(b"").hex() == expected

    def test_hello_known_value(self):
        expected = "1c8aff950685c2ed4bc3174f3472287b56d9517b9c948127319a09a7a36deac8"
        assert keccak256(b"hello").hex() == expected

    def test_differs_from_sha3_256(self):
        """Keccak padding differs from the standardized SHA3-256."""
        assert keccak256(b"hello") != hashlib.sha3_256(b"hello").digest()

    def test_digest_size(self):
        assert len(keccak256(b"anything")) == HASH_SIZE


class TestHashPair:
    """Tests for hash_pair() sorted concatenation."""

    def test_commutative(self):
        a = keccak256(b"a")
        b = keccak256(b"b")
        assert hash_pair(a, b) == hash_pair(b, a)

    def test_smaller_operand_first(self):
        low = bytes(31) + b"\x01"
        high = b"\xff" + bytes(31)
        assert hash_pair(high, low) == keccak256(low + high)

    def test_byte_order_is_unsigned(self):
        """0x80.. sorts after 0x7f.., as unsigned big-endian comparison requires."""
        a = b"\x80" + bytes(31)
        b = b"\x7f" + bytes(31)
        assert hash_pair(a, b) == keccak256(b + a)

    def test_equal_operands(self):
        a = keccak256(b"same")
        assert hash_pair(a, a) == keccak256(a + a)


class TestHexConversion:
    """Tests for to_hex / from_hex."""

    def test_round_trip(self):
        data = keccak256(b"x")
        assert from_hex(to_hex(data)) == data

    def test_to_hex_prefix_and_case(self):
        assert to_hex(bytes.fromhex("DEADBEEF")) == "0xdeadbeef"

    def test_from_hex_requires_prefix(self):
        with pytest.raises(ValueError, match="0x"):
            from_hex("deadbeef")

    def test_from_hex_odd_length(self):
        with pytest.raises(ValueError, match="even length"):
            from_hex("0xabc")

    def test_from_hex_invalid_characters(self):
        with pytest.raises(ValueError, match="Invalid hex"):
            from_hex("0xzz")

    def test_from_hex32_accepts_node(self):
        node = keccak256(b"node")
        assert from_hex32(to_hex(node)) == node

    def test_from_hex32_rejects_short(self):
        with pytest.raises(ValueError, match="32 bytes"):
            from_hex32("0x" + "ab" * 31)
