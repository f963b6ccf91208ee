"""
Merkle Tree Objects
Class-based interface over the functions in merkle_tree.py.

This module provides:
- MerkleTree: Builds the layers once and serves roots and proofs
- MerkleVerifier: Verifies proofs from raw components
"""
from __future__ import annotations

from typing import Sequence

from core.crypto.hashing import to_hex
from core.merkle.merkle_tree import (
    MerkleProof,
    build_merkle_layers,
    compute_tree_depth,
    fold_proof,
    proof_from_layers,
    verify_merkle_proof,
)
from core.schemas.errors import MerkleProofException


class MerkleTree:
    """
    An immutable Merkle tree over 32-byte leaves.

    By default leaves stay in the order given. With sort_leaves=True the
    leaves are sorted by byte value and exact duplicates are dropped first,
    which reproduces the layout produced by legacy airdrop distributor
    tooling. Either layout verifies under the same sorted-pair fold.

    Example:
        >>> tree = MerkleTree([keccak256(b"a"), keccak256(b"b")])
        >>> proof = tree.get_proof_at(0)
        >>> MerkleVerifier.verify_leaf_in_root(tree.leaves[0], proof, tree.root)
        True
    """

    def __init__(self, leaves: Sequence[bytes], sort_leaves: bool = False) -> None:
        elements = sorted(set(leaves)) if sort_leaves else list(leaves)
        self._layers = build_merkle_layers(elements)
        self._positions: dict[bytes, int] = {}
        for position, leaf in enumerate(elements):
            self._positions.setdefault(leaf, position)

    @property
    def layers(self) -> list[list[bytes]]:
        """Copy of every layer, leaves first, root layer last."""
        return [list(layer) for layer in self._layers]

    @property
    def leaves(self) -> list[bytes]:
        return list(self._layers[0])

    @property
    def root(self) -> bytes:
        return self._layers[-1][0]

    @property
    def hex_root(self) -> str:
        return to_hex(self.root)

    @property
    def depth(self) -> int:
        return compute_tree_depth(len(self._layers[0]))

    def __len__(self) -> int:
        return len(self._layers[0])

    def position_of(self, leaf: bytes) -> int:
        """
        Position of a leaf in the bottom layer.

        Raises:
            MerkleProofException: If the leaf is not in the tree
        """
        try:
            return self._positions[leaf]
        except KeyError:
            raise MerkleProofException(
                f"Leaf {to_hex(leaf)} is not part of this tree"
            ) from None

    def get_proof_at(self, position: int) -> list[bytes]:
        """
        Sibling hashes for the leaf at a bottom-layer position.

        Raises:
            MerkleProofException: If position is out of range
        """
        try:
            return proof_from_layers(self._layers, position)
        except IndexError as e:
            raise MerkleProofException(str(e), leaf_index=position) from e

    def get_proof(self, leaf: bytes) -> list[bytes]:
        """Sibling hashes for a leaf, located by value."""
        return self.get_proof_at(self.position_of(leaf))

    def get_hex_proof(self, leaf: bytes) -> list[str]:
        """Same as get_proof, as 0x-prefixed hex strings."""
        return [to_hex(node) for node in self.get_proof(leaf)]

    def prove(self, position: int) -> MerkleProof:
        """Full MerkleProof object for the leaf at a bottom-layer position."""
        siblings = self.get_proof_at(position)
        return MerkleProof(
            leaf=self._layers[0][position],
            index=position,
            siblings=siblings,
            root=self.root,
        )


class MerkleVerifier:
    """
    Convenience class for verifying Merkle proofs.

    Example:
        >>> proof = tree.prove(1)
        >>> MerkleVerifier.verify(proof)
        True
    """

    @staticmethod
    def verify(proof: MerkleProof) -> bool:
        return verify_merkle_proof(proof)

    @staticmethod
    def verify_leaf_in_root(
        leaf: bytes,
        siblings: Sequence[bytes],
        root: bytes,
    ) -> bool:
        """
        Verify a leaf is included in a Merkle root using raw components.

        Args:
            leaf: The leaf hash to verify
            siblings: Sibling hashes (bottom-up)
            root: The claimed Merkle root

        Returns:
            True if the folded proof equals root, False otherwise
        """
        return fold_proof(leaf, siblings) == root


__all__ = [
    "MerkleTree",
    "MerkleVerifier",
]
