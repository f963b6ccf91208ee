"""
Merkle Tree Implementation
Deterministic Merkle tree construction, proof generation, and verification.

This module provides:
- Deterministic layer construction from an ordered leaf list
- Merkle proof generation for any leaf position
- Merkle proof verification by folding siblings into the leaf

Canonical Commitment Rules (Hard Contracts):
1. Leaves are opaque 32-byte values produced upstream by a LeafEncoder.
2. Parent hashing: parent = keccak256(min(a, b) + max(a, b)), so pairing is
   commutative and proofs carry no left/right direction bits.
3. Odd layers: the last node has no partner and is promoted to the next
   layer unchanged. It is NOT duplicated and NOT re-hashed.
4. Empty leaves: a construction error, there is no meaningful root.
5. Single leaf: root = leaf, proof = [].

Determinism Notes:
- No randomness or non-deterministic ordering
- This module never sorts leaves, it trusts input order
- Deployed claim contracts recompute parents with the same rules, so any
  change here is a wire-format break
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from core.crypto.hashing import hash_pair
from core.schemas.errors import ConstructionException, ErrorCodes


Layers = list[list[bytes]]


@dataclass(frozen=True)
class MerkleProof:
    """
    A Merkle proof for a single leaf in a Merkle tree.

    Attributes:
        leaf: The leaf hash being proven (32 bytes)
        index: The 0-based position of the leaf in the bottom layer
        siblings: Sibling hashes from bottom to top of tree
        root: The Merkle root this proof is against
    """
    leaf: bytes
    index: int
    siblings: list[bytes]
    root: bytes

    def __post_init__(self) -> None:
        """Validate proof structure."""
        if self.index < 0:
            raise ValueError(f"Leaf index must be non-negative, got {self.index}")


def merkle_parent(left: Optional[bytes], right: Optional[bytes]) -> bytes:
    """
    Combine two nodes into their parent.

    If one side is absent the other is returned unchanged (lone node
    promotion). Otherwise both are hashed in sorted byte order.

    Raises:
        ValueError: If both sides are absent
    """
    if left is None and right is None:
        raise ValueError("Cannot combine two absent nodes")
    if right is None:
        return left
    if left is None:
        return right
    return hash_pair(left, right)


def next_layer(layer: Sequence[bytes]) -> list[bytes]:
    """Pair up (0,1), (2,3), ... and hash each pair; an unpaired tail is promoted."""
    return [
        merkle_parent(layer[i], layer[i + 1] if i + 1 < len(layer) else None)
        for i in range(0, len(layer), 2)
    ]


def build_merkle_layers(leaves: Sequence[bytes]) -> Layers:
    """
    Build every layer of the tree, from the leaves up to the root.

    Example: [a, b, c] -> [[a, b, c], [parent(a,b), c], [parent(parent(a,b), c)]]

    Args:
        leaves: Sequence of leaf hashes. Order matters and is preserved.

    Returns:
        List of layers; layers[0] is the leaf layer and layers[-1] == [root]

    Raises:
        ConstructionException: If leaves is empty
    """
    if len(leaves) == 0:
        raise ConstructionException(
            "Cannot build a Merkle tree from an empty leaf set",
            code=ErrorCodes.EMPTY_LEAF_SET,
        )

    layers: Layers = [list(leaves)]
    while len(layers[-1]) > 1:
        layers.append(next_layer(layers[-1]))
    return layers


def build_merkle_root(leaves: Sequence[bytes]) -> bytes:
    """
    Build a Merkle root from a sequence of leaf hashes.

    Returns:
        32-byte Merkle root

    Raises:
        ConstructionException: If leaves is empty
    """
    return build_merkle_layers(leaves)[-1][0]


def proof_from_layers(layers: Layers, index: int) -> list[bytes]:
    """
    Collect the sibling hashes for the leaf at `index`, bottom-up.

    At each layer the sibling is index ^ 1. A promoted node has no sibling
    in that layer, so nothing is emitted for it.

    Raises:
        IndexError: If index is out of range
    """
    if index < 0 or index >= len(layers[0]):
        raise IndexError(
            f"Leaf index {index} out of range for {len(layers[0])} leaves"
        )

    siblings: list[bytes] = []
    current_index = index
    for layer in layers[:-1]:
        sibling_index = current_index ^ 1
        if sibling_index < len(layer):
            siblings.append(layer[sibling_index])
        current_index //= 2
    return siblings


def build_merkle_proof(leaves: Sequence[bytes], index: int) -> MerkleProof:
    """
    Generate a Merkle proof for the leaf at the given index.

    Raises:
        IndexError: If index is out of range
        ConstructionException: If leaves is empty
    """
    layers = build_merkle_layers(leaves)
    siblings = proof_from_layers(layers, index)
    return MerkleProof(
        leaf=layers[0][index],
        index=index,
        siblings=siblings,
        root=layers[-1][0],
    )


def fold_proof(leaf: bytes, siblings: Sequence[bytes]) -> bytes:
    """Recompute a root by combining the leaf with each sibling in order."""
    current = leaf
    for sibling in siblings:
        current = merkle_parent(current, sibling)
    return current


def verify_merkle_proof(proof: MerkleProof) -> bool:
    """
    Verify a Merkle proof.

    The index is not consulted: sorted-pair hashing makes position
    irrelevant to the fold.

    Returns:
        True if the recomputed root equals proof.root byte-for-byte
    """
    return fold_proof(proof.leaf, proof.siblings) == proof.root


def compute_tree_depth(num_leaves: int) -> int:
    """
    Number of layers in a tree with the given number of leaves.

    A single leaf has depth 1, two leaves depth 2, three or four leaves
    depth 3. The longest proof has depth - 1 siblings.
    """
    if num_leaves <= 0:
        return 0

    depth = 1
    n = num_leaves
    while n > 1:
        n = (n + 1) // 2
        depth += 1
    return depth


__all__ = [
    "Layers",
    "MerkleProof",
    "merkle_parent",
    "next_layer",
    "build_merkle_layers",
    "build_merkle_root",
    "proof_from_layers",
    "build_merkle_proof",
    "fold_proof",
    "verify_merkle_proof",
    "compute_tree_depth",
]
