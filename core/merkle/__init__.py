"""
Merkle Tree and Commitments
Deterministic Merkle tree construction + proof generation/verification.

This module provides:
- MerkleProof: Dataclass representing a Merkle inclusion proof
- build_merkle_layers / build_merkle_root: Build the tree from leaf hashes
- build_merkle_proof / proof_from_layers: Generate proof for a specific leaf
- verify_merkle_proof / fold_proof: Verify a proof against its claimed root
- MerkleTree / MerkleVerifier: Class-based wrappers

Canonical Commitment Rules:
1. Parent hashing: keccak256(min(a, b) + max(a, b))
2. Odd layers: last node promoted unchanged
3. Empty tree: construction error
4. Single leaf: root = leaf

Usage:
    from core.merkle import MerkleTree, MerkleVerifier

    tree = MerkleTree(leaves)
    proof = tree.get_proof_at(2)
    assert MerkleVerifier.verify_leaf_in_root(leaves[2], proof, tree.root)
"""
from .merkle_tree import (
    Layers,
    MerkleProof,
    merkle_parent,
    next_layer,
    build_merkle_layers,
    build_merkle_root,
    proof_from_layers,
    build_merkle_proof,
    fold_proof,
    verify_merkle_proof,
    compute_tree_depth,
)

from .merkle_proofs import (
    MerkleTree,
    MerkleVerifier,
)


__all__ = [
    # Core types
    "Layers",
    "MerkleProof",
    # Core functions
    "merkle_parent",
    "next_layer",
    "build_merkle_layers",
    "build_merkle_root",
    "proof_from_layers",
    "build_merkle_proof",
    "fold_proof",
    "verify_merkle_proof",
    "compute_tree_depth",
    # Convenience classes
    "MerkleTree",
    "MerkleVerifier",
]
