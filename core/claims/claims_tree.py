"""
Claims Tree
A MerkleTree whose leaves are encoded allocation records.
"""
from __future__ import annotations

from typing import Sequence

from core.claims.encoding import PLAIN_ENCODER, LeafEncoder
from core.merkle.merkle_proofs import MerkleTree
from core.schemas.allocation import AllocationRecord


class ClaimsTree:
    """
    Builds the tree for records already in canonical order.

    Record i is encoded with index i. The caller (the allocation parser)
    is responsible for the ordering; this class never reorders records.
    """

    def __init__(
        self,
        records: Sequence[AllocationRecord],
        encoder: LeafEncoder = PLAIN_ENCODER,
        sort_leaves: bool = False,
    ) -> None:
        self.encoder = encoder
        self.records = list(records)
        self._leaves = [
            encoder.encode_record(index, record)
            for index, record in enumerate(self.records)
        ]
        self.tree = MerkleTree(self._leaves, sort_leaves=sort_leaves)

    @property
    def root(self) -> bytes:
        return self.tree.root

    @property
    def hex_root(self) -> str:
        return self.tree.hex_root

    def leaf(self, index: int) -> bytes:
        """Leaf of the record with canonical index `index`."""
        return self._leaves[index]

    def get_proof(self, index: int, record: AllocationRecord) -> list[str]:
        """Hex proof for a record, located by its leaf value."""
        return self.tree.get_hex_proof(self.encoder.encode_record(index, record))
