"""
Proof Verification and Root Reconciliation
Independent checks over a distributed claims file.

Two checks, both needed in audit workflows:

- verify_claim: fold one entry's proof into its leaf and compare with
  the root. Establishes that this entry is provably included.
- reconcile_root: rebuild the whole tree from the raw entry fields
  (never from the stored proofs) and return the root. Establishes that
  the file as a whole commits to the published root.

Passing one does not imply passing the other. A corrupted proof still
reconciles, and a consistent rewrite of every proof can verify entry by
entry against a root that the raw fields do not rebuild.

Nothing here shares state with the parser; only the leaf encoder and the
pair hashing rule are common to both paths.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional, Sequence, Union

from core.claims.encoding import ClaimVariant, LeafEncoder, get_encoder
from core.crypto.hashing import from_hex32, to_hex
from core.merkle.merkle_proofs import MerkleTree, MerkleVerifier
from core.schemas.allocation import KEY_SEPARATOR, UINT256_LIMIT
from core.schemas.claims import ClaimsFile
from core.schemas.errors import AllotreeException, ClaimsFileException, ErrorCodes
from core.schemas.verification import CheckResult, VerificationResult


logger = logging.getLogger(__name__)


Node = Union[bytes, str]


@dataclass(frozen=True)
class ClaimRecord:
    """Raw fields of one claims file entry, as an auditor reads them."""
    key: str
    index: int
    account: str
    capacity: int
    referral: Optional[str]
    proof: list[bytes] = field(default_factory=list)

    @property
    def key_matches(self) -> bool:
        """Whether the entry's referral field agrees with the suffix of its key."""
        if self.referral is None:
            return KEY_SEPARATOR not in self.key
        return self.key == f"{self.account}{KEY_SEPARATOR}{self.referral}"


def _as_node(value: Node) -> bytes:
    if isinstance(value, str):
        return from_hex32(value)
    return bytes(value)


def verify_claim(
    index: int,
    account: str,
    capacity: int,
    proof: Sequence[Node],
    root: Node,
    referral: Optional[str] = None,
    encoder: Optional[LeafEncoder] = None,
) -> bool:
    """
    Check one entry against a root.

    Recomputes the leaf from the raw fields, folds the proof in the given
    order and compares byte-for-byte. Anything unencodable (bad address,
    out-of-range integer, malformed hex) is a plain False.

    Args:
        index: Canonical index of the entry
        account: Address of the claimer
        capacity: Claim cap
        proof: Sibling hashes, leaf to root (bytes or 0x hex)
        root: Expected root (bytes or 0x hex)
        referral: Referral tag for referral distributions
        encoder: Leaf encoder; defaults to the one implied by `referral`
    """
    if encoder is None:
        encoder = get_encoder(
            ClaimVariant.REFERRAL if referral is not None else ClaimVariant.PLAIN
        )
    if not 0 <= index < UINT256_LIMIT or not 0 <= capacity < UINT256_LIMIT:
        return False

    try:
        leaf = encoder.encode(index, account, capacity, referral)
        siblings = [_as_node(node) for node in proof]
        expected = _as_node(root)
    except (ValueError, TypeError):
        return False

    return MerkleVerifier.verify_leaf_in_root(leaf, siblings, expected)


def detect_variant(claims_file: ClaimsFile) -> ClaimVariant:
    """
    Referral distributions carry `referral` on every entry, plain ones on none.

    Raises:
        ClaimsFileException: If the file mixes both kinds of entry
    """
    kinds = {entry.referral is not None for entry in claims_file.claims.values()}
    if len(kinds) > 1:
        raise ClaimsFileException("Claims file mixes referral and plain entries")
    return ClaimVariant.REFERRAL if True in kinds else ClaimVariant.PLAIN


def claims_to_records(
    claims_file: ClaimsFile,
    variant: Optional[ClaimVariant] = None,
) -> list[ClaimRecord]:
    """
    Extract raw entry fields, in canonical key order.

    The account is the part of the key before the first separator;
    checksummed addresses never contain one.

    Raises:
        ClaimsFileException: If an entry does not fit the variant
    """
    variant = ClaimVariant(variant) if variant is not None else detect_variant(claims_file)

    records: list[ClaimRecord] = []
    for key in sorted(claims_file.claims):
        entry = claims_file.claims[key]
        if variant is ClaimVariant.REFERRAL:
            if entry.referral is None:
                raise ClaimsFileException(f"Entry {key} has no referral", key=key)
            account = key.partition(KEY_SEPARATOR)[0]
        else:
            if entry.referral is not None:
                raise ClaimsFileException(
                    f"Entry {key} carries a referral in a plain distribution", key=key
                )
            account = key

        records.append(ClaimRecord(
            key=key,
            index=entry.index,
            account=account,
            capacity=entry.capacity,
            referral=entry.referral,
            proof=entry.proof_bytes(),
        ))
    return records


def reconcile_root(
    claims_file: ClaimsFile,
    variant: Optional[ClaimVariant] = None,
    encoder: Optional[LeafEncoder] = None,
    sort_leaves: bool = False,
) -> bytes:
    """
    Rebuild the root from the raw entries of a claims file.

    Entries are taken in canonical key order and encoded with their stored
    index. Compare the result with claims_file.root_bytes.

    Raises:
        ClaimsFileException: If an entry cannot be encoded
        ConstructionException: If the file has no entries
    """
    records = claims_to_records(claims_file, variant)
    if encoder is None:
        encoder = get_encoder(variant if variant is not None else detect_variant(claims_file))

    leaves: list[bytes] = []
    for record in records:
        try:
            leaves.append(encoder.encode(record.index, record.account, record.capacity, record.referral))
        except (ValueError, TypeError) as e:
            raise ClaimsFileException(
                f"Entry {record.key} cannot be encoded: {e}", key=record.key
            ) from e

    return MerkleTree(leaves, sort_leaves=sort_leaves).root


def audit_claims_file(
    claims_file: ClaimsFile,
    variant: Optional[ClaimVariant] = None,
    encoder: Optional[LeafEncoder] = None,
    sort_leaves: bool = False,
) -> VerificationResult:
    """
    Run every check over a claims file.

    Produces one `claim:<key>` check per entry, an `index_set` check and a
    `root_match` check. The result is ok only if all of them pass.

    Raises:
        ClaimsFileException: If the file mixes plain and referral entries
    """
    variant = ClaimVariant(variant) if variant is not None else detect_variant(claims_file)
    encoder = encoder or get_encoder(variant)
    records = claims_to_records(claims_file, variant)
    root = claims_file.root_bytes

    result = VerificationResult(ok=True, expected_root=claims_file.merkle_root)

    for record in records:
        check_id = f"claim:{record.key}"
        details = {"index": record.index, "key": record.key}
        if not record.key_matches:
            result.add_check(CheckResult.failed(
                check_id,
                f"Key {record.key} does not match its account/referral fields",
                details={**details, "code": ErrorCodes.MERKLE_PROOF_INVALID},
            ))
            logger.warning(f"Verification for {record.key} failed: key mismatch")
            continue

        if verify_claim(
            record.index, record.account, record.capacity, record.proof, root,
            referral=record.referral, encoder=encoder,
        ):
            result.add_check(CheckResult.passed(check_id, "Proof verified", details=details))
            logger.info(f"Verified proof for {record.index} {record.key}")
        else:
            result.add_check(CheckResult.failed(
                check_id,
                f"Proof for {record.key} does not lead to the stored root",
                details={**details, "code": ErrorCodes.MERKLE_PROOF_INVALID},
            ))
            logger.warning(f"Verification for {record.key} failed")

    indices = sorted(record.index for record in records)
    if indices == list(range(len(records))):
        result.add_check(CheckResult.passed("index_set", f"Indices are 0..{len(records) - 1}"))
    else:
        result.add_check(CheckResult.failed(
            "index_set",
            "Indices are not a contiguous 0-based sequence",
            details={"code": ErrorCodes.INDEX_SET_INVALID},
        ))

    try:
        rebuilt = to_hex(reconcile_root(claims_file, variant, encoder, sort_leaves))
    except AllotreeException as e:
        result.error = e.to_error_model()
        result.add_check(CheckResult.failed(
            "root_match", f"Root could not be rebuilt: {e.message}",
            details={"code": e.code},
        ))
        logger.warning(f"Root reconstruction failed: {e.message}")
        return result

    result.rebuilt_root = rebuilt
    if rebuilt.lower() == claims_file.merkle_root.lower():
        result.add_check(CheckResult.passed(
            "root_match", "Rebuilt root matches merkleRoot", details={"root": rebuilt},
        ))
    else:
        result.add_check(CheckResult.failed(
            "root_match",
            f"Rebuilt root {rebuilt} differs from merkleRoot {claims_file.merkle_root}",
            details={"code": ErrorCodes.ROOT_MISMATCH, "rebuilt": rebuilt},
        ))
    logger.info(f"Reconstructed merkle root {rebuilt}")

    return result


__all__ = [
    "ClaimRecord",
    "verify_claim",
    "detect_variant",
    "claims_to_records",
    "reconcile_root",
    "audit_claims_file",
]
