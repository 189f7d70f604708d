"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Hashtree, a product of Garudex Labs

Merkle proof verification.

Verification recomputes a candidate root from a leaf digest, its index and
a proof, then compares it to the claimed root. The position of each sibling
is re-derived from the parity of the index and cross-checked against the
position stored in the proof.

Verification is total: malformed proofs, wrong lengths, wrong digest widths
and mismatched roots all resolve to False. It never raises.

The index check does not bound the index by the leaf count, which the
verifier never sees. Where a layer duplicates its trailing odd node, the
nonexistent index of the duplicate slot has a valid proof of its own: the
same siblings as the real node, tagged for the odd index. With three leaves
(d0, d1, d2), the steps (d2, LEFT), (combine(d0, d1), LEFT) verify d2 at
index 3. Callers that know the leaf count must check index < leaf_count.
"""

import time
from typing import Optional

from hashtree.logging_config import get_logger, log_merkle_verification
from hashtree.merkle.hasher import DEFAULT_HASHER, MerkleHasher
from hashtree.merkle.proof import MerkleProof, Position, ProofStep

logger = get_logger(__name__)

_DIGEST_TYPES = (bytes, bytearray, memoryview)


def _check_proof(
    proof: MerkleProof,
    root: bytes,
    leaf_digest: bytes,
    index: int,
    hasher: MerkleHasher,
) -> Optional[str]:
    """
    Recompute the root and return a failure reason, or None on success.
    """
    if not isinstance(proof, MerkleProof):
        return "proof_not_merkle_proof"
    if not isinstance(root, _DIGEST_TYPES) or not isinstance(leaf_digest, _DIGEST_TYPES):
        return "digest_not_bytes"
    if isinstance(index, bool) or not isinstance(index, int) or index < 0:
        return "invalid_index"

    digest_size = hasher.digest_size
    if len(leaf_digest) != digest_size or len(root) != digest_size:
        return "digest_size_mismatch"

    current = bytes(leaf_digest)
    current_index = index

    for step in proof.steps:
        if not isinstance(step, ProofStep) or not isinstance(step.position, Position):
            return "malformed_step"
        if not isinstance(step.sibling, _DIGEST_TYPES) or len(step.sibling) != digest_size:
            return "digest_size_mismatch"

        # Cross-check the stored position against the index parity
        if step.position is not Position.from_index(current_index):
            return "position_mismatch"

        if step.position is Position.RIGHT:
            current = hasher.combine(current, bytes(step.sibling))
        else:
            current = hasher.combine(bytes(step.sibling), current)

        current_index //= 2

    # Index must be consistent with the proof length; the leaf count is not known here
    if current_index != 0:
        return "index_out_of_range"

    if current != bytes(root):
        return "root_mismatch"

    return None


def verify_proof(
    proof: MerkleProof,
    root: bytes,
    leaf_digest: bytes,
    index: int,
    hasher: Optional[MerkleHasher] = None,
) -> bool:
    """
    Verify a Merkle inclusion proof.

    Pure function with no side effects and no shared state.

    Args:
        proof: Proof returned by MerkleTree.contains_leaf or generate_proof
        root: Claimed root digest
        leaf_digest: Digest of the leaf being proven
        index: Leaf index returned with the proof
        hasher: Hash combiner used to build the tree (default: sha256)

    Returns:
        True if the proof recomputes the claimed root, False otherwise
    """
    return _check_proof(
        proof, root, leaf_digest, index, hasher if hasher is not None else DEFAULT_HASHER
    ) is None


# Short alias matching the proof API naming
verify = verify_proof


class MerkleVerifier:
    """
    Verify inclusion proofs against bare root digests.

    The verifier holds only an immutable hasher and may be shared across
    threads. Each outcome is logged; leaf contents are never logged.

    Example:
        >>> verifier = MerkleVerifier(tree.hasher)
        >>> proof, index = tree.contains_leaf(tree.leaf_digest(b"b"))
        >>> verifier.verify_leaf(b"b", proof, tree.get_root(), index)
        True
    """

    def __init__(self, hasher: Optional[MerkleHasher] = None):
        """
        Initialize verifier.

        Args:
            hasher: Hash combiner used to build the trees being verified
        """
        self.hasher = hasher if hasher is not None else DEFAULT_HASHER

    def verify(
        self,
        proof: MerkleProof,
        root: bytes,
        leaf_digest: bytes,
        index: int,
    ) -> bool:
        """
        Verify a proof for a leaf digest.

        Args:
            proof: Proof to verify
            root: Claimed root digest
            leaf_digest: Digest of the leaf being proven
            index: Leaf index

        Returns:
            True if the proof is valid, False otherwise
        """
        start = time.perf_counter()
        failure_reason = _check_proof(proof, root, leaf_digest, index, self.hasher)
        duration_ms = (time.perf_counter() - start) * 1000

        log_merkle_verification(
            logger,
            success=failure_reason is None,
            duration_ms=round(duration_ms, 3),
            failure_reason=failure_reason,
            leaf_index=index,
        )

        return failure_reason is None

    def verify_leaf(
        self,
        leaf: bytes,
        proof: MerkleProof,
        root: bytes,
        index: int,
    ) -> bool:
        """
        Verify a proof for raw leaf bytes.

        The leaf is hashed with this verifier's leaf rule first.

        Args:
            leaf: Original leaf data
            proof: Proof to verify
            root: Claimed root digest
            index: Leaf index

        Returns:
            True if the proof is valid, False otherwise
        """
        if not isinstance(leaf, _DIGEST_TYPES):
            log_merkle_verification(
                logger, success=False, duration_ms=0.0, failure_reason="leaf_not_bytes"
            )
            return False
        return self.verify(proof, root, self.hasher.leaf_digest(bytes(leaf)), index)
