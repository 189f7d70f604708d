"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Hashtree, a product of Garudex Labs

Merkle tree construction, proof generation and proof verification.
"""

from hashtree.merkle.hasher import (
    DEFAULT_ALGORITHM,
    DEFAULT_HASHER,
    MerkleHasher,
    available_algorithms,
    combine,
    from_hex,
    get_digest_function,
    leaf_digest,
    to_hex,
)
from hashtree.merkle.proof import (
    MerkleProof,
    Position,
    ProofStep,
    build_proof,
    compute_tree_depth,
    decode_proof,
    encode_proof,
    expected_proof_length,
    proof_from_dict,
    proof_to_dict,
)
from hashtree.merkle.tree import MerkleTree
from hashtree.merkle.handle import MutableMerkleTree
from hashtree.merkle.verifier import MerkleVerifier, verify, verify_proof

__all__ = [
    "DEFAULT_ALGORITHM",
    "DEFAULT_HASHER",
    "MerkleHasher",
    "available_algorithms",
    "combine",
    "from_hex",
    "get_digest_function",
    "leaf_digest",
    "to_hex",
    "MerkleProof",
    "Position",
    "ProofStep",
    "build_proof",
    "compute_tree_depth",
    "decode_proof",
    "encode_proof",
    "expected_proof_length",
    "proof_from_dict",
    "proof_to_dict",
    "MerkleTree",
    "MutableMerkleTree",
    "MerkleVerifier",
    "verify",
    "verify_proof",
]
