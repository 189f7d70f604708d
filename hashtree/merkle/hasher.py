"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Hashtree, a product of Garudex Labs

Hash combiner for Merkle tree construction and verification.

This module is the single place where leaf hashing and pair hashing are
defined. Tree construction, proof generation and proof verification all go
through a MerkleHasher so that the three can never disagree:
- Leaf digest: H(data), or H(0x00 || data) with domain separation
- Pair digest: H(left || right), or H(0x01 || left || right) with domain separation

Digest primitives are looked up by name. sha256, sha3_256 and blake2b come
from hashlib; keccak256 comes from eth_utils.
"""

import hashlib
from typing import Callable, Dict, List

from eth_utils import keccak

from hashtree.exceptions import UnsupportedAlgorithmError

DigestFunction = Callable[[bytes], bytes]

DEFAULT_ALGORITHM = "sha256"

# Prefix tags used when domain separation is enabled (RFC 6962 style)
LEAF_PREFIX = b"\x00"
NODE_PREFIX = b"\x01"


def _sha256(data: bytes) -> bytes:
    return hashlib.sha256(data).digest()


def _sha3_256(data: bytes) -> bytes:
    return hashlib.sha3_256(data).digest()


def _blake2b_256(data: bytes) -> bytes:
    return hashlib.blake2b(data, digest_size=32).digest()


def _keccak256(data: bytes) -> bytes:
    return keccak(data)


_DIGEST_FUNCTIONS: Dict[str, DigestFunction] = {
    "sha256": _sha256,
    "sha3_256": _sha3_256,
    "blake2b": _blake2b_256,
    "keccak256": _keccak256,
}


def available_algorithms() -> List[str]:
    """Return the names of all supported digest algorithms."""
    return sorted(_DIGEST_FUNCTIONS)


def get_digest_function(name: str) -> DigestFunction:
    """
    Look up a digest primitive by name.

    Args:
        name: Algorithm name (case-insensitive, "-" and "_" are interchangeable)

    Returns:
        Function mapping bytes to a fixed-width digest

    Raises:
        UnsupportedAlgorithmError: If the algorithm is unknown
    """
    key = name.lower().replace("-", "_") if isinstance(name, str) else name
    try:
        return _DIGEST_FUNCTIONS[key]
    except (KeyError, TypeError):
        raise UnsupportedAlgorithmError(
            f"Unsupported digest algorithm '{name}'. "
            f"Available: {', '.join(available_algorithms())}"
        )


class MerkleHasher:
    """
    Leaf and pair hashing rules for one tree.

    A hasher is immutable once created. Trees and verifiers must share the
    same algorithm and domain separation setting, otherwise proofs will not
    verify.

    Example:
        >>> hasher = MerkleHasher("sha256")
        >>> d0 = hasher.leaf_digest(b"a")
        >>> d1 = hasher.leaf_digest(b"b")
        >>> parent = hasher.combine(d0, d1)
        >>> len(parent)
        32
    """

    def __init__(self, algorithm: str = DEFAULT_ALGORITHM, domain_separation: bool = False):
        """
        Initialize hasher.

        Args:
            algorithm: Digest algorithm name (see available_algorithms())
            domain_separation: Prefix leaf and pair inputs with distinct tags

        Raises:
            UnsupportedAlgorithmError: If the algorithm is unknown
        """
        self._digest = get_digest_function(algorithm)
        self._algorithm = algorithm.lower().replace("-", "_")
        self._domain_separation = bool(domain_separation)
        self._digest_size = len(self.hash(b""))

    @classmethod
    def from_config(cls, hashing_config) -> "MerkleHasher":
        """Create a hasher from a HashingConfig."""
        return cls(
            algorithm=hashing_config.algorithm,
            domain_separation=hashing_config.domain_separation,
        )

    @property
    def algorithm(self) -> str:
        return self._algorithm

    @property
    def domain_separation(self) -> bool:
        return self._domain_separation

    @property
    def digest_size(self) -> int:
        """Width in bytes of every digest this hasher produces."""
        return self._digest_size

    def hash(self, data: bytes) -> bytes:
        """Apply the raw digest primitive without any tagging."""
        return self._digest(data)

    def leaf_digest(self, data: bytes) -> bytes:
        """
        Hash raw leaf bytes into a leaf digest.

        Args:
            data: Raw leaf bytes

        Returns:
            Leaf digest
        """
        if self._domain_separation:
            return self._digest(LEAF_PREFIX + data)
        return self._digest(data)

    def combine(self, left: bytes, right: bytes) -> bytes:
        """
        Hash two child digests into their parent digest.

        Order matters: combine(a, b) != combine(b, a) in general.

        Args:
            left: Left child digest
            right: Right child digest

        Returns:
            Parent digest
        """
        if self._domain_separation:
            return self._digest(NODE_PREFIX + left + right)
        return self._digest(left + right)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MerkleHasher):
            return NotImplemented
        return (
            self._algorithm == other._algorithm
            and self._domain_separation == other._domain_separation
        )

    def __hash__(self) -> int:
        return hash((self._algorithm, self._domain_separation))

    def __repr__(self) -> str:
        return (
            f"MerkleHasher(algorithm={self._algorithm!r}, "
            f"domain_separation={self._domain_separation!r})"
        )


DEFAULT_HASHER = MerkleHasher()


def leaf_digest(data: bytes) -> bytes:
    """Leaf digest under the default hasher (sha256, no domain separation)."""
    return DEFAULT_HASHER.leaf_digest(data)


def combine(left: bytes, right: bytes) -> bytes:
    """Pair digest under the default hasher (sha256, no domain separation)."""
    return DEFAULT_HASHER.combine(left, right)


def to_hex(digest: bytes) -> str:
    """Convert a digest to a lowercase hex string without prefix."""
    return digest.hex()


def from_hex(hex_string: str) -> bytes:
    """
    Convert a hex string (optionally 0x-prefixed) to bytes.

    Raises:
        ValueError: If the string has odd length or contains invalid characters
    """
    hex_content = hex_string.strip()
    if hex_content[:2].lower() == "0x":
        hex_content = hex_content[2:]

    if len(hex_content) % 2 != 0:
        raise ValueError(
            f"Hex string must have even length, got length {len(hex_content)}"
        )

    try:
        return bytes.fromhex(hex_content)
    except ValueError as e:
        raise ValueError(f"Invalid hex characters in string: {e}") from e
