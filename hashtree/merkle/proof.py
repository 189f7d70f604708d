"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Hashtree, a product of Garudex Labs

Merkle inclusion proof values and their serialized layouts.

A proof is an ordered list of (sibling digest, position) steps, one per layer
from the leaf layer up to, but not including, the root layer. Position tells
which side the sibling sits on relative to the node being authenticated.

Binary layout: each step is one flag byte (0x00 = left, 0x01 = right)
followed by the sibling digest. There is no header; the leaf index travels
separately.

JSON layout: {"index": 3, "steps": [{"sibling": "<hex>", "position": "left"}]}
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterator, Optional, Sequence, Tuple

from hashtree.exceptions import ProofDecodeError
from hashtree.merkle.hasher import from_hex, to_hex


class Position(Enum):
    """Side on which a sibling sits relative to the authenticated node."""
    LEFT = 0
    RIGHT = 1

    @classmethod
    def from_index(cls, index: int) -> "Position":
        """Sibling position for a node at the given index within its layer."""
        return cls.RIGHT if index % 2 == 0 else cls.LEFT


@dataclass(frozen=True)
class ProofStep:
    """
    One step of an inclusion proof.

    Attributes:
        sibling: Digest of the sibling node at this layer
        position: Side of the sibling relative to the current node
    """
    sibling: bytes
    position: Position


@dataclass(frozen=True)
class MerkleProof:
    """
    Proof that a leaf is included in a Merkle tree.

    Proofs carry no back-reference to the tree they came from. The leaf
    index is returned alongside the proof and must be supplied again at
    verification time.

    Attributes:
        steps: Proof steps ordered from the leaf layer towards the root
    """
    steps: Tuple[ProofStep, ...] = ()

    def __post_init__(self) -> None:
        # Accept any sequence of steps but store a tuple
        object.__setattr__(self, "steps", tuple(self.steps))

    @property
    def siblings(self) -> Tuple[bytes, ...]:
        return tuple(step.sibling for step in self.steps)

    @property
    def positions(self) -> Tuple[Position, ...]:
        return tuple(step.position for step in self.steps)

    def __len__(self) -> int:
        return len(self.steps)

    def __iter__(self) -> Iterator[ProofStep]:
        return iter(self.steps)


def expected_proof_length(leaf_count: int) -> int:
    """
    Number of proof steps for a tree with the given number of leaves.

    Equals ceil(log2(leaf_count)); a single-leaf tree has an empty proof.

    Raises:
        ValueError: If leaf_count is not positive
    """
    if leaf_count < 1:
        raise ValueError(f"leaf_count must be at least 1, got {leaf_count}")
    return (leaf_count - 1).bit_length()


def compute_tree_depth(leaf_count: int) -> int:
    """
    Number of layers, leaf layer and root layer included.

    A single leaf has depth 1, two leaves have depth 2, and so on.
    Returns 0 for an empty leaf count.
    """
    if leaf_count <= 0:
        return 0
    return expected_proof_length(leaf_count) + 1


def encode_proof(proof: MerkleProof) -> bytes:
    """
    Serialize a proof to its binary layout.

    Args:
        proof: Proof to encode

    Returns:
        Concatenation of (flag byte || sibling digest) for every step
    """
    out = bytearray()
    for step in proof.steps:
        out.append(step.position.value)
        out.extend(step.sibling)
    return bytes(out)


def decode_proof(data: bytes, digest_size: int = 32) -> MerkleProof:
    """
    Deserialize a proof from its binary layout.

    Args:
        data: Encoded proof bytes
        digest_size: Width of each sibling digest

    Returns:
        Decoded MerkleProof

    Raises:
        ProofDecodeError: If the length or a flag byte is invalid
    """
    if digest_size < 1:
        raise ProofDecodeError(f"digest_size must be at least 1, got {digest_size}")

    record_size = digest_size + 1
    if len(data) % record_size != 0:
        raise ProofDecodeError(
            f"Encoded proof length {len(data)} is not a multiple of {record_size}"
        )

    steps = []
    for offset in range(0, len(data), record_size):
        flag = data[offset]
        if flag not in (0, 1):
            raise ProofDecodeError(f"Invalid position flag {flag:#04x} at offset {offset}")
        sibling = bytes(data[offset + 1:offset + record_size])
        steps.append(ProofStep(sibling=sibling, position=Position(flag)))

    return MerkleProof(steps=tuple(steps))


def proof_to_dict(proof: MerkleProof, index: Optional[int] = None) -> Dict[str, Any]:
    """
    Convert a proof to a JSON-serializable dictionary.

    Args:
        proof: Proof to convert
        index: Optional leaf index to carry along with the proof

    Returns:
        Dictionary with hex-encoded siblings and "left"/"right" positions
    """
    data: Dict[str, Any] = {
        "steps": [
            {"sibling": to_hex(step.sibling), "position": step.position.name.lower()}
            for step in proof.steps
        ],
    }
    if index is not None:
        data["index"] = index
    return data


def proof_from_dict(data: Dict[str, Any]) -> Tuple[MerkleProof, Optional[int]]:
    """
    Build a proof from its dictionary form.

    Args:
        data: Dictionary produced by proof_to_dict()

    Returns:
        Tuple of (proof, index); index is None when absent

    Raises:
        ProofDecodeError: If the dictionary is malformed
    """
    if not isinstance(data, dict):
        raise ProofDecodeError("Proof must be a JSON object")

    raw_steps = data.get("steps")
    if not isinstance(raw_steps, list):
        raise ProofDecodeError("Proof is missing a 'steps' list")

    index = data.get("index")
    if index is not None and (isinstance(index, bool) or not isinstance(index, int) or index < 0):
        raise ProofDecodeError(f"Proof index must be a non-negative integer, got {index!r}")

    steps = []
    for i, raw in enumerate(raw_steps):
        if not isinstance(raw, dict):
            raise ProofDecodeError(f"Proof step {i} must be an object")
        try:
            sibling = from_hex(raw["sibling"])
            position = Position[str(raw["position"]).upper()]
        except KeyError as e:
            raise ProofDecodeError(f"Proof step {i} is missing or has invalid field {e}") from e
        except (AttributeError, ValueError) as e:
            raise ProofDecodeError(f"Proof step {i} has an invalid sibling: {e}") from e
        steps.append(ProofStep(sibling=sibling, position=position))

    return MerkleProof(steps=tuple(steps)), index


def build_proof(siblings: Sequence[bytes], positions: Sequence[Position]) -> MerkleProof:
    """Zip parallel sibling and position sequences into a proof."""
    if len(siblings) != len(positions):
        raise ValueError(
            f"siblings and positions differ in length ({len(siblings)} != {len(positions)})"
        )
    return MerkleProof(
        steps=tuple(ProofStep(sibling=s, position=p) for s, p in zip(siblings, positions))
    )
