"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Hashtree, a product of Garudex Labs

Mutable handle over an immutable Merkle tree.

The handle owns the source leaves and the current tree. Appending leaves
rebuilds the whole tree from the combined leaf sequence; there is no
incremental recomputation. A failed rebuild leaves the previous tree in
place.

The handle does no internal locking. Concurrent add_leaves() calls must be
serialized by the caller. Trees returned by the handle are immutable
snapshots and can be shared freely.
"""

from typing import List, Optional, Sequence, Tuple

from hashtree.exceptions import EmptyInputError, EmptyTreeError
from hashtree.logging_config import get_logger
from hashtree.merkle.hasher import DEFAULT_HASHER, MerkleHasher
from hashtree.merkle.proof import MerkleProof
from hashtree.merkle.tree import MerkleTree

logger = get_logger(__name__)


class MutableMerkleTree:
    """
    Append-only collection of leaves with an always-current Merkle tree.

    Example:
        >>> handle = MutableMerkleTree([b"a", b"b"])
        >>> handle.count_leaves()
        2
        >>> tree = handle.add_leaves([b"c"])
        >>> handle.count_leaves()
        3
    """

    def __init__(
        self,
        leaves: Sequence[bytes] = (),
        hasher: Optional[MerkleHasher] = None,
        **tree_options,
    ):
        """
        Initialize the handle, building a tree if leaves are given.

        Args:
            leaves: Initial leaves; may be empty
            hasher: Hash combiner used for every rebuild
            **tree_options: Forwarded to MerkleTree (use_parallel, parallel_threshold, ...)
        """
        self.hasher = hasher if hasher is not None else DEFAULT_HASHER
        self._tree_options = tree_options
        self._tree: Optional[MerkleTree] = None

        leaves = list(leaves)
        if leaves:
            self._tree = self._build(leaves)

    @classmethod
    def from_config(cls, config, leaves: Sequence[bytes] = ()) -> "MutableMerkleTree":
        """Create a handle using the hashing and builder sections of a HashtreeConfig."""
        return cls(
            leaves,
            hasher=MerkleHasher.from_config(config.hashing),
            use_parallel=config.builder.parallel_enabled,
            parallel_threshold=config.builder.parallel_threshold,
            max_workers=config.builder.max_workers,
            proof_cache_size=config.builder.proof_cache_size,
        )

    def _build(self, leaves: List[bytes]) -> MerkleTree:
        return MerkleTree.build_from(leaves, hasher=self.hasher, **self._tree_options)

    @property
    def tree(self) -> Optional[MerkleTree]:
        """The current tree, or None if no leaves have been added."""
        return self._tree

    @property
    def leaves(self) -> Tuple[bytes, ...]:
        """Source leaves of the current tree."""
        return self._tree.leaves if self._tree is not None else ()

    def add_leaves(self, new_leaves: Sequence[bytes]) -> MerkleTree:
        """
        Append leaves and rebuild the tree.

        Args:
            new_leaves: Leaves to append after the existing ones

        Returns:
            The newly built tree, which replaces the previous one

        Raises:
            EmptyInputError: If both the existing and the new leaf sets are empty
        """
        new_leaves = list(new_leaves)
        combined = list(self.leaves) + new_leaves

        if not combined:
            raise EmptyInputError("Cannot build Merkle tree: no existing or new leaves")

        previous_count = self.count_leaves()

        # Build before swapping so a failure keeps the previous tree
        tree = self._build(combined)
        self._tree = tree

        logger.debug(
            "merkle_tree_rebuilt",
            previous_leaf_count=previous_count,
            added_leaf_count=len(new_leaves),
            leaf_count=tree.count_leaves(),
        )

        return tree

    def get_root(self) -> bytes:
        """
        Get the root digest of the current tree.

        Raises:
            EmptyTreeError: If no leaves have been added yet
        """
        if self._tree is None:
            raise EmptyTreeError("Tree has not been built yet. Call add_leaves() first.")
        return self._tree.get_root()

    def count_leaves(self) -> int:
        """Number of leaves in the current tree (0 if none)."""
        return self._tree.count_leaves() if self._tree is not None else 0

    def leaf_digest(self, data: bytes) -> bytes:
        """Hash raw leaf bytes with this handle's leaf rule."""
        return self.hasher.leaf_digest(data)

    def contains_leaf(self, target: bytes) -> Optional[Tuple[MerkleProof, int]]:
        """
        Look up a leaf digest in the current tree.

        Returns:
            Tuple of (proof, leaf index), or None if absent or no tree exists
        """
        if self._tree is None:
            return None
        return self._tree.contains_leaf(target)

    def generate_proof(self, leaf_index: int) -> MerkleProof:
        """
        Generate a proof for a leaf index in the current tree.

        Raises:
            EmptyTreeError: If no leaves have been added yet
            LeafIndexError: If leaf_index is out of range
        """
        if self._tree is None:
            raise EmptyTreeError("Tree has not been built yet. Call add_leaves() first.")
        return self._tree.generate_proof(leaf_index)

    def __len__(self) -> int:
        return self.count_leaves()
