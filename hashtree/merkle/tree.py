"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Hashtree, a product of Garudex Labs

Merkle tree construction and proof generation.

This module implements a binary Merkle tree over an ordered sequence of
leaves. It supports:
- Tree construction from raw leaf bytes, keeping every layer
- Root lookup and leaf counting
- Membership lookup by leaf digest, returning a proof and the leaf index
- Proof generation for any leaf index
- Parallel layer construction for large trees

If a layer has an odd number of nodes, the last node is combined with
itself. Proof generation applies the same rule, so a duplicated node's
proof step carries its own digest as sibling.
"""

import concurrent.futures
import threading
import time
from typing import Dict, List, Optional, Sequence, Tuple

from hashtree.exceptions import EmptyInputError, LeafIndexError
from hashtree.logging_config import (
    get_logger,
    log_merkle_root_computation,
    log_proof_generation,
)
from hashtree.merkle.hasher import DEFAULT_HASHER, MerkleHasher
from hashtree.merkle.proof import MerkleProof, Position, ProofStep

logger = get_logger(__name__)

Layer = Tuple[bytes, ...]


class MerkleTree:
    """
    Binary Merkle tree with all layers kept in memory.

    The tree is built bottom-up from leaf digests. Each internal node is the
    combination of its two children, left then right. A trailing odd node is
    combined with itself. The tree is immutable once built; appending leaves
    means building a new tree (see MutableMerkleTree).

    Generated proofs are cached per leaf index. The cache is the only state
    written after construction and is guarded by a lock, so trees can be
    shared across threads.

    Example:
        >>> tree = MerkleTree.build_from([b"a", b"b", b"c"])
        >>> root = tree.get_root()
        >>> proof, index = tree.contains_leaf(tree.hasher.leaf_digest(b"b"))
        >>> index
        1
    """

    # Use parallel hashing for layers at least this long
    PARALLEL_THRESHOLD = 100

    MAX_WORKERS = 4

    # Proof cache size limit
    MAX_PROOF_CACHE_SIZE = 1000

    def __init__(
        self,
        leaves: Sequence[bytes],
        hasher: Optional[MerkleHasher] = None,
        use_parallel: bool = True,
        parallel_threshold: Optional[int] = None,
        max_workers: Optional[int] = None,
        proof_cache_size: Optional[int] = None,
    ):
        """
        Build Merkle tree from leaf data.

        Args:
            leaves: Ordered leaf data (hashed with the hasher's leaf rule)
            hasher: Hash combiner, defaults to sha256 without domain separation
            use_parallel: Enable parallel hashing for large layers (default: True)
            parallel_threshold: Minimum layer length for parallel hashing
            max_workers: Thread pool size for parallel hashing
            proof_cache_size: Maximum number of cached proofs (0 disables caching)

        Raises:
            EmptyInputError: If leaves is empty
            TypeError: If a leaf is not bytes
        """
        leaves = tuple(leaves)
        if not leaves:
            raise EmptyInputError("Cannot create Merkle tree from empty leaves list")

        for i, leaf in enumerate(leaves):
            if not isinstance(leaf, (bytes, bytearray, memoryview)):
                raise TypeError(
                    f"Leaf {i} must be bytes, got {type(leaf).__name__}"
                )

        self.hasher = hasher if hasher is not None else DEFAULT_HASHER
        self.parallel_threshold = (
            parallel_threshold if parallel_threshold is not None else self.PARALLEL_THRESHOLD
        )
        self.max_workers = max_workers if max_workers is not None else self.MAX_WORKERS
        self.proof_cache_size = (
            proof_cache_size if proof_cache_size is not None else self.MAX_PROOF_CACHE_SIZE
        )
        self.use_parallel = use_parallel and len(leaves) >= self.parallel_threshold

        self.leaves: Tuple[bytes, ...] = tuple(bytes(leaf) for leaf in leaves)

        start = time.perf_counter()
        self.layers: Tuple[Layer, ...] = self._build_layers()
        duration_ms = (time.perf_counter() - start) * 1000

        # Proofs are cached per leaf index; the tree never changes after build
        self._proof_cache: Dict[int, MerkleProof] = {}
        self._proof_cache_lock = threading.Lock()

        log_merkle_root_computation(
            logger,
            leaf_count=self.count_leaves(),
            merkle_root=self.get_root().hex(),
            duration_ms=round(duration_ms, 3),
            algorithm=self.hasher.algorithm,
            parallel=self.use_parallel,
        )

    @classmethod
    def build_from(
        cls,
        leaves: Sequence[bytes],
        hasher: Optional[MerkleHasher] = None,
        **options,
    ) -> "MerkleTree":
        """
        Build a tree from an ordered sequence of leaves.

        Args:
            leaves: Ordered leaf data
            hasher: Hash combiner shared with verifiers
            **options: use_parallel, parallel_threshold, max_workers, proof_cache_size

        Returns:
            Built MerkleTree

        Raises:
            EmptyInputError: If leaves is empty
        """
        return cls(leaves, hasher=hasher, **options)

    @classmethod
    def from_config(cls, leaves: Sequence[bytes], config) -> "MerkleTree":
        """Build a tree using the hashing and builder sections of a HashtreeConfig."""
        return cls(
            leaves,
            hasher=MerkleHasher.from_config(config.hashing),
            use_parallel=config.builder.parallel_enabled,
            parallel_threshold=config.builder.parallel_threshold,
            max_workers=config.builder.max_workers,
            proof_cache_size=config.builder.proof_cache_size,
        )

    def _map(self, func, items: List) -> List[bytes]:
        """Apply func over items, in a thread pool for large inputs."""
        if self.use_parallel and len(items) >= self.parallel_threshold:
            with concurrent.futures.ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                # executor.map preserves input order
                return list(executor.map(func, items))
        return [func(item) for item in items]

    def _next_layer(self, current_layer: Layer) -> Layer:
        """
        Combine consecutive pairs of a layer into its parent layer.

        Args:
            current_layer: Layer with at least two entries

        Returns:
            Parent layer with ceil(len(current_layer) / 2) entries
        """
        pairs = []
        for i in range(0, len(current_layer), 2):
            left = current_layer[i]
            # If odd number of nodes, duplicate the last one
            if i + 1 < len(current_layer):
                right = current_layer[i + 1]
            else:
                right = current_layer[i]
            pairs.append((left, right))

        combine = self.hasher.combine
        return tuple(self._map(lambda pair: combine(pair[0], pair[1]), pairs))

    def _build_layers(self) -> Tuple[Layer, ...]:
        """
        Build every layer bottom-up.

        layers[0] is the leaf digest layer and layers[-1] is the root layer
        (a single digest).

        Returns:
            Tuple of layers
        """
        current_layer: Layer = tuple(self._map(self.hasher.leaf_digest, list(self.leaves)))
        layers = [current_layer]

        while len(current_layer) > 1:
            current_layer = self._next_layer(current_layer)
            layers.append(current_layer)

        return tuple(layers)

    def get_root(self) -> bytes:
        """
        Get the Merkle root digest.

        Returns:
            Root digest of the tree
        """
        return self.layers[-1][0]

    def count_leaves(self) -> int:
        """Number of leaves in the tree."""
        return len(self.layers[0])

    @property
    def leaf_digests(self) -> Layer:
        """Layer 0: the leaf digests in tree order."""
        return self.layers[0]

    @property
    def depth(self) -> int:
        """Number of layers, leaf layer and root layer included."""
        return len(self.layers)

    def leaf_digest(self, data: bytes) -> bytes:
        """Hash raw leaf bytes with this tree's leaf rule."""
        return self.hasher.leaf_digest(data)

    def find_leaf(self, target: bytes) -> Optional[int]:
        """
        Find the index of the first leaf whose digest equals target.

        Args:
            target: Leaf digest to look for

        Returns:
            Leaf index, or None if no leaf has that digest
        """
        try:
            return self.layers[0].index(target)
        except ValueError:
            return None

    def contains_leaf(self, target: bytes) -> Optional[Tuple[MerkleProof, int]]:
        """
        Look up a leaf digest and prove its membership.

        Absence is an expected outcome and is signalled with None.

        Args:
            target: Leaf digest to look for

        Returns:
            Tuple of (proof, leaf index) for the first matching leaf, or None
        """
        index = self.find_leaf(target)
        if index is None:
            logger.debug("leaf_not_found", leaf_count=self.count_leaves())
            return None
        return self.generate_proof(index), index

    def generate_proof(self, leaf_index: int) -> MerkleProof:
        """
        Generate Merkle proof for a leaf at the given index.

        The proof consists of sibling digests along the path from leaf to
        root, with the side each sibling sits on.

        Args:
            leaf_index: Index of the leaf (0-based)

        Returns:
            MerkleProof with one step per layer below the root

        Raises:
            LeafIndexError: If leaf_index is out of range
        """
        leaf_count = self.count_leaves()
        if (
            isinstance(leaf_index, bool)
            or not isinstance(leaf_index, int)
            or leaf_index < 0
            or leaf_index >= leaf_count
        ):
            raise LeafIndexError(f"Leaf index {leaf_index} out of range [0, {leaf_count})")

        cached = self._proof_cache.get(leaf_index)
        if cached is not None:
            log_proof_generation(logger, leaf_index, len(cached), cached=True)
            return cached

        steps = []
        current_index = leaf_index

        # Traverse from leaf to root, excluding the root layer
        for current_layer in self.layers[:-1]:
            if current_index % 2 == 0:
                sibling_index = current_index + 1
            else:
                sibling_index = current_index - 1

            if sibling_index < len(current_layer):
                sibling = current_layer[sibling_index]
            else:
                # Duplicated trailing node, same as build logic
                sibling = current_layer[current_index]

            steps.append(ProofStep(sibling=sibling, position=Position.from_index(current_index)))
            current_index //= 2

        proof = MerkleProof(steps=tuple(steps))

        with self._proof_cache_lock:
            if len(self._proof_cache) < self.proof_cache_size:
                self._proof_cache.setdefault(leaf_index, proof)

        log_proof_generation(logger, leaf_index, len(proof), cached=False)

        return proof

    def __len__(self) -> int:
        return self.count_leaves()

    def __repr__(self) -> str:
        return (
            f"MerkleTree(leaves={self.count_leaves()}, "
            f"root={self.get_root().hex()}, hasher={self.hasher!r})"
        )
