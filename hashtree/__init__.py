"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Hashtree, a product of Garudex Labs

Hashtree - Binary Merkle tree commitments and inclusion proofs.

Hashtree builds a binary hash tree over an ordered collection of leaves,
exposes its root digest as a commitment to the whole collection, and
generates and verifies compact membership proofs for individual leaves.
"""

from hashtree._version import __version__

__all__ = ["__version__"]
