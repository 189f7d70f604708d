"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Hashtree, a product of Garudex Labs

Exception hierarchy for Hashtree.

All custom exceptions inherit from HashtreeError base class.
"""


class HashtreeError(Exception):
    """Base exception for all Hashtree errors."""
    pass


# Tree Errors
class TreeError(HashtreeError):
    """Base exception for tree construction and lookup errors."""
    pass


class EmptyInputError(TreeError, ValueError):
    """Raised when a tree would be built over zero leaves."""
    pass


class EmptyTreeError(TreeError):
    """Raised when the root is requested from a handle that holds no tree."""
    pass


class LeafIndexError(TreeError, ValueError):
    """Raised when a proof is requested for a leaf index that is out of range."""
    pass


# Hashing Errors
class HashingError(HashtreeError):
    """Base exception for hashing-related errors."""
    pass


class UnsupportedAlgorithmError(HashingError, ValueError):
    """Raised when an unknown digest algorithm is requested."""
    pass


# Proof Errors
class ProofError(HashtreeError):
    """Base exception for proof-related errors."""
    pass


class ProofDecodeError(ProofError, ValueError):
    """Raised when a serialized proof is malformed."""
    pass


# Configuration Errors
class ConfigurationError(HashtreeError):
    """Base exception for configuration-related errors."""
    pass


class InvalidConfigurationError(ConfigurationError):
    """Raised when configuration is invalid or malformed."""
    pass
