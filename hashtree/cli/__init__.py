"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Hashtree, a product of Garudex Labs

Command-line interface for Hashtree.
"""

from hashtree.cli.main import cli

__all__ = ["cli"]
