"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Hashtree, a product of Garudex Labs

Configuration management for Hashtree.

Handles loading and validation of configuration files.
"""

from hashtree.config.settings import (
    BuilderConfig,
    HashingConfig,
    HashtreeConfig,
    LoggingConfig,
    get_default_config,
    get_default_config_path,
    load_config,
)

__all__ = [
    "BuilderConfig",
    "HashingConfig",
    "HashtreeConfig",
    "LoggingConfig",
    "get_default_config",
    "get_default_config_path",
    "load_config",
]
