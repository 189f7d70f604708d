"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Hashtree, a product of Garudex Labs

Configuration management for Hashtree.

Loads YAML configuration from file with sensible defaults and validation.
Supports environment variable substitution using ${ENV_VAR} syntax.
"""

import os
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import yaml

from hashtree.exceptions import InvalidConfigurationError, UnsupportedAlgorithmError
from hashtree.logging_config import get_logger
from hashtree.merkle.hasher import DEFAULT_ALGORITHM, get_digest_function

logger = get_logger(__name__)

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
VALID_LOG_FORMATS = ("console", "json")


def _expand_env_vars(value: Any) -> Any:
    """
    Recursively expand environment variables in configuration values.

    Supports ${ENV_VAR} syntax with optional default values: ${ENV_VAR:default}

    Args:
        value: Configuration value (string, dict, list, or other)

    Returns:
        Value with environment variables expanded

    Examples:
        "${HASHTREE_ALGORITHM}" -> value of HASHTREE_ALGORITHM env var
        "${HASHTREE_ALGORITHM:sha256}" -> value of HASHTREE_ALGORITHM or "sha256" if not set
    """
    if isinstance(value, str):
        pattern = r'\$\{([^}:]+)(?::([^}]*))?\}'

        def replace_env_var(match):
            var_name = match.group(1)
            default_value = match.group(2) if match.group(2) is not None else ""
            return os.environ.get(var_name, default_value)

        return re.sub(pattern, replace_env_var, value)
    elif isinstance(value, dict):
        return {k: _expand_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [_expand_env_vars(item) for item in value]
    else:
        return value


def _as_bool(value: Any, name: str) -> bool:
    """Coerce YAML booleans and env-expanded strings to bool."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "yes", "on", "1"):
        return True
    if isinstance(value, str) and value.strip().lower() in ("false", "no", "off", "0", ""):
        return False
    raise InvalidConfigurationError(f"{name} must be a boolean, got {value!r}")


def _as_int(value: Any, name: str) -> int:
    """Coerce YAML integers and env-expanded strings to int."""
    if isinstance(value, bool):
        raise InvalidConfigurationError(f"{name} must be an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise InvalidConfigurationError(f"{name} must be an integer, got {value!r}")


@dataclass
class HashingConfig:
    """Digest primitive and leaf/pair hashing rules."""

    algorithm: str = DEFAULT_ALGORITHM  # sha256, sha3_256, blake2b, keccak256
    domain_separation: bool = False  # Prefix leaves with 0x00 and pairs with 0x01


@dataclass
class BuilderConfig:
    """Tree builder tuning."""

    parallel_enabled: bool = True
    parallel_threshold: int = 100  # Minimum layer length for thread-pool hashing
    max_workers: int = 4
    proof_cache_size: int = 1000  # 0 disables proof caching


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    file: str = ""
    format: str = "console"  # "console" or "json"


@dataclass
class HashtreeConfig:
    """Main Hashtree configuration."""

    hashing: HashingConfig = field(default_factory=HashingConfig)
    builder: BuilderConfig = field(default_factory=BuilderConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def get_default_config_path() -> str:
    """Get the default configuration file path."""
    return os.path.expanduser("~/.hashtree/config.yaml")


def get_default_config() -> HashtreeConfig:
    """
    Get default configuration with sensible defaults.

    Returns:
        HashtreeConfig: Default configuration object
    """
    return HashtreeConfig()


def load_config(config_path: Optional[str] = None) -> HashtreeConfig:
    """
    Load configuration from YAML file with validation.

    If config file is not found, returns default configuration.
    If config file is malformed or invalid, raises InvalidConfigurationError.

    Args:
        config_path: Path to configuration file. If None, uses default path.

    Returns:
        HashtreeConfig: Loaded and validated configuration

    Raises:
        InvalidConfigurationError: If configuration is invalid or malformed
    """
    if config_path is None:
        config_path = get_default_config_path()

    config_path = os.path.expanduser(str(config_path))

    if not os.path.exists(config_path):
        logger.debug("config_not_found", path=config_path)
        return get_default_config()

    try:
        with open(config_path, 'r') as f:
            config_data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger.error("config_parse_failed", path=config_path, error=str(e))
        raise InvalidConfigurationError(
            f"Failed to parse YAML configuration file '{config_path}': {e}"
        ) from e
    except OSError as e:
        logger.error("config_read_failed", path=config_path, error=str(e))
        raise InvalidConfigurationError(
            f"Failed to read configuration file '{config_path}': {e}"
        ) from e

    if config_data is None:
        logger.debug("config_empty", path=config_path)
        return get_default_config()

    if not isinstance(config_data, dict):
        raise InvalidConfigurationError(
            f"Invalid configuration in '{config_path}': top level must be a mapping"
        )

    config_data = _expand_env_vars(config_data)

    try:
        config = _build_config_from_dict(config_data)
        _validate_config(config)
    except InvalidConfigurationError as e:
        logger.error("config_invalid", path=config_path, error=str(e))
        raise InvalidConfigurationError(
            f"Invalid configuration in '{config_path}': {e}"
        ) from e

    logger.debug("config_loaded", path=config_path)
    return config


def _section(config_data: Dict[str, Any], name: str) -> Dict[str, Any]:
    section = config_data.get(name) or {}
    if not isinstance(section, dict):
        raise InvalidConfigurationError(f"'{name}' section must be a mapping")
    return section


def _build_config_from_dict(config_data: Dict[str, Any]) -> HashtreeConfig:
    """
    Build HashtreeConfig from dictionary loaded from YAML.

    Merges user configuration with defaults.

    Args:
        config_data: Dictionary loaded from YAML file

    Returns:
        HashtreeConfig: Configuration object

    Raises:
        InvalidConfigurationError: If a value has the wrong type
    """
    default_config = get_default_config()

    hashing_data = _section(config_data, 'hashing')
    hashing = HashingConfig(
        algorithm=str(hashing_data.get('algorithm', default_config.hashing.algorithm)),
        domain_separation=_as_bool(
            hashing_data.get('domain_separation', default_config.hashing.domain_separation),
            'hashing.domain_separation',
        ),
    )

    builder_data = _section(config_data, 'builder')
    builder = BuilderConfig(
        parallel_enabled=_as_bool(
            builder_data.get('parallel_enabled', default_config.builder.parallel_enabled),
            'builder.parallel_enabled',
        ),
        parallel_threshold=_as_int(
            builder_data.get('parallel_threshold', default_config.builder.parallel_threshold),
            'builder.parallel_threshold',
        ),
        max_workers=_as_int(
            builder_data.get('max_workers', default_config.builder.max_workers),
            'builder.max_workers',
        ),
        proof_cache_size=_as_int(
            builder_data.get('proof_cache_size', default_config.builder.proof_cache_size),
            'builder.proof_cache_size',
        ),
    )

    logging_data = _section(config_data, 'logging')
    logging = LoggingConfig(
        level=str(logging_data.get('level', default_config.logging.level)).upper(),
        file=os.path.expanduser(str(logging_data.get('file', default_config.logging.file) or "")),
        format=str(logging_data.get('format', default_config.logging.format)).lower(),
    )

    return HashtreeConfig(hashing=hashing, builder=builder, logging=logging)


def _validate_config(config: HashtreeConfig) -> None:
    """
    Validate configuration values.

    Raises:
        InvalidConfigurationError: If any value is out of range
    """
    try:
        get_digest_function(config.hashing.algorithm)
    except UnsupportedAlgorithmError as e:
        raise InvalidConfigurationError(str(e)) from e

    if config.builder.parallel_threshold < 1:
        raise InvalidConfigurationError(
            f"builder.parallel_threshold must be at least 1, got {config.builder.parallel_threshold}"
        )
    if config.builder.max_workers < 1:
        raise InvalidConfigurationError(
            f"builder.max_workers must be at least 1, got {config.builder.max_workers}"
        )
    if config.builder.proof_cache_size < 0:
        raise InvalidConfigurationError(
            f"builder.proof_cache_size must be non-negative, got {config.builder.proof_cache_size}"
        )

    if config.logging.level not in VALID_LOG_LEVELS:
        raise InvalidConfigurationError(
            f"logging.level must be one of {', '.join(VALID_LOG_LEVELS)}, got {config.logging.level!r}"
        )
    if config.logging.format not in VALID_LOG_FORMATS:
        raise InvalidConfigurationError(
            f"logging.format must be one of {', '.join(VALID_LOG_FORMATS)}, got {config.logging.format!r}"
        )
