"""
Pytest configuration and shared fixtures for Hashtree tests.
"""

import logging
import tempfile
from pathlib import Path
from typing import Generator

import pytest
import structlog


def create_test_config_content(temp_dir: Path, **overrides) -> str:
    """
    Generate test configuration YAML content.
    
    Args:
        temp_dir: Temporary directory for the log file.
        **overrides: algorithm, domain_separation, parallel_threshold, level, format
        
    Returns:
        YAML configuration content as string.
    """
    algorithm = overrides.get("algorithm", "sha256")
    domain_separation = str(overrides.get("domain_separation", False)).lower()
    parallel_threshold = overrides.get("parallel_threshold", 100)
    level = overrides.get("level", "INFO")
    log_format = overrides.get("format", "json")
    
    return f"""
hashing:
  algorithm: {algorithm}
  domain_separation: {domain_separation}

builder:
  parallel_enabled: true
  parallel_threshold: {parallel_threshold}
  max_workers: 2
  proof_cache_size: 16

logging:
  level: {level}
  file: {temp_dir}/hashtree.log
  format: {log_format}
"""


@pytest.fixture(autouse=True)
def reset_logging() -> Generator[None, None, None]:
    """Drop handlers and structlog configuration installed by a test."""
    yield
    logging.getLogger().handlers.clear()
    structlog.reset_defaults()


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """
    Create a temporary directory for test files.
    
    Yields:
        Path to temporary directory that is cleaned up after test.
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sample_config_path(temp_dir: Path) -> Path:
    """
    Create a sample configuration file for testing.
    
    Returns:
        Path to sample config file.
    """
    config_path = temp_dir / "config.yaml"
    config_path.write_text(create_test_config_content(temp_dir))
    return config_path


@pytest.fixture
def make_config_yaml(temp_dir: Path):
    """
    Factory fixture that writes a config file with the given overrides.
    
    Usage:
        def test_something(make_config_yaml):
            config_path = make_config_yaml(algorithm="keccak256")
    """
    def _make_config(**overrides) -> Path:
        config_path = temp_dir / "config.yaml"
        config_path.write_text(create_test_config_content(temp_dir, **overrides))
        return config_path
    return _make_config


@pytest.fixture
def leaves_file(temp_dir: Path) -> Path:
    """Leaf file with one leaf per line."""
    path = temp_dir / "leaves.txt"
    path.write_text("alpha\nbeta\ngamma\ndelta\nepsilon\n")
    return path
