"""
Unit tests for configuration management.
"""

import os
from pathlib import Path

import pytest

from hashtree.config.settings import (
    BuilderConfig,
    HashingConfig,
    HashtreeConfig,
    LoggingConfig,
    get_default_config,
    get_default_config_path,
    load_config,
)
from hashtree.exceptions import ConfigurationError, InvalidConfigurationError


class TestDefaultConfig:
    """Test default configuration."""
    
    def test_default_config_path(self):
        """Test that the default path lives under the user's home directory."""
        path = get_default_config_path()
        assert path.endswith(os.path.join(".hashtree", "config.yaml"))
        assert "~" not in path
    
    def test_default_config_values(self):
        """Test default values of every section."""
        config = get_default_config()
        
        assert isinstance(config, HashtreeConfig)
        assert config.hashing == HashingConfig(algorithm="sha256", domain_separation=False)
        assert config.builder == BuilderConfig(
            parallel_enabled=True,
            parallel_threshold=100,
            max_workers=4,
            proof_cache_size=1000,
        )
        assert config.logging == LoggingConfig(level="INFO", file="", format="console")


class TestLoadConfig:
    """Test loading configuration from YAML files."""
    
    def test_missing_file_returns_defaults(self, temp_dir: Path):
        """Test that a missing config file falls back to defaults."""
        config = load_config(str(temp_dir / "missing.yaml"))
        assert config == get_default_config()
    
    def test_empty_file_returns_defaults(self, temp_dir: Path):
        """Test that an empty config file falls back to defaults."""
        config_path = temp_dir / "empty.yaml"
        config_path.write_text("")
        
        assert load_config(str(config_path)) == get_default_config()
    
    def test_load_sample_config(self, sample_config_path: Path, temp_dir: Path):
        """Test loading a complete configuration file."""
        config = load_config(str(sample_config_path))
        
        assert config.hashing.algorithm == "sha256"
        assert config.hashing.domain_separation is False
        assert config.builder.max_workers == 2
        assert config.builder.proof_cache_size == 16
        assert config.logging.file == f"{temp_dir}/hashtree.log"
        assert config.logging.format == "json"
    
    def test_partial_config_merges_defaults(self, temp_dir: Path):
        """Test that missing sections and keys take default values."""
        config_path = temp_dir / "partial.yaml"
        config_path.write_text("hashing:\n  algorithm: KECCAK256\n")
        
        config = load_config(str(config_path))
        
        assert config.hashing.algorithm == "KECCAK256"
        assert config.builder == BuilderConfig()
        assert config.logging == LoggingConfig()
    
    def test_env_var_expansion(self, temp_dir: Path, monkeypatch):
        """Test ${VAR} and ${VAR:default} substitution."""
        monkeypatch.setenv("HASHTREE_TEST_ALGORITHM", "blake2b")
        monkeypatch.delenv("HASHTREE_TEST_WORKERS", raising=False)
        config_path = temp_dir / "env.yaml"
        config_path.write_text(
            "hashing:\n"
            "  algorithm: ${HASHTREE_TEST_ALGORITHM}\n"
            "builder:\n"
            "  max_workers: ${HASHTREE_TEST_WORKERS:8}\n"
            "  parallel_enabled: ${HASHTREE_TEST_PARALLEL:false}\n"
        )
        
        config = load_config(str(config_path))
        
        assert config.hashing.algorithm == "blake2b"
        assert config.builder.max_workers == 8
        assert config.builder.parallel_enabled is False
    
    def test_log_level_and_format_normalized(self, make_config_yaml):
        """Test that level is upper-cased and format lower-cased."""
        config = load_config(str(make_config_yaml(level="debug", format="JSON")))
        
        assert config.logging.level == "DEBUG"
        assert config.logging.format == "json"


class TestInvalidConfig:
    """Test configuration validation errors."""
    
    def test_invalid_yaml(self, temp_dir: Path):
        """Test that malformed YAML raises InvalidConfigurationError."""
        config_path = temp_dir / "bad.yaml"
        config_path.write_text("hashing: [unclosed\n")
        
        with pytest.raises(InvalidConfigurationError, match="Failed to parse YAML"):
            load_config(str(config_path))
    
    def test_non_mapping_top_level(self, temp_dir: Path):
        """Test that a YAML list is rejected."""
        config_path = temp_dir / "list.yaml"
        config_path.write_text("- a\n- b\n")
        
        with pytest.raises(InvalidConfigurationError, match="top level must be a mapping"):
            load_config(str(config_path))
    
    def test_non_mapping_section(self, temp_dir: Path):
        """Test that a scalar section is rejected."""
        config_path = temp_dir / "section.yaml"
        config_path.write_text("builder: 5\n")
        
        with pytest.raises(InvalidConfigurationError, match="'builder' section must be a mapping"):
            load_config(str(config_path))
    
    def test_unknown_algorithm(self, make_config_yaml):
        """Test that an unknown digest algorithm is rejected."""
        with pytest.raises(InvalidConfigurationError, match="Unsupported digest algorithm 'md5'"):
            load_config(str(make_config_yaml(algorithm="md5")))
    
    def test_invalid_log_level(self, make_config_yaml):
        with pytest.raises(InvalidConfigurationError, match="logging.level"):
            load_config(str(make_config_yaml(level="LOUD")))
    
    def test_invalid_log_format(self, make_config_yaml):
        with pytest.raises(InvalidConfigurationError, match="logging.format"):
            load_config(str(make_config_yaml(format="xml")))
    
    def test_invalid_parallel_threshold(self, make_config_yaml):
        with pytest.raises(InvalidConfigurationError, match="parallel_threshold must be at least 1"):
            load_config(str(make_config_yaml(parallel_threshold=0)))
    
    @pytest.mark.parametrize(
        "body,message",
        [
            ("builder:\n  max_workers: 0\n", "max_workers must be at least 1"),
            ("builder:\n  proof_cache_size: -1\n", "proof_cache_size must be non-negative"),
            ("builder:\n  max_workers: many\n", "max_workers must be an integer"),
            ("builder:\n  max_workers: true\n", "max_workers must be an integer"),
            ("hashing:\n  domain_separation: maybe\n", "domain_separation must be a boolean"),
        ],
    )
    def test_invalid_values(self, temp_dir: Path, body, message):
        """Test out-of-range and mistyped values."""
        config_path = temp_dir / "invalid.yaml"
        config_path.write_text(body)
        
        with pytest.raises(InvalidConfigurationError, match=message) as exc_info:
            load_config(str(config_path))
        
        assert str(config_path) in str(exc_info.value)
    
    def test_error_hierarchy(self):
        """Test that invalid configuration is a configuration error."""
        assert issubclass(InvalidConfigurationError, ConfigurationError)
