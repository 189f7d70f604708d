"""
Unit tests for structured logging configuration.
"""

import json
import logging
from pathlib import Path

import pytest

from hashtree.logging_config import (
    clear_correlation_id,
    get_correlation_id,
    get_logger,
    log_merkle_root_computation,
    log_merkle_verification,
    log_proof_generation,
    set_correlation_id,
    setup_logging,
)
from hashtree.merkle.tree import MerkleTree
from hashtree.merkle.verifier import MerkleVerifier


def _read_json_lines(log_file: Path):
    return [json.loads(line) for line in log_file.read_text().splitlines() if line.strip()]


class TestLoggingConfiguration:
    """Test structured logging configuration functionality."""
    
    def test_setup_logging_default(self):
        """Test setup_logging with default parameters."""
        setup_logging()
        
        logger = get_logger("test")
        assert hasattr(logger, 'info') and hasattr(logger, 'warning') and hasattr(logger, 'error')
    
    def test_setup_logging_with_level(self):
        """Test setup_logging with custom log level."""
        setup_logging(level="DEBUG")
        
        assert logging.getLogger().level == logging.DEBUG
    
    def test_setup_logging_with_file(self, temp_dir: Path):
        """Test setup_logging with log file."""
        log_file = temp_dir / "logs" / "test.log"
        setup_logging(level="INFO", log_file=log_file, json_format=False)
        
        get_logger("test").info("test_message", key="value")
        
        assert log_file.exists()
        assert "test_message" in log_file.read_text()
    
    def test_setup_logging_json_format(self, temp_dir: Path):
        """Test setup_logging with JSON format."""
        log_file = temp_dir / "test.log"
        setup_logging(level="INFO", log_file=log_file, json_format=True)
        
        get_logger("test").info("json_message", key="value")
        
        entries = _read_json_lines(log_file)
        assert entries[-1]["event"] == "json_message"
        assert entries[-1]["key"] == "value"
        assert entries[-1]["level"] == "info"
        assert entries[-1]["logger"] == "hashtree.test"
        assert "timestamp" in entries[-1]
    
    def test_level_filters_debug(self, temp_dir: Path):
        """Test that debug events are dropped at INFO level."""
        log_file = temp_dir / "test.log"
        setup_logging(level="INFO", log_file=log_file)
        
        get_logger("test").debug("hidden")
        
        assert "hidden" not in log_file.read_text()
    
    def test_get_logger_prefix(self):
        """Test that logger names are placed under the hashtree namespace once."""
        setup_logging()
        
        assert get_logger("hashtree.merkle.tree") is not None
        assert get_logger("other") is not None


class TestCorrelationId:
    """Test correlation ID propagation."""
    
    def test_set_and_clear(self):
        """Test setting, reading and clearing the correlation ID."""
        cid = set_correlation_id("abc-123")
        
        assert cid == "abc-123"
        assert get_correlation_id() == "abc-123"
        
        clear_correlation_id()
        assert get_correlation_id() is None
    
    def test_generated_id(self):
        """Test that a UUID is generated when none is given."""
        cid = set_correlation_id()
        try:
            assert len(cid) == 36
            assert get_correlation_id() == cid
        finally:
            clear_correlation_id()
    
    def test_correlation_id_in_output(self, temp_dir: Path):
        """Test that the correlation ID is attached to log events."""
        log_file = temp_dir / "test.log"
        setup_logging(level="INFO", log_file=log_file)
        set_correlation_id("trace-42")
        try:
            get_logger("test").info("traced")
        finally:
            clear_correlation_id()
        
        assert _read_json_lines(log_file)[-1]["correlation_id"] == "trace-42"


class TestEventHelpers:
    """Test the Merkle event logging helpers."""
    
    @pytest.fixture
    def log_file(self, temp_dir: Path) -> Path:
        path = temp_dir / "events.log"
        setup_logging(level="DEBUG", log_file=path)
        return path
    
    def test_root_computation(self, log_file: Path):
        log_merkle_root_computation(get_logger("test"), leaf_count=3, merkle_root="ab", duration_ms=1.5)
        
        entry = _read_json_lines(log_file)[-1]
        assert entry["event"] == "merkle_root_computation"
        assert entry["level"] == "debug"
        assert entry["leaf_count"] == 3
    
    def test_proof_generation(self, log_file: Path):
        log_proof_generation(get_logger("test"), leaf_index=2, proof_length=3, cached=True)
        
        entry = _read_json_lines(log_file)[-1]
        assert entry["event"] == "proof_generation"
        assert entry["cached"] is True
    
    def test_verification_success_and_failure(self, log_file: Path):
        logger = get_logger("test")
        log_merkle_verification(logger, success=True, duration_ms=0.1)
        log_merkle_verification(logger, success=False, duration_ms=0.1, failure_reason="root_mismatch")
        
        success, failure = _read_json_lines(log_file)[-2:]
        assert success["event"] == "merkle_verification"
        assert success["level"] == "info"
        assert "failure_reason" not in success
        assert failure["event"] == "merkle_verification_failed"
        assert failure["level"] == "warning"
        assert failure["failure_reason"] == "root_mismatch"
    
    def test_tree_and_verifier_emit_events(self, log_file: Path):
        """Test that building, proving and verifying are logged without leaf contents."""
        tree = MerkleTree([b"secret-a", b"secret-b", b"secret-c"])
        proof, index = tree.contains_leaf(tree.leaf_digest(b"secret-b"))
        MerkleVerifier().verify(proof, tree.get_root(), tree.leaf_digest(b"secret-c"), index)
        
        content = log_file.read_text()
        events = [entry["event"] for entry in _read_json_lines(log_file)]
        assert "merkle_root_computation" in events
        assert "proof_generation" in events
        assert "merkle_verification_failed" in events
        assert "secret" not in content
