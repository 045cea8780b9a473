"""
Pytest configuration and shared fixtures for sparse Merkle tree tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Provides commonly-used tree fixtures via pytest's autodiscovery
3. Configures pytest markers
"""

import os
import sys
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

_PROJECT_ROOT = Path(__file__).resolve().parent.parent

if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))

from sparse_merkle.crypto.hashing import sha256_hex_hash, sha256_int_hash  # noqa: E402
from sparse_merkle.merkle import SparseMerkleTree  # noqa: E402


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture
def hex_tree():
    """Empty string-mode tree of depth 8 using sha256."""
    return SparseMerkleTree(sha256_hex_hash, 8)


@pytest.fixture
def int_tree():
    """Empty big-number tree of depth 16 using sha256."""
    return SparseMerkleTree(sha256_int_hash, 16, big_numbers=True)


@pytest.fixture
def scenario_tree():
    """Empty string-mode tree of depth 3, as used by the worked example."""
    return SparseMerkleTree(sha256_hex_hash, 3)


@pytest.fixture
def populated_hex_tree(hex_tree):
    """Depth-8 tree holding a handful of entries."""
    for key, value in [("2b", "44"), ("16", "78"), ("d", "e7"), ("10", "141"), ("20", "340")]:
        hex_tree.add(key, value)
    return hex_tree


@pytest.fixture(autouse=True)
def _isolate_smt_env(monkeypatch):
    """Keep SMT_* variables from the developer's shell out of tests."""
    for name in list(os.environ):
        if name.startswith("SMT_"):
            monkeypatch.delenv(name, raising=False)


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
