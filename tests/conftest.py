#!/usr/bin/env python3
"""Shared pytest fixtures for jsonshape test suite."""

import pytest
import pathlib
import sys

# Add parent directory to path for imports
sys.path.insert(0, str(pathlib.Path(__file__).parent.parent))

from tests.fixtures.generate_test_data import (
    generate_flat_jsonl,
    generate_nested_jsonl,
    generate_corrupted_jsonl,
    generate_mixed_jsonl,
    generate_unicode_jsonl,
)
from tests.fixtures.fakes import FakeProbe


# ============================================================================
# File Fixtures
# ============================================================================

@pytest.fixture
def example_line() -> str:
    return '{"a":"hi","b":12,"c":{"a":"a string longer than ten chars"}}\n'


@pytest.fixture
def example_file(tmp_path, example_line) -> pathlib.Path:
    jsonl_file = tmp_path / "example.jsonl"
    jsonl_file.write_text(example_line)
    return jsonl_file


@pytest.fixture
def empty_file(tmp_path) -> pathlib.Path:
    jsonl_file = tmp_path / "empty.jsonl"
    jsonl_file.write_text('')
    return jsonl_file


@pytest.fixture
def flat_jsonl_file(tmp_path) -> pathlib.Path:
    """A 500-line flat file."""
    jsonl_file = tmp_path / "flat.jsonl"
    generate_flat_jsonl(500, str(jsonl_file))
    return jsonl_file


@pytest.fixture
def nested_jsonl_file(tmp_path) -> pathlib.Path:
    jsonl_file = tmp_path / "nested.jsonl"
    generate_nested_jsonl(5, 20, str(jsonl_file))
    return jsonl_file


@pytest.fixture
def mixed_jsonl_file(tmp_path) -> pathlib.Path:
    jsonl_file = tmp_path / "mixed.jsonl"
    generate_mixed_jsonl(300, str(jsonl_file))
    return jsonl_file


@pytest.fixture
def unicode_jsonl_file(tmp_path) -> pathlib.Path:
    jsonl_file = tmp_path / "unicode.jsonl"
    generate_unicode_jsonl(50, str(jsonl_file))
    return jsonl_file


@pytest.fixture
def corrupted_jsonl_file(tmp_path) -> pathlib.Path:
    """Twenty lines, the seventh truncated."""
    jsonl_file = tmp_path / "corrupted.jsonl"
    generate_corrupted_jsonl(20, 7, str(jsonl_file))
    return jsonl_file


# ============================================================================
# Probe Fixtures
# ============================================================================

@pytest.fixture
def fake_probe():
    return FakeProbe()


# ============================================================================
# Environment Fixtures
# ============================================================================

@pytest.fixture
def clean_environment(monkeypatch):
    """Ensure a clean environment for tests."""
    for var in ['JSONSHAPE_INPUT', 'JSONSHAPE_BACKEND', 'JSONSHAPE_STRING_THRESHOLD',
                'JSONSHAPE_SETTLE_SECONDS', 'JSONSHAPE_LOG_LEVEL', 'DEBUG']:
        monkeypatch.delenv(var, raising=False)
    yield


# ============================================================================
# Performance Testing Fixtures
# ============================================================================

@pytest.fixture
def memory_profiler():
    """Profile memory usage of a call, in MiB."""
    from memory_profiler import memory_usage

    def profile_memory(func, *args, **kwargs):
        mem_usage, result = memory_usage((func, args, kwargs), retval=True, interval=0.01)
        return {
            "result": result,
            "min": min(mem_usage),
            "max": max(mem_usage),
        }

    return profile_memory


# ============================================================================
# Test Markers
# ============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow")
    config.addinivalue_line("markers", "integration: marks integration tests")
    config.addinivalue_line("markers", "benchmark: marks benchmark tests")
