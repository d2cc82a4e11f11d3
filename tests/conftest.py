"""
Pytest Configuration and Fixtures

This module provides:
- Shared fixtures for all tests (sample ideas, storages, stores, clock)
- Test category markers
"""

import json
import sys
from datetime import datetime, timedelta
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

# Import test configuration
from tests.test_config import (
    CONFIG, EXPECTED, TEST_DATA, MESSAGES, get_all_sample_ideas,
)
from tests.fakes import FakeClock, SequentialIds

from braindrop.models import idea_from_dict
from braindrop.storage import JsonFileStorage, MemoryStorage
from braindrop.store import IdeaStore


# =============================================================================
# SHARED FIXTURES
# =============================================================================

@pytest.fixture
def clock():
    """A FakeClock advancing one step per call."""
    return FakeClock(
        start=datetime.fromisoformat(CONFIG["clock_start"]),
        step=timedelta(seconds=CONFIG["clock_step_seconds"]),
    )


@pytest.fixture
def sample_dicts():
    """Persisted-form sample ideas."""
    return get_all_sample_ideas()


@pytest.fixture
def sample_ideas(sample_dicts):
    """Decoded sample ideas."""
    return [idea_from_dict(data) for data in sample_dicts]


@pytest.fixture
def memory_storage():
    """An empty MemoryStorage."""
    return MemoryStorage()


@pytest.fixture
def seeded_storage(sample_dicts):
    """A MemoryStorage holding the sample ideas."""
    return MemoryStorage(blob=json.dumps(sample_dicts))


@pytest.fixture
def file_storage(tmp_path):
    """A JsonFileStorage in a temporary directory."""
    return JsonFileStorage(data_dir=tmp_path / "data", slot=CONFIG["default_slot"])


@pytest.fixture
def store(memory_storage, clock):
    """An initialized, empty IdeaStore over memory storage."""
    idea_store = IdeaStore(memory_storage, clock=clock, id_factory=SequentialIds())
    idea_store.initialize()
    return idea_store


@pytest.fixture
def seeded_store(seeded_storage, clock):
    """An initialized IdeaStore holding the sample ideas."""
    idea_store = IdeaStore(seeded_storage, clock=clock, id_factory=SequentialIds())
    idea_store.initialize()
    return idea_store


@pytest.fixture
def test_data():
    """Provide access to test data."""
    return TEST_DATA


@pytest.fixture
def expected_values():
    """Provide access to expected values."""
    return EXPECTED


# =============================================================================
# MARKERS FOR TEST CATEGORIES
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "config_validation: Configuration validation tests"
    )
    config.addinivalue_line(
        "markers", "cli_behavior: CLI interface tests"
    )
    config.addinivalue_line(
        "markers", "scenarios: End-to-end store and query scenarios"
    )
