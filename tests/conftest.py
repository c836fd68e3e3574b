"""
Pytest Configuration and Fixtures

This module provides:
- A deterministic clock for ordering-sensitive tests
- Storage fixtures for every offline backend
- Shared engine and sample data fixtures
- Test category markers and a run summary
"""

import sys
from datetime import datetime, timedelta
from pathlib import Path
from threading import Lock

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from tests.test_config import CONFIG, TEST_DATA, get_sample_idea, get_all_sample_ideas

from ideaswipe.engine import IdeaEngine
from ideaswipe.models import IdeaDraft
from ideaswipe.storage import MemoryStorage, SQLiteStorage


# =============================================================================
# FAKE CLOCK
# =============================================================================

class FakeClock:
    """
    Returns strictly increasing timestamps, one second apart.

    Each call advances the clock, so ideas created in sequence get
    created_at values T1 < T2 < T3.
    """

    def __init__(self, start: datetime = None, step: timedelta = timedelta(seconds=1)):
        self.current = start or datetime.fromisoformat(CONFIG["clock_start"])
        self.step = step
        self._lock = Lock()

    def __call__(self) -> datetime:
        with self._lock:
            value = self.current
            self.current = self.current + self.step
            return value

    def freeze(self) -> None:
        """Stop advancing, so every later call returns the same instant."""
        self.step = timedelta(0)


# =============================================================================
# SHARED FIXTURES
# =============================================================================

@pytest.fixture
def clock():
    """Provide a fresh fake clock."""
    return FakeClock()


@pytest.fixture
def memory_storage(clock):
    """Provide an empty in-memory storage."""
    return MemoryStorage(clock=clock)


@pytest.fixture
def sqlite_storage(tmp_path, clock):
    """Provide an empty SQLite storage in a temporary file."""
    storage = SQLiteStorage(db_path=str(tmp_path / "ideaswipe.db"), clock=clock)
    yield storage
    storage.close()


@pytest.fixture(params=CONFIG["offline_backends"])
def storage(request, tmp_path, clock):
    """Provide each offline backend in turn."""
    if request.param == "memory":
        yield MemoryStorage(clock=clock)
    else:
        backend = SQLiteStorage(db_path=str(tmp_path / "ideaswipe.db"), clock=clock)
        yield backend
        backend.close()


@pytest.fixture
def engine(storage):
    """Provide an engine over each offline backend."""
    return IdeaEngine.from_storage(storage)


@pytest.fixture
def users():
    """Provide the named test user ids."""
    return dict(TEST_DATA["users"])


@pytest.fixture
def sample_payload():
    """Provide a single sample idea payload dict."""
    return get_sample_idea(0)


@pytest.fixture
def sample_payloads():
    """Provide all sample idea payload dicts."""
    return get_all_sample_ideas()


@pytest.fixture
def sample_draft(sample_payload):
    """Provide a single valid IdeaDraft."""
    return IdeaDraft(**sample_payload)


@pytest.fixture
def seeded_engine(engine, sample_payloads):
    """Provide an engine with the sample ideas submitted in order (oldest first)."""
    ideas = [engine.submit_idea(IdeaDraft(**payload)) for payload in sample_payloads]
    return engine, ideas


# =============================================================================
# MARKERS AND SUMMARY
# =============================================================================

_outcomes = {"passed": 0, "failed": 0, "skipped": 0}


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "idempotency: Duplicate prevention and repeat-safety tests"
    )
    config.addinivalue_line(
        "markers", "concurrency: Parallel upsert tests"
    )
    config.addinivalue_line(
        "markers", "cli_behavior: CLI interface tests"
    )
    config.addinivalue_line(
        "markers", "config_validation: Configuration validation tests"
    )


def pytest_runtest_logreport(report):
    """Count outcomes of the test call phase."""
    if report.when == "call" and report.outcome in _outcomes:
        _outcomes[report.outcome] += 1
    elif report.when == "setup" and report.skipped:
        _outcomes["skipped"] += 1


def pytest_terminal_summary(terminalreporter, exitstatus, config):
    """Print a one-line pass rate after the run."""
    total = sum(_outcomes.values())
    rate = _outcomes["passed"] / max(total, 1) * 100
    terminalreporter.write_sep("=", "IDEA SWIPE TEST SUMMARY")
    terminalreporter.write_line(
        f"Total: {total} | Passed: {_outcomes['passed']} | "
        f"Failed: {_outcomes['failed']} | Skipped: {_outcomes['skipped']} | "
        f"Pass Rate: {rate:.1f}%"
    )
