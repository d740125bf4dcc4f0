"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import random
import sys
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from mathpath.curriculum import ProblemConfig, build_curriculum, default_curriculum
from mathpath.db.database import create_db_engine
from mathpath.db.store import InMemoryProgressStore, SqlProgressStore


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")
    config.addinivalue_line("markers", "slow: Slow tests")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def rng():
    """Seeded random source so generated exercises are reproducible."""
    return random.Random(1234)


def _make_config(op, operand1, operand2, **constraints):
    """Build a ProblemConfig the way curriculum JSON spells it."""
    return ProblemConfig.model_validate({
        "type": op,
        "operand1Range": list(operand1),
        "operand2Range": list(operand2),
        "constraints": constraints,
    })


@pytest.fixture
def addition_config():
    return _make_config("addition", (1, 9), (1, 9), sumMax=10)


@pytest.fixture
def subtraction_config():
    return _make_config("subtraction", (2, 10), (1, 10))


@pytest.fixture
def multiplication_config():
    return _make_config("multiplication", (1, 9), (1, 9))


@pytest.fixture
def division_config():
    return _make_config("division", (1, 12), (2, 9))


@pytest.fixture
def single_fact_config():
    """Config that can only ever produce 3 + 4."""
    return _make_config("addition", (3, 3), (4, 4))


@pytest.fixture
def curriculum():
    return default_curriculum()


@pytest.fixture
def chain_curriculum():
    """Three skills chained A -> B -> C."""
    def skill(skill_id, prerequisite):
        return {
            "id": skill_id,
            "name": skill_id.upper(),
            "prerequisite": prerequisite,
            "problemConfig": {
                "type": "addition",
                "operand1Range": [1, 5],
                "operand2Range": [1, 5],
            },
        }

    return build_curriculum([
        {"name": "Chain", "skills": [skill("a", None), skill("b", "a"), skill("c", "b")]},
    ])


@pytest.fixture
def memory_store():
    """Fresh dict-backed progress store."""
    return InMemoryProgressStore()


@pytest.fixture
def sql_store(tmp_path):
    """SQLite-backed progress store in a temporary directory."""
    engine = create_db_engine(f"sqlite:///{tmp_path / 'progress.db'}", echo=False)
    yield SqlProgressStore(engine)
    engine.dispose()


@pytest.fixture
def make_config():
    """Factory for ad-hoc ProblemConfigs."""
    return _make_config
