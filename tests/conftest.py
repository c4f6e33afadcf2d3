"""
Shared fixtures for the planner test suite.
"""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from lifeplanner.core.config import Config
from lifeplanner.core.database import Database
from lifeplanner.core.planner import Planner


@pytest.fixture
def db():
    """Initialized in-memory database, closed after the test."""
    database = Database(":memory:")
    database.open()
    database.initialize()
    yield database
    database.close()


@pytest.fixture
def config(tmp_path):
    """Config rooted in a temporary directory."""
    return Config(tmp_path / "config")


@pytest.fixture
def planner(db, config):
    """Unseeded planner over the in-memory database."""
    return Planner(db, config)
