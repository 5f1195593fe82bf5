from datetime import datetime

import pytest


@pytest.fixture
def tmp_db(tmp_path):
    """Provide a temporary SQLite database path for tests."""
    db_path = str(tmp_path / "test_ward.db")
    return db_path


@pytest.fixture
def now():
    """A fixed mid-afternoon review time."""
    return datetime(2024, 3, 10, 15, 42, 7)
