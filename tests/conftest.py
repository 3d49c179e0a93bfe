"""
conftest.py
-----------
Shared pytest fixtures for moodjournal tests.

Provides fixtures for:
- Database setup and teardown
- Sessions and entity managers
- Fixed clock and signed-in user
"""
import pytest
from pathlib import Path
from datetime import date
from tempfile import TemporaryDirectory
from unittest.mock import MagicMock

from moodjournal.core.context import FixedClock, StaticAuthContext
from moodjournal.core.logging_manager import JournalLogger
from moodjournal.core.seeds import load_seeds


TODAY = date(2026, 10, 19)


# ----- Path Fixtures -----

@pytest.fixture
def tmp_dir():
    """Create a temporary directory for test file operations."""
    with TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


# ----- Collaborator Fixtures -----

@pytest.fixture
def today():
    """The fixed 'today' used by clock-dependent tests."""
    return TODAY


@pytest.fixture
def clock(today):
    return FixedClock(today)


@pytest.fixture
def auth():
    """Auth context signed in as user 1."""
    return StaticAuthContext(user_id=1)


@pytest.fixture
def seeds():
    """Packaged default seed catalog."""
    return load_seeds()


@pytest.fixture
def mock_logger():
    """Logger double for asserting log calls."""
    return MagicMock(spec=JournalLogger)


# ----- Test Database Fixtures -----

@pytest.fixture
def test_db_path(tmp_dir):
    """Create temporary test database path."""
    return tmp_dir / "test.db"


@pytest.fixture
def test_db(test_db_path, auth, clock, seeds):
    """
    Create test database instance with schema.

    Returns a JournalDB bound to user 1 and the fixed clock.
    Database is torn down after the test.
    """
    from moodjournal.database.manager import JournalDB

    db = JournalDB(db_path=test_db_path, auth=auth, clock=clock, seeds=seeds)

    yield db

    db.close()


@pytest.fixture
def db_session(test_db):
    """
    Create a database session for tests.

    Changes are rolled back after the test.
    """
    with test_db.session_scope() as session:
        yield session
        session.rollback()


@pytest.fixture
def tag_manager(db_session):
    """Create TagManager instance for testing."""
    from moodjournal.database.managers.tag_manager import TagManager
    return TagManager(db_session)


@pytest.fixture
def entry_manager(db_session, tag_manager):
    """Create EntryManager instance sharing the tag manager's session."""
    from moodjournal.database.managers.entry_manager import EntryManager
    return EntryManager(db_session, tags=tag_manager)
