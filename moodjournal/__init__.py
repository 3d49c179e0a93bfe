"""
moodjournal
===========

Entry persistence and analytics core of a personal mood journal.

The package stores one journal entry per day per user in a SQLite database,
keeps tag usage counters consistent with the entries that reference them,
and derives streak, mood, tag and word-count statistics from the stored
entries.

Main Components:
    - core: Logging, validation, paths, seeds, clock and auth collaborators
    - utils: Text utilities (word counting)
    - database: SQLAlchemy ORM models, entity managers, CLI
    - analytics: Streak calculation and dashboard aggregation

Primary Interfaces:
    - moodjournal.database.manager.JournalDB: Main database interface
    - moodjournal.database.cli: Database management CLI

Example Usage:
    >>> from moodjournal import JournalDB
    >>> from moodjournal.core.context import StaticAuthContext
    >>> db = JournalDB(db_path="journal.db", auth=StaticAuthContext(1))
    >>> result = db.save_entry({
    ...     "date": "2026-10-19",
    ...     "content": "A quiet day.",
    ...     "primary_mood": "Calm",
    ... })
    >>> result.status
    <SaveStatus.CREATED: 'created'>
"""

__version__ = "1.0.0"
__author__ = "moodjournal project"

from moodjournal.database.manager import JournalDB
from moodjournal.core.paths import DATA_DIR, DB_PATH, LOG_DIR

__all__ = [
    "JournalDB",
    "DATA_DIR",
    "DB_PATH",
    "LOG_DIR",
]
