"""
Database Models Package
------------------------

SQLAlchemy ORM models for the moodjournal database.

- base: Base class and timestamp helper
- associations: Many-to-many relationship tables
- enums: Mood
- core: JournalEntry
- entities: Tag

Usage:
    from moodjournal.database.models import JournalEntry, Tag, Mood
"""
from .base import Base, utc_now
from .enums import Mood
from .associations import entry_tags
from .core import JournalEntry
from .entities import Tag

__all__ = [
    "Base",
    "utc_now",
    "Mood",
    "entry_tags",
    "JournalEntry",
    "Tag",
]
