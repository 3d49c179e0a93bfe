#!/usr/bin/env python3
"""
managers package
--------------------
Entity managers for the moodjournal database.

Each manager works inside a session handed to it by JournalDB and never
commits on its own.

Available Managers:
    BaseManager: Abstract base class with common utilities
    TagManager: Tag catalog and usage reconciliation
    EntryManager: Journal entry persistence and queries

Usage:
    from moodjournal.database.managers import EntryManager, TagManager

    tag_mgr = TagManager(session, logger)
    entry_mgr = EntryManager(session, logger, tags=tag_mgr)
"""
from .base_manager import BaseManager
from .tag_manager import TagManager
from .entry_manager import EntryManager, EntryValues

__all__ = [
    "BaseManager",
    "TagManager",
    "EntryManager",
    "EntryValues",
]
