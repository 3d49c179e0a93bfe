#!/usr/bin/env python3
"""
moodjournal Database Package
----------------------------
Persistence layer for journal entries and tags.

This package provides:
- JournalDB: transactional facade (sessions, per-user write locks, schema)
- Entity managers for entries and tags
- Typed save/delete results
- Data export
"""

from .manager import JournalDB
from moodjournal.core.exceptions import (
    ConflictError,
    DatabaseError,
    ExportError,
    NotFoundError,
    ValidationError,
)
from .export_manager import ExportManager
from .results import DeleteResult, EntrySaveResult, SaveStatus
from .decorators import (
    DatabaseOperation,
    handle_db_errors,
    log_database_operation,
)

__all__ = [
    # Main manager
    "JournalDB",
    # Results
    "DeleteResult",
    "EntrySaveResult",
    "SaveStatus",
    # Exceptions
    "ConflictError",
    "DatabaseError",
    "ExportError",
    "NotFoundError",
    "ValidationError",
    # Core modules
    "ExportManager",
    # Decorators
    "DatabaseOperation",
    "handle_db_errors",
    "log_database_operation",
]
