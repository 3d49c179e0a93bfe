#!/usr/bin/env python3
"""
results.py
--------------------
Typed outcomes of entry writes.

Expected, recoverable outcomes of a save or delete (validation failure,
date conflict, missing record) are returned as values rather than raised,
so callers can branch on `result.status`. Storage failures are not results:
they propagate as DatabaseError.

Usage:
    result = db.save_entry(metadata)
    if result.status is SaveStatus.CONFLICT:
        existing = db.get_entry_by_date(metadata["date"])
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .models import JournalEntry


class SaveStatus(str, Enum):
    """Outcome of EntryManager.save."""

    CREATED = "created"
    UPDATED = "updated"
    CONFLICT = "conflict"
    VALIDATION_ERROR = "validation_error"
    NOT_FOUND = "not_found"


class DeleteResult(str, Enum):
    """Outcome of EntryManager.delete."""

    DELETED = "deleted"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class EntrySaveResult:
    """
    Result of saving a journal entry.

    Attributes:
        status: What happened
        entry: The stored entry (CREATED / UPDATED only)
        reason: Human-readable explanation (failures only)
        existing_id: Id of the entry that already owns the date (CONFLICT only)
    """

    status: SaveStatus
    entry: Optional["JournalEntry"] = None
    reason: Optional[str] = None
    existing_id: Optional[int] = None

    @property
    def ok(self) -> bool:
        """True for CREATED and UPDATED."""
        return self.status in (SaveStatus.CREATED, SaveStatus.UPDATED)

    @classmethod
    def created(cls, entry: "JournalEntry") -> "EntrySaveResult":
        return cls(SaveStatus.CREATED, entry=entry)

    @classmethod
    def updated(cls, entry: "JournalEntry") -> "EntrySaveResult":
        return cls(SaveStatus.UPDATED, entry=entry)

    @classmethod
    def conflict(cls, reason: str, existing_id: Optional[int] = None) -> "EntrySaveResult":
        return cls(SaveStatus.CONFLICT, reason=reason, existing_id=existing_id)

    @classmethod
    def invalid(cls, reason: str) -> "EntrySaveResult":
        return cls(SaveStatus.VALIDATION_ERROR, reason=reason)

    @classmethod
    def not_found(cls, reason: str) -> "EntrySaveResult":
        return cls(SaveStatus.NOT_FOUND, reason=reason)
