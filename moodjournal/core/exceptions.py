#!/usr/bin/env python3
"""
exceptions.py
--------------------
Custom exception classes for the moodjournal project.

Exception Hierarchy:
    Exception (built-in)
    ├── DatabaseError - Underlying store failures (disk, corruption, locks)
    │   ├── ExportError - Data export operation failures
    │   └── SeedError - Seed file loading failures
    ├── ValidationError - Data validation failures
    │   └── EntryValidationError - Malformed journal entries
    ├── ConflictError - Duplicate date on insert
    ├── NotFoundError - Operations on a missing id or date
    ├── AuthenticationError - No authenticated user available
    └── TemporalFileError - Temporary file management failures

Validation, conflict and not-found conditions are expected outcomes of
ordinary use and are turned into typed results at the JournalDB boundary.
DatabaseError is never converted: it always reaches the caller.

Usage:
    from moodjournal.core.exceptions import DatabaseError, ValidationError

    try:
        db.get_all_entries()
    except DatabaseError as e:
        logger.error(f"Database operation failed: {e}")
"""


class DatabaseError(Exception):
    """
    Base exception for storage failures.

    Raised when the underlying store fails: connection problems, disk
    errors, corruption, lock exhaustion, integrity violations that are not
    part of the expected conflict handling.

    Examples:
        >>> raise DatabaseError("Connection to database failed")
    """

    pass


class ExportError(DatabaseError):
    """
    Exception for export failures.

    Examples:
        >>> raise ExportError("Failed to write entries.json: permission denied")
    """

    pass


class SeedError(DatabaseError):
    """
    Exception for seed data that cannot be loaded.

    Examples:
        >>> raise SeedError("Seed file missing 'moods' section")
    """

    pass


class ValidationError(Exception):
    """
    Exception for data validation failures.

    Raised when input data fails validation checks:
    - Invalid date formats
    - Missing required fields
    - Type mismatches
    - Constraint violations

    Examples:
        >>> raise ValidationError("Invalid date format: expected YYYY-MM-DD")
    """

    pass


class EntryValidationError(ValidationError):
    """
    Exception for malformed journal entries.

    Examples:
        >>> raise EntryValidationError("Entry content cannot be empty")
        >>> raise EntryValidationError("Secondary moods must differ from primary")
    """

    pass


class ConflictError(Exception):
    """
    Exception raised when a new entry would duplicate an existing date.

    Attributes:
        user_id: Owning profile of the existing entry
        entry_date: Date already taken
        existing_id: Id of the entry occupying the date, when known
    """

    def __init__(self, message: str, user_id=None, entry_date=None, existing_id=None):
        super().__init__(message)
        self.user_id = user_id
        self.entry_date = entry_date
        self.existing_id = existing_id


class NotFoundError(Exception):
    """Exception for operations on an entry or tag that does not exist."""

    pass


class AuthenticationError(Exception):
    """Exception raised when an operation needs a user and none is signed in."""

    pass


class TemporalFileError(Exception):
    """
    Exception for temporary file management errors.

    Raised when a staging file for an atomic write cannot be created.
    """

    pass
