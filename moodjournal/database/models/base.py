"""
Base Classes
------------

Foundational ORM classes for the moodjournal database.

Classes:
    - Base: Declarative base for all SQLAlchemy models
    - utc_now: Default factory for timezone-aware timestamps
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from datetime import datetime, timezone

# --- Third party ---
from sqlalchemy.orm import DeclarativeBase


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


# --- Base ORM class ---
class Base(DeclarativeBase):
    """
    Base class for all ORM models.

    Serves as the declarative base for SQLAlchemy models and provides
    access to the metadata object for table creation and migrations.
    """

    pass
