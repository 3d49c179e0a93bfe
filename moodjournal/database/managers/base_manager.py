#!/usr/bin/env python3
"""
base_manager.py
--------------------
Base manager providing shared helpers for the entry and tag managers.

Key Features:
    - Retry logic for SQLite lock handling
    - Generic get-or-create lookup

Managers never commit: they work inside the session handed to them, and the
enclosing JournalDB.session_scope decides commit or rollback.

Example:
    class TagManager(BaseManager):
        def get_or_create(self, user_id: int, name: str) -> Tag:
            return self._get_or_create(
                Tag, {"user_id": user_id, "name_key": name.lower()}, {"name": name}
            )
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import time
from abc import ABC
from typing import Any, Callable, Dict, Optional, Protocol, Type, TypeVar

# --- Third party imports ---
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Mapped, Session

# --- Local imports ---
from moodjournal.core.exceptions import DatabaseError
from moodjournal.core.logging_manager import JournalLogger, safe_logger


class HasId(Protocol):
    """Protocol for objects that have an id attribute."""

    id: Mapped[int]


T = TypeVar("T", bound=HasId)


class BaseManager(ABC):
    """
    Abstract base manager providing common utilities.

    Attributes:
        session: SQLAlchemy session for database operations
        logger: Optional logger for operation tracking
    """

    def __init__(self, session: Session, logger: Optional[JournalLogger] = None):
        self.session = session
        self.logger = logger

    # -------------------------------------------------------------------------
    # Core Helper Methods
    # -------------------------------------------------------------------------

    def _execute_with_retry(
        self,
        operation: Callable,
        max_retries: int = 3,
        retry_delay: float = 0.1,
    ) -> Any:
        """
        Execute database operation with retry on lock.

        Args:
            operation: Callable that performs the operation
            max_retries: Maximum number of retry attempts
            retry_delay: Base delay between retries (exponential backoff)

        Returns:
            Result of the operation

        Raises:
            OperationalError: If all retries exhausted or error is not a lock
        """
        for attempt in range(max_retries):
            try:
                return operation()
            except OperationalError as e:
                error_msg = str(e).lower()

                if (
                    "locked" in error_msg or "busy" in error_msg
                ) and attempt < max_retries - 1:
                    wait_time = retry_delay * (2**attempt)

                    safe_logger(self.logger).log_debug(
                        f"Database locked, retrying in {wait_time}s",
                        {"attempt": attempt + 1, "max_retries": max_retries},
                    )

                    time.sleep(wait_time)
                    continue

                raise

        raise DatabaseError("Retry loop completed without success")

    def _get_or_create(
        self,
        model_class: Type[T],
        lookup_fields: Dict[str, Any],
        extra_fields: Optional[Dict[str, Any]] = None,
    ) -> T:
        """
        Get an existing row or create it if it doesn't exist.

        Callers hold the per-user write lock, so a unique-constraint failure
        here means another process wrote the row; the transaction is left to
        the enclosing session_scope to roll back.

        Args:
            model_class: ORM model class to query or create
            lookup_fields: Dictionary of field_name: value to filter/create
            extra_fields: Additional fields for new object creation only

        Returns:
            ORM instance of the model class

        Raises:
            DatabaseError: If the insert violates a constraint
        """
        obj = self.session.query(model_class).filter_by(**lookup_fields).first()
        if obj:
            return obj

        fields = lookup_fields.copy()
        if extra_fields:
            fields.update(extra_fields)

        obj = model_class(**fields)
        self.session.add(obj)
        try:
            self.session.flush()
        except IntegrityError as e:
            raise DatabaseError(
                f"Failed to create {model_class.__name__} with {lookup_fields}: {e}"
            ) from e
        return obj
