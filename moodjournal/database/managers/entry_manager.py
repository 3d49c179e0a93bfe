#!/usr/bin/env python3
"""
entry_manager.py
--------------------
Manages JournalEntry records: one entry per user per calendar day.

Key Features:
    - Validated create/update through a single save() entry point
    - Date uniqueness checked in code and backed by uq_entry_user_date
    - word_count recomputed from content on every save
    - Tag usage reconciled through TagManager in the same transaction
    - Search, filtering, pagination and calendar queries

Expected failures of save()/delete() come back as typed results. The one
exception is a unique-constraint violation detected at flush time: the
session is no longer usable at that point, so ConflictError is raised and
the caller turns it into a CONFLICT result after rolling back.

Usage:
    entry_mgr = EntryManager(session, logger)

    result = entry_mgr.save({
        "user_id": 1,
        "date": "2026-10-19",
        "content": "Long walk by the river.",
        "primary_mood": "Calm",
        "secondary_moods": ["Grateful"],
        "tags": ["Health"],
    })

    entries = entry_mgr.filter(1, start="2026-10-01", mood="calm")
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import calendar
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional

# --- Third party imports ---
from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Query, Session, selectinload

# --- Local imports ---
from moodjournal.core.exceptions import (
    ConflictError,
    EntryValidationError,
    ValidationError,
)
from moodjournal.core.logging_manager import JournalLogger, safe_logger
from moodjournal.core.validators import DataValidator
from moodjournal.database.decorators import handle_db_errors, log_database_operation
from moodjournal.database.models import JournalEntry, Mood, Tag, utc_now
from moodjournal.database.results import DeleteResult, EntrySaveResult
from moodjournal.utils.txt import count_words
from .base_manager import BaseManager
from .tag_manager import TagManager

MAX_SECONDARY_MOODS = 2


@dataclass
class EntryValues:
    """Validated, normalized field values of an entry save."""

    user_id: int
    entry_date: date
    title: str
    content: str
    primary_mood: Mood
    secondary_moods: List[Mood] = field(default_factory=list)
    tags: Dict[str, str] = field(default_factory=dict)


class EntryManager(BaseManager):
    """
    Manages JournalEntry table operations.

    Attributes:
        tags: TagManager sharing this manager's session
    """

    def __init__(
        self,
        session: Session,
        logger: Optional[JournalLogger] = None,
        tags: Optional[TagManager] = None,
    ):
        super().__init__(session, logger)
        self.tags = tags or TagManager(session, logger)

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    @staticmethod
    def _parse_mood(value: Any, label: str) -> Mood:
        try:
            return Mood.parse(value)
        except ValueError:
            raise EntryValidationError(f"Invalid {label}: {value!r}")

    @classmethod
    def _secondary_moods(cls, metadata: Dict[str, Any]) -> List[Any]:
        if "secondary_moods" in metadata:
            raw = metadata.get("secondary_moods") or []
            if isinstance(raw, str):
                raw = raw.split(",")
        else:
            raw = [metadata.get("secondary_mood_1"), metadata.get("secondary_mood_2")]
        return [m for m in raw if DataValidator.normalize_string(m) or isinstance(m, Mood)]

    @classmethod
    def validate(cls, metadata: Dict[str, Any]) -> EntryValues:
        """
        Validate and normalize raw entry metadata.

        Args:
            metadata: Dictionary with keys:
                - user_id (required)
                - date (required): date, datetime or ISO string
                - content (required): non-blank text, may contain markup
                - primary_mood (required): Mood or mood name
                - secondary_moods (optional): up to two moods
                  (or secondary_mood_1 / secondary_mood_2)
                - title (optional)
                - tags (optional): list of names or a comma separated string

        Returns:
            EntryValues

        Raises:
            EntryValidationError: Describing the first problem found
        """
        user_id = DataValidator.normalize_int(metadata.get("user_id"))
        if user_id is None:
            raise EntryValidationError("Entry requires a user_id")

        entry_date = DataValidator.normalize_date(metadata.get("date"))
        if entry_date is None:
            raise EntryValidationError(
                f"Invalid or missing date: {metadata.get('date')!r}"
            )

        content = metadata.get("content")
        if not isinstance(content, str) or not content.strip():
            raise EntryValidationError("Entry content cannot be empty")

        if metadata.get("primary_mood") in (None, ""):
            raise EntryValidationError("Entry requires a primary mood")
        primary = cls._parse_mood(metadata["primary_mood"], "primary mood")

        secondary: List[Mood] = []
        for raw in cls._secondary_moods(metadata):
            mood = cls._parse_mood(raw, "secondary mood")
            if mood == primary:
                raise EntryValidationError(
                    f"Secondary mood {mood.value} repeats the primary mood"
                )
            if mood in secondary:
                raise EntryValidationError(f"Secondary mood {mood.value} given twice")
            secondary.append(mood)
        if len(secondary) > MAX_SECONDARY_MOODS:
            raise EntryValidationError(
                f"At most {MAX_SECONDARY_MOODS} secondary moods are allowed"
            )

        return EntryValues(
            user_id=user_id,
            entry_date=entry_date,
            title=DataValidator.normalize_string(metadata.get("title")) or "",
            content=content,
            primary_mood=primary,
            secondary_moods=secondary,
            tags=DataValidator.normalize_tag_names(metadata.get("tags")),
        )

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    @handle_db_errors
    @log_database_operation("save_entry")
    def save(self, metadata: Dict[str, Any]) -> EntrySaveResult:
        """
        Create or update an entry.

        An entry without `id` is created; with `id` the stored record is
        updated in place (all mutable fields, tags included).

        Returns:
            EntrySaveResult with status CREATED, UPDATED, CONFLICT,
            VALIDATION_ERROR or NOT_FOUND

        Raises:
            ConflictError: If the date constraint fails at flush time
            DatabaseError: On storage failures
        """
        try:
            values = self.validate(metadata)
        except EntryValidationError as e:
            safe_logger(self.logger).log_debug(
                "entry_rejected",
                {"user_id": metadata.get("user_id"), "reason": str(e)},
            )
            return EntrySaveResult.invalid(str(e))

        if metadata.get("id") in (None, ""):
            return self._create(values)

        entry_id = DataValidator.normalize_int(metadata.get("id"))
        if entry_id is None:
            return EntrySaveResult.invalid(f"Invalid entry id: {metadata.get('id')!r}")
        return self._update(entry_id, values)

    def _create(self, values: EntryValues) -> EntrySaveResult:
        existing = self._get_by_date(values.user_id, values.entry_date)
        if existing is not None:
            return EntrySaveResult.conflict(
                f"An entry already exists for {values.entry_date.isoformat()}",
                existing_id=existing.id,
            )

        now = utc_now()
        entry = JournalEntry(user_id=values.user_id, created_at=now)
        self._apply(entry, values, previous_tags=[], now=now)
        self.session.add(entry)
        self._flush_entry(values)

        safe_logger(self.logger).log_debug(
            "entry_created",
            {"user_id": values.user_id, "entry_id": entry.id, "date": values.entry_date},
        )
        return EntrySaveResult.created(entry)

    def _update(self, entry_id: int, values: EntryValues) -> EntrySaveResult:
        entry = self.session.get(JournalEntry, entry_id)
        if entry is None:
            return EntrySaveResult.not_found(f"Entry not found: {entry_id}")
        if entry.user_id != values.user_id:
            return EntrySaveResult.invalid("An entry cannot change its owner")

        if entry.date != values.entry_date:
            occupant = self._get_by_date(values.user_id, values.entry_date)
            if occupant is not None and occupant.id != entry.id:
                return EntrySaveResult.conflict(
                    f"An entry already exists for {values.entry_date.isoformat()}",
                    existing_id=occupant.id,
                )

        self._apply(entry, values, previous_tags=entry.tag_names, now=utc_now())
        self._flush_entry(values)

        safe_logger(self.logger).log_debug(
            "entry_updated",
            {"user_id": values.user_id, "entry_id": entry.id, "date": values.entry_date},
        )
        return EntrySaveResult.updated(entry)

    def _apply(
        self, entry: JournalEntry, values: EntryValues, previous_tags: List[str], now
    ) -> None:
        """Reconcile the entry's tags and copy validated values onto it."""
        # Tag queries autoflush the session, so reconcile before mutating the entry
        tag_rows = self.tags.reconcile(
            values.user_id, previous_tags, list(values.tags.values())
        )

        secondary = values.secondary_moods + [None] * (
            MAX_SECONDARY_MOODS - len(values.secondary_moods)
        )
        entry.date = values.entry_date
        entry.title = values.title
        entry.content = values.content
        entry.primary_mood = values.primary_mood
        entry.secondary_mood_1, entry.secondary_mood_2 = secondary
        entry.word_count = count_words(values.content)
        entry.updated_at = now
        entry.tags = tag_rows

    def _flush_entry(self, values: EntryValues) -> None:
        try:
            self.session.flush()
        except IntegrityError as e:
            if "journal_entries.date" in str(e.orig) or "uq_entry_user_date" in str(e.orig):
                raise ConflictError(
                    f"An entry already exists for {values.entry_date.isoformat()}",
                    user_id=values.user_id,
                    entry_date=values.entry_date,
                ) from e
            raise

    @handle_db_errors
    @log_database_operation("delete_entry")
    def delete(self, entry_id: int, user_id: Optional[int] = None) -> DeleteResult:
        """
        Delete an entry and release its tag usage.

        Args:
            entry_id: Entry to remove
            user_id: When given, entries of other users are treated as missing

        Returns:
            DeleteResult.DELETED or DeleteResult.NOT_FOUND (no state change)
        """
        entry = self.session.get(JournalEntry, entry_id)
        if entry is None or (user_id is not None and entry.user_id != user_id):
            return DeleteResult.NOT_FOUND

        self.tags.reconcile(entry.user_id, entry.tag_names, [])
        self.session.delete(entry)
        self.session.flush()
        return DeleteResult.DELETED

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def _query(self, user_id: int) -> Query:
        return (
            self.session.query(JournalEntry)
            .options(selectinload(JournalEntry.tags))
            .filter(JournalEntry.user_id == user_id)
            .order_by(
                JournalEntry.date.desc(),
                JournalEntry.created_at.desc(),
                JournalEntry.id.desc(),
            )
        )

    def _get_by_date(self, user_id: int, entry_date: date) -> Optional[JournalEntry]:
        return (
            self.session.query(JournalEntry)
            .filter_by(user_id=user_id, date=entry_date)
            .one_or_none()
        )

    @handle_db_errors
    @log_database_operation("get_all_entries")
    def get_all(self, user_id: int) -> List[JournalEntry]:
        """All entries of a user, newest date first."""
        return self._execute_with_retry(lambda: self._query(user_id).all())

    @handle_db_errors
    @log_database_operation("get_entry_by_date")
    def get_by_date(self, user_id: int, entry_date: Any) -> Optional[JournalEntry]:
        """
        Retrieve the entry of a user for one day.

        Raises:
            ValidationError: If entry_date cannot be parsed
        """
        day = DataValidator.normalize_date(entry_date)
        if day is None:
            raise ValidationError(f"Invalid date: {entry_date!r}")
        return self._query(user_id).filter(JournalEntry.date == day).one_or_none()

    @handle_db_errors
    @log_database_operation("get_entry_by_id")
    def get_by_id(self, entry_id: int) -> Optional[JournalEntry]:
        return (
            self.session.query(JournalEntry)
            .options(selectinload(JournalEntry.tags))
            .filter(JournalEntry.id == entry_id)
            .one_or_none()
        )

    @handle_db_errors
    @log_database_operation("search_entries")
    def search(self, user_id: int, term: Optional[str]) -> List[JournalEntry]:
        """
        Case-insensitive substring search over title and content.

        A blank term returns every entry.
        """
        text = DataValidator.normalize_string(term)
        query = self._query(user_id)
        if text:
            query = query.filter(
                or_(
                    JournalEntry.title.icontains(text, autoescape=True),
                    JournalEntry.content.icontains(text, autoescape=True),
                )
            )
        return self._execute_with_retry(query.all)

    @handle_db_errors
    @log_database_operation("filter_entries")
    def filter(
        self,
        user_id: int,
        start: Any = None,
        end: Any = None,
        mood: Any = None,
        tags: Any = None,
    ) -> List[JournalEntry]:
        """
        Filter entries by date range, mood and tags.

        Args:
            user_id: Owning profile
            start: First day to include (inclusive)
            end: Last day to include (inclusive)
            mood: Mood matching the primary or either secondary mood
            tags: Tag names; an entry matches if it carries any of them

        Raises:
            ValidationError: For unparseable dates, an unknown mood,
                or start after end
        """
        query = self._query(user_id)

        start_day = self._optional_date(start, "start")
        end_day = self._optional_date(end, "end")
        if start_day and end_day and start_day > end_day:
            raise ValidationError(
                f"Start date {start_day.isoformat()} is after end date {end_day.isoformat()}"
            )
        if start_day:
            query = query.filter(JournalEntry.date >= start_day)
        if end_day:
            query = query.filter(JournalEntry.date <= end_day)

        if mood not in (None, ""):
            try:
                wanted = Mood.parse(mood)
            except ValueError as e:
                raise ValidationError(str(e))
            query = query.filter(
                or_(
                    JournalEntry.primary_mood == wanted,
                    JournalEntry.secondary_mood_1 == wanted,
                    JournalEntry.secondary_mood_2 == wanted,
                )
            )

        keys = list(DataValidator.normalize_tag_names(tags))
        if keys:
            query = query.filter(JournalEntry.tags.any(Tag.name_key.in_(keys)))

        return self._execute_with_retry(query.all)

    @staticmethod
    def _optional_date(value: Any, label: str) -> Optional[date]:
        if value in (None, ""):
            return None
        day = DataValidator.normalize_date(value)
        if day is None:
            raise ValidationError(f"Invalid {label} date: {value!r}")
        return day

    @handle_db_errors
    @log_database_operation("get_entries_page")
    def get_page(self, user_id: int, page: int = 1, page_size: int = 20) -> List[JournalEntry]:
        """
        One page of entries in get_all() order.

        Raises:
            ValidationError: If page or page_size is not a positive integer
        """
        page_num, size = DataValidator.validate_page(page, page_size)
        query = self._query(user_id).offset((page_num - 1) * size).limit(size)
        return self._execute_with_retry(query.all)

    @handle_db_errors
    def count(self, user_id: int) -> int:
        return (
            self.session.query(JournalEntry)
            .filter(JournalEntry.user_id == user_id)
            .count()
        )

    @handle_db_errors
    @log_database_operation("get_dates_in_month")
    def get_dates_in_month(self, user_id: int, year: int, month: int) -> List[date]:
        """
        Days of one calendar month that have an entry, ascending.

        Raises:
            ValidationError: If month is outside 1-12
        """
        if not 1 <= int(month) <= 12:
            raise ValidationError(f"Invalid month: {month}")
        first = date(int(year), int(month), 1)
        last = date(int(year), int(month), calendar.monthrange(int(year), int(month))[1])

        stmt = (
            select(JournalEntry.date)
            .where(
                JournalEntry.user_id == user_id,
                JournalEntry.date >= first,
                JournalEntry.date <= last,
            )
            .order_by(JournalEntry.date)
        )
        return list(self.session.scalars(stmt))

    @handle_db_errors
    @log_database_operation("get_distinct_dates")
    def get_distinct_dates(self, user_id: int) -> List[date]:
        """Every day with an entry, ascending."""
        stmt = (
            select(JournalEntry.date)
            .where(JournalEntry.user_id == user_id)
            .distinct()
            .order_by(JournalEntry.date)
        )
        return list(self.session.scalars(stmt))
