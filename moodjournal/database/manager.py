#!/usr/bin/env python3
"""
manager.py
--------------------
Database manager for the moodjournal entry store.

Provides the JournalDB class, the single transactional entry point of the
persistence layer. Handles:
    - Initialization of the database engine and sessionmaker
    - Schema creation and versioning via Alembic
    - Per-user serialization of writes
    - Entry persistence with tag usage reconciliation
    - Queries, streaks and dashboard analytics
    - Tag catalog maintenance and seeding

Key Features:
    - Every write runs under a per-user lock inside one transaction:
      the entry write and its tag reconciliation commit or roll back together
    - Validation, conflict and not-found outcomes come back as typed results
    - Storage failures always propagate as DatabaseError
    - The current user is read from an injected AuthContext and the current
      day from an injected Clock

Usage:
    db = JournalDB("~/journal/journal.db", auth=StaticAuthContext(1))

    result = db.save_entry({
        "date": "2026-10-19",
        "content": "A quiet day.",
        "primary_mood": "Calm",
        "tags": ["Rest"],
    })
    if result.status is SaveStatus.CONFLICT:
        ...

    snapshot = db.build_analytics()

Notes
==============
- Fresh databases are created from the ORM models and stamped to the
  latest Alembic revision; existing ones are upgraded with `upgrade_database`
- All timestamps are UTC-aware
- Reads take no lock; SQLite lock contention is retried with backoff
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import threading
from contextlib import contextmanager
from datetime import date, datetime
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple, TypeVar, Union

# --- Third party ---
from alembic import command
from alembic.config import Config
from alembic.runtime.migration import MigrationContext
from alembic.util import CommandError
from sqlalchemy import Engine, create_engine, inspect
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

# --- Local imports ---
from moodjournal.analytics import (
    AnalyticsAggregator,
    AnalyticsSnapshot,
    StreakSnapshot,
    calculate_streaks,
)
from moodjournal.core.context import AuthContext, Clock, SystemClock
from moodjournal.core.exceptions import AuthenticationError, ConflictError, DatabaseError
from moodjournal.core.logging_manager import JournalLogger
from moodjournal.core.paths import ALEMBIC_DIR
from moodjournal.core.seeds import SeedData

from .decorators import DatabaseOperation, handle_db_errors, log_database_operation
from .export_manager import ExportManager
from .managers import EntryManager, TagManager
from .models import Base, JournalEntry, Tag
from .results import DeleteResult, EntrySaveResult

T = TypeVar("T")

# Lock table shared by every JournalDB instance in the process,
# keyed by (database file, user id)
_USER_LOCKS: Dict[Tuple[str, int], threading.RLock] = {}
_USER_LOCKS_GUARD = threading.Lock()


def _lock_for(db_key: str, user_id: int) -> threading.RLock:
    with _USER_LOCKS_GUARD:
        lock = _USER_LOCKS.get((db_key, user_id))
        if lock is None:
            lock = threading.RLock()
            _USER_LOCKS[(db_key, user_id)] = lock
        return lock


# ----- Main Database Manager -----
class JournalDB:
    """
    Main database manager for the journal database.

    Attributes:
        db_path (Path): Filesystem path to the SQLite database file.
        alembic_dir (Path): Filesystem path to the Alembic scripts.
        engine (Engine): SQLAlchemy engine instance.
        SessionLocal (sessionmaker): SQLAlchemy session factory.
        auth (AuthContext | None): Source of the current user id.
        clock (Clock): Source of the current day.
        seeds (SeedData): Mood catalog and starter tags.
        logger (JournalLogger | None): Operation logger.
    """

    # ---- Initialization ----
    def __init__(
        self,
        db_path: Union[str, Path],
        alembic_dir: Union[str, Path] = ALEMBIC_DIR,
        log_dir: Optional[Union[str, Path]] = None,
        auth: Optional[AuthContext] = None,
        clock: Optional[Clock] = None,
        seeds: Optional[SeedData] = None,
    ) -> None:
        """
        Initialize database engine and session factory.

        Args:
            db_path: Path to the SQLite file (created if missing)
            alembic_dir: Path to the Alembic migration scripts
            log_dir: Directory for log files (optional)
            auth: Current-user provider (optional; without it every call
                needs an explicit user_id)
            clock: Current-day provider (defaults to the system clock)
            seeds: Seed catalog (defaults to an empty catalog)
        """
        self.db_path = Path(db_path).expanduser().resolve()
        self.alembic_dir = Path(alembic_dir).expanduser().resolve()
        self.auth = auth
        self.clock: Clock = clock or SystemClock()
        self.seeds = seeds or SeedData()

        # --- Logging ---
        if log_dir:
            self.log_dir = Path(log_dir).expanduser().resolve()
            self.logger: Optional[JournalLogger] = JournalLogger(
                self.log_dir, component_name="database"
            )
        else:
            self.logger = None

        self.export_manager = ExportManager(self.logger)
        self.aggregator = AnalyticsAggregator(self.seeds, self.logger)

        self._setup_engine()

    def _setup_engine(self) -> None:
        """Initialize database engine and session factory."""
        try:
            if self.logger:
                self.logger.log_operation(
                    "database_init_start",
                    {
                        "db_path": str(self.db_path),
                        "alembic_dir": str(self.alembic_dir),
                    },
                )

            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            is_new_file = not self.db_path.exists()

            self.engine: Engine = create_engine(
                f"sqlite:///{self.db_path}",
                echo=False,
                pool_pre_ping=True,
                connect_args={"check_same_thread": False, "timeout": 30},
            )

            self.SessionLocal: sessionmaker = sessionmaker(
                bind=self.engine,
                autoflush=True,
                expire_on_commit=False,
            )

            self.alembic_cfg: Config = self._setup_alembic()

            if is_new_file:
                self.initialize_schema()

            if self.logger:
                self.logger.log_operation("database_init_complete", {"success": True})

        except DatabaseError:
            raise
        except (SQLAlchemyError, OSError) as e:
            if self.logger:
                self.logger.log_error(e, {"operation": "database_init"})
            raise DatabaseError(f"Database initialization failed: {e}") from e

    def close(self) -> None:
        """Dispose of the engine's connections and release log files."""
        self.engine.dispose()
        if self.logger:
            self.logger.close()

    # ---- Session Management ----
    @contextmanager
    def session_scope(self, user_id: Optional[int] = None) -> Iterator[Session]:
        """
        Provide a transactional scope around a series of operations.

        Commits on success, rolls back on any exception. SQLAlchemy errors
        raised by the commit itself surface as DatabaseError.

        `user_id` only labels the session in the log.

        Usage:
            with db.session_scope() as session:
                entries = EntryManager(session, db.logger).get_all(user_id)
        """
        session = self.SessionLocal()
        session_id = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
        scope = {"session_id": session_id, "user_id": user_id}

        if self.logger:
            self.logger.log_debug("session_start", scope)

        try:
            yield session
            session.commit()
            if self.logger:
                self.logger.log_debug("session_commit", scope)

        except Exception as e:
            session.rollback()
            if self.logger:
                self.logger.log_debug(
                    "session_rollback",
                    {**scope, "error": type(e).__name__},
                )
            if isinstance(e, SQLAlchemyError):
                raise DatabaseError(f"Transaction failed: {e}") from e
            raise
        finally:
            session.close()
            if self.logger:
                self.logger.log_debug("session_close", scope)

    def _write(self, user_id: int, operation: Callable[[Session], T]) -> T:
        """Run `operation` in one transaction while holding the user's write lock."""
        with _lock_for(str(self.db_path), user_id):
            with self.session_scope(user_id) as session:
                return operation(session)

    def _read(self, operation: Callable[[Session], T]) -> T:
        with self.session_scope() as session:
            return operation(session)

    def _managers(self, session: Session) -> Tuple[EntryManager, TagManager]:
        tags = TagManager(session, self.logger)
        return EntryManager(session, self.logger, tags=tags), tags

    def _resolve_user(self, user_id: Optional[int] = None) -> int:
        """
        Return an explicit user id, or the authenticated user's id.

        Raises:
            AuthenticationError: If no user id is given and nobody is signed in
        """
        if user_id is not None:
            return int(user_id)
        current = self.auth.current_user_id() if self.auth else None
        if current is None:
            raise AuthenticationError("No authenticated user")
        return current

    # ---- Alembic ----
    def _setup_alembic(self) -> Config:
        """Build the Alembic configuration programmatically (no ini file)."""
        alembic_cfg = Config()
        alembic_cfg.set_main_option("script_location", str(self.alembic_dir))
        alembic_cfg.set_main_option("sqlalchemy.url", f"sqlite:///{self.db_path}")
        alembic_cfg.set_main_option(
            "file_template",
            "%%(year)d%%(month).2d%%(day).2d_%%(hour).2d%%(minute).2d_%%(slug)s",
        )
        return alembic_cfg

    @handle_db_errors
    @log_database_operation("initialize_schema")
    def initialize_schema(self) -> None:
        """
        Create tables if needed and bring the schema to the latest revision.

        Actions:
            If the database has no tables,
                creates all tables from the ORM models
                stamps the Alembic revision to head
            If not,
                runs pending migrations
        """
        table_names = inspect(self.engine).get_table_names()

        if not table_names:
            Base.metadata.create_all(bind=self.engine)
            try:
                command.stamp(self.alembic_cfg, "head")
            except CommandError as e:
                raise DatabaseError(f"Could not stamp database revision: {e}") from e
            if self.logger:
                self.logger.log_operation(
                    "fresh_database_created",
                    {"tables_created": len(Base.metadata.tables)},
                )
        else:
            self.upgrade_database()
            if self.logger:
                self.logger.log_operation(
                    "existing_database_migrated",
                    {"table_count": len(table_names)},
                )

    @handle_db_errors
    @log_database_operation("upgrade_database")
    def upgrade_database(self, revision: str = "head") -> None:
        """Upgrade the database schema to the given Alembic revision."""
        try:
            command.upgrade(self.alembic_cfg, revision)
        except CommandError as e:
            raise DatabaseError(f"Database upgrade failed: {e}") from e

    def get_migration_history(self) -> Dict[str, Optional[str]]:
        """
        Get the current migration status of the database.

        Returns:
            Dictionary with 'current_revision' and 'status'
            ('up_to_date' or 'needs_migration')
        """
        try:
            with self.engine.connect() as conn:
                current_rev = MigrationContext.configure(conn).get_current_revision()
        except SQLAlchemyError as e:
            raise DatabaseError(f"Could not read migration state: {e}") from e

        return {
            "current_revision": current_rev,
            "status": "up_to_date" if current_rev else "needs_migration",
        }

    # -------------------------------------------------------------------------
    # Entries
    # -------------------------------------------------------------------------

    def save_entry(self, metadata: Dict[str, Any]) -> EntrySaveResult:
        """
        Create or update a journal entry.

        Args:
            metadata: Entry fields (see EntryManager.validate); `user_id`
                defaults to the authenticated user, `id` selects an update

        Returns:
            EntrySaveResult (CREATED, UPDATED, CONFLICT, VALIDATION_ERROR,
            NOT_FOUND)

        Raises:
            AuthenticationError: If no user can be resolved
            DatabaseError: On storage failures
        """
        data = dict(metadata)
        user_id = self._resolve_user(data.get("user_id"))
        data["user_id"] = user_id

        def _save(session: Session) -> EntrySaveResult:
            entries, _ = self._managers(session)
            result = entries.save(data)
            if not result.ok:
                session.rollback()
            return result

        try:
            result = self._write(user_id, _save)
        except ConflictError as e:
            result = EntrySaveResult.conflict(str(e), existing_id=e.existing_id)

        if self.logger:
            self.logger.log_operation(
                "save_entry",
                {
                    "user_id": user_id,
                    "status": result.status.value,
                    "entry_id": result.entry.id if result.entry else None,
                    "reason": result.reason,
                },
            )
        return result

    def delete_entry(self, entry_id: int, user_id: Optional[int] = None) -> DeleteResult:
        """
        Delete an entry of the current user.

        Returns:
            DeleteResult.DELETED, or DeleteResult.NOT_FOUND with no state change
        """
        uid = self._resolve_user(user_id)
        result = self._write(
            uid, lambda session: self._managers(session)[0].delete(entry_id, user_id=uid)
        )
        if self.logger:
            self.logger.log_operation(
                "delete_entry",
                {"user_id": uid, "entry_id": entry_id, "status": result.value},
            )
        return result

    def get_all_entries(self, user_id: Optional[int] = None) -> List[JournalEntry]:
        """All entries of the user, newest date first."""
        uid = self._resolve_user(user_id)
        return self._read(lambda session: self._managers(session)[0].get_all(uid))

    def get_entry_by_date(
        self, entry_date: Union[str, date], user_id: Optional[int] = None
    ) -> Optional[JournalEntry]:
        uid = self._resolve_user(user_id)
        return self._read(
            lambda session: self._managers(session)[0].get_by_date(uid, entry_date)
        )

    def get_entry_by_id(
        self, entry_id: int, user_id: Optional[int] = None
    ) -> Optional[JournalEntry]:
        """Entry by id; entries of other users are reported as missing."""
        uid = self._resolve_user(user_id)
        entry = self._read(lambda session: self._managers(session)[0].get_by_id(entry_id))
        if entry is None or entry.user_id != uid:
            return None
        return entry

    def search_entries(
        self, term: Optional[str], user_id: Optional[int] = None
    ) -> List[JournalEntry]:
        uid = self._resolve_user(user_id)
        return self._read(lambda session: self._managers(session)[0].search(uid, term))

    def filter_entries(
        self,
        start: Any = None,
        end: Any = None,
        mood: Any = None,
        tags: Any = None,
        user_id: Optional[int] = None,
    ) -> List[JournalEntry]:
        uid = self._resolve_user(user_id)
        return self._read(
            lambda session: self._managers(session)[0].filter(
                uid, start=start, end=end, mood=mood, tags=tags
            )
        )

    def get_entries_page(
        self, page: int = 1, page_size: int = 20, user_id: Optional[int] = None
    ) -> List[JournalEntry]:
        uid = self._resolve_user(user_id)
        return self._read(
            lambda session: self._managers(session)[0].get_page(uid, page, page_size)
        )

    def count_entries(self, user_id: Optional[int] = None) -> int:
        uid = self._resolve_user(user_id)
        return self._read(lambda session: self._managers(session)[0].count(uid))

    def get_entry_dates(
        self,
        year: Optional[int] = None,
        month: Optional[int] = None,
        user_id: Optional[int] = None,
    ) -> List[date]:
        """
        Days with an entry, ascending.

        With year and month, only that calendar month (for a calendar view);
        otherwise every distinct day.
        """
        uid = self._resolve_user(user_id)
        if year is not None and month is not None:
            return self._read(
                lambda session: self._managers(session)[0].get_dates_in_month(
                    uid, year, month
                )
            )
        return self._read(
            lambda session: self._managers(session)[0].get_distinct_dates(uid)
        )

    # -------------------------------------------------------------------------
    # Analytics
    # -------------------------------------------------------------------------

    def get_streaks(self, user_id: Optional[int] = None) -> StreakSnapshot:
        """Streak statistics relative to the clock's today."""
        dates = self.get_entry_dates(user_id=user_id)
        return calculate_streaks(dates, self.clock.today())

    def build_analytics(self, user_id: Optional[int] = None) -> AnalyticsSnapshot:
        """Dashboard statistics for the user, relative to the clock's today."""
        uid = self._resolve_user(user_id)

        def _load(session: Session) -> Tuple[List[JournalEntry], List[Tag]]:
            entries, tags = self._managers(session)
            return entries.get_all(uid), tags.get_all(uid)

        entries, tags = self._read(_load)
        return self.aggregator.build(entries, tags, self.clock.today())

    # -------------------------------------------------------------------------
    # Tags
    # -------------------------------------------------------------------------

    def get_tags(self, user_id: Optional[int] = None, order_by: str = "name") -> List[Tag]:
        uid = self._resolve_user(user_id)
        return self._read(
            lambda session: self._managers(session)[1].get_all(uid, order_by=order_by)
        )

    def delete_tag(self, name: str, user_id: Optional[int] = None) -> bool:
        """
        Explicitly remove a tag by name and detach it from every entry.

        Returns:
            True if the tag existed
        """
        uid = self._resolve_user(user_id)

        def _delete(session: Session) -> bool:
            tags = self._managers(session)[1]
            tag = tags.get(uid, name)
            return tags.delete(tag.id) if tag else False

        return self._write(uid, _delete)

    def seed_user(self, user_id: Optional[int] = None) -> int:
        """
        Prepopulate the seed tags for a user without tags.

        Returns:
            Number of tags created
        """
        uid = self._resolve_user(user_id)
        with DatabaseOperation(self.logger, "seed_user", {"user_id": uid}):
            created = self._write(
                uid, lambda session: self._managers(session)[1].prepopulate(uid, self.seeds)
            )
        return len(created)

    def verify_tag_usage(
        self, user_id: Optional[int] = None
    ) -> Dict[str, Tuple[int, int]]:
        """Tags whose stored usage disagrees with the entries: {name: (stored, actual)}."""
        uid = self._resolve_user(user_id)
        return self._read(lambda session: self._managers(session)[1].verify_usage(uid))

    def rebuild_tag_usage(self, user_id: Optional[int] = None) -> int:
        """Recompute usage counters from the entries; returns tags changed."""
        uid = self._resolve_user(user_id)
        with DatabaseOperation(self.logger, "rebuild_tag_usage", {"user_id": uid}):
            return self._write(
                uid, lambda session: self._managers(session)[1].rebuild_usage(uid)
            )

    # -------------------------------------------------------------------------
    # Export
    # -------------------------------------------------------------------------

    def export_json(self, export_file: Union[str, Path], user_id: Optional[int] = None) -> Path:
        """Write the user's entries and tags to one JSON file."""
        uid = self._resolve_user(user_id)
        return self.export_manager.export_to_json(
            self.get_all_entries(uid), export_file, tags=self.get_tags(uid)
        )

    def export_markdown(
        self, output_dir: Union[str, Path], user_id: Optional[int] = None
    ) -> List[Path]:
        """Write one Markdown file per entry under output_dir."""
        uid = self._resolve_user(user_id)
        return self.export_manager.export_to_markdown(self.get_all_entries(uid), output_dir)
