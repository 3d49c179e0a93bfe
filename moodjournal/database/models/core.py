"""
Core Models
------------

Central model for the moodjournal database.

Models:
    - JournalEntry: One journal record for one calendar day for one user

Invariants kept by EntryManager:
    - one entry per (user_id, date), also enforced by uq_entry_user_date
    - word_count always derived from content
    - secondary moods never repeat each other or the primary mood
"""
from __future__ import annotations

from datetime import date, datetime
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import (
    CheckConstraint,
    Date,
    DateTime,
    Enum as SQLEnum,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from moodjournal.utils.txt import reading_time

from .associations import entry_tags
from .base import Base, utc_now
from .enums import Mood

if TYPE_CHECKING:
    from .entities import Tag


def _mood_column() -> SQLEnum:
    return SQLEnum(
        Mood,
        values_callable=lambda x: [e.value for e in x],
        native_enum=False,
        length=32,
        validate_strings=True,
        name="mood",
    )


class JournalEntry(Base):
    """
    A user's journal entry for one calendar day.

    Attributes:
        id: Primary key
        user_id: Owning profile
        date: Calendar day of the entry (unique per user)
        title: Optional title
        content: Rich text body (may contain markup)
        primary_mood: Required mood
        secondary_mood_1, secondary_mood_2: Optional supporting moods
        word_count: Words in content with markup stripped
        created_at: When this record was first inserted (immutable)
        updated_at: When this record was last written

    Relationships:
        tags: Many-to-many with Tag
    """

    __tablename__ = "journal_entries"
    __table_args__ = (
        UniqueConstraint("user_id", "date", name="uq_entry_user_date"),
        CheckConstraint("word_count >= 0", name="ck_entry_positive_word_count"),
    )

    # ---- Primary fields ----
    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    date: Mapped[date] = mapped_column(Date, nullable=False)
    title: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    content: Mapped[str] = mapped_column(Text, default="", nullable=False)
    primary_mood: Mapped[Mood] = mapped_column(_mood_column(), nullable=False)
    secondary_mood_1: Mapped[Optional[Mood]] = mapped_column(
        _mood_column(), nullable=True
    )
    secondary_mood_2: Mapped[Optional[Mood]] = mapped_column(
        _mood_column(), nullable=True
    )
    word_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    # ---- Timestamps ----
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )

    # ---- Relationships ----
    tags: Mapped[List["Tag"]] = relationship(
        "Tag", secondary=entry_tags, back_populates="entries"
    )

    # ---- Computed properties ----
    @property
    def secondary_moods(self) -> List[Mood]:
        """Secondary moods in the order they were given."""
        return [m for m in (self.secondary_mood_1, self.secondary_mood_2) if m is not None]

    @property
    def moods(self) -> List[Mood]:
        """Every mood mention of this entry, primary first."""
        return [self.primary_mood, *self.secondary_moods]

    @property
    def tag_names(self) -> List[str]:
        """Display names of the entry's tags, alphabetically."""
        return sorted((tag.name for tag in self.tags), key=str.lower)

    @property
    def reading_time(self) -> float:
        """Estimated reading time in minutes."""
        return reading_time(self.word_count or 0)

    @property
    def date_formatted(self) -> str:
        """Get date in YYYY-MM-DD format"""
        return self.date.isoformat()

    def __repr__(self) -> str:
        return f"<JournalEntry(id={self.id}, user_id={self.user_id}, date={self.date})>"
