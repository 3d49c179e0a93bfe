"""
Entity Models
--------------

Tag model for categorizing journal entries.

Models:
    - Tag: Per-user keyword with a maintained usage counter

usage_count is a stored counter, kept equal to the number of live entries
referencing the tag by TagManager.reconcile. Tags are never removed when
their usage drops to zero; only an explicit delete removes them.
"""

# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from datetime import datetime
from typing import TYPE_CHECKING, List

# --- Third party imports ---
from sqlalchemy import CheckConstraint, DateTime, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

# --- Local imports ---
from moodjournal.core.seeds import DEFAULT_TAG_COLOR

from .associations import entry_tags
from .base import Base, utc_now

if TYPE_CHECKING:
    from .core import JournalEntry


class Tag(Base):
    """
    Keyword tag owned by one user.

    Attributes:
        id: Primary key
        user_id: Owning profile
        name: Display spelling (first spelling used)
        name_key: Lower-cased name, unique per user
        color: Display colour (hex)
        usage_count: Number of live entries referencing this tag
        created_at: Creation timestamp

    Relationships:
        entries: Many-to-many with JournalEntry
    """

    __tablename__ = "tags"
    __table_args__ = (
        UniqueConstraint("user_id", "name_key", name="uq_tag_user_name"),
        CheckConstraint("name != ''", name="ck_non_empty_tag"),
        CheckConstraint("usage_count >= 0", name="ck_tag_positive_usage"),
    )

    # ---- Primary fields ----
    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    name_key: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    color: Mapped[str] = mapped_column(String(16), default=DEFAULT_TAG_COLOR, nullable=False)
    usage_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )

    # ---- Relationships ----
    entries: Mapped[List["JournalEntry"]] = relationship(
        "JournalEntry", secondary=entry_tags, back_populates="tags"
    )

    @property
    def linked_entry_count(self) -> int:
        """Number of entries actually linked to this tag."""
        return len(self.entries)

    def __repr__(self) -> str:
        return f"<Tag(id={self.id}, user_id={self.user_id}, name={self.name!r}, usage={self.usage_count})>"
