#!/usr/bin/env python3
"""
tag_manager.py
--------------------
Manages Tag entities and keeps their usage counters consistent.

Tags are per-user keyword labels. A tag's identity is its lower-cased,
trimmed name; the display name is the spelling used the first time the tag
was created. usage_count is a stored counter equal to the number of live
entries referencing the tag, maintained by reconcile() on every entry save
and delete.

Key Features:
    - Two-way usage reconciliation between an entry's old and new tag sets
    - Lazy get-or-create semantics for tag lookup
    - Seed prepopulation for new profiles
    - Usage verification and rebuild from the entry associations

Usage:
    tag_mgr = TagManager(session, logger)

    # Entry saved with {"Work", "Health"} where it used to have {"Work", "Family"}
    rows = tag_mgr.reconcile(user_id, {"Work", "Family"}, {"Work", "Health"})

    # Catalog
    all_tags = tag_mgr.get_all(user_id, order_by="usage_count")
    mismatches = tag_mgr.verify_usage(user_id)
"""
from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Tuple

from sqlalchemy import func, select

from moodjournal.core.exceptions import NotFoundError, ValidationError
from moodjournal.core.logging_manager import safe_logger
from moodjournal.core.seeds import DEFAULT_TAG_COLOR, SeedData
from moodjournal.core.validators import DataValidator
from moodjournal.database.decorators import handle_db_errors, log_database_operation
from moodjournal.database.models import Tag, entry_tags
from .base_manager import BaseManager


class TagManager(BaseManager):
    """
    Manages Tag table operations and usage counters.

    All methods work inside the caller's session; nothing here commits.
    """

    # -------------------------------------------------------------------------
    # Usage Reconciliation
    # -------------------------------------------------------------------------

    @handle_db_errors
    @log_database_operation("reconcile_tags")
    def reconcile(
        self,
        user_id: int,
        previous_tags: Optional[Iterable[str]],
        new_tags: Optional[Iterable[str]],
    ) -> List[Tag]:
        """
        Apply the usage delta between an entry's previous and new tag sets.

        Names are compared by their case-insensitive key; blank names are
        ignored. Tags only in the new set are created (usage 1) or
        incremented. Tags only in the previous set are decremented, floored
        at zero. Tags in both sets are untouched.

        Args:
            user_id: Owning profile
            previous_tags: Tag names the entry had before this save
                (empty for a new entry)
            new_tags: Tag names the entry has after this save
                (empty for a delete)

        Returns:
            Tag rows for new_tags, in first-seen order
        """
        previous = DataValidator.normalize_tag_names(previous_tags)
        new = DataValidator.normalize_tag_names(new_tags)

        added = [key for key in new if key not in previous]
        removed = [key for key in previous if key not in new]

        rows: Dict[str, Tag] = {}

        for key in added:
            tag = self._get_by_key(user_id, key)
            if tag is None:
                tag = self._get_or_create(
                    Tag,
                    {"user_id": user_id, "name_key": key},
                    {"name": new[key], "color": DEFAULT_TAG_COLOR, "usage_count": 1},
                )
            else:
                tag.usage_count = (tag.usage_count or 0) + 1
            rows[key] = tag

        for key in removed:
            tag = self._get_by_key(user_id, key)
            if tag is None:
                safe_logger(self.logger).log_debug(
                    "tag_decrement_skipped",
                    {"user_id": user_id, "tag": previous[key]},
                )
                continue
            tag.usage_count = max(0, (tag.usage_count or 0) - 1)

        for key in new:
            if key not in rows:
                tag = self._get_by_key(user_id, key)
                if tag is None:
                    # The entry referenced a tag that was since deleted
                    tag = self._get_or_create(
                        Tag,
                        {"user_id": user_id, "name_key": key},
                        {"name": new[key], "color": DEFAULT_TAG_COLOR, "usage_count": 1},
                    )
                rows[key] = tag

        self.session.flush()
        return [rows[key] for key in new]

    # -------------------------------------------------------------------------
    # Catalog Operations
    # -------------------------------------------------------------------------

    def _get_by_key(self, user_id: int, key: str) -> Optional[Tag]:
        return (
            self.session.query(Tag)
            .filter_by(user_id=user_id, name_key=key)
            .one_or_none()
        )

    @handle_db_errors
    @log_database_operation("get_tag")
    def get(self, user_id: int, name: str) -> Optional[Tag]:
        """
        Retrieve a tag by name (case-insensitive).

        Returns:
            Tag object if found, None otherwise
        """
        key = DataValidator.tag_key(name)
        if not key:
            return None
        return self._get_by_key(user_id, key)

    @handle_db_errors
    @log_database_operation("get_tag_by_id")
    def get_by_id(self, tag_id: int) -> Optional[Tag]:
        return self.session.get(Tag, tag_id)

    @handle_db_errors
    @log_database_operation("get_all_tags")
    def get_all(self, user_id: int, order_by: str = "name") -> List[Tag]:
        """
        Retrieve all tags of a user.

        Args:
            user_id: Owning profile
            order_by: "name" (alphabetical) or "usage_count" (most used first,
                ties alphabetical)

        Returns:
            List of Tag objects
        """
        query = self.session.query(Tag).filter(Tag.user_id == user_id)
        if order_by == "usage_count":
            query = query.order_by(Tag.usage_count.desc(), Tag.name_key)
        else:
            query = query.order_by(Tag.name_key)
        return query.all()

    @handle_db_errors
    @log_database_operation("get_or_create_tag")
    def get_or_create(
        self, user_id: int, name: str, color: Optional[str] = None
    ) -> Tag:
        """
        Get an existing tag or create it with zero usage.

        Raises:
            ValidationError: If name is blank
        """
        display = DataValidator.normalize_string(name)
        if not display:
            raise ValidationError("Tag cannot be empty")

        return self._get_or_create(
            Tag,
            {"user_id": user_id, "name_key": display.lower()},
            {"name": display, "color": color or DEFAULT_TAG_COLOR, "usage_count": 0},
        )

    @handle_db_errors
    @log_database_operation("update_tag_color")
    def update_color(self, tag_id: int, color: str) -> Tag:
        """
        Change a tag's display colour.

        Raises:
            NotFoundError: If the tag does not exist
            ValidationError: If color is blank
        """
        tag = self.session.get(Tag, tag_id)
        if tag is None:
            raise NotFoundError(f"Tag not found: {tag_id}")

        value = DataValidator.normalize_string(color)
        if not value:
            raise ValidationError("Tag colour cannot be empty")

        tag.color = value
        self.session.flush()
        return tag

    @handle_db_errors
    @log_database_operation("delete_tag")
    def delete(self, tag_id: int) -> bool:
        """
        Explicitly remove a tag, detaching it from every entry.

        Returns:
            True if a tag was removed, False if it did not exist
        """
        tag = self.session.get(Tag, tag_id)
        if tag is None:
            return False

        tag.entries.clear()
        self.session.delete(tag)
        self.session.flush()

        safe_logger(self.logger).log_debug(
            "tag_deleted", {"user_id": tag.user_id, "tag_id": tag_id, "tag": tag.name}
        )
        return True

    @handle_db_errors
    @log_database_operation("prepopulate_tags")
    def prepopulate(self, user_id: int, seeds: SeedData) -> List[Tag]:
        """
        Insert the seed tags for a profile that has none yet.

        Returns:
            Newly created tags (empty when the user already had tags)
        """
        has_tags = (
            self.session.query(Tag.id).filter(Tag.user_id == user_id).first()
            is not None
        )
        if has_tags:
            return []

        created: List[Tag] = []
        seen = set()
        for seed in seeds.tags:
            key = DataValidator.tag_key(seed.name)
            if not key or key in seen:
                continue
            seen.add(key)
            tag = Tag(
                user_id=user_id,
                name=seed.name.strip(),
                name_key=key,
                color=seed.color or DEFAULT_TAG_COLOR,
                usage_count=0,
            )
            self.session.add(tag)
            created.append(tag)

        self.session.flush()
        return created

    # -------------------------------------------------------------------------
    # Integrity
    # -------------------------------------------------------------------------

    def _actual_usage(self, user_id: int) -> Dict[int, int]:
        stmt = (
            select(entry_tags.c.tag_id, func.count(entry_tags.c.entry_id))
            .join(Tag, Tag.id == entry_tags.c.tag_id)
            .where(Tag.user_id == user_id)
            .group_by(entry_tags.c.tag_id)
        )
        return {tag_id: count for tag_id, count in self.session.execute(stmt)}

    @handle_db_errors
    @log_database_operation("verify_tag_usage")
    def verify_usage(self, user_id: int) -> Dict[str, Tuple[int, int]]:
        """
        Compare stored usage counters with the entry associations.

        Returns:
            {tag name: (stored, actual)} for every tag that disagrees
        """
        actual = self._actual_usage(user_id)
        return {
            tag.name: (tag.usage_count, actual.get(tag.id, 0))
            for tag in self.get_all(user_id)
            if tag.usage_count != actual.get(tag.id, 0)
        }

    @handle_db_errors
    @log_database_operation("rebuild_tag_usage")
    def rebuild_usage(self, user_id: int) -> int:
        """
        Recompute every usage counter of a user from the entry associations.

        Returns:
            Number of tags whose counter changed
        """
        actual = self._actual_usage(user_id)
        changed = 0
        for tag in self.get_all(user_id):
            count = actual.get(tag.id, 0)
            if tag.usage_count != count:
                tag.usage_count = count
                changed += 1
        self.session.flush()
        return changed
