"""
test_tag_manager.py
-------------------
Unit tests for TagManager: usage reconciliation and catalog operations.

Covers the two-way usage delta applied on entry saves and deletes,
case-insensitive identity, seeding, and counter verification.
"""
import pytest

from moodjournal.core.exceptions import NotFoundError, ValidationError
from moodjournal.core.seeds import SeedData, TagSeed
from moodjournal.database.managers.tag_manager import TagManager
from moodjournal.database.models import JournalEntry, Mood, Tag


def _usage(tag_manager, name, user_id=1):
    tag = tag_manager.get(user_id, name)
    return None if tag is None else tag.usage_count


class TestReconcile:
    """Test TagManager.reconcile()."""

    def test_new_tags_created_with_usage_one(self, tag_manager):
        rows = tag_manager.reconcile(1, [], ["Work", "Health"])

        assert [t.name for t in rows] == ["Work", "Health"]
        assert all(t.usage_count == 1 for t in rows)
        assert all(t.color == "#AAAAAA" for t in rows)

    def test_existing_tag_incremented(self, tag_manager):
        tag_manager.reconcile(1, [], ["Work"])
        tag_manager.reconcile(1, [], ["Work"])
        assert _usage(tag_manager, "Work") == 2

    def test_removed_tag_decremented(self, tag_manager):
        tag_manager.reconcile(1, [], ["Work"])
        tag_manager.reconcile(1, [], ["Work"])
        tag_manager.reconcile(1, ["Work"], [])
        assert _usage(tag_manager, "Work") == 1

    def test_unchanged_tags_untouched(self, tag_manager):
        tag_manager.reconcile(1, [], ["Work", "Family"])
        rows = tag_manager.reconcile(1, ["Work", "Family"], ["Work", "Health"])

        assert [t.name for t in rows] == ["Work", "Health"]
        assert _usage(tag_manager, "Work") == 1
        assert _usage(tag_manager, "Family") == 0
        assert _usage(tag_manager, "Health") == 1

    def test_decrement_floors_at_zero(self, tag_manager):
        tag_manager.get_or_create(1, "Work")
        tag_manager.reconcile(1, ["Work"], [])
        tag_manager.reconcile(1, ["Work"], [])
        assert _usage(tag_manager, "Work") == 0

    def test_decrement_missing_tag_is_skipped(self, tag_manager):
        assert tag_manager.reconcile(1, ["Ghost"], []) == []
        assert tag_manager.get(1, "Ghost") is None

    def test_case_insensitive_identity(self, tag_manager):
        tag_manager.reconcile(1, [], ["Work"])
        rows = tag_manager.reconcile(1, [], ["WORK", "work "])

        assert len(rows) == 1
        assert rows[0].name == "Work"
        assert rows[0].usage_count == 2
        assert len(tag_manager.get_all(1)) == 1

    def test_respelling_is_not_a_change(self, tag_manager):
        tag_manager.reconcile(1, [], ["Work"])
        tag_manager.reconcile(1, ["Work"], ["work"])
        assert _usage(tag_manager, "Work") == 1

    def test_blank_names_ignored(self, tag_manager):
        rows = tag_manager.reconcile(1, [], ["", "   ", "Work"])
        assert [t.name for t in rows] == ["Work"]

    def test_users_have_separate_catalogs(self, tag_manager):
        tag_manager.reconcile(1, [], ["Work"])
        tag_manager.reconcile(2, [], ["Work"])

        assert _usage(tag_manager, "Work", user_id=1) == 1
        assert _usage(tag_manager, "Work", user_id=2) == 1
        assert tag_manager.get(1, "Work").id != tag_manager.get(2, "Work").id

    def test_kept_tag_recreated_when_missing(self, tag_manager):
        rows = tag_manager.reconcile(1, ["Work"], ["Work"])
        assert rows[0].name == "Work"
        assert rows[0].usage_count == 1


class TestCatalog:
    """Test lookup, listing and explicit maintenance."""

    def test_get_is_case_insensitive(self, tag_manager):
        tag_manager.get_or_create(1, "Health")
        assert tag_manager.get(1, "  HEALTH ").name == "Health"

    def test_get_blank_returns_none(self, tag_manager):
        assert tag_manager.get(1, "") is None

    def test_get_or_create_returns_existing(self, tag_manager):
        first = tag_manager.get_or_create(1, "Work", color="#123456")
        second = tag_manager.get_or_create(1, "work")

        assert first.id == second.id
        assert second.color == "#123456"
        assert second.usage_count == 0

    def test_get_or_create_blank_raises(self, tag_manager):
        with pytest.raises(ValidationError):
            tag_manager.get_or_create(1, "  ")

    def test_get_all_by_name(self, tag_manager):
        tag_manager.reconcile(1, [], ["beta", "Alpha"])
        assert [t.name for t in tag_manager.get_all(1)] == ["Alpha", "beta"]

    def test_get_all_by_usage(self, tag_manager):
        tag_manager.reconcile(1, [], ["Alpha", "Beta"])
        tag_manager.reconcile(1, [], ["Beta"])

        names = [t.name for t in tag_manager.get_all(1, order_by="usage_count")]
        assert names == ["Beta", "Alpha"]

    def test_update_color(self, tag_manager):
        tag = tag_manager.get_or_create(1, "Work")
        assert tag_manager.update_color(tag.id, "#FF0000").color == "#FF0000"

    def test_update_color_missing_tag(self, tag_manager):
        with pytest.raises(NotFoundError):
            tag_manager.update_color(999, "#FF0000")

    def test_update_color_blank(self, tag_manager):
        tag = tag_manager.get_or_create(1, "Work")
        with pytest.raises(ValidationError):
            tag_manager.update_color(tag.id, "")

    def test_delete_detaches_from_entries(self, tag_manager, db_session, today):
        tag = tag_manager.reconcile(1, [], ["Work"])[0]
        entry = JournalEntry(
            user_id=1, date=today, content="x", primary_mood=Mood.CALM, tags=[tag]
        )
        db_session.add(entry)
        db_session.flush()

        assert tag_manager.delete(tag.id) is True
        db_session.refresh(entry)
        assert entry.tags == []
        assert tag_manager.get(1, "Work") is None

    def test_delete_missing(self, tag_manager):
        assert tag_manager.delete(12345) is False


class TestPrepopulate:
    """Test seeding of starter tags."""

    def test_creates_seed_tags(self, tag_manager):
        seeds = SeedData(tags=(TagSeed("Work", "#29B6F6"), TagSeed("work"), TagSeed("Rest")))
        created = tag_manager.prepopulate(1, seeds)

        assert [t.name for t in created] == ["Work", "Rest"]
        assert tag_manager.get(1, "Work").color == "#29B6F6"
        assert all(t.usage_count == 0 for t in created)

    def test_skips_users_with_tags(self, tag_manager):
        tag_manager.get_or_create(1, "Mine")
        assert tag_manager.prepopulate(1, SeedData(tags=(TagSeed("Work"),))) == []

    def test_default_catalog(self, tag_manager, seeds):
        created = tag_manager.prepopulate(1, seeds)
        assert len(created) == len(seeds.tags)


class TestUsageIntegrity:
    """Test verify_usage() and rebuild_usage()."""

    def _entry(self, db_session, day, tags):
        entry = JournalEntry(
            user_id=1, date=day, content="x", primary_mood=Mood.CALM, tags=tags
        )
        db_session.add(entry)
        db_session.flush()
        return entry

    def test_consistent_counters(self, tag_manager, db_session, today):
        rows = tag_manager.reconcile(1, [], ["Work"])
        self._entry(db_session, today, rows)
        assert tag_manager.verify_usage(1) == {}

    def test_detects_and_rebuilds_drift(self, tag_manager, db_session, today):
        rows = tag_manager.reconcile(1, [], ["Work"])
        self._entry(db_session, today, rows)
        rows[0].usage_count = 5
        stale = Tag(user_id=1, name="Old", name_key="old", usage_count=2)
        db_session.add(stale)
        db_session.flush()

        assert tag_manager.verify_usage(1) == {"Old": (2, 0), "Work": (5, 1)}
        assert tag_manager.rebuild_usage(1) == 2
        assert tag_manager.verify_usage(1) == {}
        assert _usage(tag_manager, "Work") == 1


class TestLogging:
    """Log calls made by TagManager."""

    def test_missing_decrement_logged_at_debug(self, db_session, mock_logger):
        TagManager(db_session, mock_logger).reconcile(1, ["Ghost"], [])

        messages = [c.args[0] for c in mock_logger.log_debug.call_args_list]
        assert "tag_decrement_skipped" in messages
        mock_logger.log_error.assert_not_called()
