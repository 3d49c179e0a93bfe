"""
test_entry_manager.py
---------------------
Unit tests for EntryManager: validation, saves, deletes and queries.

Target Coverage: 90%+
"""
from datetime import date, datetime, timedelta

import pytest

from moodjournal.core.exceptions import EntryValidationError, ValidationError
from moodjournal.database.managers.entry_manager import EntryManager
from moodjournal.database.models import Mood
from moodjournal.database.results import DeleteResult, SaveStatus

TODAY = date(2026, 10, 19)


def make_entry_data(**overrides):
    data = {
        "user_id": 1,
        "date": TODAY,
        "title": "A day",
        "content": "Walked to the market and back.",
        "primary_mood": "Calm",
        "secondary_moods": [],
        "tags": [],
    }
    data.update(overrides)
    return data


class TestValidate:
    """Test EntryManager.validate()."""

    def test_normalizes_values(self):
        values = EntryManager.validate(
            make_entry_data(
                date="2026-10-19",
                title="  Walk  ",
                primary_mood="happy",
                secondary_moods="Grateful, calm",
                tags=["Work", "work", "Health"],
            )
        )
        assert values.entry_date == TODAY
        assert values.title == "Walk"
        assert values.primary_mood is Mood.HAPPY
        assert values.secondary_moods == [Mood.GRATEFUL, Mood.CALM]
        assert values.tags == {"work": "Work", "health": "Health"}

    def test_numbered_secondary_fields(self):
        values = EntryManager.validate(
            {
                "user_id": 1,
                "date": TODAY,
                "content": "x",
                "primary_mood": "Sad",
                "secondary_mood_1": "Tired",
                "secondary_mood_2": None,
            }
        )
        assert values.secondary_moods == [Mood.TIRED]

    def test_missing_title_is_empty(self):
        assert EntryManager.validate(make_entry_data(title=None)).title == ""

    @pytest.mark.parametrize(
        "overrides,message",
        [
            ({"user_id": None}, "user_id"),
            ({"date": None}, "date"),
            ({"date": "yesterday"}, "date"),
            ({"content": "   "}, "content"),
            ({"content": None}, "content"),
            ({"primary_mood": None}, "primary mood"),
            ({"primary_mood": "Elated"}, "primary mood"),
            ({"secondary_moods": ["Elated"]}, "secondary mood"),
            ({"secondary_moods": ["Calm"]}, "repeats the primary"),
            ({"secondary_moods": ["Sad", "sad"]}, "given twice"),
            ({"secondary_moods": ["Sad", "Tired", "Bored"]}, "At most 2"),
        ],
    )
    def test_rejects(self, overrides, message):
        with pytest.raises(EntryValidationError, match=message):
            EntryManager.validate(make_entry_data(**overrides))


class TestSaveCreate:
    """Test creating entries through save()."""

    def test_create(self, entry_manager):
        result = entry_manager.save(
            make_entry_data(content="<p>Three <b>little</b> words</p>", tags=["Work"])
        )

        assert result.status is SaveStatus.CREATED
        assert result.ok
        entry = result.entry
        assert entry.id is not None
        assert entry.word_count == 3
        assert entry.tag_names == ["Work"]
        assert entry.created_at is not None
        assert entry.updated_at == entry.created_at

    def test_create_updates_tag_usage(self, entry_manager, tag_manager):
        entry_manager.save(make_entry_data(tags=["Work", "Health"]))
        entry_manager.save(make_entry_data(date=TODAY - timedelta(days=1), tags=["work"]))

        assert tag_manager.get(1, "Work").usage_count == 2
        assert tag_manager.get(1, "Health").usage_count == 1

    def test_duplicate_date_conflicts(self, entry_manager, tag_manager):
        first = entry_manager.save(make_entry_data(tags=["Work"]))
        second = entry_manager.save(
            make_entry_data(date=datetime(2026, 10, 19, 22, 0), tags=["Work"])
        )

        assert second.status is SaveStatus.CONFLICT
        assert second.existing_id == first.entry.id
        assert second.entry is None
        assert tag_manager.get(1, "Work").usage_count == 1
        assert entry_manager.count(1) == 1

    def test_same_date_other_user(self, entry_manager):
        entry_manager.save(make_entry_data())
        result = entry_manager.save(make_entry_data(user_id=2))
        assert result.status is SaveStatus.CREATED

    def test_invalid_returns_result(self, entry_manager):
        result = entry_manager.save(make_entry_data(content=""))
        assert result.status is SaveStatus.VALIDATION_ERROR
        assert "content" in result.reason
        assert entry_manager.count(1) == 0

    def test_invalid_id(self, entry_manager):
        result = entry_manager.save(make_entry_data(id="abc"))
        assert result.status is SaveStatus.VALIDATION_ERROR


class TestSaveUpdate:
    """Test updating entries through save()."""

    def test_update_in_place(self, entry_manager):
        created = entry_manager.save(make_entry_data(content="one two")).entry
        result = entry_manager.save(
            make_entry_data(
                id=created.id,
                content="one two three four",
                primary_mood="Happy",
                secondary_moods=["Excited"],
            )
        )

        assert result.status is SaveStatus.UPDATED
        entry = result.entry
        assert entry.id == created.id
        assert entry.word_count == 4
        assert entry.primary_mood is Mood.HAPPY
        assert entry.secondary_moods == [Mood.EXCITED]
        assert entry.updated_at >= entry.created_at

    def test_update_reconciles_tags(self, entry_manager, tag_manager):
        created = entry_manager.save(make_entry_data(tags=["Work", "Family"])).entry
        entry_manager.save(make_entry_data(id=created.id, tags=["Work", "Health"]))

        assert tag_manager.get(1, "Work").usage_count == 1
        assert tag_manager.get(1, "Family").usage_count == 0
        assert tag_manager.get(1, "Health").usage_count == 1

    def test_update_clears_secondary_moods(self, entry_manager):
        created = entry_manager.save(make_entry_data(secondary_moods=["Tired"])).entry
        entry = entry_manager.save(make_entry_data(id=created.id)).entry
        assert entry.secondary_mood_1 is None
        assert entry.secondary_moods == []

    def test_update_missing(self, entry_manager):
        result = entry_manager.save(make_entry_data(id=999))
        assert result.status is SaveStatus.NOT_FOUND

    def test_update_onto_occupied_date(self, entry_manager):
        first = entry_manager.save(make_entry_data()).entry
        second = entry_manager.save(make_entry_data(date=TODAY - timedelta(days=1))).entry

        result = entry_manager.save(make_entry_data(id=second.id, date=TODAY))
        assert result.status is SaveStatus.CONFLICT
        assert result.existing_id == first.id

    def test_move_to_free_date(self, entry_manager):
        entry = entry_manager.save(make_entry_data()).entry
        moved = entry_manager.save(make_entry_data(id=entry.id, date="2026-10-01")).entry
        assert moved.date == date(2026, 10, 1)

    def test_owner_cannot_change(self, entry_manager):
        entry = entry_manager.save(make_entry_data()).entry
        result = entry_manager.save(make_entry_data(id=entry.id, user_id=2))
        assert result.status is SaveStatus.VALIDATION_ERROR


class TestDelete:
    """Test EntryManager.delete()."""

    def test_delete_releases_tags(self, entry_manager, tag_manager):
        entry = entry_manager.save(make_entry_data(tags=["Work"])).entry

        assert entry_manager.delete(entry.id) is DeleteResult.DELETED
        assert entry_manager.get_by_id(entry.id) is None
        assert tag_manager.get(1, "Work").usage_count == 0

    def test_delete_twice(self, entry_manager, tag_manager):
        entry = entry_manager.save(make_entry_data(tags=["Work"])).entry
        entry_manager.delete(entry.id)

        assert entry_manager.delete(entry.id) is DeleteResult.NOT_FOUND
        assert tag_manager.get(1, "Work").usage_count == 0

    def test_delete_other_users_entry(self, entry_manager):
        entry = entry_manager.save(make_entry_data()).entry
        assert entry_manager.delete(entry.id, user_id=2) is DeleteResult.NOT_FOUND
        assert entry_manager.get_by_id(entry.id) is not None


@pytest.fixture
def journal(entry_manager):
    """Five entries of user 1 and one of user 2."""
    rows = [
        ("2026-10-19", "Calm", [], ["Work"], "Quiet office day"),
        ("2026-10-18", "Happy", ["Grateful"], ["Family"], "Picnic in the park"),
        ("2026-10-15", "Sad", ["Calm"], ["Health", "work"], "Dentist 100% done"),
        ("2026-09-30", "Tired", [], [], "Long week at the office"),
        ("2026-09-02", "Calm", [], ["Family"], "First day of school"),
    ]
    for day, mood, secondary, tags, content in rows:
        entry_manager.save(
            make_entry_data(
                date=day,
                primary_mood=mood,
                secondary_moods=secondary,
                tags=tags,
                content=content,
                title=None,
            )
        )
    entry_manager.save(make_entry_data(user_id=2, content="Office of user two"))
    return entry_manager


def _dates(entries):
    return [e.date_formatted for e in entries]


class TestQueries:
    """Test read operations."""

    def test_get_all_newest_first(self, journal):
        assert _dates(journal.get_all(1)) == [
            "2026-10-19", "2026-10-18", "2026-10-15", "2026-09-30", "2026-09-02",
        ]

    def test_get_by_date(self, journal):
        entry = journal.get_by_date(1, "2026-10-18")
        assert entry.content == "Picnic in the park"
        assert journal.get_by_date(1, "2026-10-17") is None

    def test_get_by_date_invalid(self, journal):
        with pytest.raises(ValidationError):
            journal.get_by_date(1, "soon")

    def test_search_case_insensitive(self, journal):
        assert _dates(journal.search(1, "OFFICE")) == ["2026-10-19", "2026-09-30"]

    def test_search_escapes_wildcards(self, journal):
        assert _dates(journal.search(1, "100%")) == ["2026-10-15"]
        assert journal.search(1, "_") == []

    def test_search_blank_returns_all(self, journal):
        assert len(journal.search(1, "  ")) == 5

    def test_filter_date_range(self, journal):
        result = journal.filter(1, start="2026-10-01", end="2026-10-18")
        assert _dates(result) == ["2026-10-18", "2026-10-15"]

    def test_filter_mood_matches_secondary(self, journal):
        assert _dates(journal.filter(1, mood="calm")) == [
            "2026-10-19", "2026-10-15", "2026-09-02",
        ]

    def test_filter_tags_any(self, journal):
        assert _dates(journal.filter(1, tags=["WORK", "family"])) == [
            "2026-10-19", "2026-10-18", "2026-10-15", "2026-09-02",
        ]

    def test_filter_combined(self, journal):
        result = journal.filter(1, start="2026-10-01", mood="Calm", tags=["Health"])
        assert _dates(result) == ["2026-10-15"]

    def test_filter_rejects_inverted_range(self, journal):
        with pytest.raises(ValidationError):
            journal.filter(1, start="2026-10-18", end="2026-10-01")

    def test_filter_rejects_unknown_mood(self, journal):
        with pytest.raises(ValidationError):
            journal.filter(1, mood="Elated")

    def test_get_page(self, journal):
        assert _dates(journal.get_page(1, page=2, page_size=2)) == [
            "2026-10-15", "2026-09-30",
        ]
        assert journal.get_page(1, page=4, page_size=2) == []

    def test_get_page_invalid(self, journal):
        with pytest.raises(ValidationError):
            journal.get_page(1, page=0)

    def test_count(self, journal):
        assert journal.count(1) == 5
        assert journal.count(2) == 1

    def test_dates_in_month(self, journal):
        assert journal.get_dates_in_month(1, 2026, 10) == [
            date(2026, 10, 15), date(2026, 10, 18), date(2026, 10, 19),
        ]

    def test_dates_in_month_invalid(self, journal):
        with pytest.raises(ValidationError):
            journal.get_dates_in_month(1, 2026, 13)

    def test_distinct_dates(self, journal):
        assert journal.get_distinct_dates(1)[0] == date(2026, 9, 2)
        assert len(journal.get_distinct_dates(1)) == 5
