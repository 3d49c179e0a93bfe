#!/usr/bin/env python3
"""
aggregator.py
--------------------
Dashboard statistics derived from a user's entries and tags.

The aggregator is pure: it takes already-loaded entries and tags plus the
reference day and returns an AnalyticsSnapshot. Mood valence comes from the
injected seed catalog.

Usage:
    aggregator = AnalyticsAggregator(seeds)
    snapshot = aggregator.build(entries, tags, today=date(2026, 10, 19))
    snapshot.frequent_moods[0].mood  # -> "Calm"
"""
from __future__ import annotations

from collections import Counter
from datetime import date, timedelta
from typing import TYPE_CHECKING, Dict, Iterable, List, Optional, Sequence

from moodjournal.core.logging_manager import JournalLogger, safe_logger
from moodjournal.core.seeds import VALENCES, SeedData

from .snapshots import AnalyticsSnapshot, MoodStat, TagStat, WordCountPoint
from .streaks import calculate_streaks

if TYPE_CHECKING:
    from moodjournal.database.models import JournalEntry, Tag

TOP_N = 5
TREND_DAYS = 30


class AnalyticsAggregator:
    """Builds AnalyticsSnapshot values from entries and tags."""

    def __init__(self, seeds: Optional[SeedData] = None, logger: Optional[JournalLogger] = None):
        self.seeds = seeds or SeedData()
        self.logger = logger

    def build(
        self,
        entries: Sequence[JournalEntry],
        tags: Iterable[Tag],
        today: date,
    ) -> AnalyticsSnapshot:
        """
        Aggregate statistics for one user.

        Args:
            entries: All entries of the user
            tags: All tags of the user (usage counters are read as stored)
            today: Last day of the word-count trend and streak reference

        Returns:
            AnalyticsSnapshot
        """
        mood_counts = self.count_moods(entries)
        moods = self.mood_distribution(mood_counts)
        tag_stats = self.tag_breakdown(tags)

        total_words = sum(entry.word_count or 0 for entry in entries)
        average = round(total_words / len(entries), 1) if entries else 0.0

        snapshot = AnalyticsSnapshot(
            mood_distribution=tuple(moods),
            frequent_moods=tuple(moods[:TOP_N]),
            tag_breakdown=tuple(tag_stats),
            most_used_tags=tuple(tag_stats[:TOP_N]),
            word_count_trend=tuple(self.word_count_trend(entries, today)),
            total_entries=len(entries),
            total_words=total_words,
            average_word_count=average,
            streaks=calculate_streaks((entry.date for entry in entries), today),
            valence_breakdown=self.valence_breakdown(mood_counts),
        )

        safe_logger(self.logger).log_debug(
            "analytics_built",
            {"entries": len(entries), "moods": len(moods), "tags": len(tag_stats)},
        )
        return snapshot

    # ---- Moods ----
    @staticmethod
    def count_moods(entries: Iterable[JournalEntry]) -> Counter:
        """Count every mood mention (primary and secondary separately)."""
        counts: Counter = Counter()
        for entry in entries:
            for mood in entry.moods:
                counts[mood.value] += 1
        return counts

    @staticmethod
    def mood_distribution(counts: Counter) -> List[MoodStat]:
        """Mood shares, most mentioned first; ties by mood name."""
        total = sum(counts.values())
        if not total:
            return []
        ordered = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
        return [
            MoodStat(mood=mood, count=count, percentage=round(100 * count / total, 2))
            for mood, count in ordered
        ]

    def valence_breakdown(self, counts: Counter) -> Dict[str, int]:
        """Mood mentions per valence; moods missing from the catalog are skipped."""
        breakdown = {valence: 0 for valence in VALENCES}
        for mood, count in counts.items():
            valence = self.seeds.valence_of(mood)
            if valence in breakdown:
                breakdown[valence] += count
        return breakdown

    # ---- Tags ----
    @staticmethod
    def tag_breakdown(tags: Iterable[Tag]) -> List[TagStat]:
        """Tags by stored usage, most used first; ties alphabetical."""
        stats = [
            TagStat(name=tag.name, count=tag.usage_count or 0, color=tag.color)
            for tag in tags
        ]
        return sorted(stats, key=lambda s: (-s.count, s.name.lower()))

    # ---- Words ----
    @staticmethod
    def word_count_trend(
        entries: Iterable[JournalEntry], today: date, days: int = TREND_DAYS
    ) -> List[WordCountPoint]:
        """Daily word counts for the `days` days ending today, zero-filled."""
        start = today - timedelta(days=days - 1)
        by_day: Dict[date, int] = {}
        for entry in entries:
            if start <= entry.date <= today:
                by_day[entry.date] = by_day.get(entry.date, 0) + (entry.word_count or 0)
        return [
            WordCountPoint(day=day, word_count=by_day.get(day, 0))
            for day in (start + timedelta(days=offset) for offset in range(days))
        ]
