#!/usr/bin/env python3
"""
snapshots.py
--------------------
Immutable result types of the analytics layer.

All snapshots are plain frozen dataclasses with a `to_dict()` for JSON
output; none of them hold ORM objects.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import date
from typing import Any, Dict, Tuple


@dataclass(frozen=True)
class StreakSnapshot:
    """
    Date-based streak statistics.

    Attributes:
        current_streak: Run of consecutive days ending today or yesterday
        longest_streak: Longest run of consecutive days ever
        missed_days: Days without an entry between the first and last entry
        total_entries: Number of distinct days with an entry
    """

    current_streak: int = 0
    longest_streak: int = 0
    missed_days: int = 0
    total_entries: int = 0

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


@dataclass(frozen=True)
class MoodStat:
    """Mentions of one mood across all entries."""

    mood: str
    count: int
    percentage: float


@dataclass(frozen=True)
class TagStat:
    """Stored usage of one tag."""

    name: str
    count: int
    color: str


@dataclass(frozen=True)
class WordCountPoint:
    """Words written on one day (0 when no entry)."""

    day: date
    word_count: int


@dataclass(frozen=True)
class AnalyticsSnapshot:
    """
    Dashboard statistics for one user at one point in time.

    Attributes:
        mood_distribution: Every mentioned mood, most frequent first
        frequent_moods: Top five of mood_distribution
        tag_breakdown: Every tag, most used first
        most_used_tags: Top five tags by stored usage
        word_count_trend: Thirty daily points ending today
        total_entries: Number of entries
        total_words: Sum of word counts
        average_word_count: Mean word count, one decimal
        streaks: Streak statistics
        valence_breakdown: Mood mentions per valence
    """

    mood_distribution: Tuple[MoodStat, ...] = ()
    frequent_moods: Tuple[MoodStat, ...] = ()
    tag_breakdown: Tuple[TagStat, ...] = ()
    most_used_tags: Tuple[TagStat, ...] = ()
    word_count_trend: Tuple[WordCountPoint, ...] = ()
    total_entries: int = 0
    total_words: int = 0
    average_word_count: float = 0.0
    streaks: StreakSnapshot = field(default_factory=StreakSnapshot)
    valence_breakdown: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["word_count_trend"] = [
            {"day": point.day.isoformat(), "word_count": point.word_count}
            for point in self.word_count_trend
        ]
        return data
