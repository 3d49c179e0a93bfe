"""
Analytics Package
------------------

Pure statistics over already-loaded journal entries.

- streaks: calculate_streaks
- aggregator: AnalyticsAggregator (mood, tag, word-count statistics)
- snapshots: Immutable result types
"""
from .snapshots import (
    AnalyticsSnapshot,
    MoodStat,
    StreakSnapshot,
    TagStat,
    WordCountPoint,
)
from .streaks import calculate_streaks
from .aggregator import AnalyticsAggregator

__all__ = [
    "AnalyticsAggregator",
    "AnalyticsSnapshot",
    "MoodStat",
    "StreakSnapshot",
    "TagStat",
    "WordCountPoint",
    "calculate_streaks",
]
