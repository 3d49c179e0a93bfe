#!/usr/bin/env python3
"""
streaks.py
--------------------
Streak calculation over the days that have a journal entry.

A streak is a maximal run of consecutive calendar days each having an
entry. The current streak is still alive only if its last day is today or
yesterday; entries dated after today count toward the longest streak,
missed days and total, never toward the current streak.

Examples:
    >>> today = date(2026, 10, 19)
    >>> calculate_streaks([today, today - timedelta(days=2)], today)
    StreakSnapshot(current_streak=1, longest_streak=1, missed_days=1, total_entries=2)
"""
from __future__ import annotations

from datetime import date, timedelta
from typing import Iterable, List

from .snapshots import StreakSnapshot

ONE_DAY = timedelta(days=1)


def calculate_streaks(dates: Iterable[date], today: date) -> StreakSnapshot:
    """
    Compute current and longest streaks, missed days and distinct day count.

    Args:
        dates: Entry dates (duplicates and any order allowed)
        today: Reference day for the current streak

    Returns:
        StreakSnapshot (all zeros for no dates)
    """
    days: List[date] = sorted(set(dates))
    if not days:
        return StreakSnapshot()

    longest = run = 1
    missed = 0
    for previous, current in zip(days, days[1:]):
        gap = (current - previous).days
        if gap == 1:
            run += 1
        else:
            missed += gap - 1
            run = 1
        longest = max(longest, run)

    return StreakSnapshot(
        current_streak=_current_streak(days, today),
        longest_streak=longest,
        missed_days=missed,
        total_entries=len(days),
    )


def _current_streak(days: List[date], today: date) -> int:
    past = [d for d in days if d <= today]
    if not past or past[-1] < today - ONE_DAY:
        return 0

    streak = 1
    for previous, current in zip(reversed(past[:-1]), reversed(past[1:])):
        if current - previous != ONE_DAY:
            break
        streak += 1
    return streak
