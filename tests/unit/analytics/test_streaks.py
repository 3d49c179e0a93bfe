"""
test_streaks.py
---------------
Unit tests for calculate_streaks().
"""
from datetime import date, timedelta

from moodjournal.analytics import StreakSnapshot, calculate_streaks

T = date(2026, 10, 19)


def days_ago(n):
    return T - timedelta(days=n)


class TestCalculateStreaks:
    """Test streak calculation."""

    def test_empty_is_all_zero(self):
        assert calculate_streaks([], T) == StreakSnapshot(0, 0, 0, 0)

    def test_full_run_ending_today(self):
        result = calculate_streaks([T, days_ago(1), days_ago(2)], T)
        assert result == StreakSnapshot(
            current_streak=3, longest_streak=3, missed_days=0, total_entries=3
        )

    def test_gap_breaks_streak(self):
        result = calculate_streaks([T, days_ago(2)], T)
        assert result == StreakSnapshot(
            current_streak=1, longest_streak=1, missed_days=1, total_entries=2
        )

    def test_stale_streak_is_zero(self):
        result = calculate_streaks([days_ago(5)], T)
        assert result == StreakSnapshot(
            current_streak=0, longest_streak=1, missed_days=0, total_entries=1
        )

    def test_streak_ending_yesterday_is_alive(self):
        result = calculate_streaks([days_ago(1), days_ago(2)], T)
        assert result.current_streak == 2

    def test_duplicates_and_order_ignored(self):
        result = calculate_streaks([days_ago(1), T, T, days_ago(1)], T)
        assert result.total_entries == 2
        assert result.current_streak == 2

    def test_longest_streak_in_the_past(self):
        dates = [days_ago(20), days_ago(19), days_ago(18), days_ago(17), T]
        result = calculate_streaks(dates, T)
        assert result.longest_streak == 4
        assert result.current_streak == 1
        assert result.missed_days == 16

    def test_future_dates_do_not_extend_current_streak(self):
        tomorrow = T + timedelta(days=1)
        result = calculate_streaks([T, tomorrow], T)
        assert result.current_streak == 1
        assert result.longest_streak == 2
        assert result.total_entries == 2

    def test_only_future_dates(self):
        result = calculate_streaks([T + timedelta(days=3)], T)
        assert result.current_streak == 0
        assert result.longest_streak == 1

    def test_missed_days_sum_over_gaps(self):
        dates = [days_ago(10), days_ago(7), days_ago(6), days_ago(2)]
        # gaps of 3 and 4 days leave 2 + 3 missed days
        assert calculate_streaks(dates, T).missed_days == 5
