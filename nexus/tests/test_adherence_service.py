"""
Tests for the adherence engine.

Tests cover:
1. Due-day rules for every frequency
2. Current and longest streaks, including the today exemption
3. Completion rate and rounding
4. Last-completed labels
"""
import pytest
from datetime import date, datetime, timedelta, timezone
from types import SimpleNamespace

from nexus.schemas import HabitDocument
from nexus.services import adherence_service
from nexus.services.adherence_service import calculate_streak, is_due


def make_habit(created="2024-01-01", frequency="daily", target=1, completions=()):
    return HabitDocument(
        id="h1",
        title="Read",
        frequency=frequency,
        target=target,
        completions=list(completions),
        created_at=datetime.fromisoformat(created).replace(hour=8, tzinfo=timezone.utc),
    )


class TestIsDue:
    """Tests for is_due"""

    def test_daily_is_always_due(self):
        habit = make_habit(frequency="daily")
        start = date(2023, 12, 1)
        assert all(is_due(habit, start + timedelta(days=offset)) for offset in range(90))

    def test_weekdays_ignore_creation_date(self):
        """Weekday rules depend only on the calendar day"""
        monday_habit = make_habit(created="2024-01-01", frequency="weekdays")
        saturday_habit = make_habit(created="2024-01-06", frequency="weekdays")

        for offset in range(21):
            day = date(2024, 1, 1) + timedelta(days=offset)
            assert is_due(monday_habit, day) == is_due(saturday_habit, day) == (day.weekday() < 5)

    def test_weekends(self):
        habit = make_habit(frequency="weekends")
        assert is_due(habit, date(2024, 1, 6))  # Saturday
        assert is_due(habit, date(2024, 1, 7))  # Sunday
        assert not is_due(habit, date(2024, 1, 8))
        assert not is_due(habit, date(2024, 1, 12))

    def test_every_other_day_anchored_on_creation(self):
        habit = make_habit(created="2024-01-01", frequency="every-other-day")
        assert [is_due(habit, date(2024, 1, d)) for d in range(1, 7)] == [
            True, False, True, False, True, False
        ]

    def test_every_other_day_has_period_two(self):
        habit = make_habit(created="2024-01-02", frequency="every-other-day")
        assert is_due(habit, date(2024, 1, 2))
        for offset in range(30):
            day = date(2024, 1, 2) + timedelta(days=offset)
            assert is_due(habit, day) == is_due(habit, day + timedelta(days=2))
            assert is_due(habit, day) != is_due(habit, day + timedelta(days=1))

    def test_creation_day_uses_utc(self):
        """23:30 in New York on Jan 1 is already Jan 2 in UTC"""
        habit = make_habit(frequency="every-other-day")
        habit.created_at = datetime(2024, 1, 1, 23, 30, tzinfo=timezone(timedelta(hours=-5)))
        assert is_due(habit, date(2024, 1, 2))
        assert not is_due(habit, date(2024, 1, 1))

    def test_unknown_frequency_raises(self):
        habit = SimpleNamespace(
            frequency="monthly", target=1, completions=[], created_at=date(2024, 1, 1)
        )
        with pytest.raises(ValueError):
            is_due(habit, date(2024, 1, 1))


class TestCompletionCount:
    """Tests for completion_count and is_met"""

    def test_counts_repetitions_on_day(self):
        habit = make_habit(target=2, completions=["2024-01-03", "2024-01-03", "2024-01-04"])
        assert adherence_service.completion_count(habit, date(2024, 1, 3)) == 2
        assert adherence_service.completion_count(habit, "2024-01-04") == 1
        assert adherence_service.completion_count(habit, date(2024, 1, 5)) == 0

    def test_met_requires_target(self):
        habit = make_habit(target=2, completions=["2024-01-03", "2024-01-03", "2024-01-04"])
        assert adherence_service.is_met(habit, date(2024, 1, 3))
        assert not adherence_service.is_met(habit, date(2024, 1, 4))


class TestCalculateStreak:
    """Tests for calculate_streak"""

    def test_gap_yesterday_breaks_current(self):
        """Jan 3 missed: current restarts today, longest is Jan 1-2"""
        habit = make_habit(completions=["2024-01-01", "2024-01-02", "2024-01-04"])
        streak = calculate_streak(habit, date(2024, 1, 4))
        assert streak.current == 1
        assert streak.longest == 2
        assert streak.completion_rate == 75

    def test_unmet_today_does_not_break_streak(self):
        habit = make_habit(completions=["2024-01-01", "2024-01-02", "2024-01-04"])
        streak = calculate_streak(habit, date(2024, 1, 3))
        assert streak.current == 2
        assert streak.longest == 2

    def test_unmet_today_excluded_from_rate(self):
        habit = make_habit(completions=["2024-01-01", "2024-01-02"])
        assert calculate_streak(habit, date(2024, 1, 3)).completion_rate == 100

    def test_partial_target_today_is_exempt(self):
        habit = make_habit(target=2, completions=["2024-01-01", "2024-01-01", "2024-01-02"])
        today = date(2024, 1, 2)

        assert adherence_service.completion_count(habit, today) == 1
        streak = calculate_streak(habit, today)
        assert streak.current == 1
        assert streak.longest == 1
        assert streak.completion_rate == 100

    def test_missed_day_before_today_breaks_streak(self):
        habit = make_habit(completions=["2024-01-01", "2024-01-02"])
        streak = calculate_streak(habit, date(2024, 1, 5))
        assert streak.current == 0
        assert streak.longest == 2
        assert streak.completion_rate == 50

    def test_zero_completions(self):
        streak = calculate_streak(make_habit(), date(2024, 1, 10))
        assert (streak.current, streak.longest, streak.completion_rate) == (0, 0, 0)

    def test_today_is_creation_day_without_completion(self):
        streak = calculate_streak(make_habit(), date(2024, 1, 1))
        assert (streak.current, streak.longest, streak.completion_rate) == (0, 0, 0)

    def test_every_due_day_met(self):
        """Weekdays habit done Mon-Fri for two weeks: ten due days"""
        days = [
            (date(2024, 1, 1) + timedelta(days=offset)).isoformat()
            for offset in range(12)
            if (date(2024, 1, 1) + timedelta(days=offset)).weekday() < 5
        ]
        habit = make_habit(frequency="weekdays", completions=days)
        streak = calculate_streak(habit, date(2024, 1, 12))
        assert streak.current == 10
        assert streak.longest == 10
        assert streak.completion_rate == 100

    def test_non_due_days_do_not_break_streak(self):
        habit = make_habit(
            created="2024-01-06",
            frequency="weekends",
            completions=["2024-01-06", "2024-01-07", "2024-01-13", "2024-01-14"],
        )
        streak = calculate_streak(habit, date(2024, 1, 15))
        assert streak.current == 4
        assert streak.longest == 4
        assert streak.completion_rate == 100

    def test_every_other_day_streak(self):
        habit = make_habit(
            frequency="every-other-day",
            completions=["2024-01-01", "2024-01-03", "2024-01-05"],
        )
        assert calculate_streak(habit, date(2024, 1, 6)).current == 3

    def test_completions_before_creation_ignored(self):
        habit = make_habit(created="2024-01-05", completions=["2024-01-01", "2024-01-05"])
        streak = calculate_streak(habit, date(2024, 1, 5))
        assert streak.current == 1
        assert streak.longest == 1
        assert streak.completion_rate == 100

    def test_today_before_creation(self):
        habit = make_habit(created="2024-01-10", completions=["2024-01-10"])
        streak = calculate_streak(habit, date(2024, 1, 5))
        assert (streak.current, streak.longest, streak.completion_rate) == (0, 0, 0)

    @pytest.mark.parametrize("completions,today", [
        (["2024-01-01", "2024-01-02", "2024-01-04"], date(2024, 1, 4)),
        (["2024-01-01", "2024-01-02", "2024-01-03"], date(2024, 1, 3)),
        (["2024-01-02", "2024-01-05", "2024-01-06"], date(2024, 1, 7)),
        ([], date(2024, 1, 9)),
    ])
    def test_longest_never_below_current(self, completions, today):
        streak = calculate_streak(make_habit(completions=completions), today)
        assert streak.longest >= streak.current

    def test_repeated_calls_agree(self):
        habit = make_habit(completions=["2024-01-01", "2024-01-03", "2024-01-04"])
        assert calculate_streak(habit, date(2024, 1, 4)) == calculate_streak(habit, date(2024, 1, 4))


class TestRounding:
    """Tests for round_half_up"""

    def test_halves_round_up(self):
        assert adherence_service.round_half_up(0.5) == 1
        assert adherence_service.round_half_up(2.5) == 3
        assert adherence_service.round_half_up(12.5) == 13

    def test_rate_uses_half_up(self):
        """One of eight due days met: 12.5% rounds to 13"""
        habit = make_habit(completions=["2024-01-08"])
        assert calculate_streak(habit, date(2024, 1, 8)).completion_rate == 13


class TestLastCompletedText:
    """Tests for last_completed_text"""

    @pytest.mark.parametrize("last,expected", [
        ("2024-01-15", "Today"),
        ("2024-01-14", "Yesterday"),
        ("2024-01-12", "3 days ago"),
        ("2024-01-09", "6 days ago"),
        ("2024-01-08", "Jan 8"),
        ("2024-01-05", "Jan 5"),
        ("2024-01-20", "Today"),
    ])
    def test_labels(self, last, expected):
        habit = make_habit(completions=["2024-01-02", last])
        assert adherence_service.last_completed_text(habit, date(2024, 1, 15)) == expected

    def test_never(self):
        assert adherence_service.last_completed_text(make_habit(), date(2024, 1, 15)) == "Never"
