"""
Adherence engine.
Decides when a habit is due and derives streaks and completion rates
from its completion log.

All functions are pure: they read the habit they are given plus an explicit
``today`` and never touch the database. A habit is anything exposing
``frequency``, ``target``, ``created_at`` and ``completions`` (an iterable of
ISO date strings), so ORM rows and sync documents are handled alike.
"""
import math
from collections import Counter
from datetime import date
from typing import Callable, Optional

from nexus.constants import Frequency, RECENT_COMPLETION_DAYS
from nexus.schemas import StreakInfo
from nexus.shared.date_utils import (
    DateLike, day_number, format_month_day, from_day_number, to_date, today_utc
)


def _weekday(number: int) -> int:
    """Monday == 0, matching date.weekday()"""
    return (number - 1) % 7


def _due_predicate(frequency, created: int) -> Callable[[int], bool]:
    """Build a due test over day numbers for one habit"""
    frequency = Frequency(frequency)

    if frequency is Frequency.DAILY:
        return lambda number: True
    if frequency is Frequency.WEEKDAYS:
        return lambda number: _weekday(number) < 5
    if frequency is Frequency.WEEKENDS:
        return lambda number: _weekday(number) >= 5
    if frequency is Frequency.EVERY_OTHER_DAY:
        # Phase is anchored on the creation day, not a fixed epoch
        return lambda number: abs(number - created) % 2 == 0

    raise ValueError(f"Unsupported frequency: {frequency}")


def _completion_counts(habit) -> Counter:
    return Counter(day_number(entry) for entry in habit.completions)


def _target(habit) -> int:
    return max(1, habit.target or 1)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def is_due(habit, on: DateLike) -> bool:
    """Whether the habit's frequency asks for action on the given day"""
    check = _due_predicate(habit.frequency, day_number(habit.created_at))
    return check(day_number(on))


def completion_count(habit, on: DateLike) -> int:
    """Number of repetitions logged on the given day"""
    iso = to_date(on).isoformat()
    return sum(1 for entry in habit.completions if entry == iso)


def is_met(habit, on: DateLike) -> bool:
    return completion_count(habit, on) >= _target(habit)


def calculate_streak(habit, today: Optional[date] = None) -> StreakInfo:
    """
    Current streak, longest streak and completion rate as of today.

    A due day that is not yet met only breaks the streak once it is over,
    so an unmet today neither ends the current streak, resets the running
    longest streak, nor counts against the completion rate.
    """
    today_number = day_number(today or today_utc())
    created = day_number(habit.created_at)
    target = _target(habit)
    counts = _completion_counts(habit)
    due = _due_predicate(habit.frequency, created)

    def met(number: int) -> bool:
        return counts.get(number, 0) >= target

    # Current streak: walk backwards from today to the creation day
    current = 0
    number = today_number
    while number >= created:
        if due(number):
            if met(number):
                current += 1
            elif number != today_number:
                break
        number -= 1

    # Longest streak and completion rate: one forward sweep
    longest = 0
    running = 0
    total_due = 0
    met_due = 0
    for number in range(created, today_number + 1):
        if not due(number):
            continue
        if met(number):
            running += 1
            total_due += 1
            met_due += 1
        elif number != today_number:
            running = 0
            total_due += 1
        longest = max(longest, running)

    longest = max(longest, current)

    completion_rate = 0
    if total_due > 0:
        completion_rate = min(100, max(0, round_half_up(100 * met_due / total_due)))

    return StreakInfo(current=current, longest=longest, completion_rate=completion_rate)


def last_completed_text(habit, today: Optional[date] = None) -> str:
    """Human label for the most recent completion"""
    completions = list(habit.completions)
    if not completions:
        return "Never"

    last = max(day_number(entry) for entry in completions)
    days_ago = day_number(today or today_utc()) - last

    if days_ago <= 0:
        return "Today"
    if days_ago == 1:
        return "Yesterday"
    if days_ago < RECENT_COMPLETION_DAYS:
        return f"{days_ago} days ago"
    return format_month_day(from_day_number(last))
