"""
Analytics service.
Aggregates adherence metrics across habits for the dashboard, analytics,
weekly summary and achievements views.

Every function takes the habit list and today explicitly and reads nothing
else, so results are reproducible for a fixed day.
"""
from datetime import date
from typing import List, Sequence

from nexus.constants import (
    BADGE_SPROUT_STREAK, BADGE_SAPLING_STREAK, BADGE_OAK_STREAK,
    BADGE_MASTER_HABITS, WEEK_DAYS
)
from nexus.services import adherence_service
from nexus.shared.date_utils import format_date, last_n_days, to_date, to_iso


def _percent(part: int, whole: int) -> int:
    if whole <= 0:
        return 0
    return adherence_service.round_half_up(100 * part / whole)


def dashboard(habits: Sequence, today: date) -> dict:
    """Today's progress counters and the best streak on record"""
    due_today = [h for h in habits if adherence_service.is_due(h, today)]
    completed_today = [h for h in due_today if adherence_service.is_met(h, today)]

    best_streak = 0
    for habit in habits:
        best_streak = max(best_streak, adherence_service.calculate_streak(habit, today).longest)

    return {
        "date": today.isoformat(),
        "due_today": len(due_today),
        "completed_today": len(completed_today),
        "daily_progress": _percent(len(completed_today), len(due_today)),
        "best_streak": best_streak,
    }


def overview(habits: Sequence, today: date) -> dict:
    """
    Lifetime statistics plus the last week of activity.

    ``weekly`` lists the last seven days newest first; a habit counts as
    completed on a day if it has any repetition logged, regardless of target.
    """
    streaks = [adherence_service.calculate_streak(h, today) for h in habits]

    weekly = []
    for iso in reversed(last_n_days(WEEK_DAYS, today)):
        done = [h for h in habits if iso in h.completions]
        weekly.append({
            "date": iso,
            "label": format_date(iso),
            "completed": len(done),
            "habits": [{"title": h.title, "color_theme": h.color_theme} for h in done],
        })

    return {
        "avg_adherence": adherence_service.round_half_up(
            sum(s.completion_rate for s in streaks) / max(1, len(habits))
        ),
        "total_logs": sum(len(h.completions) for h in habits),
        "max_streak": max([s.longest for s in streaks], default=0),
        "habit_count": len(habits),
        "weekly": weekly,
        "habit_rates": [
            {"id": h.id, "title": h.title, "rate": s.completion_rate}
            for h, s in zip(habits, streaks)
        ],
    }


def weekly_summary(habits: Sequence, today: date) -> List[dict]:
    """Seven days ending today, oldest first, with per-day completion rate"""
    days = []
    for iso in last_n_days(WEEK_DAYS, today):
        active = [
            h for h in habits
            if to_iso(h.created_at) <= iso or iso in h.completions
        ]
        completed = [h for h in active if iso in h.completions]
        day = to_date(iso)
        days.append({
            "date": iso,
            "day_name": day.strftime("%a"),
            "month_name": day.strftime("%b"),
            "day": day.day,
            "completed": [h.title for h in completed],
            "total": len(active),
            "rate": _percent(len(completed), len(active)),
            "is_today": day == today,
        })
    return days


def achievements(habits: Sequence, today: date) -> dict:
    """Badge list with unlock state"""
    currents = [adherence_service.calculate_streak(h, today).current for h in habits]

    def any_streak(threshold: int) -> bool:
        return any(current >= threshold for current in currents)

    badges = [
        {
            "id": "first-step",
            "name": "First Step",
            "description": "Complete your first habit.",
            "achieved": any(len(h.completions) > 0 for h in habits),
        },
        {
            "id": "streak-3",
            "name": "Sprout",
            "description": f"Reach a {BADGE_SPROUT_STREAK}-day streak.",
            "achieved": any_streak(BADGE_SPROUT_STREAK),
        },
        {
            "id": "streak-7",
            "name": "Sapling",
            "description": f"Reach a {BADGE_SAPLING_STREAK}-day streak.",
            "achieved": any_streak(BADGE_SAPLING_STREAK),
        },
        {
            "id": "streak-30",
            "name": "Mighty Oak",
            "description": f"Reach a {BADGE_OAK_STREAK}-day streak.",
            "achieved": any_streak(BADGE_OAK_STREAK),
        },
        {
            "id": "master",
            "name": "Forest Guardian",
            "description": f"{BADGE_MASTER_HABITS} habits with {BADGE_SAPLING_STREAK}+ day streaks.",
            "achieved": sum(1 for c in currents if c >= BADGE_SAPLING_STREAK) >= BADGE_MASTER_HABITS,
        },
    ]

    achieved = sum(1 for badge in badges if badge["achieved"])
    return {
        "badges": badges,
        "achieved": achieved,
        "progress": _percent(achieved, len(badges)),
    }
