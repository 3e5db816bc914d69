"""
Habit management service.
Handles habit CRUD, completion logging, per-day notes and tile progress.
"""
import logging
from datetime import date, datetime
from typing import List, Optional
from sqlalchemy.orm import Session

from nexus.models import Habit, utcnow
from nexus.schemas import HabitCreate, HabitUpdate, HabitProgress
from nexus.repositories.habit_repository import HabitRepository
from nexus.services import adherence_service
from nexus.shared.date_utils import to_date, to_iso
from nexus.exceptions import HabitNotFoundException, ValidationException
from nexus.constants import CompletionDirection

logger = logging.getLogger("nexus.habits")


class HabitService:
    """Service for habit management"""

    def __init__(self, db: Session):
        self.db = db
        self.habit_repo = HabitRepository()

    def get_habit(self, habit_id: str) -> Habit:
        """Get habit by ID or raise HabitNotFoundException"""
        habit = self.habit_repo.get_by_id(self.db, habit_id)
        if not habit:
            raise HabitNotFoundException(habit_id)
        return habit

    def list_habits(self, include_archived: bool = False) -> List[Habit]:
        return self.habit_repo.get_all(self.db, include_archived)

    def create_habit(self, habit_data: HabitCreate, now: Optional[datetime] = None) -> Habit:
        """Create a new habit with an empty completion log"""
        data = habit_data.model_dump()
        data["frequency"] = habit_data.frequency.value
        habit = Habit(**data, archived=False, created_at=now or utcnow())
        habit = self.habit_repo.create(self.db, habit)
        logger.info(f"Created habit {habit.id} ({habit.title}, {habit.frequency})")
        return habit

    def update_habit(self, habit_id: str, habit_update: HabitUpdate) -> Habit:
        """Update habit details; completions, notes and creation time are untouched"""
        habit = self.get_habit(habit_id)

        update_data = habit_update.model_dump(exclude_unset=True)
        for key, value in update_data.items():
            if value is None and key in ("title", "target", "frequency"):
                continue
            if key == "frequency":
                value = value.value
            setattr(habit, key, value)

        return self.habit_repo.update(self.db, habit)

    def set_archived(self, habit_id: str, archived: bool) -> Habit:
        habit = self.get_habit(habit_id)
        habit.archived = archived
        logger.info(f"Habit {habit_id} {'archived' if archived else 'restored'}")
        return self.habit_repo.update(self.db, habit)

    def delete_habit(self, habit_id: str) -> None:
        habit = self.get_habit(habit_id)
        self.habit_repo.delete(self.db, habit)
        logger.info(f"Deleted habit {habit_id}")

    def toggle_completion(
        self,
        habit_id: str,
        on: date,
        direction: Optional[CompletionDirection] = None
    ) -> Habit:
        """
        Log or remove one repetition of a habit on a day.

        - add: append unless the day already reached its target
        - remove: drop one repetition if any exist
        - no direction: add while below target, otherwise remove one

        Removing the last repetition of a day also deletes that day's note.

        Raises:
            HabitNotFoundException: Unknown habit
            ValidationException: Day precedes the habit's creation day
        """
        habit = self.get_habit(habit_id)
        on = to_date(on)

        if on < to_date(habit.created_at):
            raise ValidationException("date", f"{on} is before the habit was created")

        count = adherence_service.completion_count(habit, on)
        target = max(1, habit.target or 1)

        if direction is None:
            direction = CompletionDirection.ADD if count < target else CompletionDirection.REMOVE

        removed = False
        if direction == CompletionDirection.ADD:
            if count >= target:
                return habit
            self.habit_repo.add_completion(self.db, habit, on)
        else:
            removed = self.habit_repo.remove_completion(self.db, habit, on)

        if removed and count == 1:
            notes = habit.notes
            if notes.pop(on.isoformat(), None) is not None:
                habit.notes = notes

        return self.habit_repo.update(self.db, habit)

    def set_note(self, habit_id: str, on: date, content: str) -> Habit:
        """Attach a note to a day; blank content removes it"""
        habit = self.get_habit(habit_id)
        notes = habit.notes
        key = to_iso(on)

        if content.strip():
            notes[key] = content
        else:
            notes.pop(key, None)

        habit.notes = notes
        return self.habit_repo.update(self.db, habit)

    def habit_progress(self, habit: Habit, today: date) -> HabitProgress:
        """Everything a habit tile shows for today"""
        count = adherence_service.completion_count(habit, today)
        target = max(1, habit.target or 1)
        return HabitProgress(
            habit_id=habit.id,
            date=today,
            due=adherence_service.is_due(habit, today),
            met=count >= target,
            count=count,
            target=target,
            streak=adherence_service.calculate_streak(habit, today),
            last_completed=adherence_service.last_completed_text(habit, today),
        )
