"""
Habit repository - Data access layer for Habit and HabitCompletion models.
Handles all database queries related to habits and their completion log.
"""
from datetime import date
from typing import List, Optional
from sqlalchemy.orm import Session, selectinload

from nexus.models import Habit, HabitCompletion


class HabitRepository:
    """Repository for Habit data access"""

    @staticmethod
    def get_by_id(db: Session, habit_id: str) -> Optional[Habit]:
        """Get habit by ID"""
        return db.query(Habit).filter(Habit.id == habit_id).first()

    @staticmethod
    def get_all(db: Session, include_archived: bool = False) -> List[Habit]:
        """Get habits with their completions, oldest first"""
        query = db.query(Habit).options(selectinload(Habit.completion_records))
        if not include_archived:
            query = query.filter(Habit.archived == False)
        return query.order_by(Habit.created_at, Habit.id).all()

    @staticmethod
    def create(db: Session, habit: Habit) -> Habit:
        """Create new habit"""
        db.add(habit)
        db.commit()
        db.refresh(habit)
        return habit

    @staticmethod
    def update(db: Session, habit: Habit) -> Habit:
        """Update existing habit"""
        db.commit()
        db.refresh(habit)
        return habit

    @staticmethod
    def delete(db: Session, habit: Habit) -> None:
        """Delete habit and its completion log"""
        db.delete(habit)
        db.commit()

    @staticmethod
    def delete_all(db: Session) -> int:
        """Delete every habit; returns number removed"""
        habits = db.query(Habit).all()
        for habit in habits:
            db.delete(habit)
        db.flush()
        return len(habits)

    @staticmethod
    def add_completion(db: Session, habit: Habit, on: date) -> HabitCompletion:
        """Log one repetition"""
        record = HabitCompletion(date=on)
        habit.completion_records.append(record)
        db.flush()
        return record

    @staticmethod
    def remove_completion(db: Session, habit: Habit, on: date) -> bool:
        """Remove the most recently logged repetition for a day"""
        for record in reversed(habit.completion_records):
            if record.date == on:
                habit.completion_records.remove(record)
                db.flush()
                return True
        return False
