"""
Journal repository - Data access layer for JournalEntry model.
"""
from datetime import date
from typing import List, Optional
from sqlalchemy.orm import Session

from nexus.models import JournalEntry


class JournalRepository:
    """Repository for JournalEntry data access"""

    @staticmethod
    def get_by_date(db: Session, on: date) -> Optional[JournalEntry]:
        return db.query(JournalEntry).filter(JournalEntry.date == on).first()

    @staticmethod
    def get_range(db: Session, start: Optional[date] = None, end: Optional[date] = None) -> List[JournalEntry]:
        """Entries between start and end (inclusive), newest first"""
        query = db.query(JournalEntry)
        if start:
            query = query.filter(JournalEntry.date >= start)
        if end:
            query = query.filter(JournalEntry.date <= end)
        return query.order_by(JournalEntry.date.desc()).all()

    @staticmethod
    def save(db: Session, entry: JournalEntry) -> JournalEntry:
        db.add(entry)
        db.commit()
        db.refresh(entry)
        return entry

    @staticmethod
    def delete(db: Session, entry: JournalEntry) -> None:
        db.delete(entry)
        db.commit()

    @staticmethod
    def delete_all(db: Session) -> int:
        entries = db.query(JournalEntry).all()
        for entry in entries:
            db.delete(entry)
        db.flush()
        return len(entries)
