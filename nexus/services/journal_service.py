"""
Journal service.
One entry per calendar day, saved by upsert.
"""
import logging
from datetime import date, datetime
from typing import List, Optional
from sqlalchemy.orm import Session

from nexus.models import JournalEntry, utcnow
from nexus.constants import Mood
from nexus.repositories.journal_repository import JournalRepository
from nexus.exceptions import JournalEntryNotFoundException

logger = logging.getLogger("nexus.journal")


class JournalService:
    """Service for journal entries"""

    def __init__(self, db: Session):
        self.db = db
        self.journal_repo = JournalRepository()

    def get_entry(self, on: date) -> JournalEntry:
        entry = self.journal_repo.get_by_date(self.db, on)
        if not entry:
            raise JournalEntryNotFoundException(on.isoformat())
        return entry

    def list_entries(self, start: Optional[date] = None, end: Optional[date] = None) -> List[JournalEntry]:
        return self.journal_repo.get_range(self.db, start, end)

    def save_entry(
        self,
        on: date,
        content: str,
        mood: Optional[Mood] = None,
        now: Optional[datetime] = None
    ) -> JournalEntry:
        """Create or overwrite the entry for a day, keeping its id"""
        entry = self.journal_repo.get_by_date(self.db, on)
        if not entry:
            entry = JournalEntry(date=on)
            logger.info(f"New journal entry for {on}")

        entry.content = content
        entry.mood = mood.value if mood else None
        entry.updated_at = now or utcnow()
        return self.journal_repo.save(self.db, entry)

    def delete_entry(self, on: date) -> None:
        entry = self.get_entry(on)
        self.journal_repo.delete(self.db, entry)
