"""
Document sync service.
Serves the whole user state as one document and accepts pushes from devices.

Sync is last-writer-wins: each section present in a push replaces the stored
section wholesale. Nothing is merged record by record.
"""
import logging
from datetime import datetime
from typing import Optional
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from nexus.models import Habit, HabitCompletion, JournalEntry, SyncState, utcnow
from nexus.schemas import (
    SyncDocument, SyncPayload, HabitDocument, SettingsDocument, JournalDocument
)
from nexus.repositories.habit_repository import HabitRepository
from nexus.repositories.journal_repository import JournalRepository
from nexus.repositories.settings_repository import SettingsRepository
from nexus.shared.date_utils import as_utc, to_date
from nexus.exceptions import DatabaseException, SyncException
from nexus.constants import DEFAULT_HABIT_ICON

logger = logging.getLogger("nexus.sync")

DOCUMENT_NAME = "default"


class SyncService:
    """Service for the get/put document-sync contract"""

    def __init__(self, db: Session):
        self.db = db
        self.habit_repo = HabitRepository()
        self.journal_repo = JournalRepository()
        self.settings_repo = SettingsRepository()

    def _state(self) -> SyncState:
        state = self.db.query(SyncState).filter(SyncState.document == DOCUMENT_NAME).first()
        if not state:
            state = SyncState(document=DOCUMENT_NAME)
            self.db.add(state)
            self.db.flush()
        return state

    def export_document(self) -> SyncDocument:
        """Current server state in the client's wire format"""
        habits = [
            HabitDocument(
                id=h.id,
                title=h.title,
                description=h.description,
                category=h.category,
                target=h.target,
                frequency=h.frequency,
                completions=h.completions,
                created_at=h.created_at,
                color_theme=h.color_theme,
                archived=bool(h.archived),
                notes=h.notes,
                icon=h.icon,
            )
            for h in self.habit_repo.get_all(self.db, include_archived=True)
        ]

        settings = self.settings_repo.get(self.db)
        settings_doc = SettingsDocument(
            email=settings.email or "",
            theme=settings.theme,
            enable_notifications=bool(settings.enable_notifications),
            categories=settings.categories,
        )

        journal = [
            JournalDocument(
                id=e.id,
                date=e.date.isoformat(),
                content=e.content or "",
                mood=e.mood,
                updated_at=e.updated_at,
            )
            for e in self.journal_repo.get_range(self.db)
        ]

        state = self.db.query(SyncState).filter(SyncState.document == DOCUMENT_NAME).first()
        return SyncDocument(
            habits=habits,
            settings=settings_doc,
            journal=journal,
            updated_at=state.updated_at if state else None,
        )

    def import_document(self, payload: SyncPayload, now: Optional[datetime] = None) -> SyncDocument:
        """
        Apply a push from a device.

        Raises:
            SyncException: Payload is internally inconsistent
            DatabaseException: Write failed; nothing is applied
        """
        if payload.habits is not None:
            ids = [h.id for h in payload.habits]
            if len(ids) != len(set(ids)):
                raise SyncException("duplicate habit ids in payload")
        if payload.journal is not None:
            days = [e.date for e in payload.journal]
            if len(days) != len(set(days)):
                raise SyncException("more than one journal entry for the same date")

        # Settings row must exist before the write transaction starts
        self.settings_repo.get(self.db)

        try:
            if payload.habits is not None:
                self._replace_habits(payload.habits)
            if payload.settings is not None:
                self._replace_settings(payload.settings)
            if payload.journal is not None:
                self._replace_journal(payload.journal)

            self._state().updated_at = now or utcnow()
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Sync import failed: {e}")
            raise DatabaseException("sync import", str(e))

        logger.info(
            "Sync applied: habits=%s settings=%s journal=%s",
            "replaced" if payload.habits is not None else "kept",
            "replaced" if payload.settings is not None else "kept",
            "replaced" if payload.journal is not None else "kept",
        )
        return self.export_document()

    def _replace_habits(self, habits: list[HabitDocument]) -> None:
        self.habit_repo.delete_all(self.db)
        for doc in habits:
            habit = Habit(
                id=doc.id,
                title=doc.title,
                description=doc.description,
                category=doc.category,
                target=doc.target,
                frequency=doc.frequency.value,
                color_theme=doc.color_theme,
                icon=doc.icon or DEFAULT_HABIT_ICON,
                archived=doc.archived,
                created_at=as_utc(doc.created_at),
            )
            habit.notes = doc.notes
            habit.completion_records = [HabitCompletion(date=to_date(d)) for d in doc.completions]
            self.db.add(habit)
        self.db.flush()

    def _replace_settings(self, doc: SettingsDocument) -> None:
        settings = self.settings_repo.get(self.db)
        settings.email = doc.email
        settings.theme = doc.theme.value
        settings.enable_notifications = doc.enable_notifications
        settings.categories = doc.categories

    def _replace_journal(self, entries: list[JournalDocument]) -> None:
        self.journal_repo.delete_all(self.db)
        for doc in entries:
            self.db.add(JournalEntry(
                id=doc.id,
                date=to_date(doc.date),
                content=doc.content,
                mood=doc.mood.value if doc.mood else None,
                updated_at=as_utc(doc.updated_at),
            ))
        self.db.flush()

    def reset(self) -> None:
        """Wipe habits and journal and restore default settings"""
        self.habit_repo.delete_all(self.db)
        self.journal_repo.delete_all(self.db)
        self.db.commit()
        self.settings_repo.reset(self.db)
        logger.warning("All data reset to defaults")
