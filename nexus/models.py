import json
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Boolean, DateTime, Date, Text, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from nexus.database import Base
from nexus.constants import (
    DEFAULT_HABIT_TARGET, DEFAULT_HABIT_ICON, DEFAULT_HABIT_COLOR_THEME,
    DEFAULT_HABIT_CATEGORY, DEFAULT_CATEGORIES, DEFAULT_THEME, Frequency
)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return str(uuid.uuid4())


class Habit(Base):
    __tablename__ = "habits"

    id = Column(String, primary_key=True, default=new_id)
    title = Column(String, nullable=False)
    description = Column(String, nullable=True)
    category = Column(String, default=DEFAULT_HABIT_CATEGORY)
    target = Column(Integer, default=DEFAULT_HABIT_TARGET)  # Completions needed on a due day
    frequency = Column(String, default=Frequency.DAILY.value)  # daily, weekdays, weekends, every-other-day
    color_theme = Column(String, default=DEFAULT_HABIT_COLOR_THEME)
    icon = Column(String, default=DEFAULT_HABIT_ICON)
    archived = Column(Boolean, default=False)
    notes_json = Column(Text, nullable=True)  # JSON object {"YYYY-MM-DD": "note"}
    created_at = Column(DateTime(timezone=True), default=utcnow)

    completion_records = relationship(
        "HabitCompletion",
        back_populates="habit",
        cascade="all, delete-orphan",
        order_by="HabitCompletion.id",
    )

    @property
    def completions(self) -> list[str]:
        """One ISO date per logged repetition"""
        return [record.date.isoformat() for record in self.completion_records]

    @property
    def notes(self) -> dict:
        if not self.notes_json:
            return {}
        try:
            return json.loads(self.notes_json)
        except json.JSONDecodeError:
            return {}

    @notes.setter
    def notes(self, value: dict) -> None:
        self.notes_json = json.dumps(value) if value else None


class HabitCompletion(Base):
    __tablename__ = "habit_completions"

    id = Column(Integer, primary_key=True, index=True)
    habit_id = Column(String, ForeignKey("habits.id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)  # UTC calendar day
    created_at = Column(DateTime(timezone=True), default=utcnow)

    habit = relationship("Habit", back_populates="completion_records")


class JournalEntry(Base):
    __tablename__ = "journal_entries"

    id = Column(String, primary_key=True, default=new_id)
    date = Column(Date, nullable=False, unique=True, index=True)
    content = Column(Text, default="")
    mood = Column(String, nullable=True)  # happy, neutral, sad, excited, tired
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)


class Settings(Base):
    __tablename__ = "settings"

    id = Column(Integer, primary_key=True, index=True)

    # User preferences
    email = Column(String, default="")
    theme = Column(String, default=DEFAULT_THEME)  # light or dark
    enable_notifications = Column(Boolean, default=True)
    categories_json = Column(Text, default=lambda: json.dumps(DEFAULT_CATEGORIES))

    # Backup settings
    auto_backup_enabled = Column(Boolean, default=True)  # Enable automatic backups
    backup_time = Column(String, default="03:00")  # Time for automatic backup (HH:MM format)
    backup_interval_days = Column(Integer, default=1)  # Backup every N days
    backup_keep_local_count = Column(Integer, default=10)  # Keep last N local backups
    last_backup_date = Column(DateTime(timezone=True), nullable=True)  # Last successful backup timestamp

    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    @property
    def categories(self) -> list[str]:
        if not self.categories_json:
            return list(DEFAULT_CATEGORIES)
        try:
            return json.loads(self.categories_json)
        except json.JSONDecodeError:
            return list(DEFAULT_CATEGORIES)

    @categories.setter
    def categories(self, value: list[str]) -> None:
        self.categories_json = json.dumps(list(value))


class Backup(Base):
    __tablename__ = "backups"

    id = Column(Integer, primary_key=True, index=True)
    filename = Column(String, nullable=False)
    filepath = Column(String, nullable=False)
    size_bytes = Column(Integer, default=0)
    backup_type = Column(String, default="auto")  # auto or manual
    status = Column(String, default="completed")
    error_message = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)


class SyncState(Base):
    __tablename__ = "sync_state"
    __table_args__ = (UniqueConstraint("document", name="uq_sync_document"),)

    id = Column(Integer, primary_key=True, index=True)
    document = Column(String, nullable=False, default="default")
    updated_at = Column(DateTime(timezone=True), nullable=True)  # Last accepted remote write
