from pydantic import BaseModel, Field, field_validator
from datetime import datetime, date
from typing import Optional, List, Dict

from nexus.constants import (
    Frequency, Mood, Theme, CompletionDirection,
    DEFAULT_HABIT_TARGET, DEFAULT_HABIT_ICON, DEFAULT_HABIT_COLOR_THEME,
    DEFAULT_HABIT_CATEGORY, DEFAULT_CATEGORIES, DEFAULT_THEME
)
from nexus.shared.date_utils import to_iso

HHMM_PATTERN = r"^([0-1][0-9]|2[0-3]):[0-5][0-9]$"

# Field limits shared by the API models and the sync documents
TITLE_MAX_LENGTH = 200
DESCRIPTION_MAX_LENGTH = 1000
CATEGORY_MAX_LENGTH = 100
STYLE_MAX_LENGTH = 50  # color theme and icon names
TARGET_MAX = 100
EMAIL_MAX_LENGTH = 320
JOURNAL_MAX_LENGTH = 20000


class StreakInfo(BaseModel):
    current: int = 0
    longest: int = 0
    completion_rate: int = Field(default=0, ge=0, le=100)


# Habit schemas
class HabitBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=TITLE_MAX_LENGTH)
    description: Optional[str] = Field(None, max_length=DESCRIPTION_MAX_LENGTH)
    category: str = Field(default=DEFAULT_HABIT_CATEGORY, max_length=CATEGORY_MAX_LENGTH)
    target: int = Field(default=DEFAULT_HABIT_TARGET, ge=1, le=TARGET_MAX)  # Completions per due day
    frequency: Frequency = Frequency.DAILY
    color_theme: str = Field(default=DEFAULT_HABIT_COLOR_THEME, max_length=STYLE_MAX_LENGTH)
    icon: str = Field(default=DEFAULT_HABIT_ICON, max_length=STYLE_MAX_LENGTH)


class HabitCreate(HabitBase):
    pass


class HabitUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=TITLE_MAX_LENGTH)
    description: Optional[str] = Field(None, max_length=DESCRIPTION_MAX_LENGTH)
    category: Optional[str] = Field(None, max_length=CATEGORY_MAX_LENGTH)
    target: Optional[int] = Field(None, ge=1, le=TARGET_MAX)
    frequency: Optional[Frequency] = None
    color_theme: Optional[str] = Field(None, max_length=STYLE_MAX_LENGTH)
    icon: Optional[str] = Field(None, max_length=STYLE_MAX_LENGTH)


class HabitResponse(HabitBase):
    id: str
    archived: bool = False
    completions: List[str] = []
    notes: Dict[str, str] = {}
    created_at: datetime

    class Config:
        from_attributes = True


class ArchiveRequest(BaseModel):
    archived: bool = True


class CompletionToggle(BaseModel):
    date: date
    direction: Optional[CompletionDirection] = None  # None toggles


class NoteUpdate(BaseModel):
    content: str = Field(default="", max_length=5000)


class HabitProgress(BaseModel):
    habit_id: str
    date: date
    due: bool
    met: bool
    count: int
    target: int
    streak: StreakInfo
    last_completed: str


class DueResponse(BaseModel):
    habit_id: str
    date: date
    due: bool


class DateItem(BaseModel):
    iso: str
    date: date


# Journal schemas
class JournalEntryUpdate(BaseModel):
    content: str = Field(default="", max_length=JOURNAL_MAX_LENGTH)
    mood: Optional[Mood] = None


class JournalEntryResponse(BaseModel):
    id: str
    date: date
    content: str
    mood: Optional[Mood] = None
    updated_at: datetime

    class Config:
        from_attributes = True


# Settings schemas
class SettingsBase(BaseModel):
    email: str = Field(default="", max_length=EMAIL_MAX_LENGTH)
    theme: Theme = Theme(DEFAULT_THEME)
    enable_notifications: bool = True
    categories: List[str] = Field(default_factory=lambda: list(DEFAULT_CATEGORIES))

    # Backup settings
    auto_backup_enabled: bool = Field(default=True)
    backup_time: str = Field(default="03:00", pattern=HHMM_PATTERN)
    backup_interval_days: int = Field(default=1, ge=1, le=30)
    backup_keep_local_count: int = Field(default=10, ge=1, le=100)


class SettingsUpdate(SettingsBase):
    pass


class SettingsResponse(SettingsBase):
    id: int
    updated_at: datetime
    last_backup_date: Optional[datetime] = None

    class Config:
        from_attributes = True


# Backup schemas
class BackupResponse(BaseModel):
    id: int
    filename: str
    filepath: str
    size_bytes: int
    backup_type: str = "auto"
    status: str = "completed"
    error_message: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


# Sync document schemas (client wire format, camelCase)
class HabitDocument(BaseModel):
    id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1, max_length=TITLE_MAX_LENGTH)
    description: Optional[str] = Field(None, max_length=DESCRIPTION_MAX_LENGTH)
    category: str = Field(default=DEFAULT_HABIT_CATEGORY, max_length=CATEGORY_MAX_LENGTH)
    target: int = Field(default=DEFAULT_HABIT_TARGET, ge=1, le=TARGET_MAX)
    frequency: Frequency = Frequency.DAILY
    completions: List[str] = []
    created_at: datetime = Field(..., alias="createdAt")
    color_theme: str = Field(default=DEFAULT_HABIT_COLOR_THEME, max_length=STYLE_MAX_LENGTH, alias="colorTheme")
    archived: bool = False
    notes: Dict[str, str] = {}
    icon: Optional[str] = Field(default=DEFAULT_HABIT_ICON, max_length=STYLE_MAX_LENGTH)

    class Config:
        populate_by_name = True

    @field_validator("completions")
    @classmethod
    def normalize_completions(cls, value: List[str]) -> List[str]:
        return [to_iso(entry) for entry in value]

    @field_validator("notes")
    @classmethod
    def normalize_note_keys(cls, value: Dict[str, str]) -> Dict[str, str]:
        return {to_iso(key): note for key, note in value.items()}


class SettingsDocument(BaseModel):
    email: str = Field(default="", max_length=EMAIL_MAX_LENGTH)
    theme: Theme = Theme(DEFAULT_THEME)
    enable_notifications: bool = Field(default=True, alias="enableNotifications")
    categories: List[str] = Field(default_factory=lambda: list(DEFAULT_CATEGORIES))

    class Config:
        populate_by_name = True


class JournalDocument(BaseModel):
    id: str = Field(..., min_length=1)
    date: str
    content: str = Field(default="", max_length=JOURNAL_MAX_LENGTH)
    mood: Optional[Mood] = None
    updated_at: datetime = Field(..., alias="updatedAt")

    class Config:
        populate_by_name = True

    @field_validator("date")
    @classmethod
    def normalize_date(cls, value: str) -> str:
        return to_iso(value)


class SyncPayload(BaseModel):
    """Sections omitted from a push are left untouched on the server"""
    habits: Optional[List[HabitDocument]] = None
    settings: Optional[SettingsDocument] = None
    journal: Optional[List[JournalDocument]] = None


class SyncDocument(BaseModel):
    habits: List[HabitDocument] = []
    settings: SettingsDocument
    journal: List[JournalDocument] = []
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")

    class Config:
        populate_by_name = True
