"""
Application-wide constants.
Habit frequencies, journal moods, default settings and environment defaults.
"""
import os
from enum import Enum


class Frequency(str, Enum):
    """How often a habit is due"""
    DAILY = "daily"
    WEEKDAYS = "weekdays"
    WEEKENDS = "weekends"
    EVERY_OTHER_DAY = "every-other-day"


class Mood(str, Enum):
    HAPPY = "happy"
    NEUTRAL = "neutral"
    SAD = "sad"
    EXCITED = "excited"
    TIRED = "tired"


class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"


class CompletionDirection(str, Enum):
    ADD = "add"
    REMOVE = "remove"


# Habit defaults
DEFAULT_HABIT_TARGET = 1
DEFAULT_HABIT_ICON = "CheckSquare"
DEFAULT_HABIT_COLOR_THEME = "pink"
DEFAULT_HABIT_CATEGORY = "Wellness"

# Settings defaults
DEFAULT_CATEGORIES = ["Wellness", "Fitness", "Productivity", "Mindset", "Social"]
DEFAULT_THEME = Theme.DARK.value

# Date windows (days)
TIMELINE_PAST_DAYS = 60
TIMELINE_FUTURE_DAYS = 7
YEAR_PAST_DAYS = 330
YEAR_FUTURE_DAYS = 30
WEEK_DAYS = 7
RECENT_COMPLETION_DAYS = 7

# Achievement thresholds (current streak, in due days)
BADGE_SPROUT_STREAK = 3
BADGE_SAPLING_STREAK = 7
BADGE_OAK_STREAK = 30
BADGE_MASTER_HABITS = 3

# Backups
BACKUP_TYPE_AUTO = "auto"
BACKUP_TYPE_MANUAL = "manual"
BACKUP_FILE_PREFIX = "nexus_backup"

# Environment defaults
DEFAULT_DATABASE_URL = "sqlite:///./nexus.db"
DEFAULT_API_KEY = "change-me"
API_KEY = os.getenv("NEXUS_API_KEY", DEFAULT_API_KEY)
API_KEY_HEADER = "X-API-Key"
DEFAULT_LOG_DIRECTORY_PROD = "/var/log/nexus"
DEFAULT_LOG_DIRECTORY_DEV = "./logs"
DEFAULT_BACKUP_DIRECTORY_PROD = "/var/lib/nexus/backups"
DEFAULT_BACKUP_DIRECTORY_DEV = "./backups"

CORS_ALLOWED_ORIGINS = [
    origin.strip()
    for origin in os.getenv(
        "NEXUS_CORS_ORIGINS", "http://localhost:5173,http://localhost:3000"
    ).split(",")
    if origin.strip()
]
