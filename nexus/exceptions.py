"""
Custom exceptions for the habit tracker application.
Provides specific exception types for better error handling and recovery.
"""


class NexusException(Exception):
    """Base exception for the habit tracker"""
    pass


class HabitNotFoundException(NexusException):
    """Raised when a habit is not found"""
    def __init__(self, habit_id: str):
        self.habit_id = habit_id
        super().__init__(f"Habit with ID {habit_id} not found")


class JournalEntryNotFoundException(NexusException):
    """Raised when there is no journal entry for a date"""
    def __init__(self, entry_date: str):
        self.entry_date = entry_date
        super().__init__(f"No journal entry for {entry_date}")


class ValidationException(NexusException):
    """Raised when data validation fails"""
    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(f"Validation error for {field}: {message}")


class DatabaseException(NexusException):
    """Raised when database operations fail"""
    def __init__(self, operation: str, details: str):
        self.operation = operation
        self.details = details
        super().__init__(f"Database {operation} failed: {details}")


class BackupException(NexusException):
    """Raised when backup operations fail"""
    def __init__(self, message: str):
        super().__init__(f"Backup operation failed: {message}")


class SyncException(NexusException):
    """Raised when a sync document cannot be applied"""
    def __init__(self, message: str):
        super().__init__(f"Sync failed: {message}")
