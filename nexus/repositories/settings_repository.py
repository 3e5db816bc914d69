"""
Settings repository - Data access layer for Settings model.
Handles all database queries related to settings.
"""
from sqlalchemy.orm import Session
from nexus.models import Settings


class SettingsRepository:
    """Repository for Settings data access"""

    @staticmethod
    def get(db: Session) -> Settings:
        """
        Get settings (creates with defaults if not exists).

        Returns:
            Settings object
        """
        settings = db.query(Settings).first()
        if not settings:
            settings = Settings()
            db.add(settings)
            db.commit()
            db.refresh(settings)
        return settings

    @staticmethod
    def update(db: Session, settings: Settings, values: dict) -> Settings:
        """
        Apply field values to settings and persist them.

        Args:
            db: Database session
            settings: Settings object to modify
            values: Field name to new value

        Returns:
            Updated settings
        """
        for key, value in values.items():
            if hasattr(value, "value"):
                value = value.value
            setattr(settings, key, value)
        db.commit()
        db.refresh(settings)
        return settings

    @staticmethod
    def reset(db: Session) -> Settings:
        """Replace settings with defaults"""
        db.query(Settings).delete()
        db.commit()
        return SettingsRepository.get(db)
