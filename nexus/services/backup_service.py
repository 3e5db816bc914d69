"""
Backup service.
Writes JSON snapshots of the sync document to local disk and prunes old ones.
"""
import os
import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional
from sqlalchemy.orm import Session

from nexus.models import Backup, utcnow
from nexus.repositories.settings_repository import SettingsRepository
from nexus.services.sync_service import SyncService
from nexus.exceptions import BackupException
from nexus.constants import (
    BACKUP_FILE_PREFIX, BACKUP_TYPE_AUTO,
    DEFAULT_BACKUP_DIRECTORY_PROD, DEFAULT_BACKUP_DIRECTORY_DEV
)

logger = logging.getLogger("nexus.backup")

BACKUP_DIR = os.getenv("NEXUS_BACKUP_DIR", DEFAULT_BACKUP_DIRECTORY_PROD)


def get_backup_dir() -> Path:
    """Backup directory, falling back to a local one without permissions"""
    path = Path(BACKUP_DIR)
    try:
        path.mkdir(parents=True, exist_ok=True)
    except PermissionError:
        path = Path(DEFAULT_BACKUP_DIRECTORY_DEV)
        path.mkdir(parents=True, exist_ok=True)
    return path


def get_backup_filepath(backup_type: str = BACKUP_TYPE_AUTO, now: Optional[datetime] = None) -> tuple[str, str]:
    """Generate backup filename and full path"""
    timestamp = (now or utcnow()).strftime("%Y-%m-%d_%H-%M-%S")
    filename = f"{BACKUP_FILE_PREFIX}_{timestamp}_{backup_type}.json"
    return filename, str(get_backup_dir() / filename)


def create_backup(db: Session, backup_type: str = BACKUP_TYPE_AUTO, now: Optional[datetime] = None) -> Backup:
    """
    Write the current document to a JSON file and record it.

    Args:
        db: Database session
        backup_type: "auto" or "manual"
        now: Timestamp used for the filename and bookkeeping

    Returns:
        Backup record

    Raises:
        BackupException: Snapshot could not be written
    """
    now = now or utcnow()
    document = SyncService(db).export_document()
    try:
        filename, filepath = get_backup_filepath(backup_type, now)
        logger.info(f"Creating backup: {filename}")
        Path(filepath).write_text(document.model_dump_json(by_alias=True, indent=2), encoding="utf-8")
        size_bytes = os.path.getsize(filepath)
    except OSError as e:
        logger.error(f"Backup failed: {e}")
        raise BackupException(str(e))

    backup = Backup(
        filename=filename,
        filepath=filepath,
        size_bytes=size_bytes,
        backup_type=backup_type,
        status="completed",
        created_at=now,
    )
    db.add(backup)
    db.commit()
    db.refresh(backup)

    logger.info(f"Backup created: {filename} ({size_bytes} bytes)")

    settings = SettingsRepository.get(db)
    SettingsRepository.update(db, settings, {"last_backup_date": now})

    cleanup_old_backups(db)
    return backup


def cleanup_old_backups(db: Session) -> int:
    """Remove old local backups keeping only the last N; returns count removed"""
    keep_count = SettingsRepository.get(db).backup_keep_local_count or 1

    backups = db.query(Backup).order_by(Backup.created_at.desc(), Backup.id.desc()).all()
    removed = 0
    for backup in backups[keep_count:]:
        _remove_file(backup.filepath)
        db.delete(backup)
        removed += 1

    if removed:
        db.commit()
        logger.info(f"Removed {removed} old backups")
    return removed


def list_backups(db: Session) -> List[Backup]:
    return db.query(Backup).order_by(Backup.created_at.desc(), Backup.id.desc()).all()


def last_auto_backup(db: Session) -> Optional[Backup]:
    return db.query(Backup).filter(
        Backup.backup_type == BACKUP_TYPE_AUTO
    ).order_by(Backup.created_at.desc()).first()


def delete_backup(db: Session, backup_id: int) -> bool:
    backup = db.query(Backup).filter(Backup.id == backup_id).first()
    if not backup:
        return False
    _remove_file(backup.filepath)
    db.delete(backup)
    db.commit()
    return True


def _remove_file(filepath: str) -> None:
    try:
        Path(filepath).unlink(missing_ok=True)
    except OSError as e:
        logger.warning(f"Could not delete backup file {filepath}: {e}")
