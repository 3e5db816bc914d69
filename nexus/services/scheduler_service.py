"""
Background scheduler.
Takes automatic JSON backups once the configured time of day has passed.
"""

import logging
from datetime import datetime
from typing import Optional
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
from sqlalchemy.orm import Session

from nexus.database import SessionLocal
from nexus.models import utcnow
from nexus.repositories.settings_repository import SettingsRepository
from nexus.services import backup_service
from nexus.shared.date_utils import to_date
from nexus.exceptions import BackupException
from nexus.constants import BACKUP_TYPE_AUTO

logger = logging.getLogger("nexus.scheduler")

scheduler = AsyncIOScheduler()


def _normalize_time(time_str: Optional[str]) -> str:
    """
    Normalize a time string to HHMM.
    Examples: '06:00' -> '0600', '0600' -> '0600', None -> '0000'
    """
    if not time_str:
        return "0000"
    return time_str.replace(":", "").zfill(4)


def backup_due(db: Session, now: datetime) -> bool:
    """Whether an automatic backup should be taken at this moment"""
    settings = SettingsRepository.get(db)
    if not settings.auto_backup_enabled:
        return False

    current_time = now.strftime("%H%M")
    target_time = _normalize_time(settings.backup_time or "03:00")
    if int(current_time) < int(target_time):
        return False

    last = backup_service.last_auto_backup(db)
    if not last:
        logger.info("[AUTO_BACKUP] No previous backups found, creating first one")
        return True

    days_since = (to_date(now) - to_date(last.created_at)).days
    if days_since < max(1, settings.backup_interval_days or 1):
        return False
    return True


async def run_auto_backup():
    """Job: automatic backup"""
    db = SessionLocal()
    try:
        now = utcnow()
        if backup_due(db, now):
            backup = backup_service.create_backup(db, BACKUP_TYPE_AUTO, now)
            logger.info(f"Auto-backup successful: {backup.filename}")
    except BackupException as e:
        logger.error(f"Auto-backup failed: {e}")
    except Exception as e:
        logger.error(f"Scheduler Error (Backup): {e}")
    finally:
        db.close()


def start_scheduler():
    """Start the scheduler"""
    if not scheduler.running:
        # Checked every minute; the job decides whether it is time
        scheduler.add_job(
            run_auto_backup,
            CronTrigger(minute='*'),
            id='auto_backup',
            replace_existing=True
        )
        scheduler.start()
        logger.info(f"Scheduler started with jobs: {[job.id for job in scheduler.get_jobs()]}")


def stop_scheduler():
    """Stop the scheduler"""
    if scheduler.running:
        scheduler.shutdown()
        logger.info("Scheduler stopped")
