"""
Backup routes.
"""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List

from nexus.database import get_db
from nexus.dependencies import verify_api_key
from nexus.schemas import BackupResponse
from nexus.services import backup_service
from nexus.exceptions import BackupException
from nexus.constants import BACKUP_TYPE_MANUAL

router = APIRouter(prefix="/api/backups", tags=["backups"], dependencies=[Depends(verify_api_key)])


@router.get("", response_model=List[BackupResponse])
def list_backups(db: Session = Depends(get_db)):
    return backup_service.list_backups(db)


@router.post("", response_model=BackupResponse)
def create_backup(db: Session = Depends(get_db)):
    """Take a manual backup now"""
    try:
        return backup_service.create_backup(db, BACKUP_TYPE_MANUAL)
    except BackupException as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.delete("/{backup_id}")
def delete_backup(backup_id: int, db: Session = Depends(get_db)):
    if not backup_service.delete_backup(db, backup_id):
        raise HTTPException(status_code=404, detail="Backup not found")
    return {"message": "Backup deleted"}
