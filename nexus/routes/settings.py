"""
Settings routes.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from nexus.database import get_db
from nexus.dependencies import verify_api_key
from nexus.schemas import SettingsUpdate, SettingsResponse
from nexus.repositories.settings_repository import SettingsRepository

router = APIRouter(prefix="/api/settings", tags=["settings"], dependencies=[Depends(verify_api_key)])


@router.get("", response_model=SettingsResponse)
def get_settings(db: Session = Depends(get_db)):
    return SettingsRepository.get(db)


@router.put("", response_model=SettingsResponse)
def update_settings(settings_update: SettingsUpdate, db: Session = Depends(get_db)):
    """Update settings; fields left out of the request keep their values"""
    settings = SettingsRepository.get(db)
    return SettingsRepository.update(db, settings, settings_update.model_dump(exclude_unset=True))
