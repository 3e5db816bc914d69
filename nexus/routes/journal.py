"""
Journal routes.
"""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from datetime import date
from typing import List, Optional

from nexus.database import get_db
from nexus.dependencies import verify_api_key
from nexus.schemas import JournalEntryUpdate, JournalEntryResponse
from nexus.services.journal_service import JournalService
from nexus.exceptions import JournalEntryNotFoundException

router = APIRouter(prefix="/api/journal", tags=["journal"], dependencies=[Depends(verify_api_key)])


@router.get("", response_model=List[JournalEntryResponse])
def list_entries(
    start: Optional[date] = None,
    end: Optional[date] = None,
    db: Session = Depends(get_db)
):
    """Entries in an optional date range, newest first"""
    return JournalService(db).list_entries(start, end)


@router.get("/{entry_date}", response_model=JournalEntryResponse)
def get_entry(entry_date: date, db: Session = Depends(get_db)):
    try:
        return JournalService(db).get_entry(entry_date)
    except JournalEntryNotFoundException as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.put("/{entry_date}", response_model=JournalEntryResponse)
def save_entry(entry_date: date, entry: JournalEntryUpdate, db: Session = Depends(get_db)):
    return JournalService(db).save_entry(entry_date, entry.content, entry.mood)


@router.delete("/{entry_date}")
def delete_entry(entry_date: date, db: Session = Depends(get_db)):
    try:
        JournalService(db).delete_entry(entry_date)
    except JournalEntryNotFoundException as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"message": "Journal entry deleted"}
