"""
Habit HTTP routes.
"""
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from datetime import date
from typing import List, Optional

from nexus.database import get_db
from nexus.dependencies import verify_api_key, get_today
from nexus.schemas import (
    HabitCreate, HabitUpdate, HabitResponse, ArchiveRequest, CompletionToggle,
    NoteUpdate, HabitProgress, DueResponse, StreakInfo
)
from nexus.services.habit_service import HabitService
from nexus.services import adherence_service
from nexus.exceptions import HabitNotFoundException, ValidationException

router = APIRouter(prefix="/api/habits", tags=["habits"], dependencies=[Depends(verify_api_key)])


def _get_or_404(service: HabitService, habit_id: str):
    try:
        return service.get_habit(habit_id)
    except HabitNotFoundException as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("", response_model=List[HabitResponse])
def list_habits(include_archived: bool = False, db: Session = Depends(get_db)):
    """List habits, oldest first"""
    return HabitService(db).list_habits(include_archived)


@router.post("", response_model=HabitResponse, status_code=status.HTTP_201_CREATED)
def create_habit(habit: HabitCreate, db: Session = Depends(get_db)):
    return HabitService(db).create_habit(habit)


@router.get("/{habit_id}", response_model=HabitResponse)
def get_habit(habit_id: str, db: Session = Depends(get_db)):
    return _get_or_404(HabitService(db), habit_id)


@router.put("/{habit_id}", response_model=HabitResponse)
def update_habit(habit_id: str, habit_update: HabitUpdate, db: Session = Depends(get_db)):
    try:
        return HabitService(db).update_habit(habit_id, habit_update)
    except HabitNotFoundException as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/{habit_id}")
def delete_habit(habit_id: str, db: Session = Depends(get_db)):
    try:
        HabitService(db).delete_habit(habit_id)
    except HabitNotFoundException as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"message": "Habit deleted"}


@router.post("/{habit_id}/archive", response_model=HabitResponse)
def archive_habit(habit_id: str, request: ArchiveRequest, db: Session = Depends(get_db)):
    """Archive or restore a habit"""
    try:
        return HabitService(db).set_archived(habit_id, request.archived)
    except HabitNotFoundException as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/{habit_id}/completions", response_model=HabitResponse)
def toggle_completion(habit_id: str, toggle: CompletionToggle, db: Session = Depends(get_db)):
    """Log or remove one repetition on a day"""
    try:
        return HabitService(db).toggle_completion(habit_id, toggle.date, toggle.direction)
    except HabitNotFoundException as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValidationException as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.put("/{habit_id}/notes/{note_date}", response_model=HabitResponse)
def set_note(habit_id: str, note_date: date, note: NoteUpdate, db: Session = Depends(get_db)):
    """Set the note for a day; empty content clears it"""
    try:
        return HabitService(db).set_note(habit_id, note_date, note.content)
    except HabitNotFoundException as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/{habit_id}/streak", response_model=StreakInfo)
def get_streak(habit_id: str, db: Session = Depends(get_db), today: date = Depends(get_today)):
    habit = _get_or_404(HabitService(db), habit_id)
    return adherence_service.calculate_streak(habit, today)


@router.get("/{habit_id}/progress", response_model=HabitProgress)
def get_progress(habit_id: str, db: Session = Depends(get_db), today: date = Depends(get_today)):
    service = HabitService(db)
    habit = _get_or_404(service, habit_id)
    return service.habit_progress(habit, today)


@router.get("/{habit_id}/due", response_model=DueResponse)
def get_due(
    habit_id: str,
    on: Optional[date] = Query(None, alias="date"),
    db: Session = Depends(get_db),
    today: date = Depends(get_today)
):
    """Whether the habit is due on a date (defaults to today)"""
    habit = _get_or_404(HabitService(db), habit_id)
    on = on or today
    return DueResponse(habit_id=habit.id, date=on, due=adherence_service.is_due(habit, on))
