"""
Analytics routes. Archived habits are left out of every aggregate.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from datetime import date

from nexus.database import get_db
from nexus.dependencies import verify_api_key, get_today
from nexus.repositories.habit_repository import HabitRepository
from nexus.services import analytics_service

router = APIRouter(prefix="/api", tags=["analytics"], dependencies=[Depends(verify_api_key)])


@router.get("/dashboard")
def get_dashboard(db: Session = Depends(get_db), today: date = Depends(get_today)):
    return analytics_service.dashboard(HabitRepository.get_all(db), today)


@router.get("/analytics")
def get_analytics(db: Session = Depends(get_db), today: date = Depends(get_today)):
    return analytics_service.overview(HabitRepository.get_all(db), today)


@router.get("/analytics/weekly")
def get_weekly(db: Session = Depends(get_db), today: date = Depends(get_today)):
    return analytics_service.weekly_summary(HabitRepository.get_all(db), today)


@router.get("/achievements")
def get_achievements(db: Session = Depends(get_db), today: date = Depends(get_today)):
    return analytics_service.achievements(HabitRepository.get_all(db), today)
