"""
Date range routes used to lay out the calendar views.
"""
from fastapi import APIRouter, Depends, Query
from datetime import date
from typing import List

from nexus.dependencies import verify_api_key, get_today
from nexus.schemas import DateItem
from nexus.shared import date_utils
from nexus.constants import WEEK_DAYS

router = APIRouter(prefix="/api/dates", tags=["dates"], dependencies=[Depends(verify_api_key)])


@router.get("/last-7-days", response_model=List[str])
def last_seven_days(today: date = Depends(get_today)):
    return date_utils.last_n_days(WEEK_DAYS, today)


@router.get("/timeline", response_model=List[DateItem])
def timeline(today: date = Depends(get_today)):
    return [DateItem(iso=iso, date=day) for iso, day in date_utils.timeline_range(today=today)]


@router.get("/year", response_model=List[DateItem])
def year(today: date = Depends(get_today)):
    return [DateItem(iso=iso, date=day) for iso, day in date_utils.year_range(today)]


@router.get("/month")
def month(
    year: int = Query(..., ge=1, le=9999),
    month: int = Query(..., ge=1, le=12),
):
    """Grid layout for a month: day count and Sunday-based first weekday"""
    days, first_weekday = date_utils.month_layout(year, month)
    return {"year": year, "month": month, "days": days, "first_weekday": first_weekday}
