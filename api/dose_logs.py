"""
Dose Logs API Router
Endpoints for logging doses, schedules, adherence statistics and export
"""

from typing import List, Optional
from datetime import date, datetime
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from api.deps import get_db, get_now, get_current_user_id, services
from api.schemas.dose_log import (
    DoseLogCreate,
    DoseLogDetail,
    DoseLogResult,
    ScheduleEntry,
    DatedScheduleEntry,
    AdherenceStats,
    ExportRow,
)


router = APIRouter(prefix="/dose-logs", tags=["dose-logs"])


@router.get("/", response_model=List[DoseLogDetail])
async def list_dose_logs(
    start_date: Optional[date] = Query(None, description="First day, inclusive"),
    end_date: Optional[date] = Query(None, description="Last day, inclusive"),
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """
    Get the caller's dose logs, newest first

    The range filter applies only when both dates are given.
    """
    dose_log_service = services.get_dose_log_service()
    return await dose_log_service.get_dose_logs(
        user_id, start_date=start_date, end_date=end_date, db=db
    )


@router.post("/", response_model=DoseLogResult, status_code=status.HTTP_201_CREATED)
async def log_dose(
    log_data: DoseLogCreate,
    user_id: int = Depends(get_current_user_id),
    now: datetime = Depends(get_now),
    db: Session = Depends(get_db)
):
    """
    Log a dose for one of today's time slots

    - **medication_id**: Medication ID
    - **scheduled_time**: "HH:MM" slot
    - **status**: taken (default), missed or skipped

    A dose marked taken more than 4 hours after its slot is stored as missed.
    """
    dose_log_service = services.get_dose_log_service()
    return await dose_log_service.log_dose(
        user_id=user_id,
        medication_id=log_data.medication_id,
        scheduled_time=log_data.scheduled_time,
        status=log_data.status.value,
        now=now,
        db=db
    )


@router.get("/schedule", response_model=List[ScheduleEntry])
async def get_todays_schedule(
    user_id: int = Depends(get_current_user_id),
    now: datetime = Depends(get_now),
    db: Session = Depends(get_db)
):
    """
    Get today's dose slots with their status
    """
    schedule_service = services.get_schedule_service()
    occurrences = await schedule_service.get_todays_schedule(user_id, now=now, db=db)
    return [o.to_dict(include_date=False) for o in occurrences]


@router.get("/weekly-schedule", response_model=List[DatedScheduleEntry])
async def get_weekly_schedule(
    start_date: Optional[date] = Query(None, description="First day, inclusive"),
    end_date: Optional[date] = Query(None, description="Last day, inclusive"),
    user_id: int = Depends(get_current_user_id),
    now: datetime = Depends(get_now),
    db: Session = Depends(get_db)
):
    """
    Get dose slots for every day of a date range

    Both dates are required.
    """
    schedule_service = services.get_schedule_service()
    occurrences = await schedule_service.get_weekly_schedule(
        user_id, start_date, end_date, now=now, db=db
    )
    return [o.to_dict() for o in occurrences]


@router.get("/stats", response_model=AdherenceStats)
async def get_adherence_stats(
    start_date: Optional[date] = Query(None, description="First day, inclusive"),
    end_date: Optional[date] = Query(None, description="Last day, inclusive"),
    user_id: int = Depends(get_current_user_id),
    now: datetime = Depends(get_now),
    db: Session = Depends(get_db)
):
    """
    Get adherence statistics

    Without dates the last 30 days are used.
    """
    adherence_service = services.get_adherence_service()
    report = await adherence_service.get_adherence_stats(
        user_id, start_date=start_date, end_date=end_date, now=now, db=db
    )
    return report.to_dict()


@router.get("/export", response_model=List[ExportRow])
async def export_dose_logs(
    start_date: Optional[date] = Query(None, description="First day, inclusive"),
    end_date: Optional[date] = Query(None, description="Last day, inclusive"),
    user_id: int = Depends(get_current_user_id),
    now: datetime = Depends(get_now),
    db: Session = Depends(get_db)
):
    """
    Export the caller's dose logs as rows, oldest first
    """
    report_service = services.get_report_service()
    return await report_service.get_export_rows(
        user_id, start_date=start_date, end_date=end_date, now=now, db=db
    )
