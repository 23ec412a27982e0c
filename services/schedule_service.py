"""
Schedule Service
Daily and ranged dose schedules derived from medications and dose logs
"""

import logging
from typing import List, Optional
from datetime import datetime, date
from sqlalchemy.orm import Session, joinedload
from sqlalchemy import and_

from config import settings
from database import get_db_context
import models
from services.dose_log_service import day_bounds
from services.exceptions import ValidationFailure
from services.medication_service import query_medications_in_range
from tools.schedule_expander import DoseOccurrence, schedule_expander
from tools.status_resolver import status_resolver


logger = logging.getLogger(__name__)


def query_logs_in_range(
    session: Session,
    user_id: int,
    start: date,
    end: date
) -> List[models.DoseLog]:
    """Dose logs of a user created on any day of [start, end]"""
    range_start, range_end = day_bounds(start, end)
    return session.query(models.DoseLog).options(
        joinedload(models.DoseLog.medication).joinedload(models.Medication.category)
    ).filter(
        and_(
            models.DoseLog.user_id == user_id,
            models.DoseLog.created_at >= range_start,
            models.DoseLog.created_at <= range_end
        )
    ).all()


def check_range(start_date: Optional[date], end_date: Optional[date]) -> None:
    """Reject missing, inverted or oversized ranges before any query runs"""
    if start_date is None or end_date is None:
        raise ValidationFailure("Start date and end date are required")
    if start_date > end_date:
        raise ValidationFailure("Start date must not be after end date")
    if (end_date - start_date).days + 1 > settings.MAX_RANGE_DAYS:
        raise ValidationFailure(
            f"Date range must not exceed {settings.MAX_RANGE_DAYS} days"
        )


class ScheduleService:
    """
    Service for schedule views
    """

    async def get_todays_schedule(
        self,
        user_id: int,
        now: Optional[datetime] = None,
        db: Optional[Session] = None
    ) -> List[DoseOccurrence]:
        """
        Today's dose slots with their status

        Args:
            user_id: Caller
            now: Current time (default datetime.now())
            db: Database session

        Returns:
            Occurrences for today sorted by scheduled_time. Logged slots carry
            the logged status; the rest are pending, or missed once the
            4 hour cutoff has passed.
        """
        now = now or datetime.now()
        today = now.date()

        def _get(session: Session) -> List[DoseOccurrence]:
            medications = query_medications_in_range(session, user_id, today, today)
            logs = query_logs_in_range(session, user_id, today, today)

            occurrences = schedule_expander.expand_day(medications, today)
            status_resolver.resolve_all(occurrences, logs, now)

            # Stable sort keeps medication order within a slot
            occurrences.sort(key=lambda o: o.scheduled_time)
            logger.debug(
                f"Today's schedule for user {user_id}: {len(occurrences)} slot(s)"
            )
            return occurrences

        if db:
            return _get(db)

        with get_db_context() as session:
            return _get(session)

    async def get_weekly_schedule(
        self,
        user_id: int,
        start_date: Optional[date],
        end_date: Optional[date],
        now: Optional[datetime] = None,
        db: Optional[Session] = None
    ) -> List[DoseOccurrence]:
        """
        Dose slots for every day of [start_date, end_date]

        Each (medication, time, day) appears once: a logged slot shows its
        latest log, an unlogged one an inferred status.
        """
        check_range(start_date, end_date)
        now = now or datetime.now()

        def _get(session: Session) -> List[DoseOccurrence]:
            medications = query_medications_in_range(session, user_id, start_date, end_date)
            logs = query_logs_in_range(session, user_id, start_date, end_date)

            candidates = schedule_expander.expand(medications, start_date, end_date)
            merged = status_resolver.merge_with_logs(candidates, logs, now)
            merged.sort(key=lambda o: (o.date, o.scheduled_time))

            logger.debug(
                f"Weekly schedule for user {user_id} {start_date}..{end_date}: "
                f"{len(merged)} slot(s) from {len(logs)} log(s)"
            )
            return merged

        if db:
            return _get(db)

        with get_db_context() as session:
            return _get(session)


# Singleton instance
schedule_service = ScheduleService()
