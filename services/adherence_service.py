"""
Adherence Service
Adherence statistics over a date range
"""

import logging
from typing import Optional, Tuple
from datetime import datetime, date, timedelta
from sqlalchemy.orm import Session

from config import settings
from database import get_db_context
from services.exceptions import ValidationFailure
from services.medication_service import query_medications_in_range
from services.schedule_service import query_logs_in_range
from tools.adherence_aggregator import AdherenceReport, adherence_aggregator, collect_occurrences


logger = logging.getLogger(__name__)


def resolve_stats_range(
    start_date: Optional[date],
    end_date: Optional[date],
    today: date
) -> Tuple[date, date]:
    """
    Fill in missing bounds of a stats / export range

    No bounds: the last STATS_DEFAULT_DAYS days up to today. Only an end:
    the same window ending there. Only a start: from there up to today.
    """
    window = timedelta(days=settings.STATS_DEFAULT_DAYS)

    if start_date is None and end_date is None:
        start, end = today - window, today
    elif start_date is None:
        start, end = end_date - window, end_date
    elif end_date is None:
        start, end = start_date, today
    else:
        start, end = start_date, end_date

    if start > end:
        raise ValidationFailure("Start date must not be after end date")
    if (end - start).days + 1 > settings.MAX_RANGE_DAYS:
        raise ValidationFailure(
            f"Date range must not exceed {settings.MAX_RANGE_DAYS} days"
        )
    return start, end


class AdherenceService:
    """
    Service for adherence statistics
    """

    async def get_adherence_stats(
        self,
        user_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        now: Optional[datetime] = None,
        db: Optional[Session] = None
    ) -> AdherenceReport:
        """
        Compute adherence for a user

        Args:
            user_id: Caller
            start_date: First day, inclusive (optional)
            end_date: Last day, inclusive (optional)
            now: Current time (default datetime.now())
            db: Database session

        Returns:
            AdherenceReport with overall, per-medication and per-day groups.
            Logged doses count with their stored status; unlogged slots count
            only once they are missed. Pending and future slots are excluded.
        """
        now = now or datetime.now()
        start, end = resolve_stats_range(start_date, end_date, now.date())

        def _get(session: Session) -> AdherenceReport:
            medications = query_medications_in_range(session, user_id, start, end)
            logs = query_logs_in_range(session, user_id, start, end)

            occurrences = collect_occurrences(medications, logs, start, end, now)
            report = adherence_aggregator.aggregate(occurrences)

            logger.info(
                f"Adherence for user {user_id} {start}..{end}: "
                f"{report.counts.taken}/{report.counts.total} taken"
            )
            return report

        if db:
            return _get(db)

        with get_db_context() as session:
            return _get(session)


# Singleton instance
adherence_service = AdherenceService()
