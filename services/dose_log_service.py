"""
Dose Log Service
Records dose events and keeps the user's daily streak
"""

import logging
from typing import Any, Dict, List, Optional, Union
from datetime import datetime, date, time
from sqlalchemy.orm import Session, joinedload
from sqlalchemy import and_, or_, update

from database import get_db_context
import models
from models import DoseStatus
from services.exceptions import ValidationFailure
from services.medication_service import get_owned_medication
from tools.time_window import parse_time_of_day, minutes_since, is_late, is_past_cutoff


logger = logging.getLogger(__name__)


LOGGED_MESSAGE = "Dose logged successfully"
OVERRIDE_MESSAGE = "Dose marked as missed because it was more than 4 hours after scheduled time"


def _coerce_status(status: Union[DoseStatus, str, None]) -> DoseStatus:
    if status is None:
        return DoseStatus.TAKEN
    try:
        return DoseStatus(status)
    except ValueError:
        raise ValidationFailure("Status must be taken, missed, or skipped")


def day_bounds(start: date, end: date):
    """Datetime bounds covering whole days start..end"""
    return datetime.combine(start, time.min), datetime.combine(end, time.max)


def bump_streak(session: Session, user_id: int, now: datetime) -> bool:
    """
    Increment the user's streak at most once per calendar day.

    Single conditional UPDATE, so two concurrent "taken" logs on the same
    day cannot both increment. Returns True if the streak moved.
    """
    today_start = datetime.combine(now.date(), time.min)
    result = session.execute(
        update(models.User)
        .where(models.User.id == user_id)
        .where(or_(
            models.User.last_streak_update.is_(None),
            models.User.last_streak_update < today_start
        ))
        .values(streak=models.User.streak + 1, last_streak_update=now)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


class DoseLogService:
    """
    Service for dose logging and log history
    """

    async def log_dose(
        self,
        user_id: int,
        medication_id: int,
        scheduled_time: str,
        status: Union[DoseStatus, str, None] = DoseStatus.TAKEN,
        now: Optional[datetime] = None,
        db: Optional[Session] = None
    ) -> Dict[str, Any]:
        """
        Record a dose for one of today's time slots

        A dose logged as taken more than 4 hours after its slot is stored as
        missed instead. was_late is set for doses logged between 30 minutes
        and 4 hours after the slot.

        Args:
            user_id: Caller; must own the medication
            medication_id: Medication ID
            scheduled_time: "HH:MM" slot, interpreted as today
            status: Requested status (default taken)
            now: Current time (default datetime.now())
            db: Database session

        Returns:
            {"message", "dose_log", "user_streak", "overridden"}
        """
        now = now or datetime.now()
        requested = _coerce_status(status)
        try:
            parse_time_of_day(scheduled_time)
        except ValueError as e:
            raise ValidationFailure(str(e))

        def _log(session: Session) -> Dict[str, Any]:
            get_owned_medication(session, user_id, medication_id)

            diff_minutes = minutes_since(now, scheduled_time)
            was_late = is_late(diff_minutes)

            final_status = requested
            message = LOGGED_MESSAGE
            overridden = False
            if requested == DoseStatus.TAKEN and is_past_cutoff(diff_minutes):
                final_status = DoseStatus.MISSED
                message = OVERRIDE_MESSAGE
                overridden = True

            dose_log = models.DoseLog(
                medication_id=medication_id,
                user_id=user_id,
                scheduled_time=scheduled_time,
                taken_at=now,
                created_at=now,
                status=final_status,
                was_late=was_late
            )
            session.add(dose_log)
            session.flush()

            streak_bumped = False
            if final_status == DoseStatus.TAKEN:
                streak_bumped = bump_streak(session, user_id, now)

            session.commit()
            session.refresh(dose_log)

            user = session.get(models.User, user_id)
            session.refresh(user)

            logger.info(
                f"Logged dose {dose_log.id} for medication {medication_id} at "
                f"{scheduled_time}: {final_status.value} "
                f"(diff={diff_minutes:.0f}m, late={was_late}, streak_bumped={streak_bumped})"
            )

            return {
                "message": message,
                "dose_log": dose_log,
                "user_streak": user.streak,
                "overridden": overridden,
            }

        if db:
            return _log(db)

        with get_db_context() as session:
            return _log(session)

    async def get_dose_logs(
        self,
        user_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        db: Optional[Session] = None
    ) -> List[models.DoseLog]:
        """
        Dose logs of a user, newest first

        The range filter (on creation day, both ends inclusive) applies only
        when both bounds are given.
        """
        if start_date and end_date and start_date > end_date:
            raise ValidationFailure("Start date must not be after end date")

        def _get(session: Session) -> List[models.DoseLog]:
            query = session.query(models.DoseLog).options(
                joinedload(models.DoseLog.medication).joinedload(models.Medication.category)
            ).filter(models.DoseLog.user_id == user_id)

            if start_date and end_date:
                range_start, range_end = day_bounds(start_date, end_date)
                query = query.filter(
                    and_(
                        models.DoseLog.created_at >= range_start,
                        models.DoseLog.created_at <= range_end
                    )
                )

            return query.order_by(
                models.DoseLog.created_at.desc(), models.DoseLog.id.desc()
            ).all()

        if db:
            return _get(db)

        with get_db_context() as session:
            return _get(session)


# Singleton instance
dose_log_service = DoseLogService()
