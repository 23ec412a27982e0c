"""
Report Service
Tabular export of a user's dose logs
"""

import logging
from typing import Dict, List, Optional, Any
from datetime import datetime, date
from sqlalchemy.orm import Session

from database import get_db_context
import models
from services.adherence_service import resolve_stats_range
from services.schedule_service import query_logs_in_range


logger = logging.getLogger(__name__)


def export_row(log: models.DoseLog) -> Dict[str, Any]:
    """One export line for a dose log"""
    medication = log.medication
    category = medication.category if medication is not None else None
    taken_at = log.taken_at or log.created_at

    return {
        "log_id": log.id,
        "date": log.created_at.date().isoformat(),
        "time_taken": taken_at.strftime("%H:%M:%S") if taken_at else None,
        "scheduled_time": log.scheduled_time,
        "medication_id": log.medication_id,
        "medication_name": medication.name if medication is not None else None,
        "dose": medication.dose if medication is not None else None,
        "category": category.name if category is not None else "None",
        "status": log.status.value,
        "was_late": "Yes" if log.was_late else "No",
    }


class ReportService:
    """
    Service for dose log exports
    """

    async def get_export_rows(
        self,
        user_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        now: Optional[datetime] = None,
        db: Optional[Session] = None
    ) -> List[Dict[str, Any]]:
        """
        Export rows for the user's dose logs, oldest first

        The range defaults the same way as adherence statistics.
        """
        now = now or datetime.now()
        start, end = resolve_stats_range(start_date, end_date, now.date())

        def _export(session: Session) -> List[Dict[str, Any]]:
            logs = query_logs_in_range(session, user_id, start, end)
            logs.sort(key=lambda log: (log.created_at, log.id))

            rows = [export_row(log) for log in logs]
            logger.info(f"Exported {len(rows)} dose log(s) for user {user_id} {start}..{end}")
            return rows

        if db:
            return _export(db)

        with get_db_context() as session:
            return _export(session)


# Singleton instance
report_service = ReportService()
