"""
Status Resolver
Assigns pending / taken / missed / skipped to dose occurrences
"""

import logging
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple, Union
from datetime import datetime, date

from models import OccurrenceStatus
from tools.activity import to_date_str
from tools.schedule_expander import DoseOccurrence, MedicationSnapshot
from tools.time_window import minutes_since, is_past_cutoff


logger = logging.getLogger(__name__)


# (medication_id, "HH:MM", "YYYY-MM-DD")
LogKey = Tuple[int, str, str]


def log_key(log: Any) -> LogKey:
    """Slot-day key of a dose log: the day is the day the log was created"""
    return (log.medication_id, log.scheduled_time, to_date_str(log.created_at))


def _recency(log: Any):
    return (log.taken_at or log.created_at, log.id or 0)


def log_status(log: Any) -> OccurrenceStatus:
    value = getattr(log.status, "value", log.status)
    return OccurrenceStatus(value)


class LogIndex:
    """
    Dose logs keyed by slot-day.

    When several logs share a key the one with the latest taken_at wins
    (ties go to the higher id).
    """

    def __init__(self, logs: Iterable[Any] = ()):
        self._logs: Dict[LogKey, Any] = {}
        for log in logs:
            self.add(log)

    def add(self, log: Any) -> None:
        key = log_key(log)
        current = self._logs.get(key)
        if current is None:
            self._logs[key] = log
            return
        logger.debug(f"Duplicate dose log for slot {key}: {current.id} vs {log.id}")
        if _recency(log) >= _recency(current):
            self._logs[key] = log

    def get(self, key: LogKey) -> Optional[Any]:
        return self._logs.get(key)

    def __contains__(self, key: LogKey) -> bool:
        return key in self._logs

    def __iter__(self) -> Iterator[Any]:
        return iter(self._logs.values())

    def __len__(self) -> int:
        return len(self._logs)


def infer_status(
    occurrence_date: Union[date, str],
    scheduled_time: str,
    now: datetime
) -> OccurrenceStatus:
    """
    Read-time inference for a slot that has no log.

    Past days are missed. Today's slots are missed once the 4 hour cutoff
    has passed and pending before that. Future days are pending.
    """
    day_str = to_date_str(occurrence_date)
    today_str = now.date().isoformat()

    if day_str < today_str:
        return OccurrenceStatus.MISSED
    if day_str == today_str:
        if is_past_cutoff(minutes_since(now, scheduled_time, on_date=now.date())):
            return OccurrenceStatus.MISSED
        return OccurrenceStatus.PENDING
    return OccurrenceStatus.PENDING


class StatusResolver:
    """
    Merges candidate occurrences with recorded dose logs
    """

    @staticmethod
    def _as_index(logs: Union[LogIndex, Iterable[Any]]) -> LogIndex:
        return logs if isinstance(logs, LogIndex) else LogIndex(logs)

    def resolve(
        self,
        occurrence: DoseOccurrence,
        logs: Union[LogIndex, Iterable[Any]],
        now: datetime
    ) -> OccurrenceStatus:
        """
        Status of one occurrence

        A matching log's stored status is final; otherwise the status is
        inferred from the occurrence's day and the time window.
        """
        log = self._as_index(logs).get(occurrence.key)
        if log is not None:
            return log_status(log)
        return infer_status(occurrence.date, occurrence.scheduled_time, now)

    def resolve_all(
        self,
        occurrences: List[DoseOccurrence],
        logs: Union[LogIndex, Iterable[Any]],
        now: datetime
    ) -> List[DoseOccurrence]:
        """Set status on each occurrence in place and return them"""
        index = self._as_index(logs)
        for occurrence in occurrences:
            occurrence.status = self.resolve(occurrence, index, now)
        return occurrences

    def merge_with_logs(
        self,
        candidates: List[DoseOccurrence],
        logs: Union[LogIndex, Iterable[Any]],
        now: datetime
    ) -> List[DoseOccurrence]:
        """
        Ranged-view merge: each slot-day appears exactly once

        Candidates whose key has a log are dropped; the remaining ones get an
        inferred status. Then one entry per logged key is appended, carrying
        the log's status and the medication it was logged against.
        """
        index = self._as_index(logs)

        merged = []
        for candidate in candidates:
            if candidate.key in index:
                continue
            candidate.status = infer_status(candidate.date, candidate.scheduled_time, now)
            merged.append(candidate)

        for log in index:
            medication_id, scheduled_time, day_str = log_key(log)
            merged.append(DoseOccurrence(
                medication_id=medication_id,
                medication=MedicationSnapshot.from_medication(log.medication),
                scheduled_time=scheduled_time,
                date=day_str,
                status=log_status(log)
            ))

        return merged


# Singleton instance
status_resolver = StatusResolver()
