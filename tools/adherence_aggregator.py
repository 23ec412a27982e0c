"""
Adherence Aggregator
Reduces resolved dose occurrences into overall / per-medication / per-day stats
"""

import logging
from typing import Any, Dict, Iterable, List
from dataclasses import dataclass, field
from datetime import datetime, date

from models import OccurrenceStatus
from tools.activity import to_date_str
from tools.schedule_expander import DoseOccurrence, MedicationSnapshot, schedule_expander
from tools.status_resolver import LogIndex, infer_status, log_key, log_status


logger = logging.getLogger(__name__)


@dataclass
class AdherenceCounts:
    """Status tallies for a group of occurrences"""
    total: int = 0
    taken: int = 0
    missed: int = 0
    skipped: int = 0

    def add(self, status: OccurrenceStatus) -> None:
        self.total += 1
        if status == OccurrenceStatus.TAKEN:
            self.taken += 1
        elif status == OccurrenceStatus.MISSED:
            self.missed += 1
        elif status == OccurrenceStatus.SKIPPED:
            self.skipped += 1

    @property
    def adherence_rate(self) -> float:
        """taken / total as a fraction, 0 for an empty group"""
        return self.taken / self.total if self.total > 0 else 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            "taken": self.taken,
            "missed": self.missed,
            "skipped": self.skipped,
            "adherence_rate": self.adherence_rate,
        }


@dataclass
class MedicationAdherence:
    medication_id: int
    medication_name: str
    counts: AdherenceCounts = field(default_factory=AdherenceCounts)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "medication_id": self.medication_id,
            "medication_name": self.medication_name,
            **self.counts.to_dict(),
        }


@dataclass
class DayAdherence:
    date: str
    counts: AdherenceCounts = field(default_factory=AdherenceCounts)

    def to_dict(self) -> Dict[str, Any]:
        return {"date": self.date, **self.counts.to_dict()}


@dataclass
class AdherenceReport:
    """Aggregated adherence over a date range"""
    counts: AdherenceCounts
    by_medication: List[MedicationAdherence]
    by_day: List[DayAdherence]

    @property
    def overall(self) -> float:
        return self.counts.adherence_rate

    def to_dict(self) -> Dict[str, Any]:
        return {
            "overall": self.overall,
            "total": self.counts.total,
            "taken": self.counts.taken,
            "missed": self.counts.missed,
            "skipped": self.counts.skipped,
            "by_medication": [m.to_dict() for m in self.by_medication],
            "by_day": [d.to_dict() for d in self.by_day],
        }


def collect_occurrences(
    medications: Iterable[Any],
    logs: Iterable[Any],
    start: date,
    end: date,
    now: datetime
) -> List[DoseOccurrence]:
    """
    Occurrences that count toward adherence over [start, end]

    Every log created inside the range contributes its own status, whichever
    day's schedule it was meant for. Slots with no log contribute only when
    they infer to missed: future days and still-pending slots today are left
    out entirely.
    """
    medications = list(medications)
    medications_by_id = {m.id: m for m in medications}
    start_str, end_str = start.isoformat(), end.isoformat()

    index = LogIndex(
        log for log in logs
        if start_str <= to_date_str(log.created_at) <= end_str
    )

    occurrences = []
    for log in index:
        medication_id, scheduled_time, day_str = log_key(log)
        medication = medications_by_id.get(medication_id) or log.medication
        occurrences.append(DoseOccurrence(
            medication_id=medication_id,
            medication=MedicationSnapshot.from_medication(medication),
            scheduled_time=scheduled_time,
            date=day_str,
            status=log_status(log)
        ))

    last_day = min(end, now.date())
    if start > last_day:
        return occurrences

    for candidate in schedule_expander.expand(medications, start, last_day):
        if candidate.key in index:
            continue
        status = infer_status(candidate.date, candidate.scheduled_time, now)
        if status == OccurrenceStatus.MISSED:
            candidate.status = status
            occurrences.append(candidate)

    return occurrences


class AdherenceAggregator:
    """
    Computes adherence statistics from resolved occurrences
    """

    def aggregate(self, occurrences: Iterable[DoseOccurrence]) -> AdherenceReport:
        """
        Group occurrences overall, by medication and by day

        Args:
            occurrences: Occurrences with a final status

        Returns:
            AdherenceReport; by_medication keeps first-seen order and by_day
            is sorted by ascending date
        """
        overall = AdherenceCounts()
        by_medication: Dict[int, MedicationAdherence] = {}
        by_day: Dict[str, DayAdherence] = {}

        for occurrence in occurrences:
            if occurrence.status is None:
                logger.warning(
                    f"Skipping unresolved occurrence {occurrence.key} in aggregation"
                )
                continue

            overall.add(occurrence.status)

            med_stats = by_medication.get(occurrence.medication_id)
            if med_stats is None:
                med_stats = MedicationAdherence(
                    medication_id=occurrence.medication_id,
                    medication_name=occurrence.medication.name
                )
                by_medication[occurrence.medication_id] = med_stats
            med_stats.counts.add(occurrence.status)

            day_stats = by_day.get(occurrence.date)
            if day_stats is None:
                day_stats = DayAdherence(date=occurrence.date)
                by_day[occurrence.date] = day_stats
            day_stats.counts.add(occurrence.status)

        return AdherenceReport(
            counts=overall,
            by_medication=list(by_medication.values()),
            by_day=sorted(by_day.values(), key=lambda d: d.date)
        )


# Singleton instance
adherence_aggregator = AdherenceAggregator()
