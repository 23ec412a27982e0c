"""
Schedule Expander
Expands active medications x time slots into dose occurrences
"""

import logging
from typing import Any, Dict, Iterable, Iterator, List, Optional
from dataclasses import dataclass
from datetime import date, timedelta

from models import OccurrenceStatus
from tools.activity import is_active_on
from tools.time_window import is_valid_time_of_day


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MedicationSnapshot:
    """Medication summary carried on each occurrence"""
    id: int
    name: str
    dose: str
    category: Optional[Dict[str, Any]] = None

    @classmethod
    def from_medication(cls, medication: Any) -> "MedicationSnapshot":
        category = getattr(medication, "category", None)
        return cls(
            id=medication.id,
            name=medication.name,
            dose=medication.dose,
            category={"id": category.id, "name": category.name} if category is not None else None
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "dose": self.dose,
            "category": self.category,
        }


@dataclass
class DoseOccurrence:
    """One expected dose: a medication, a time slot and a calendar day"""
    medication_id: int
    medication: MedicationSnapshot
    scheduled_time: str
    date: str
    status: Optional[OccurrenceStatus] = None

    @property
    def key(self):
        return (self.medication_id, self.scheduled_time, self.date)

    def to_dict(self, include_date: bool = True) -> Dict[str, Any]:
        data = {
            "medication_id": self.medication_id,
            "medication": self.medication.to_dict(),
            "scheduled_time": self.scheduled_time,
            "status": self.status.value if self.status is not None else None,
        }
        if include_date:
            data["date"] = self.date
        return data


def date_range(start: date, end: date) -> Iterator[date]:
    """Whole calendar days from start to end, both inclusive"""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def clean_times(times: Any, medication_id: Any = "?") -> List[str]:
    """
    Stored time slots in their stored order.

    Malformed entries are dropped with a warning instead of failing the view.
    """
    if not times:
        return []
    if not isinstance(times, (list, tuple)):
        logger.warning(f"Medication {medication_id} has non-list times {times!r}; ignoring")
        return []

    result = []
    for value in times:
        if is_valid_time_of_day(value):
            result.append(value)
        else:
            logger.warning(f"Medication {medication_id} has malformed time {value!r}; skipping")
    return result


def valid_times(medication: Any) -> List[str]:
    """The medication's well-formed time slots"""
    return clean_times(
        getattr(medication, "times", None),
        medication_id=getattr(medication, "id", "?")
    )


class ScheduleExpander:
    """
    Turns medication definitions into candidate dose occurrences
    """

    def expand(
        self,
        medications: Iterable[Any],
        start: date,
        end: date
    ) -> List[DoseOccurrence]:
        """
        Expand every medication active on each day of [start, end]

        Args:
            medications: Medication rows (or any object with id, name, dose,
                times, start_date, end_date and optional category)
            start: First day, inclusive
            end: Last day, inclusive

        Returns:
            Candidate occurrences without status, in day / medication /
            time-slot order
        """
        medications = list(medications)
        snapshots = {}
        slots = {}
        for medication in medications:
            snapshots[medication.id] = MedicationSnapshot.from_medication(medication)
            slots[medication.id] = valid_times(medication)

        occurrences = []
        for day in date_range(start, end):
            day_str = day.isoformat()
            for medication in medications:
                if not is_active_on(medication, day_str):
                    continue
                for scheduled_time in slots[medication.id]:
                    occurrences.append(DoseOccurrence(
                        medication_id=medication.id,
                        medication=snapshots[medication.id],
                        scheduled_time=scheduled_time,
                        date=day_str
                    ))
        return occurrences

    def expand_day(
        self,
        medications: Iterable[Any],
        day: date
    ) -> List[DoseOccurrence]:
        """Single-day expansion (today's schedule)"""
        return self.expand(medications, day, day)


# Singleton instance
schedule_expander = ScheduleExpander()
