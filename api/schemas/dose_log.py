"""
Dose Log Schemas
Pydantic models for dose logging, schedules, statistics and export
"""

from typing import Optional, List
from datetime import datetime
from pydantic import BaseModel, Field, ConfigDict
from enum import Enum

from api.schemas.medication import CategoryRef


TIME_OF_DAY_PATTERN = r"^([01]\d|2[0-3]):([0-5]\d)$"


class DoseStatusEnum(str, Enum):
    """Statuses a client may log"""
    TAKEN = "taken"
    MISSED = "missed"
    SKIPPED = "skipped"


class OccurrenceStatusEnum(str, Enum):
    """Statuses shown on schedule views"""
    PENDING = "pending"
    TAKEN = "taken"
    MISSED = "missed"
    SKIPPED = "skipped"


# ==================== REQUEST SCHEMAS ====================

class DoseLogCreate(BaseModel):
    """Schema for logging a dose against one of today's slots"""
    medication_id: int
    scheduled_time: str = Field(..., pattern=TIME_OF_DAY_PATTERN)
    status: DoseStatusEnum = DoseStatusEnum.TAKEN


# ==================== RESPONSE SCHEMAS ====================

class MedicationRef(BaseModel):
    """Medication summary embedded in logs and schedules"""
    id: int
    name: str
    dose: str
    category: Optional[CategoryRef] = None

    model_config = ConfigDict(from_attributes=True)


class DoseLogResponse(BaseModel):
    """Schema for a stored dose log"""
    id: int
    medication_id: int
    user_id: int
    scheduled_time: str
    taken_at: datetime
    status: DoseStatusEnum
    was_late: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class DoseLogDetail(DoseLogResponse):
    """Dose log with its medication"""
    medication: Optional[MedicationRef] = None


class DoseLogResult(BaseModel):
    """Result of logging a dose"""
    message: str
    dose_log: DoseLogResponse
    user_streak: int
    overridden: bool = False


class ScheduleEntry(BaseModel):
    """One dose slot in today's schedule"""
    medication_id: int
    medication: MedicationRef
    scheduled_time: str
    status: OccurrenceStatusEnum


class DatedScheduleEntry(ScheduleEntry):
    """One dose slot in a ranged schedule"""
    date: str


class AdherenceGroup(BaseModel):
    """Status counts for one group of doses"""
    total: int
    taken: int
    missed: int
    skipped: int
    adherence_rate: float


class MedicationAdherenceStats(AdherenceGroup):
    medication_id: int
    medication_name: str


class DayAdherenceStats(AdherenceGroup):
    date: str


class AdherenceStats(BaseModel):
    """Adherence statistics over a date range"""
    overall: float
    total: int
    taken: int
    missed: int
    skipped: int
    by_medication: List[MedicationAdherenceStats]
    by_day: List[DayAdherenceStats]


class ExportRow(BaseModel):
    """One line of the dose log export"""
    log_id: int
    date: str
    time_taken: Optional[str] = None
    scheduled_time: str
    medication_id: int
    medication_name: Optional[str] = None
    dose: Optional[str] = None
    category: str
    status: str
    was_late: str
