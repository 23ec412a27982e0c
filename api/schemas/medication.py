"""
Medication Schemas
Pydantic models for medication-related API requests and responses
"""

from typing import Any, Optional, List
from datetime import datetime, date
from pydantic import BaseModel, Field, ConfigDict, field_validator, model_validator

from tools.schedule_expander import clean_times
from tools.time_window import is_valid_time_of_day


# ==================== BASE SCHEMAS ====================

class CategoryRef(BaseModel):
    """Category embedded in medication responses"""
    id: int
    name: str

    model_config = ConfigDict(from_attributes=True)


class MedicationBase(BaseModel):
    """Base medication schema"""
    name: str = Field(..., min_length=1, max_length=255)
    dose: str = Field(..., min_length=1, max_length=100)
    frequency: int = Field(..., ge=1, le=24)
    times: List[str] = Field(default_factory=list)
    start_date: date
    end_date: Optional[date] = None
    category_id: Optional[int] = None


# ==================== REQUEST SCHEMAS ====================

class MedicationCreate(MedicationBase):
    """Schema for creating a new medication"""

    @field_validator("times")
    @classmethod
    def check_times(cls, value: List[str]) -> List[str]:
        for entry in value:
            if not is_valid_time_of_day(entry):
                raise ValueError(f"Invalid time {entry!r}, expected HH:MM")
        return value

    @model_validator(mode="after")
    def check_dates(self):
        if self.end_date is not None and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class MedicationUpdate(MedicationCreate):
    """Schema for replacing a medication (every field is rewritten)"""
    pass


# ==================== RESPONSE SCHEMAS ====================

class MedicationResponse(MedicationBase):
    """Schema for medication response"""
    id: int
    user_id: int
    category: Optional[CategoryRef] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_validator("times", mode="before")
    @classmethod
    def drop_malformed_times(cls, value: Any) -> List[str]:
        # Stored rows may predate request validation
        return clean_times(value)
