"""
Database Models
SQLAlchemy ORM models for DoseTrack
"""

from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, Text, Date, Enum, Index, JSON
from sqlalchemy.orm import relationship
from datetime import datetime
from enum import Enum as PyEnum

from database import Base
from config import TableNames


# ==================== ENUMS ====================

class DoseStatus(str, PyEnum):
    """Status recorded on a dose log"""
    TAKEN = "taken"
    MISSED = "missed"
    SKIPPED = "skipped"


class OccurrenceStatus(str, PyEnum):
    """Status of a derived dose occurrence in a schedule view"""
    PENDING = "pending"
    TAKEN = "taken"
    MISSED = "missed"
    SKIPPED = "skipped"


# ==================== MODELS ====================

class User(Base):
    """Tracker user; owns categories, medications and dose logs"""
    __tablename__ = TableNames.USERS

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    name = Column(String(255))

    # Daily streak, bumped at most once per calendar day
    streak = Column(Integer, nullable=False, default=0)
    last_streak_update = Column(DateTime)

    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)

    # Relationships
    categories = relationship("Category", back_populates="user", cascade="all, delete-orphan")
    medications = relationship("Medication", back_populates="user", cascade="all, delete-orphan")
    dose_logs = relationship("DoseLog", back_populates="user", cascade="all, delete-orphan")
    calendar_credential = relationship(
        "CalendarCredential", back_populates="user", uselist=False, cascade="all, delete-orphan"
    )


class Category(Base):
    """User-defined label for medications"""
    __tablename__ = TableNames.CATEGORIES

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey(f"{TableNames.USERS}.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)

    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)

    # Relationships
    user = relationship("User", back_populates="categories")
    medications = relationship("Medication", back_populates="category", passive_deletes=True)


class Medication(Base):
    """Medication with its daily time slots and active date range"""
    __tablename__ = TableNames.MEDICATIONS

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey(f"{TableNames.USERS}.id"), nullable=False)
    category_id = Column(Integer, ForeignKey(f"{TableNames.CATEGORIES}.id", ondelete="SET NULL"))

    name = Column(String(255), nullable=False)
    dose = Column(String(100), nullable=False)  # e.g., "500mg"

    # Times per day; len(times) is expected to match but is not enforced
    frequency = Column(Integer, nullable=False, default=1)
    # Ordered list of "HH:MM" strings
    times = Column(JSON, nullable=False, default=list)

    # Inclusive calendar dates, end_date None means open-ended
    start_date = Column(Date, nullable=False)
    end_date = Column(Date)

    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)

    # Relationships
    user = relationship("User", back_populates="medications")
    category = relationship("Category", back_populates="medications")
    dose_logs = relationship("DoseLog", back_populates="medication", cascade="all, delete-orphan")

    __table_args__ = (
        Index("ix_medications_user_dates", "user_id", "start_date", "end_date"),
    )


class DoseLog(Base):
    """A recorded dose event for one medication time slot"""
    __tablename__ = TableNames.DOSE_LOGS

    id = Column(Integer, primary_key=True, index=True)
    medication_id = Column(
        Integer, ForeignKey(f"{TableNames.MEDICATIONS}.id", ondelete="CASCADE"), nullable=False
    )
    # Denormalized from the medication's owner
    user_id = Column(Integer, ForeignKey(f"{TableNames.USERS}.id"), nullable=False)

    # The slot this log is for, not the moment it was taken
    scheduled_time = Column(String(5), nullable=False)
    taken_at = Column(DateTime, nullable=False, default=datetime.now)

    status = Column(Enum(DoseStatus), nullable=False, default=DoseStatus.TAKEN)
    was_late = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime, nullable=False, default=datetime.now)

    # Relationships
    medication = relationship("Medication", back_populates="dose_logs")
    user = relationship("User", back_populates="dose_logs")

    __table_args__ = (
        Index("ix_dose_logs_user_created", "user_id", "created_at"),
        Index("ix_dose_logs_slot", "medication_id", "scheduled_time"),
    )


class CalendarCredential(Base):
    """Per-user OAuth tokens for calendar sync, stored outside any session"""
    __tablename__ = TableNames.CALENDAR_CREDENTIALS

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey(f"{TableNames.USERS}.id"), nullable=False, unique=True)

    provider = Column(String(50), nullable=False, default="google")
    access_token = Column(Text, nullable=False)
    refresh_token = Column(Text)
    token_type = Column(String(20), default="Bearer")
    scope = Column(Text)
    expires_at = Column(DateTime)

    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)

    # Relationships
    user = relationship("User", back_populates="calendar_credential")
