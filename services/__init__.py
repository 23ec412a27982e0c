"""
Services Module
Business logic layer for the DoseTrack application
"""

from services.exceptions import NotFoundError, ValidationFailure
from services.user_service import UserService, user_service
from services.category_service import CategoryService, category_service
from services.medication_service import MedicationService, medication_service
from services.dose_log_service import DoseLogService, dose_log_service
from services.schedule_service import ScheduleService, schedule_service
from services.adherence_service import AdherenceService, adherence_service
from services.report_service import ReportService, report_service
from services.credential_service import CredentialService, credential_service


__all__ = [
    # Errors
    "NotFoundError",
    "ValidationFailure",
    # Service classes
    "UserService",
    "CategoryService",
    "MedicationService",
    "DoseLogService",
    "ScheduleService",
    "AdherenceService",
    "ReportService",
    "CredentialService",
    # Singleton instances
    "user_service",
    "category_service",
    "medication_service",
    "dose_log_service",
    "schedule_service",
    "adherence_service",
    "report_service",
    "credential_service",
]
