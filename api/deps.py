"""
API Dependencies
Common dependencies for FastAPI endpoints
"""

from typing import Optional
from datetime import datetime
from fastapi import Depends, HTTPException, status, Header
from sqlalchemy.orm import Session

from database import get_db


def get_now() -> datetime:
    """
    Clock dependency
    Overridden in tests to pin the current time
    """
    return datetime.now()


async def get_current_user_id(
    x_user_id: Optional[int] = Header(None, alias="X-User-Id"),
    db: Session = Depends(get_db)
) -> int:
    """
    Resolve the calling user from the X-User-Id header

    Raises 401 when the header is missing or names an unknown user.
    """
    from models import User

    if x_user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User identification required",
        )

    user = db.query(User).filter(User.id == x_user_id).first()
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unknown user",
        )

    return x_user_id


class ServiceDependency:
    """
    Dependency injection for services
    """

    @staticmethod
    def get_user_service():
        from services.user_service import user_service
        return user_service

    @staticmethod
    def get_category_service():
        from services.category_service import category_service
        return category_service

    @staticmethod
    def get_medication_service():
        from services.medication_service import medication_service
        return medication_service

    @staticmethod
    def get_dose_log_service():
        from services.dose_log_service import dose_log_service
        return dose_log_service

    @staticmethod
    def get_schedule_service():
        from services.schedule_service import schedule_service
        return schedule_service

    @staticmethod
    def get_adherence_service():
        from services.adherence_service import adherence_service
        return adherence_service

    @staticmethod
    def get_report_service():
        from services.report_service import report_service
        return report_service

    @staticmethod
    def get_credential_service():
        from services.credential_service import credential_service
        return credential_service


# Service dependency instances
services = ServiceDependency()
