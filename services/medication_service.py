"""
Medication Service
Business logic for medication management
"""

import logging
from typing import List, Optional
from datetime import date
from sqlalchemy.orm import Session, joinedload
from sqlalchemy import and_, or_

from database import get_db_context
import models
from services.exceptions import NotFoundError


logger = logging.getLogger(__name__)


def query_medications_in_range(
    session: Session,
    user_id: int,
    start: date,
    end: date
) -> List[models.Medication]:
    """
    Medications of a user that may be active somewhere in [start, end]

    This is only a coarse prefilter; day-level activity is decided by
    tools.activity.is_active_on.
    """
    return session.query(models.Medication).options(
        joinedload(models.Medication.category)
    ).filter(
        and_(
            models.Medication.user_id == user_id,
            models.Medication.start_date <= end,
            or_(
                models.Medication.end_date.is_(None),
                models.Medication.end_date >= start
            )
        )
    ).all()


def get_owned_medication(session: Session, user_id: int, medication_id: int) -> models.Medication:
    medication = session.query(models.Medication).options(
        joinedload(models.Medication.category)
    ).filter(
        and_(
            models.Medication.id == medication_id,
            models.Medication.user_id == user_id
        )
    ).first()
    if not medication:
        raise NotFoundError("Medication not found")
    return medication


def _check_category(session: Session, user_id: int, category_id: Optional[int]) -> None:
    if category_id is None:
        return
    category = session.query(models.Category).filter(
        and_(
            models.Category.id == category_id,
            models.Category.user_id == user_id
        )
    ).first()
    if not category:
        raise NotFoundError("Category not found")


class MedicationService:
    """
    Service for medication-related operations
    """

    async def add_medication(
        self,
        user_id: int,
        name: str,
        dose: str,
        frequency: int,
        times: List[str],
        start_date: date,
        end_date: Optional[date] = None,
        category_id: Optional[int] = None,
        db: Optional[Session] = None
    ) -> models.Medication:
        """
        Add a new medication for a user

        Args:
            user_id: Owner
            name: Medication name
            dose: Dose description (e.g., "500mg")
            frequency: Doses per day
            times: Ordered "HH:MM" time slots
            start_date: First active day, inclusive
            end_date: Last active day, inclusive; None if open-ended
            category_id: Optional category owned by the same user
            db: Database session

        Returns:
            Created Medication object
        """
        def _add(session: Session) -> models.Medication:
            _check_category(session, user_id, category_id)

            medication = models.Medication(
                user_id=user_id,
                name=name,
                dose=dose,
                frequency=frequency,
                times=list(times),
                start_date=start_date,
                end_date=end_date,
                category_id=category_id
            )

            session.add(medication)
            session.commit()
            session.refresh(medication)

            logger.info(f"Added medication {medication.id} ({name}) for user {user_id}")
            return medication

        if db:
            return _add(db)

        with get_db_context() as session:
            return _add(session)

    async def get_medication(
        self,
        user_id: int,
        medication_id: int,
        db: Optional[Session] = None
    ) -> models.Medication:
        """Get a medication owned by the user"""
        def _get(session: Session) -> models.Medication:
            return get_owned_medication(session, user_id, medication_id)

        if db:
            return _get(db)

        with get_db_context() as session:
            return _get(session)

    async def get_user_medications(
        self,
        user_id: int,
        db: Optional[Session] = None
    ) -> List[models.Medication]:
        """All medications of a user, ordered by name"""
        def _get(session: Session) -> List[models.Medication]:
            return session.query(models.Medication).options(
                joinedload(models.Medication.category)
            ).filter(
                models.Medication.user_id == user_id
            ).order_by(models.Medication.name).all()

        if db:
            return _get(db)

        with get_db_context() as session:
            return _get(session)

    async def update_medication(
        self,
        user_id: int,
        medication_id: int,
        name: str,
        dose: str,
        frequency: int,
        times: List[str],
        start_date: date,
        end_date: Optional[date] = None,
        category_id: Optional[int] = None,
        db: Optional[Session] = None
    ) -> models.Medication:
        """
        Replace every editable field of a medication

        Fields not supplied are reset to their defaults (end_date and
        category_id become None).
        """
        def _update(session: Session) -> models.Medication:
            medication = get_owned_medication(session, user_id, medication_id)
            _check_category(session, user_id, category_id)

            medication.name = name
            medication.dose = dose
            medication.frequency = frequency
            medication.times = list(times)
            medication.start_date = start_date
            medication.end_date = end_date
            medication.category_id = category_id

            session.commit()
            session.refresh(medication)

            logger.info(f"Updated medication {medication_id} for user {user_id}")
            return medication

        if db:
            return _update(db)

        with get_db_context() as session:
            return _update(session)

    async def delete_medication(
        self,
        user_id: int,
        medication_id: int,
        db: Optional[Session] = None
    ) -> None:
        """Delete a medication together with its dose logs"""
        def _delete(session: Session) -> None:
            medication = get_owned_medication(session, user_id, medication_id)
            session.delete(medication)
            session.commit()

            logger.info(f"Deleted medication {medication_id} for user {user_id}")

        if db:
            return _delete(db)

        with get_db_context() as session:
            return _delete(session)


# Singleton instance
medication_service = MedicationService()
