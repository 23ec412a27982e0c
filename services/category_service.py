"""
Category Service
Business logic for medication categories
"""

import logging
from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy import and_

from database import get_db_context
import models
from services.exceptions import NotFoundError


logger = logging.getLogger(__name__)


def _owned_category(session: Session, user_id: int, category_id: int) -> models.Category:
    category = session.query(models.Category).filter(
        and_(
            models.Category.id == category_id,
            models.Category.user_id == user_id
        )
    ).first()
    if not category:
        raise NotFoundError("Category not found")
    return category


class CategoryService:
    """
    Service for category CRUD, scoped to the owning user
    """

    async def get_categories(
        self,
        user_id: int,
        db: Optional[Session] = None
    ) -> List[models.Category]:
        """All categories of a user, ordered by name"""
        def _get(session: Session) -> List[models.Category]:
            return session.query(models.Category).filter(
                models.Category.user_id == user_id
            ).order_by(models.Category.name).all()

        if db:
            return _get(db)

        with get_db_context() as session:
            return _get(session)

    async def get_category(
        self,
        user_id: int,
        category_id: int,
        db: Optional[Session] = None
    ) -> models.Category:
        def _get(session: Session) -> models.Category:
            return _owned_category(session, user_id, category_id)

        if db:
            return _get(db)

        with get_db_context() as session:
            return _get(session)

    async def create_category(
        self,
        user_id: int,
        name: str,
        db: Optional[Session] = None
    ) -> models.Category:
        """Create a category for a user"""
        def _create(session: Session) -> models.Category:
            category = models.Category(user_id=user_id, name=name)
            session.add(category)
            session.commit()
            session.refresh(category)

            logger.info(f"Created category {category.id} for user {user_id}")
            return category

        if db:
            return _create(db)

        with get_db_context() as session:
            return _create(session)

    async def update_category(
        self,
        user_id: int,
        category_id: int,
        name: str,
        db: Optional[Session] = None
    ) -> models.Category:
        """Rename a category"""
        def _update(session: Session) -> models.Category:
            category = _owned_category(session, user_id, category_id)
            category.name = name
            session.commit()
            session.refresh(category)
            return category

        if db:
            return _update(db)

        with get_db_context() as session:
            return _update(session)

    async def delete_category(
        self,
        user_id: int,
        category_id: int,
        db: Optional[Session] = None
    ) -> None:
        """
        Delete a category

        Medications that referenced it keep existing with no category.
        """
        def _delete(session: Session) -> None:
            category = _owned_category(session, user_id, category_id)

            detached = session.query(models.Medication).filter(
                models.Medication.category_id == category_id
            ).update({models.Medication.category_id: None}, synchronize_session="fetch")

            session.delete(category)
            session.commit()

            logger.info(
                f"Deleted category {category_id} for user {user_id}, "
                f"cleared it from {detached} medication(s)"
            )

        if db:
            return _delete(db)

        with get_db_context() as session:
            return _delete(session)


# Singleton instance
category_service = CategoryService()
