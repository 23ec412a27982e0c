"""
User Service
Business logic for tracker users
"""

import logging
from typing import Optional
from sqlalchemy.orm import Session

from database import get_db_context
import models
from services.exceptions import NotFoundError, ValidationFailure


logger = logging.getLogger(__name__)


class UserService:
    """
    Service for user records
    """

    async def create_user(
        self,
        email: str,
        name: Optional[str] = None,
        db: Optional[Session] = None
    ) -> models.User:
        """
        Create a new user with an empty streak

        Args:
            email: User email (unique)
            name: Display name
            db: Database session (optional)

        Returns:
            Created User object
        """
        def _create(session: Session) -> models.User:
            existing = session.query(models.User).filter(
                models.User.email == email
            ).first()

            if existing:
                raise ValidationFailure(f"User with email {email} already exists")

            user = models.User(email=email, name=name, streak=0)
            session.add(user)
            session.commit()
            session.refresh(user)

            logger.info(f"Created user {user.id}")
            return user

        if db:
            return _create(db)

        with get_db_context() as session:
            return _create(session)

    async def get_user(
        self,
        user_id: int,
        db: Optional[Session] = None
    ) -> models.User:
        """Get user by ID, raising NotFoundError if absent"""
        def _get(session: Session) -> models.User:
            user = session.query(models.User).filter(
                models.User.id == user_id
            ).first()
            if not user:
                raise NotFoundError(f"User {user_id} not found")
            return user

        if db:
            return _get(db)

        with get_db_context() as session:
            return _get(session)


# Singleton instance
user_service = UserService()
