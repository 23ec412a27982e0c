"""
Credential Service
Per-user calendar OAuth tokens, persisted in the database
"""

import logging
from typing import Optional
from datetime import datetime
from sqlalchemy.orm import Session

from database import get_db_context
import models
from services.exceptions import NotFoundError


logger = logging.getLogger(__name__)


def _credential_for(session: Session, user_id: int) -> Optional[models.CalendarCredential]:
    return session.query(models.CalendarCredential).filter(
        models.CalendarCredential.user_id == user_id
    ).first()


class CredentialService:
    """
    Service for storing calendar credentials keyed by user
    """

    async def store_tokens(
        self,
        user_id: int,
        access_token: str,
        refresh_token: Optional[str] = None,
        token_type: Optional[str] = "Bearer",
        scope: Optional[str] = None,
        expires_at: Optional[datetime] = None,
        provider: str = "google",
        db: Optional[Session] = None
    ) -> models.CalendarCredential:
        """
        Create or replace the user's credential record

        Args:
            user_id: Owner
            access_token: OAuth access token
            refresh_token: OAuth refresh token; an existing one is kept if None
            token_type: Token type
            scope: Granted scopes
            expires_at: Access token expiry
            provider: Calendar provider name
            db: Database session

        Returns:
            Stored CalendarCredential
        """
        def _store(session: Session) -> models.CalendarCredential:
            credential = _credential_for(session, user_id)
            if credential is None:
                credential = models.CalendarCredential(user_id=user_id)
                session.add(credential)

            credential.provider = provider
            credential.access_token = access_token
            if refresh_token is not None:
                credential.refresh_token = refresh_token
            credential.token_type = token_type
            credential.scope = scope
            credential.expires_at = expires_at

            session.commit()
            session.refresh(credential)

            logger.info(f"Stored {provider} calendar tokens for user {user_id}")
            return credential

        if db:
            return _store(db)

        with get_db_context() as session:
            return _store(session)

    async def get_tokens(
        self,
        user_id: int,
        db: Optional[Session] = None
    ) -> models.CalendarCredential:
        """Get the user's credential record, raising NotFoundError if absent"""
        def _get(session: Session) -> models.CalendarCredential:
            credential = _credential_for(session, user_id)
            if credential is None:
                raise NotFoundError("Calendar credentials not found")
            return credential

        if db:
            return _get(db)

        with get_db_context() as session:
            return _get(session)

    async def refresh_tokens(
        self,
        user_id: int,
        access_token: str,
        expires_at: Optional[datetime] = None,
        db: Optional[Session] = None
    ) -> models.CalendarCredential:
        """Replace the access token and expiry after an external refresh"""
        def _refresh(session: Session) -> models.CalendarCredential:
            credential = _credential_for(session, user_id)
            if credential is None:
                raise NotFoundError("Calendar credentials not found")

            credential.access_token = access_token
            credential.expires_at = expires_at
            session.commit()
            session.refresh(credential)

            logger.info(f"Refreshed calendar access token for user {user_id}")
            return credential

        if db:
            return _refresh(db)

        with get_db_context() as session:
            return _refresh(session)

    async def delete_tokens(
        self,
        user_id: int,
        db: Optional[Session] = None
    ) -> bool:
        """Delete the user's credentials; returns False if there were none"""
        def _delete(session: Session) -> bool:
            credential = _credential_for(session, user_id)
            if credential is None:
                return False

            session.delete(credential)
            session.commit()

            logger.info(f"Deleted calendar tokens for user {user_id}")
            return True

        if db:
            return _delete(db)

        with get_db_context() as session:
            return _delete(session)


# Singleton instance
credential_service = CredentialService()
