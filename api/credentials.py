"""
Calendar Credentials API Router
Endpoints for storing the caller's calendar tokens
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from api.deps import get_db, get_current_user_id, services
from api.schemas.credential import CredentialStore, CredentialResponse
from services.exceptions import NotFoundError


router = APIRouter(prefix="/calendar", tags=["calendar"])


@router.put("/credentials", response_model=CredentialResponse)
async def store_credentials(
    credential_data: CredentialStore,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """
    Create or replace the caller's calendar tokens
    """
    credential_service = services.get_credential_service()
    return await credential_service.store_tokens(
        user_id=user_id,
        access_token=credential_data.access_token,
        refresh_token=credential_data.refresh_token,
        token_type=credential_data.token_type,
        scope=credential_data.scope,
        expires_at=credential_data.expires_at,
        provider=credential_data.provider,
        db=db
    )


@router.get("/credentials", response_model=CredentialResponse)
async def get_credentials(
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    credential_service = services.get_credential_service()
    return await credential_service.get_tokens(user_id, db=db)


@router.delete("/credentials", status_code=status.HTTP_204_NO_CONTENT)
async def delete_credentials(
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """
    Delete the caller's calendar tokens
    """
    credential_service = services.get_credential_service()
    deleted = await credential_service.delete_tokens(user_id, db=db)
    if not deleted:
        raise NotFoundError("Calendar credentials not found")
    return None
