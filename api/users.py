"""
Users API Router
Endpoints for user registration and the current user
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from api.deps import get_db, get_current_user_id, services
from api.schemas.user import UserCreate, UserResponse


router = APIRouter(prefix="/users", tags=["users"])


@router.post("/", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    user_data: UserCreate,
    db: Session = Depends(get_db)
):
    """
    Register a new user

    - **email**: Unique email address
    - **name**: Display name
    """
    user_service = services.get_user_service()
    return await user_service.create_user(
        email=user_data.email,
        name=user_data.name,
        db=db
    )


@router.get("/me", response_model=UserResponse)
async def get_current_user(
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """
    Get the calling user, including the current streak
    """
    user_service = services.get_user_service()
    return await user_service.get_user(user_id, db=db)
