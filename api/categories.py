"""
Categories API Router
Endpoints for medication categories
"""

from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from api.deps import get_db, get_current_user_id, services
from api.schemas.category import CategoryCreate, CategoryUpdate, CategoryResponse


router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("/", response_model=List[CategoryResponse])
async def list_categories(
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """
    Get the caller's categories, ordered by name
    """
    category_service = services.get_category_service()
    return await category_service.get_categories(user_id, db=db)


@router.post("/", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_category(
    category_data: CategoryCreate,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """
    Create a category
    """
    category_service = services.get_category_service()
    return await category_service.create_category(user_id, category_data.name, db=db)


@router.get("/{category_id}", response_model=CategoryResponse)
async def get_category(
    category_id: int,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    category_service = services.get_category_service()
    return await category_service.get_category(user_id, category_id, db=db)


@router.put("/{category_id}", response_model=CategoryResponse)
async def update_category(
    category_id: int,
    category_data: CategoryUpdate,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """
    Rename a category
    """
    category_service = services.get_category_service()
    return await category_service.update_category(
        user_id, category_id, category_data.name, db=db
    )


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(
    category_id: int,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """
    Delete a category; its medications keep existing without one
    """
    category_service = services.get_category_service()
    await category_service.delete_category(user_id, category_id, db=db)
    return None
