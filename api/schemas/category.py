"""
Category Schemas
Pydantic models for medication categories
"""

from datetime import datetime
from pydantic import BaseModel, Field, ConfigDict


class CategoryBase(BaseModel):
    """Base category schema"""
    name: str = Field(..., min_length=1, max_length=255)


class CategoryCreate(CategoryBase):
    """Schema for creating a category"""
    pass


class CategoryUpdate(CategoryBase):
    """Schema for renaming a category"""
    pass


class CategoryResponse(CategoryBase):
    """Schema for category response"""
    id: int
    user_id: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
