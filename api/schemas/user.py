"""
User Schemas
Pydantic models for user-related API requests and responses
"""

from typing import Optional
from datetime import datetime
from pydantic import BaseModel, Field, ConfigDict, EmailStr


# ==================== REQUEST SCHEMAS ====================

class UserCreate(BaseModel):
    """Schema for creating a user"""
    email: EmailStr
    name: Optional[str] = Field(None, max_length=255)


# ==================== RESPONSE SCHEMAS ====================

class UserResponse(BaseModel):
    """Schema for user response"""
    id: int
    email: str
    name: Optional[str] = None
    streak: int = 0
    last_streak_update: Optional[datetime] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
