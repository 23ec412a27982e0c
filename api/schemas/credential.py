"""
Credential Schemas
Pydantic models for stored calendar credentials
"""

from typing import Optional
from datetime import datetime
from pydantic import BaseModel, Field, ConfigDict


class CredentialStore(BaseModel):
    """Schema for storing calendar tokens"""
    access_token: str = Field(..., min_length=1)
    refresh_token: Optional[str] = None
    token_type: Optional[str] = Field(default="Bearer", max_length=20)
    scope: Optional[str] = None
    expires_at: Optional[datetime] = None
    provider: str = Field(default="google", max_length=50)


class CredentialResponse(BaseModel):
    """Schema for credential response"""
    user_id: int
    provider: str
    access_token: str
    refresh_token: Optional[str] = None
    token_type: Optional[str] = None
    scope: Optional[str] = None
    expires_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
