"""
Pydantic models for users (portal profiles) and authentication.
"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field


Role = Literal["admin", "produtor"]


class UserBase(BaseModel):
    email: str = Field(..., examples=["produtor@festacompany.com"])
    full_name: Optional[str] = Field(None, examples=["João Silva"])


class UserCreate(UserBase):
    """Sign-up payload.

    The very first account becomes ``admin``; every later sign-up is a
    ``produtor`` until an administrator changes the role.
    """

    password: str = Field(..., min_length=6, examples=["strongpassword"])


class UserLogin(BaseModel):
    email: str = Field(..., examples=["admin@agency.com"])
    password: str = Field(..., examples=["strongpassword"])


class UserRead(UserBase):
    id: int
    role: Role
    producer_id: Optional[int] = None
    access_code: Optional[str] = None
    disabled: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {
        "from_attributes": True,
    }


class UserRoleUpdate(BaseModel):
    """Change a user's role and producer link (admin only)."""

    role: Role
    producer_id: Optional[int] = None


class UserUpdate(BaseModel):
    full_name: Optional[str] = None
    password: Optional[str] = Field(None, min_length=6)
    disabled: Optional[bool] = None


class AccessCodeRedeem(BaseModel):
    access_code: str = Field(..., examples=["K7Q2M9XA"])


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
