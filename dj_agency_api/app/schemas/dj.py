"""
Pydantic models for DJ data.

``DJBase`` contains the shared fields; ``DJCreate`` is the request
body for new DJs, ``DJUpdate`` a partial update and ``DJRead`` the
response shape including identifiers and timestamps.
"""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field


AvailabilityStatus = Literal["available", "busy", "unavailable"]


class DJBase(BaseModel):
    name: str = Field(..., min_length=1, examples=["DJ Alok"])
    email: Optional[str] = Field(None, examples=["booking@alok.com"])
    phone: Optional[str] = Field(None, examples=["(11) 99999-0000"])
    bio: Optional[str] = None
    genres: List[str] = Field(default_factory=list, examples=[["House", "Techno"]])
    booking_price: Optional[float] = Field(None, ge=0, examples=[50000.0])
    availability_status: AvailabilityStatus = "available"
    instagram_handle: Optional[str] = Field(None, examples=["@alok"])
    profile_image_url: Optional[str] = None


class DJCreate(DJBase):
    """Schema for creating a DJ."""
    pass


class DJUpdate(BaseModel):
    """Partial update; only provided fields are written."""

    name: Optional[str] = Field(None, min_length=1)
    email: Optional[str] = None
    phone: Optional[str] = None
    bio: Optional[str] = None
    genres: Optional[List[str]] = None
    booking_price: Optional[float] = Field(None, ge=0)
    availability_status: Optional[AvailabilityStatus] = None
    instagram_handle: Optional[str] = None
    profile_image_url: Optional[str] = None


class DJRead(DJBase):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {
        "from_attributes": True,
    }


class DJDashboardStats(BaseModel):
    total: int
    available: int
    busy: int
    avg_price: float
    top_genres: List[str]
