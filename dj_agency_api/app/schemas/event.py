"""
Pydantic models for event data.

An event is a booking of (optionally) one DJ for one producer at a
venue on a date.  ``EventUpdate`` is used both for edits and for
status transitions.
"""

from datetime import datetime
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field


EventStatus = Literal["pending", "confirmed", "completed", "cancelled"]


class EventBase(BaseModel):
    title: str = Field(..., min_length=1, examples=["Festival de Verão"])
    description: Optional[str] = None
    event_date: datetime = Field(..., examples=["2025-01-15T22:00:00"])
    venue: str = Field("", examples=["Arena Anhembi"])
    city: str = Field("", examples=["São Paulo"])
    state: str = Field("", examples=["SP"])
    dj_id: Optional[int] = None
    producer_id: Optional[int] = None
    status: EventStatus = "pending"
    booking_fee: Optional[float] = Field(None, ge=0, examples=[50000.0])
    expected_attendance: Optional[int] = Field(None, ge=0)


class EventCreate(EventBase):
    """Schema for creating an event."""
    pass


class EventRead(EventBase):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {
        "from_attributes": True,
    }


class EventUpdate(BaseModel):
    """Schema for updating an event.

    All fields are optional; only provided fields will be updated.
    Explicit ``null`` for ``dj_id`` or ``producer_id`` detaches the
    event from the DJ or producer.
    """

    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    event_date: Optional[datetime] = None
    venue: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    dj_id: Optional[int] = None
    producer_id: Optional[int] = None
    status: Optional[EventStatus] = None
    booking_fee: Optional[float] = Field(None, ge=0)
    expected_attendance: Optional[int] = Field(None, ge=0)


class EventStatusUpdate(BaseModel):
    status: EventStatus


class CalendarMonth(BaseModel):
    year: int
    month: int
    days: Dict[str, List[EventRead]]
    status_counts: Dict[str, int]
