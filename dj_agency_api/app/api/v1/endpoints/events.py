"""
Event endpoints for API v1.

Everyone signed in can read the events visible to them; scheduling,
editing and deleting events is reserved to administrators.
"""

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from dj_agency_api.app.api.v1.errors import service_errors
from dj_agency_api.app.core.security import get_current_user, require_roles
from dj_agency_api.app.schemas.event import (
    CalendarMonth,
    EventCreate,
    EventRead,
    EventStatus,
    EventStatusUpdate,
    EventUpdate,
)
from dj_agency_api.app.services.event_service import EventService


router = APIRouter()

# Fields that may be explicitly set to null in an update.
NULLABLE_FIELDS = {"dj_id", "producer_id", "description", "booking_fee", "expected_attendance"}


@router.post("/", response_model=EventRead, status_code=status.HTTP_201_CREATED)
async def create_event(
    event: EventCreate,
    current_user: dict = Depends(require_roles("admin")),
) -> EventRead:
    with service_errors():
        return await EventService.create_event(event, current_user)


@router.get("/", response_model=List[EventRead])
async def list_events(
    dj_id: Optional[int] = Query(None),
    producer_id: Optional[int] = Query(None),
    status_filter: Optional[EventStatus] = Query(None, alias="status"),
    date_from: Optional[datetime] = Query(None),
    date_to: Optional[datetime] = Query(None),
    current_user: dict = Depends(get_current_user),
) -> List[EventRead]:
    """List events visible to the caller, ordered by date.

    - **dj_id**, **producer_id**: restrict to one DJ or producer.
    - **status**: `pending`, `confirmed`, `completed` or `cancelled`.
    - **date_from**, **date_to**: inclusive ISO datetime bounds.
    """
    return await EventService.list_events(
        current_user,
        dj_id=dj_id,
        producer_id=producer_id,
        status=status_filter,
        date_from=date_from,
        date_to=date_to,
    )


@router.get("/calendar/{year}/{month}", response_model=CalendarMonth)
async def calendar_month(
    year: int,
    month: int,
    current_user: dict = Depends(get_current_user),
) -> CalendarMonth:
    with service_errors():
        return await EventService.calendar(current_user, year, month)


@router.get("/{event_id}", response_model=EventRead)
async def get_event(event_id: int, current_user: dict = Depends(get_current_user)) -> EventRead:
    with service_errors():
        return await EventService.get_event(event_id, current_user)


@router.put("/{event_id}", response_model=EventRead)
async def update_event(
    event_id: int,
    updates: EventUpdate,
    current_user: dict = Depends(require_roles("admin")),
) -> EventRead:
    """Partially update an event.

    Omitted fields stay unchanged; ``dj_id: null`` detaches the DJ.
    """
    update_dict = {
        k: v
        for k, v in updates.model_dump(exclude_unset=True).items()
        if v is not None or k in NULLABLE_FIELDS
    }
    with service_errors():
        return await EventService.update_event(event_id, update_dict, current_user)


@router.patch("/{event_id}/status", response_model=EventRead)
async def update_event_status(
    event_id: int,
    payload: EventStatusUpdate,
    current_user: dict = Depends(require_roles("admin")),
) -> EventRead:
    with service_errors():
        return await EventService.update_event(event_id, {"status": payload.status}, current_user)


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_event(
    event_id: int,
    current_user: dict = Depends(require_roles("admin")),
) -> None:
    """Delete an event (admin only).

    Contracts and media attached to the event are removed with it.
    """
    with service_errors():
        await EventService.delete_event(event_id, current_user)
    return None
