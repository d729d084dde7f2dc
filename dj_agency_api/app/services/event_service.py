"""
Business logic for events.

Events are always read in full and then narrowed with
``AccessControlManager.filter_events`` so a producer only ever sees the
events booked by their own producer.  Only administrators write events.
"""

import calendar
import logging
from collections import Counter
from datetime import datetime
from typing import Dict, List, Optional

from dj_agency_api.app.core.access_control import AccessControlManager
from dj_agency_api.app.core.db import get_connection, insert_row, update_row
from dj_agency_api.app.core.errors import AccessDeniedError, InvalidReferenceError, NotFoundError
from dj_agency_api.app.schemas.event import CalendarMonth, EventCreate, EventRead
from dj_agency_api.app.services.audit_service import AuditService
from dj_agency_api.app.services.mappers import EVENT_STATUS_TO_DB, event_from_row, event_to_columns


logger = logging.getLogger(__name__)


def _check_references(cursor, dj_id: Optional[int], producer_id: Optional[int]) -> None:
    if dj_id is not None and not cursor.execute(
        "SELECT id FROM djs WHERE id = ? AND is_active = 1", (dj_id,)
    ).fetchone():
        raise InvalidReferenceError(f"DJ {dj_id} does not exist")
    if producer_id is not None and not cursor.execute(
        "SELECT id FROM producers WHERE id = ?", (producer_id,)
    ).fetchone():
        raise InvalidReferenceError(f"Producer {producer_id} does not exist")


class EventService:
    """Service for scheduling events and querying the calendar."""

    @classmethod
    async def all_events(cls) -> List[EventRead]:
        """Return every event ordered by date, without visibility filtering.

        Used by the other services as the input of the access filters.
        """
        conn = get_connection()
        try:
            rows = conn.execute("SELECT * FROM events ORDER BY event_date, id").fetchall()
        finally:
            conn.close()
        return [event_from_row(row) for row in rows]

    @classmethod
    async def list_events(
        cls,
        current_user: dict,
        dj_id: Optional[int] = None,
        producer_id: Optional[int] = None,
        status: Optional[str] = None,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
    ) -> List[EventRead]:
        """Return the events visible to ``current_user`` with optional filters.

        - ``dj_id`` / ``producer_id``: restrict to one DJ or producer.
        - ``status``: one of ``pending``, ``confirmed``, ``completed``, ``cancelled``.
        - ``date_from`` / ``date_to``: inclusive bounds on ``event_date``.
        """
        events = AccessControlManager.filter_events(await cls.all_events(), current_user)
        if dj_id is not None:
            events = [e for e in events if e.dj_id == dj_id]
        if producer_id is not None:
            events = [e for e in events if e.producer_id == producer_id]
        if status:
            events = [e for e in events if e.status == status]
        if date_from is not None:
            events = [e for e in events if _naive(e.event_date) >= _naive(date_from)]
        if date_to is not None:
            events = [e for e in events if _naive(e.event_date) <= _naive(date_to)]
        return events

    @classmethod
    async def get_event(cls, event_id: int, current_user: Optional[dict] = None) -> EventRead:
        """Retrieve a single event.

        Raises ``NotFoundError`` when it does not exist and
        ``AccessDeniedError`` when ``current_user`` may not see it.
        """
        conn = get_connection()
        try:
            row = conn.execute("SELECT * FROM events WHERE id = ?", (event_id,)).fetchone()
        finally:
            conn.close()
        if not row:
            raise NotFoundError(f"Event {event_id} not found")
        event = event_from_row(row)
        if current_user is not None and not AccessControlManager.filter_events([event], current_user):
            raise AccessDeniedError(f"Event {event_id} is not available to you")
        return event

    @classmethod
    async def create_event(cls, data: EventCreate, current_user: dict) -> EventRead:
        logger.info("User %s is creating event '%s'", current_user.get("sub"), data.title)
        conn = get_connection()
        try:
            cursor = conn.cursor()
            _check_references(cursor, data.dj_id, data.producer_id)
            event_id = insert_row(cursor, "events", event_to_columns(data.model_dump()))
            conn.commit()
        finally:
            conn.close()
        await AuditService.log(
            user_id=current_user.get("user_id"),
            action="create",
            object_type="event",
            object_id=event_id,
            details={"title": data.title, "dj_id": data.dj_id, "producer_id": data.producer_id},
        )
        return await cls.get_event(event_id)

    @classmethod
    async def update_event(cls, event_id: int, updates: dict, current_user: dict) -> EventRead:
        """Update fields of an existing event.

        Only keys present in ``updates`` are written, so an explicit
        ``None`` for ``dj_id`` detaches the DJ.  Contracts follow a new
        producer or DJ; an event with contracts cannot lose its producer.
        """
        conn = get_connection()
        try:
            cursor = conn.cursor()
            if not cursor.execute("SELECT id FROM events WHERE id = ?", (event_id,)).fetchone():
                raise NotFoundError(f"Event {event_id} not found")
            _check_references(cursor, updates.get("dj_id"), updates.get("producer_id"))
            has_contracts = cursor.execute(
                "SELECT 1 FROM contracts WHERE event_id = ? LIMIT 1", (event_id,)
            ).fetchone()
            if has_contracts and "producer_id" in updates and updates["producer_id"] is None:
                raise InvalidReferenceError(f"Event {event_id} has contracts and needs a producer")
            update_row(cursor, "events", event_id, event_to_columns(updates))
            for key in ("producer_id", "dj_id"):
                if has_contracts and updates.get(key) is not None:
                    cursor.execute(
                        f"UPDATE contracts SET {key} = ?, updated_at = CURRENT_TIMESTAMP WHERE event_id = ?",
                        (updates[key], event_id),
                    )
            conn.commit()
        finally:
            conn.close()
        if "status" in updates:
            logger.info("Event %s status set to %s", event_id, updates["status"])
        await AuditService.log(
            user_id=current_user.get("user_id"),
            action="update",
            object_type="event",
            object_id=event_id,
            details=updates,
        )
        return await cls.get_event(event_id)

    @classmethod
    async def delete_event(cls, event_id: int, current_user: dict) -> None:
        """Delete an event together with its contracts and media."""
        conn = get_connection()
        try:
            cursor = conn.cursor()
            if not cursor.execute("SELECT id FROM events WHERE id = ?", (event_id,)).fetchone():
                raise NotFoundError(f"Event {event_id} not found")
            cursor.execute("DELETE FROM contracts WHERE event_id = ?", (event_id,))
            cursor.execute("DELETE FROM media WHERE event_id = ?", (event_id,))
            cursor.execute("DELETE FROM events WHERE id = ?", (event_id,))
            conn.commit()
        finally:
            conn.close()
        await AuditService.log(
            user_id=current_user.get("user_id"),
            action="delete",
            object_type="event",
            object_id=event_id,
        )

    @classmethod
    async def calendar(cls, current_user: dict, year: int, month: int) -> CalendarMonth:
        """Group the visible events of one month by ISO day.

        ``status_counts`` always lists every status, including zeros.
        """
        if not 1 <= month <= 12:
            raise InvalidReferenceError(f"Invalid month {month}")
        last_day = calendar.monthrange(year, month)[1]
        start = datetime(year, month, 1)
        end = datetime(year, month, last_day, 23, 59, 59, 999999)
        events = await cls.list_events(current_user, date_from=start, date_to=end)
        days: Dict[str, List[EventRead]] = {}
        for event in events:
            days.setdefault(event.event_date.date().isoformat(), []).append(event)
        counts = Counter(event.status for event in events)
        return CalendarMonth(
            year=year,
            month=month,
            days=days,
            status_counts={status: counts.get(status, 0) for status in EVENT_STATUS_TO_DB},
        )


def _naive(value: datetime) -> datetime:
    """Drop tzinfo so stored and requested dates compare as wall-clock times."""
    return value.replace(tzinfo=None) if value.tzinfo else value
