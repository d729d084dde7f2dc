"""
Business logic for the DJ roster.

Producers only see DJs they have already booked (a DJ appears on one of
their producer's events); the rule is applied through
``AccessControlManager.filter_djs`` / ``can_access_dj`` on every read.
Deleting a DJ is a soft delete: the row is kept for historical events
and contracts but is hidden from every listing.
"""

import logging
from typing import List, Optional

from dj_agency_api.app.core.access_control import AccessControlManager
from dj_agency_api.app.core.db import get_connection, insert_row, update_row
from dj_agency_api.app.core.errors import AccessDeniedError, NotFoundError
from dj_agency_api.app.schemas.dj import DJCreate, DJDashboardStats, DJRead
from dj_agency_api.app.services.audit_service import AuditService
from dj_agency_api.app.services.event_service import EventService
from dj_agency_api.app.services.mappers import dj_from_row, dj_to_columns


logger = logging.getLogger(__name__)

SORT_KEYS = {
    "name": lambda dj: dj.name.lower(),
    "price": lambda dj: dj.booking_price or 0,
    "status": lambda dj: dj.availability_status,
    "created": lambda dj: (dj.created_at is None, dj.created_at.isoformat() if dj.created_at else ""),
}


class DJService:
    """Service for listing, searching and maintaining DJs."""

    @classmethod
    async def all_djs(cls) -> List[DJRead]:
        """Return every active DJ ordered by artist name."""
        conn = get_connection()
        try:
            rows = conn.execute(
                "SELECT * FROM djs WHERE is_active = 1 ORDER BY artist_name COLLATE NOCASE"
            ).fetchall()
        finally:
            conn.close()
        return [dj_from_row(row) for row in rows]

    @classmethod
    async def visible_djs(cls, current_user: dict) -> List[DJRead]:
        events = await EventService.all_events()
        return AccessControlManager.filter_djs(await cls.all_djs(), events, current_user)

    @classmethod
    async def list_djs(
        cls,
        current_user: dict,
        search: Optional[str] = None,
        genre: Optional[str] = None,
        status: Optional[str] = None,
        sort_by: str = "name",
        order: str = "asc",
    ) -> List[DJRead]:
        """Return the DJs visible to ``current_user``.

        - ``search``: case-insensitive match on name, bio or any genre.
        - ``genre``: exact genre membership.
        - ``status``: ``available``, ``busy`` or ``unavailable``.
        - ``sort_by``: ``name``, ``price``, ``status`` or ``created``;
          unknown values fall back to ``name``.
        - ``order``: ``asc`` or ``desc``.
        """
        djs = await cls.visible_djs(current_user)
        if search:
            term = search.lower()
            djs = [
                dj
                for dj in djs
                if term in dj.name.lower()
                or (dj.bio and term in dj.bio.lower())
                or any(term in g.lower() for g in dj.genres)
            ]
        if genre:
            djs = [dj for dj in djs if genre in dj.genres]
        if status:
            djs = [dj for dj in djs if dj.availability_status == status]
        key = SORT_KEYS.get(sort_by, SORT_KEYS["name"])
        return sorted(djs, key=key, reverse=order.lower() == "desc")

    @classmethod
    async def get_dj(cls, dj_id: int, current_user: Optional[dict] = None) -> DJRead:
        """Retrieve one DJ.

        Producers get ``AccessDeniedError`` for DJs they never booked.
        """
        conn = get_connection()
        try:
            row = conn.execute(
                "SELECT * FROM djs WHERE id = ? AND is_active = 1", (dj_id,)
            ).fetchone()
        finally:
            conn.close()
        if not row:
            raise NotFoundError(f"DJ {dj_id} not found")
        if current_user is not None:
            events = await EventService.all_events()
            if not AccessControlManager.can_access_dj(current_user, dj_id, events):
                raise AccessDeniedError("You can only view DJs you have already booked")
        return dj_from_row(row)

    @classmethod
    async def create_dj(cls, data: DJCreate, current_user: dict) -> DJRead:
        logger.info("User %s is adding DJ '%s'", current_user.get("sub"), data.name)
        conn = get_connection()
        try:
            cursor = conn.cursor()
            columns = dj_to_columns(data.model_dump(), creating=True)
            columns["is_active"] = 1
            dj_id = insert_row(cursor, "djs", columns)
            conn.commit()
        finally:
            conn.close()
        await AuditService.log(
            user_id=current_user.get("user_id"),
            action="create",
            object_type="dj",
            object_id=dj_id,
            details={"name": data.name},
        )
        return await cls.get_dj(dj_id)

    @classmethod
    async def update_dj(cls, dj_id: int, updates: dict, current_user: dict) -> DJRead:
        conn = get_connection()
        try:
            cursor = conn.cursor()
            if not cursor.execute(
                "SELECT id FROM djs WHERE id = ? AND is_active = 1", (dj_id,)
            ).fetchone():
                raise NotFoundError(f"DJ {dj_id} not found")
            update_row(cursor, "djs", dj_id, dj_to_columns(updates))
            conn.commit()
        finally:
            conn.close()
        await AuditService.log(
            user_id=current_user.get("user_id"),
            action="update",
            object_type="dj",
            object_id=dj_id,
            details=updates,
        )
        return await cls.get_dj(dj_id)

    @classmethod
    async def delete_dj(cls, dj_id: int, current_user: dict) -> None:
        """Deactivate a DJ, detach it from future events and drop its media."""
        conn = get_connection()
        try:
            cursor = conn.cursor()
            if not cursor.execute(
                "SELECT id FROM djs WHERE id = ? AND is_active = 1", (dj_id,)
            ).fetchone():
                raise NotFoundError(f"DJ {dj_id} not found")
            update_row(cursor, "djs", dj_id, {"is_active": 0, "status": "inativo"})
            cursor.execute(
                "UPDATE events SET dj_id = NULL, updated_at = CURRENT_TIMESTAMP "
                "WHERE dj_id = ? AND status IN ('pendente', 'confirmado')",
                (dj_id,),
            )
            cursor.execute("DELETE FROM media WHERE dj_id = ?", (dj_id,))
            conn.commit()
        finally:
            conn.close()
        await AuditService.log(
            user_id=current_user.get("user_id"),
            action="delete",
            object_type="dj",
            object_id=dj_id,
        )

    @classmethod
    async def dashboard_stats(cls, current_user: dict) -> DJDashboardStats:
        """Quick roster statistics over the DJs the user can see."""
        djs = await cls.visible_djs(current_user)
        genres: List[str] = []
        for dj in djs:
            for genre in dj.genres:
                if genre not in genres:
                    genres.append(genre)
        total = len(djs)
        return DJDashboardStats(
            total=total,
            available=sum(1 for dj in djs if dj.availability_status == "available"),
            busy=sum(1 for dj in djs if dj.availability_status == "busy"),
            avg_price=sum(dj.booking_price or 0 for dj in djs) / total if total else 0.0,
            top_genres=genres[:3],
        )
