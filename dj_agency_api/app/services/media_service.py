"""
Business logic for the media gallery.

Media items hang off a DJ, an event or both.  A producer sees media of
the DJs they booked and of their own events.
"""

import logging
from typing import List, Optional

from dj_agency_api.app.core.access_control import AccessControlManager
from dj_agency_api.app.core.db import get_connection, insert_row, update_row
from dj_agency_api.app.core.errors import AccessDeniedError, InvalidReferenceError, NotFoundError
from dj_agency_api.app.schemas.media import MediaCreate, MediaRead
from dj_agency_api.app.services.audit_service import AuditService
from dj_agency_api.app.services.dj_service import DJService
from dj_agency_api.app.services.event_service import EventService
from dj_agency_api.app.services.mappers import media_from_row


logger = logging.getLogger(__name__)

MEDIA_FIELDS = ("file_url", "file_type", "category", "title", "description", "file_size")


class MediaService:
    """Service for media items."""

    @classmethod
    async def _visible(cls, items: List[MediaRead], current_user: dict) -> List[MediaRead]:
        if AccessControlManager.is_admin(current_user):
            return items
        return AccessControlManager.filter_media(
            items,
            await DJService.all_djs(),
            await EventService.all_events(),
            current_user,
        )

    @classmethod
    async def list_media(
        cls,
        current_user: dict,
        dj_id: Optional[int] = None,
        event_id: Optional[int] = None,
        category: Optional[str] = None,
    ) -> List[MediaRead]:
        """Return visible media, newest first, with optional filters."""
        conn = get_connection()
        try:
            rows = conn.execute("SELECT * FROM media ORDER BY created_at DESC, id DESC").fetchall()
        finally:
            conn.close()
        items = await cls._visible([media_from_row(row) for row in rows], current_user)
        if dj_id is not None:
            items = [m for m in items if m.dj_id == dj_id]
        if event_id is not None:
            items = [m for m in items if m.event_id == event_id]
        if category:
            items = [m for m in items if m.category == category]
        return items

    @classmethod
    async def get_media(cls, media_id: int, current_user: Optional[dict] = None) -> MediaRead:
        conn = get_connection()
        try:
            row = conn.execute("SELECT * FROM media WHERE id = ?", (media_id,)).fetchone()
        finally:
            conn.close()
        if not row:
            raise NotFoundError(f"Media {media_id} not found")
        item = media_from_row(row)
        if current_user is not None and not await cls._visible([item], current_user):
            raise AccessDeniedError(f"Media {media_id} is not available to you")
        return item

    @classmethod
    async def create_media(cls, data: MediaCreate, current_user: dict) -> MediaRead:
        conn = get_connection()
        try:
            cursor = conn.cursor()
            if data.dj_id is not None and not cursor.execute(
                "SELECT id FROM djs WHERE id = ? AND is_active = 1", (data.dj_id,)
            ).fetchone():
                raise InvalidReferenceError(f"DJ {data.dj_id} does not exist")
            if data.event_id is not None and not cursor.execute(
                "SELECT id FROM events WHERE id = ?", (data.event_id,)
            ).fetchone():
                raise InvalidReferenceError(f"Event {data.event_id} does not exist")
            media_id = insert_row(cursor, "media", data.model_dump())
            conn.commit()
        finally:
            conn.close()
        logger.info("Media %s uploaded (%s)", media_id, data.category)
        await AuditService.log(
            user_id=current_user.get("user_id"),
            action="create",
            object_type="media",
            object_id=media_id,
            details={"dj_id": data.dj_id, "event_id": data.event_id, "category": data.category},
        )
        return await cls.get_media(media_id)

    @classmethod
    async def update_media(cls, media_id: int, updates: dict, current_user: dict) -> MediaRead:
        columns = {key: value for key, value in updates.items() if key in MEDIA_FIELDS}
        conn = get_connection()
        try:
            cursor = conn.cursor()
            if not cursor.execute("SELECT id FROM media WHERE id = ?", (media_id,)).fetchone():
                raise NotFoundError(f"Media {media_id} not found")
            update_row(cursor, "media", media_id, columns)
            conn.commit()
        finally:
            conn.close()
        await AuditService.log(
            user_id=current_user.get("user_id"),
            action="update",
            object_type="media",
            object_id=media_id,
            details=columns,
        )
        return await cls.get_media(media_id)

    @classmethod
    async def delete_media(cls, media_id: int, current_user: dict) -> None:
        conn = get_connection()
        try:
            cursor = conn.cursor()
            if not cursor.execute("SELECT id FROM media WHERE id = ?", (media_id,)).fetchone():
                raise NotFoundError(f"Media {media_id} not found")
            cursor.execute("DELETE FROM media WHERE id = ?", (media_id,))
            conn.commit()
        finally:
            conn.close()
        await AuditService.log(
            user_id=current_user.get("user_id"),
            action="delete",
            object_type="media",
            object_id=media_id,
        )
