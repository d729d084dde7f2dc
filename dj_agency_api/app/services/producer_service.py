"""
Business logic for producers.

Producers are the agency's client organisations.  Administrators
register and edit them; a ``produtor`` user may only read the producer
their profile is linked to.  Each producer can be given an access code
that producer users redeem to link their profile.
"""

import logging
import secrets
import sqlite3
import string
from typing import List, Optional

from dj_agency_api.app.core.access_control import AccessControlManager, PRODUCER
from dj_agency_api.app.core.config import settings
from dj_agency_api.app.core.db import get_connection, insert_row, update_row
from dj_agency_api.app.core.errors import AccessDeniedError, NotFoundError
from dj_agency_api.app.schemas.producer import AccessCodeRead, ProducerCreate, ProducerRead
from dj_agency_api.app.services.audit_service import AuditService
from dj_agency_api.app.services.mappers import producer_from_row, producer_to_columns


logger = logging.getLogger(__name__)

ACCESS_CODE_ALPHABET = string.ascii_uppercase + string.digits

_SELECT_WITH_COUNT = """
    SELECT p.*, (SELECT COUNT(*) FROM events e WHERE e.producer_id = p.id) AS events_count
    FROM producers p
"""


class ProducerService:
    """Producer CRUD, search and access codes."""

    @classmethod
    async def list_producers(cls, search: Optional[str] = None, status: Optional[str] = None) -> List[ProducerRead]:
        """Return producers ordered by name.

        ``search`` matches name, company name, email, city and contact
        person case-insensitively.
        """
        conn = get_connection()
        try:
            rows = conn.execute(
                _SELECT_WITH_COUNT + " ORDER BY COALESCE(p.name, p.company_name) COLLATE NOCASE"
            ).fetchall()
        finally:
            conn.close()
        producers = [producer_from_row(row) for row in rows]
        if status:
            producers = [p for p in producers if p.status == status]
        if search:
            term = search.lower()
            producers = [
                p
                for p in producers
                if any(
                    term in (value or "").lower()
                    for value in (p.name, p.company_name, p.email, p.city, p.contact_person)
                )
            ]
        return producers

    @classmethod
    async def get_producer(cls, producer_id: int, current_user: Optional[dict] = None) -> ProducerRead:
        """Return one producer.

        When ``current_user`` is a producer user, only their own
        producer is visible.
        """
        if current_user is not None and not AccessControlManager.is_admin(current_user):
            if current_user.get("role") != PRODUCER or current_user.get("producer_id") != producer_id:
                raise AccessDeniedError("You can only view your own producer")
        conn = get_connection()
        try:
            row = conn.execute(_SELECT_WITH_COUNT + " WHERE p.id = ?", (producer_id,)).fetchone()
        finally:
            conn.close()
        if not row:
            raise NotFoundError(f"Producer {producer_id} not found")
        return producer_from_row(row)

    @classmethod
    async def create_producer(cls, data: ProducerCreate, current_user: dict) -> ProducerRead:
        logger.info("User %s is registering producer '%s'", current_user.get("sub"), data.name)
        conn = get_connection()
        try:
            cursor = conn.cursor()
            producer_id = insert_row(cursor, "producers", producer_to_columns(data.model_dump()))
            conn.commit()
        finally:
            conn.close()
        await AuditService.log(
            user_id=current_user.get("user_id"),
            action="create",
            object_type="producer",
            object_id=producer_id,
            details={"name": data.name},
        )
        return await cls.get_producer(producer_id)

    @classmethod
    async def update_producer(cls, producer_id: int, updates: dict, current_user: dict) -> ProducerRead:
        conn = get_connection()
        try:
            cursor = conn.cursor()
            if not cursor.execute("SELECT id FROM producers WHERE id = ?", (producer_id,)).fetchone():
                raise NotFoundError(f"Producer {producer_id} not found")
            update_row(cursor, "producers", producer_id, producer_to_columns(updates))
            conn.commit()
        finally:
            conn.close()
        await AuditService.log(
            user_id=current_user.get("user_id"),
            action="update",
            object_type="producer",
            object_id=producer_id,
            details=updates,
        )
        return await cls.get_producer(producer_id)

    @classmethod
    async def delete_producer(cls, producer_id: int, current_user: dict) -> None:
        """Delete a producer.

        Its contracts are removed, its events are detached and linked
        producer users lose their producer link.
        """
        conn = get_connection()
        try:
            cursor = conn.cursor()
            if not cursor.execute("SELECT id FROM producers WHERE id = ?", (producer_id,)).fetchone():
                raise NotFoundError(f"Producer {producer_id} not found")
            cursor.execute("DELETE FROM contracts WHERE producer_id = ?", (producer_id,))
            cursor.execute(
                "UPDATE events SET producer_id = NULL, updated_at = CURRENT_TIMESTAMP WHERE producer_id = ?",
                (producer_id,),
            )
            cursor.execute(
                "UPDATE profiles SET producer_id = NULL, access_code = NULL WHERE producer_id = ?",
                (producer_id,),
            )
            cursor.execute("DELETE FROM producers WHERE id = ?", (producer_id,))
            conn.commit()
        finally:
            conn.close()
        await AuditService.log(
            user_id=current_user.get("user_id"),
            action="delete",
            object_type="producer",
            object_id=producer_id,
        )

    @classmethod
    async def generate_access_code(cls, producer_id: int, current_user: dict) -> AccessCodeRead:
        """Generate and store a fresh access code for a producer.

        A previously issued code stops working; profiles already linked
        keep their link.
        """
        conn = get_connection()
        try:
            cursor = conn.cursor()
            if not cursor.execute("SELECT id FROM producers WHERE id = ?", (producer_id,)).fetchone():
                raise NotFoundError(f"Producer {producer_id} not found")
            while True:
                code = "".join(
                    secrets.choice(ACCESS_CODE_ALPHABET) for _ in range(settings.access_code_length)
                )
                try:
                    update_row(cursor, "producers", producer_id, {"access_code": code})
                except sqlite3.IntegrityError:
                    # Collides with another producer's code.
                    continue
                break
            conn.commit()
        finally:
            conn.close()
        logger.info("Generated access code for producer %s", producer_id)
        await AuditService.log(
            user_id=current_user.get("user_id"),
            action="generate_access_code",
            object_type="producer",
            object_id=producer_id,
        )
        return AccessCodeRead(producer_id=producer_id, access_code=code)
