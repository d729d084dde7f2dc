"""
Business logic for portal users (profiles).

Users sign up with email and password.  The first account ever created
becomes the agency ``admin``; later accounts are ``produtor`` users
that see nothing until they are linked to a producer, either by an
administrator (``update_user_role``) or by redeeming the producer's
access code.
"""

import logging
import sqlite3
from typing import List, Optional

from dj_agency_api.app.core.access_control import ADMIN, PRODUCER
from dj_agency_api.app.core.db import get_connection, insert_row, update_row
from dj_agency_api.app.core.errors import InvalidReferenceError, NotFoundError
from dj_agency_api.app.core.security import hash_password, verify_password
from dj_agency_api.app.schemas.user import UserCreate, UserRead
from dj_agency_api.app.services.audit_service import AuditService
from dj_agency_api.app.services.mappers import user_from_row


logger = logging.getLogger(__name__)


class UserService:
    """Service for sign-up, sign-in and profile administration."""

    @classmethod
    async def sign_up(cls, data: UserCreate) -> UserRead:
        """Create a profile and return it.

        Raises ``InvalidReferenceError`` when the email is already taken.
        """
        logger.info("Registering user %s", data.email)
        conn = get_connection()
        try:
            cursor = conn.cursor()
            count = cursor.execute("SELECT COUNT(*) AS count FROM profiles").fetchone()["count"]
            role = ADMIN if count == 0 else PRODUCER
            try:
                user_id = insert_row(
                    cursor,
                    "profiles",
                    {
                        "email": data.email.strip().lower(),
                        "full_name": data.full_name,
                        "password": hash_password(data.password),
                        "role": role,
                    },
                )
            except sqlite3.IntegrityError as exc:
                conn.rollback()
                raise InvalidReferenceError(f"Email {data.email} is already registered") from exc
            conn.commit()
            row = cursor.execute("SELECT * FROM profiles WHERE id = ?", (user_id,)).fetchone()
        finally:
            conn.close()
        await AuditService.log(
            user_id=user_id,
            action="create",
            object_type="user",
            object_id=user_id,
            details={"email": data.email, "role": role},
        )
        return user_from_row(row)

    @classmethod
    async def authenticate(cls, email: str, password: str) -> Optional[UserRead]:
        """Return the user when the credentials match an enabled account."""
        conn = get_connection()
        try:
            row = conn.execute(
                "SELECT * FROM profiles WHERE email = ?",
                (email.strip().lower(),),
            ).fetchone()
        finally:
            conn.close()
        if not row or row["disabled"]:
            return None
        if not verify_password(password, row["password"]):
            logger.warning("Failed sign-in attempt for %s", email)
            return None
        return user_from_row(row)

    @classmethod
    async def get_user(cls, user_id: int) -> UserRead:
        conn = get_connection()
        try:
            row = conn.execute("SELECT * FROM profiles WHERE id = ?", (user_id,)).fetchone()
        finally:
            conn.close()
        if not row:
            raise NotFoundError(f"User {user_id} not found")
        return user_from_row(row)

    @classmethod
    async def list_users(cls, role: Optional[str] = None) -> List[UserRead]:
        conn = get_connection()
        try:
            if role:
                rows = conn.execute(
                    "SELECT * FROM profiles WHERE role = ? ORDER BY id", (role,)
                ).fetchall()
            else:
                rows = conn.execute("SELECT * FROM profiles ORDER BY id").fetchall()
        finally:
            conn.close()
        return [user_from_row(row) for row in rows]

    @classmethod
    async def update_user_role(
        cls,
        user_id: int,
        role: str,
        producer_id: Optional[int],
        acting_user_id: Optional[int] = None,
    ) -> UserRead:
        """Set a user's role and producer link.

        Admins never carry a producer link.  A producer id, when given,
        must reference an existing producer.
        """
        if role == ADMIN:
            producer_id = None
        conn = get_connection()
        try:
            cursor = conn.cursor()
            if not cursor.execute("SELECT id FROM profiles WHERE id = ?", (user_id,)).fetchone():
                raise NotFoundError(f"User {user_id} not found")
            if producer_id is not None and not cursor.execute(
                "SELECT id FROM producers WHERE id = ?", (producer_id,)
            ).fetchone():
                raise InvalidReferenceError(f"Producer {producer_id} does not exist")
            update_row(cursor, "profiles", user_id, {"role": role, "producer_id": producer_id})
            conn.commit()
            row = cursor.execute("SELECT * FROM profiles WHERE id = ?", (user_id,)).fetchone()
        finally:
            conn.close()
        logger.info("User %s is now %s (producer %s)", user_id, role, producer_id)
        await AuditService.log(
            user_id=acting_user_id,
            action="update_role",
            object_type="user",
            object_id=user_id,
            details={"role": role, "producer_id": producer_id},
        )
        return user_from_row(row)

    @classmethod
    async def update_user(cls, user_id: int, updates: dict, acting_user_id: Optional[int] = None) -> UserRead:
        """Update name, password or disabled flag of a user."""
        columns = {}
        if "full_name" in updates:
            columns["full_name"] = updates["full_name"]
        if updates.get("disabled") is not None:
            columns["disabled"] = updates["disabled"]
        if updates.get("password"):
            columns["password"] = hash_password(updates["password"])
        conn = get_connection()
        try:
            cursor = conn.cursor()
            if not cursor.execute("SELECT id FROM profiles WHERE id = ?", (user_id,)).fetchone():
                raise NotFoundError(f"User {user_id} not found")
            update_row(cursor, "profiles", user_id, columns)
            conn.commit()
            row = cursor.execute("SELECT * FROM profiles WHERE id = ?", (user_id,)).fetchone()
        finally:
            conn.close()
        await AuditService.log(
            user_id=acting_user_id,
            action="update",
            object_type="user",
            object_id=user_id,
            details={key: value for key, value in updates.items() if key != "password"},
        )
        return user_from_row(row)

    @classmethod
    async def redeem_access_code(cls, user_id: int, access_code: str) -> UserRead:
        """Link a ``produtor`` profile to the producer owning ``access_code``."""
        code = access_code.strip().upper()
        conn = get_connection()
        try:
            cursor = conn.cursor()
            producer = cursor.execute(
                "SELECT id FROM producers WHERE access_code = ? AND is_active = 1", (code,)
            ).fetchone()
            if not producer:
                raise InvalidReferenceError("Invalid access code")
            profile = cursor.execute("SELECT role FROM profiles WHERE id = ?", (user_id,)).fetchone()
            if not profile:
                raise NotFoundError(f"User {user_id} not found")
            if profile["role"] != PRODUCER:
                raise InvalidReferenceError("Only producer accounts can redeem access codes")
            update_row(
                cursor,
                "profiles",
                user_id,
                {"producer_id": producer["id"], "access_code": code},
            )
            conn.commit()
            row = cursor.execute("SELECT * FROM profiles WHERE id = ?", (user_id,)).fetchone()
        finally:
            conn.close()
        logger.info("User %s linked to producer %s via access code", user_id, producer["id"])
        await AuditService.log(
            user_id=user_id,
            action="redeem_access_code",
            object_type="user",
            object_id=user_id,
            details={"producer_id": producer["id"]},
        )
        return user_from_row(row)

    @classmethod
    async def delete_user(cls, user_id: int, acting_user_id: Optional[int] = None) -> None:
        conn = get_connection()
        try:
            cursor = conn.cursor()
            if not cursor.execute("SELECT id FROM profiles WHERE id = ?", (user_id,)).fetchone():
                raise NotFoundError(f"User {user_id} not found")
            cursor.execute("DELETE FROM profiles WHERE id = ?", (user_id,))
            conn.commit()
        finally:
            conn.close()
        await AuditService.log(
            user_id=acting_user_id,
            action="delete",
            object_type="user",
            object_id=user_id,
        )
