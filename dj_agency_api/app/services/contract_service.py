"""
Business logic for contracts.

A contract binds a DJ and a producer to an event for a fee.  The agency
commission is captured when the contract is created.  A contract is
``signed`` once both the producer and the DJ have signed; producers may
sign their own side, administrators may record either signature.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from dj_agency_api.app.core.access_control import AccessControlManager
from dj_agency_api.app.core.config import settings
from dj_agency_api.app.core.db import get_connection, insert_row, update_row
from dj_agency_api.app.core.errors import AccessDeniedError, InvalidReferenceError, NotFoundError
from dj_agency_api.app.schemas.contract import ContractCreate, ContractRead
from dj_agency_api.app.services.audit_service import AuditService
from dj_agency_api.app.services.mappers import (
    CONTRACT_STATUS_TO_DB,
    contract_from_row,
    contract_to_columns,
)


logger = logging.getLogger(__name__)


class ContractService:
    """Service for contract CRUD and signatures."""

    @classmethod
    async def list_contracts(cls, current_user: dict, status: Optional[str] = None) -> List[ContractRead]:
        """Return visible contracts, newest first, optionally by status."""
        conn = get_connection()
        try:
            rows = conn.execute("SELECT * FROM contracts ORDER BY created_at DESC, id DESC").fetchall()
        finally:
            conn.close()
        contracts = AccessControlManager.filter_contracts(
            [contract_from_row(row) for row in rows], current_user
        )
        if status:
            contracts = [c for c in contracts if c.status == status]
        return contracts

    @classmethod
    async def get_contract(cls, contract_id: int, current_user: Optional[dict] = None) -> ContractRead:
        conn = get_connection()
        try:
            row = conn.execute("SELECT * FROM contracts WHERE id = ?", (contract_id,)).fetchone()
        finally:
            conn.close()
        if not row:
            raise NotFoundError(f"Contract {contract_id} not found")
        contract = contract_from_row(row)
        if current_user is not None and not AccessControlManager.filter_contracts([contract], current_user):
            raise AccessDeniedError(f"Contract {contract_id} is not available to you")
        return contract

    @classmethod
    async def create_contract(cls, data: ContractCreate, current_user: dict) -> ContractRead:
        """Create a contract for an existing event, DJ and producer.

        The contract's producer must be the event's producer and, when the
        event already has a DJ, its DJ must be that DJ.  The commission
        rate in effect (``settings.commission_rate``) and the resulting
        amount are stored on the contract.
        """
        conn = get_connection()
        try:
            cursor = conn.cursor()
            event = cursor.execute(
                "SELECT id, dj_id, producer_id FROM events WHERE id = ?", (data.event_id,)
            ).fetchone()
            if not event:
                raise InvalidReferenceError(f"Event {data.event_id} does not exist")
            if event["producer_id"] != data.producer_id:
                raise InvalidReferenceError(
                    f"Event {data.event_id} is not booked by producer {data.producer_id}"
                )
            if event["dj_id"] is not None and event["dj_id"] != data.dj_id:
                raise InvalidReferenceError(f"Event {data.event_id} is not booked with DJ {data.dj_id}")
            if not cursor.execute(
                "SELECT id FROM djs WHERE id = ? AND is_active = 1", (data.dj_id,)
            ).fetchone():
                raise InvalidReferenceError(f"DJ {data.dj_id} does not exist")
            if not cursor.execute(
                "SELECT id FROM producers WHERE id = ?", (data.producer_id,)
            ).fetchone():
                raise InvalidReferenceError(f"Producer {data.producer_id} does not exist")
            columns = contract_to_columns(data.model_dump())
            columns["commission_rate"] = settings.commission_rate
            columns["commission_amount"] = round(data.contract_value * settings.commission_rate / 100, 2)
            columns["status"] = CONTRACT_STATUS_TO_DB["pending"]
            contract_id = insert_row(cursor, "contracts", columns)
            conn.commit()
        finally:
            conn.close()
        logger.info("Contract %s created for event %s", contract_id, data.event_id)
        await AuditService.log(
            user_id=current_user.get("user_id"),
            action="create",
            object_type="contract",
            object_id=contract_id,
            details={"event_id": data.event_id, "contract_value": data.contract_value},
        )
        return await cls.get_contract(contract_id)

    @classmethod
    async def update_contract(cls, contract_id: int, updates: dict, current_user: dict) -> ContractRead:
        """Partial update; a new value recomputes the commission amount."""
        conn = get_connection()
        try:
            cursor = conn.cursor()
            row = cursor.execute(
                "SELECT commission_rate FROM contracts WHERE id = ?", (contract_id,)
            ).fetchone()
            if not row:
                raise NotFoundError(f"Contract {contract_id} not found")
            columns = contract_to_columns(updates)
            if updates.get("contract_value") is not None:
                rate = row["commission_rate"] if row["commission_rate"] is not None else settings.commission_rate
                columns["commission_amount"] = round(updates["contract_value"] * rate / 100, 2)
            update_row(cursor, "contracts", contract_id, columns)
            conn.commit()
        finally:
            conn.close()
        await AuditService.log(
            user_id=current_user.get("user_id"),
            action="update",
            object_type="contract",
            object_id=contract_id,
            details=updates,
        )
        return await cls.get_contract(contract_id)

    @classmethod
    async def sign_contract(cls, contract_id: int, party: str, current_user: dict) -> ContractRead:
        """Record a signature from ``party`` (``producer`` or ``dj``).

        Producers can only sign as ``producer`` and only their own
        contracts.  Once both sides have signed, the status becomes
        ``signed`` and ``signed_date`` is stamped.
        """
        contract = await cls.get_contract(contract_id, current_user)
        if not AccessControlManager.is_admin(current_user) and party != "producer":
            raise AccessDeniedError("Producers can only sign on behalf of the producer")
        if contract.status in ("cancelled", "completed"):
            raise InvalidReferenceError(f"Contract {contract_id} is {contract.status} and cannot be signed")

        columns = {"is_signed_by_producer" if party == "producer" else "is_signed_by_dj": 1}
        signed_producer = contract.signed_by_producer or party == "producer"
        signed_dj = contract.signed_by_dj or party == "dj"
        if signed_producer and signed_dj and contract.status != "signed":
            columns["status"] = CONTRACT_STATUS_TO_DB["signed"]
            columns["signed_at"] = datetime.now(timezone.utc).replace(tzinfo=None)
        conn = get_connection()
        try:
            cursor = conn.cursor()
            update_row(cursor, "contracts", contract_id, columns)
            conn.commit()
        finally:
            conn.close()
        logger.info("Contract %s signed by %s", contract_id, party)
        await AuditService.log(
            user_id=current_user.get("user_id"),
            action="sign",
            object_type="contract",
            object_id=contract_id,
            details={"party": party},
        )
        return await cls.get_contract(contract_id)

    @classmethod
    async def delete_contract(cls, contract_id: int, current_user: dict) -> None:
        conn = get_connection()
        try:
            cursor = conn.cursor()
            if not cursor.execute("SELECT id FROM contracts WHERE id = ?", (contract_id,)).fetchone():
                raise NotFoundError(f"Contract {contract_id} not found")
            cursor.execute("DELETE FROM contracts WHERE id = ?", (contract_id,))
            conn.commit()
        finally:
            conn.close()
        await AuditService.log(
            user_id=current_user.get("user_id"),
            action="delete",
            object_type="contract",
            object_id=contract_id,
        )
