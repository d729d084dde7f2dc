"""
Translation between stored rows and API models.

Tables keep the agency's hosted column names and Portuguese status
codes (``djs.artist_name``, ``events.fee``, ``status = 'disponivel'``).
The API exposes English names and enums.  The ``*_from_row`` functions
build read models from ``sqlite3.Row`` objects and the ``*_to_columns``
functions turn a (possibly partial) dict of API fields into a dict of
column values ready for ``INSERT`` or ``UPDATE``.
"""

import json
import logging
from typing import Any, Dict, List, Optional

from ..schemas.contract import ContractRead
from ..schemas.dj import DJRead
from ..schemas.event import EventRead
from ..schemas.media import MediaRead
from ..schemas.producer import ProducerRead
from ..schemas.user import UserRead


logger = logging.getLogger(__name__)

DJ_STATUS_TO_DB = {"available": "disponivel", "busy": "ocupado", "unavailable": "inativo"}
DJ_STATUS_FROM_DB = {v: k for k, v in DJ_STATUS_TO_DB.items()}

EVENT_STATUS_TO_DB = {
    "pending": "pendente",
    "confirmed": "confirmado",
    "completed": "concluido",
    "cancelled": "cancelado",
}
EVENT_STATUS_FROM_DB = {v: k for k, v in EVENT_STATUS_TO_DB.items()}

CONTRACT_STATUS_TO_DB = {
    "pending": "pendente",
    "signed": "assinado",
    "completed": "concluido",
    "cancelled": "cancelado",
}
CONTRACT_STATUS_FROM_DB = {v: k for k, v in CONTRACT_STATUS_TO_DB.items()}

UNNAMED_PRODUCER = "Produtor sem nome"


def dj_status_from_db(value: Optional[str]) -> str:
    return DJ_STATUS_FROM_DB.get(value, "unavailable")


def event_status_from_db(value: Optional[str]) -> str:
    return EVENT_STATUS_FROM_DB.get(value, "cancelled")


def contract_status_from_db(value: Optional[str]) -> str:
    return CONTRACT_STATUS_FROM_DB.get(value, "cancelled")


def _load_json_list(value: Optional[str]) -> List[str]:
    if not value:
        return []
    try:
        data = json.loads(value)
    except json.JSONDecodeError:
        logger.warning("Ignoring malformed genres value %r", value)
        return []
    return [str(item) for item in data] if isinstance(data, list) else []


def _row_get(row: Any, key: str) -> Any:
    return row[key] if key in row.keys() else None


# ---------------------------------------------------------------------------
# DJs
# ---------------------------------------------------------------------------

def dj_from_row(row: Any) -> DJRead:
    return DJRead(
        id=row["id"],
        name=row["artist_name"],
        email=row["email"],
        phone=row["phone"] or row["whatsapp"],
        bio=row["bio"],
        genres=_load_json_list(row["genres"]),
        booking_price=row["base_price"],
        availability_status=dj_status_from_db(row["status"]),
        instagram_handle=row["instagram"],
        profile_image_url=row["avatar_url"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def dj_to_columns(data: Dict[str, Any], creating: bool = False) -> Dict[str, Any]:
    columns: Dict[str, Any] = {}
    if "name" in data:
        columns["artist_name"] = data["name"]
        if creating:
            columns["real_name"] = data["name"]
    if "bio" in data:
        columns["bio"] = data["bio"]
    if "profile_image_url" in data:
        columns["avatar_url"] = data["profile_image_url"]
    if "genres" in data:
        columns["genres"] = json.dumps(data["genres"] or [])
    if "phone" in data:
        columns["phone"] = data["phone"]
        columns["whatsapp"] = data["phone"]
    if "email" in data:
        columns["email"] = data["email"]
    if "instagram_handle" in data:
        columns["instagram"] = data["instagram_handle"]
    if "booking_price" in data:
        columns["base_price"] = data["booking_price"]
    if data.get("availability_status") is not None:
        columns["status"] = DJ_STATUS_TO_DB[data["availability_status"]]
    return columns


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------

def event_from_row(row: Any) -> EventRead:
    return EventRead(
        id=row["id"],
        title=row["event_name"],
        description=row["description"],
        event_date=row["event_date"],
        venue=row["venue"] or "",
        city=row["address"] or "",
        state=row["state"] or "",
        dj_id=row["dj_id"],
        producer_id=row["producer_id"],
        status=event_status_from_db(row["status"]),
        booking_fee=row["fee"],
        expected_attendance=row["expected_attendees"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def event_to_columns(data: Dict[str, Any]) -> Dict[str, Any]:
    renames = {
        "title": "event_name",
        "description": "description",
        "venue": "venue",
        "city": "address",
        "state": "state",
        "booking_fee": "fee",
        "expected_attendance": "expected_attendees",
        "dj_id": "dj_id",
        "producer_id": "producer_id",
    }
    columns = {column: data[field] for field, column in renames.items() if field in data}
    if data.get("event_date") is not None:
        event_date = data["event_date"]
        columns["event_date"] = event_date.isoformat() if hasattr(event_date, "isoformat") else event_date
    if data.get("status") is not None:
        columns["status"] = EVENT_STATUS_TO_DB[data["status"]]
    return columns


# ---------------------------------------------------------------------------
# Contracts
# ---------------------------------------------------------------------------

def _clauses_to_text(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    try:
        data = json.loads(value)
    except json.JSONDecodeError:
        return value
    return data if isinstance(data, str) else json.dumps(data, ensure_ascii=False)


def contract_from_row(row: Any) -> ContractRead:
    return ContractRead(
        id=row["id"],
        event_id=row["event_id"],
        dj_id=row["dj_id"],
        producer_id=row["producer_id"],
        contract_value=row["fee"],
        commission_rate=row["commission_rate"],
        commission_amount=row["commission_amount"],
        payment_terms=row["payment_terms"],
        additional_terms=_clauses_to_text(row["custom_clauses"]),
        equipment_requirements=row["equipment_requirements"],
        performance_duration=row["performance_duration"],
        setup_time=row["setup_time"],
        cancellation_policy=row["cancellation_policy"],
        dress_code=row["dress_code"],
        technical_rider=row["technical_rider"],
        status=contract_status_from_db(row["status"]),
        signed_by_producer=bool(row["is_signed_by_producer"]),
        signed_by_dj=bool(row["is_signed_by_dj"]),
        signed_date=row["signed_at"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def contract_to_columns(data: Dict[str, Any]) -> Dict[str, Any]:
    passthrough = (
        "event_id",
        "dj_id",
        "producer_id",
        "payment_terms",
        "cancellation_policy",
        "equipment_requirements",
        "performance_duration",
        "setup_time",
        "dress_code",
        "technical_rider",
    )
    columns = {name: data[name] for name in passthrough if name in data}
    if "contract_value" in data:
        columns["fee"] = data["contract_value"]
    if "additional_terms" in data:
        terms = data["additional_terms"]
        columns["custom_clauses"] = json.dumps(terms, ensure_ascii=False) if terms is not None else None
    if data.get("status") is not None:
        columns["status"] = CONTRACT_STATUS_TO_DB[data["status"]]
    return columns


# ---------------------------------------------------------------------------
# Producers
# ---------------------------------------------------------------------------

def producer_from_row(row: Any) -> ProducerRead:
    return ProducerRead(
        id=row["id"],
        name=row["name"] or row["company_name"] or UNNAMED_PRODUCER,
        company_name=row["company_name"],
        email=row["contact_email"] or "",
        phone=row["contact_phone"],
        address=row["business_address"],
        city=row["city"],
        state=row["state"],
        zip_code=row["zip_code"],
        contact_person=row["contact_person"],
        status="active" if row["is_active"] else "inactive",
        events_count=_row_get(row, "events_count") or 0,
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def producer_to_columns(data: Dict[str, Any]) -> Dict[str, Any]:
    renames = {
        "name": "name",
        "company_name": "company_name",
        "email": "contact_email",
        "phone": "contact_phone",
        "address": "business_address",
        "city": "city",
        "state": "state",
        "zip_code": "zip_code",
        "contact_person": "contact_person",
    }
    columns = {column: data[field] for field, column in renames.items() if field in data}
    if data.get("status") is not None:
        columns["is_active"] = 1 if data["status"] == "active" else 0
    return columns


# ---------------------------------------------------------------------------
# Media and profiles share the API column names
# ---------------------------------------------------------------------------

def media_from_row(row: Any) -> MediaRead:
    return MediaRead(**{key: row[key] for key in row.keys()})


def user_from_row(row: Any) -> UserRead:
    return UserRead(
        id=row["id"],
        email=row["email"],
        full_name=row["full_name"],
        role=row["role"],
        producer_id=row["producer_id"],
        access_code=row["access_code"],
        disabled=bool(row["disabled"]),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )
