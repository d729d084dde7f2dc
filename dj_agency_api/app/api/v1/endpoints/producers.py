"""
Producer endpoints for API v1.

Producer management is an administrator task.  A producer user may
read the record of the producer their profile is linked to.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from dj_agency_api.app.api.v1.errors import service_errors
from dj_agency_api.app.core.security import get_current_user, require_permission
from dj_agency_api.app.schemas.producer import (
    AccessCodeRead,
    ProducerCreate,
    ProducerRead,
    ProducerStatus,
    ProducerUpdate,
)
from dj_agency_api.app.services.producer_service import ProducerService


router = APIRouter()

# Fields that may be explicitly set to null in an update.
NULLABLE_FIELDS = {"company_name", "phone", "address", "city", "state", "zip_code", "contact_person"}


@router.post("/", response_model=ProducerRead, status_code=status.HTTP_201_CREATED)
async def create_producer(
    producer: ProducerCreate,
    current_user: dict = Depends(require_permission("can_manage_producers")),
) -> ProducerRead:
    return await ProducerService.create_producer(producer, current_user)


@router.get("/", response_model=List[ProducerRead])
async def list_producers(
    search: Optional[str] = Query(None),
    status_filter: Optional[ProducerStatus] = Query(None, alias="status"),
    current_user: dict = Depends(require_permission("can_manage_producers")),
) -> List[ProducerRead]:
    return await ProducerService.list_producers(search=search, status=status_filter)


@router.get("/{producer_id}", response_model=ProducerRead)
async def get_producer(producer_id: int, current_user: dict = Depends(get_current_user)) -> ProducerRead:
    with service_errors():
        return await ProducerService.get_producer(producer_id, current_user)


@router.put("/{producer_id}", response_model=ProducerRead)
async def update_producer(
    producer_id: int,
    updates: ProducerUpdate,
    current_user: dict = Depends(require_permission("can_manage_producers")),
) -> ProducerRead:
    update_dict = {
        k: v
        for k, v in updates.model_dump(exclude_unset=True).items()
        if v is not None or k in NULLABLE_FIELDS
    }
    with service_errors():
        return await ProducerService.update_producer(producer_id, update_dict, current_user)


@router.delete("/{producer_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_producer(
    producer_id: int,
    current_user: dict = Depends(require_permission("can_manage_producers")),
) -> None:
    with service_errors():
        await ProducerService.delete_producer(producer_id, current_user)
    return None


@router.post("/{producer_id}/access-code", response_model=AccessCodeRead)
async def generate_access_code(
    producer_id: int,
    current_user: dict = Depends(require_permission("can_manage_producers")),
) -> AccessCodeRead:
    """Issue a new access code; the previous one stops working."""
    with service_errors():
        return await ProducerService.generate_access_code(producer_id, current_user)
