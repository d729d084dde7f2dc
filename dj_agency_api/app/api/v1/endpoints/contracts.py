"""
Contract endpoints for API v1.

Producers list and read their own contracts and may sign them on the
producer side.  Everything else is reserved to administrators.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from dj_agency_api.app.api.v1.errors import service_errors
from dj_agency_api.app.core.security import get_current_user, require_roles
from dj_agency_api.app.schemas.contract import (
    ContractCreate,
    ContractRead,
    ContractSign,
    ContractStatus,
    ContractUpdate,
)
from dj_agency_api.app.services.contract_service import ContractService


router = APIRouter()

# Fields that may be explicitly set to null in an update.
NULLABLE_FIELDS = {
    "payment_terms",
    "additional_terms",
    "equipment_requirements",
    "performance_duration",
    "setup_time",
    "cancellation_policy",
    "dress_code",
    "technical_rider",
}


@router.post("/", response_model=ContractRead, status_code=status.HTTP_201_CREATED)
async def create_contract(
    contract: ContractCreate,
    current_user: dict = Depends(require_roles("admin")),
) -> ContractRead:
    with service_errors():
        return await ContractService.create_contract(contract, current_user)


@router.get("/", response_model=List[ContractRead])
async def list_contracts(
    status_filter: Optional[ContractStatus] = Query(None, alias="status"),
    current_user: dict = Depends(get_current_user),
) -> List[ContractRead]:
    return await ContractService.list_contracts(current_user, status=status_filter)


@router.get("/{contract_id}", response_model=ContractRead)
async def get_contract(contract_id: int, current_user: dict = Depends(get_current_user)) -> ContractRead:
    with service_errors():
        return await ContractService.get_contract(contract_id, current_user)


@router.put("/{contract_id}", response_model=ContractRead)
async def update_contract(
    contract_id: int,
    updates: ContractUpdate,
    current_user: dict = Depends(require_roles("admin")),
) -> ContractRead:
    update_dict = {
        k: v
        for k, v in updates.model_dump(exclude_unset=True).items()
        if v is not None or k in NULLABLE_FIELDS
    }
    with service_errors():
        return await ContractService.update_contract(contract_id, update_dict, current_user)


@router.post("/{contract_id}/sign", response_model=ContractRead)
async def sign_contract(
    contract_id: int,
    payload: ContractSign,
    current_user: dict = Depends(get_current_user),
) -> ContractRead:
    """Sign a contract as ``producer`` or ``dj``.

    The contract becomes ``signed`` once both parties have signed.
    """
    with service_errors():
        return await ContractService.sign_contract(contract_id, payload.party, current_user)


@router.delete("/{contract_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_contract(
    contract_id: int,
    current_user: dict = Depends(require_roles("admin")),
) -> None:
    with service_errors():
        await ContractService.delete_contract(contract_id, current_user)
    return None
