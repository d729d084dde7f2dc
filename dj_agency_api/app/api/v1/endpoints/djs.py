"""
DJ endpoints for API v1.

Listing and detail routes apply the role filters, so a producer only
gets the DJs already booked for their events.  Creating and editing
DJs requires the matching permission flags.
"""

from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, Query, status

from dj_agency_api.app.api.v1.errors import service_errors
from dj_agency_api.app.core.security import get_current_user, require_permission
from dj_agency_api.app.schemas.dj import AvailabilityStatus, DJCreate, DJDashboardStats, DJRead, DJUpdate
from dj_agency_api.app.services.dj_service import DJService


router = APIRouter()

# Fields that may be explicitly set to null in an update.
NULLABLE_FIELDS = {"email", "phone", "bio", "booking_price", "instagram_handle", "profile_image_url"}


@router.post("/", response_model=DJRead, status_code=status.HTTP_201_CREATED)
async def create_dj(
    dj: DJCreate,
    current_user: dict = Depends(require_permission("can_create_djs")),
) -> DJRead:
    return await DJService.create_dj(dj, current_user)


@router.get("/", response_model=List[DJRead])
async def list_djs(
    search: Optional[str] = Query(None, description="Matches name, bio or genres"),
    genre: Optional[str] = Query(None),
    status_filter: Optional[AvailabilityStatus] = Query(None, alias="status"),
    sort_by: Literal["name", "price", "status", "created"] = Query("name"),
    order: Literal["asc", "desc"] = Query("asc"),
    current_user: dict = Depends(get_current_user),
) -> List[DJRead]:
    """List the DJs visible to the caller.

    - **search**: case-insensitive text search.
    - **genre**: exact genre.
    - **status**: `available`, `busy` or `unavailable`.
    - **sort_by** / **order**: `name`, `price`, `status` or `created`, `asc`/`desc`.
    """
    return await DJService.list_djs(
        current_user,
        search=search,
        genre=genre,
        status=status_filter,
        sort_by=sort_by,
        order=order,
    )


@router.get("/stats", response_model=DJDashboardStats)
async def dj_stats(current_user: dict = Depends(get_current_user)) -> DJDashboardStats:
    return await DJService.dashboard_stats(current_user)


@router.get("/{dj_id}", response_model=DJRead)
async def get_dj(dj_id: int, current_user: dict = Depends(get_current_user)) -> DJRead:
    with service_errors():
        return await DJService.get_dj(dj_id, current_user)


@router.put("/{dj_id}", response_model=DJRead)
async def update_dj(
    dj_id: int,
    updates: DJUpdate,
    current_user: dict = Depends(require_permission("can_edit_djs")),
) -> DJRead:
    update_dict = {
        k: v
        for k, v in updates.model_dump(exclude_unset=True).items()
        if v is not None or k in NULLABLE_FIELDS
    }
    with service_errors():
        return await DJService.update_dj(dj_id, update_dict, current_user)


@router.delete("/{dj_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_dj(
    dj_id: int,
    current_user: dict = Depends(require_permission("can_edit_djs")),
) -> None:
    """Deactivate a DJ.

    Pending and confirmed events lose their DJ and the DJ's media is
    removed; past events keep the reference.
    """
    with service_errors():
        await DJService.delete_dj(dj_id, current_user)
    return None
