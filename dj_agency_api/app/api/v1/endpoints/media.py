"""
Media endpoints for API v1.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from dj_agency_api.app.api.v1.errors import service_errors
from dj_agency_api.app.core.security import get_current_user, require_roles
from dj_agency_api.app.schemas.media import MediaCategory, MediaCreate, MediaRead, MediaUpdate
from dj_agency_api.app.services.media_service import MediaService


router = APIRouter()

# Fields that may be explicitly set to null in an update.
NULLABLE_FIELDS = {"title", "description", "file_size"}


@router.post("/", response_model=MediaRead, status_code=status.HTTP_201_CREATED)
async def create_media(
    item: MediaCreate,
    current_user: dict = Depends(require_roles("admin")),
) -> MediaRead:
    with service_errors():
        return await MediaService.create_media(item, current_user)


@router.get("/", response_model=List[MediaRead])
async def list_media(
    dj_id: Optional[int] = Query(None),
    event_id: Optional[int] = Query(None),
    category: Optional[MediaCategory] = Query(None),
    current_user: dict = Depends(get_current_user),
) -> List[MediaRead]:
    return await MediaService.list_media(current_user, dj_id=dj_id, event_id=event_id, category=category)


@router.get("/{media_id}", response_model=MediaRead)
async def get_media(media_id: int, current_user: dict = Depends(get_current_user)) -> MediaRead:
    with service_errors():
        return await MediaService.get_media(media_id, current_user)


@router.put("/{media_id}", response_model=MediaRead)
async def update_media(
    media_id: int,
    updates: MediaUpdate,
    current_user: dict = Depends(require_roles("admin")),
) -> MediaRead:
    update_dict = {
        k: v
        for k, v in updates.model_dump(exclude_unset=True).items()
        if v is not None or k in NULLABLE_FIELDS
    }
    with service_errors():
        return await MediaService.update_media(media_id, update_dict, current_user)


@router.delete("/{media_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_media(
    media_id: int,
    current_user: dict = Depends(require_roles("admin")),
) -> None:
    with service_errors():
        await MediaService.delete_media(media_id, current_user)
    return None
