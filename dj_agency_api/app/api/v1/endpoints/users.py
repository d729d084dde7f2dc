"""
User endpoints for API v1.

Sign-up, sign-in, the current profile and its permissions, producer
access-code redemption and user administration.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from dj_agency_api.app.api.v1.errors import service_errors
from dj_agency_api.app.core.access_control import ADMIN, AccessControlManager
from dj_agency_api.app.core.security import create_access_token, get_current_user, require_permission
from dj_agency_api.app.schemas.user import (
    AccessCodeRedeem,
    Role,
    Token,
    UserCreate,
    UserLogin,
    UserRead,
    UserRoleUpdate,
    UserUpdate,
)
from dj_agency_api.app.services.user_service import UserService


router = APIRouter()

# Fields that may be explicitly set to null in an update.
NULLABLE_FIELDS = {"full_name"}

PORTAL_VIEWS = (
    "dashboard",
    "djs",
    "calendar",
    "contracts",
    "financial",
    "media",
    "producers",
    "producer-dashboard",
)


@router.post("/signup", response_model=UserRead, status_code=status.HTTP_201_CREATED)
async def sign_up(user: UserCreate) -> UserRead:
    """Register a new profile.

    The first profile ever created becomes ``admin``; later ones are
    ``produtor`` and see nothing until linked to a producer.
    """
    with service_errors():
        return await UserService.sign_up(user)


@router.post("/login", response_model=Token)
async def login(credentials: UserLogin) -> Token:
    db_user = await UserService.authenticate(credentials.email, credentials.password)
    if not db_user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
    return Token(access_token=create_access_token({"sub": db_user.email}))


@router.get("/me", response_model=UserRead)
async def read_me(current_user: dict = Depends(get_current_user)) -> UserRead:
    with service_errors():
        return await UserService.get_user(current_user["user_id"])


@router.get("/me/permissions")
async def read_my_permissions(current_user: dict = Depends(get_current_user)) -> dict:
    """Permission flags and the portal views the current user may open."""
    return {
        "role": current_user.get("role"),
        "permissions": AccessControlManager.get_user_permissions(current_user),
        "views": [view for view in PORTAL_VIEWS if AccessControlManager.can_access_view(current_user, view)],
    }


@router.post("/me/access-code", response_model=UserRead)
async def redeem_access_code(
    payload: AccessCodeRedeem,
    current_user: dict = Depends(get_current_user),
) -> UserRead:
    """Link the current producer profile to the producer owning the code."""
    with service_errors():
        return await UserService.redeem_access_code(current_user["user_id"], payload.access_code)


@router.get("/", response_model=List[UserRead])
async def list_users(
    role: Optional[Role] = Query(None),
    current_user: dict = Depends(require_permission("can_manage_users")),
) -> List[UserRead]:
    return await UserService.list_users(role)


@router.put("/{user_id}/role", response_model=UserRead)
async def update_user_role(
    user_id: int,
    payload: UserRoleUpdate,
    current_user: dict = Depends(require_permission("can_manage_users")),
) -> UserRead:
    """Change a user's role and producer link.

    An administrator cannot demote their own account.
    """
    if current_user.get("user_id") == user_id and payload.role != ADMIN:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Cannot demote your own account")
    with service_errors():
        return await UserService.update_user_role(
            user_id, payload.role, payload.producer_id, acting_user_id=current_user.get("user_id")
        )


@router.put("/{user_id}", response_model=UserRead)
async def update_user(
    user_id: int,
    updates: UserUpdate,
    current_user: dict = Depends(get_current_user),
) -> UserRead:
    """Update name, password or disabled flag.

    Users may edit their own name and password; only administrators may
    edit others or toggle ``disabled``.
    """
    is_admin = AccessControlManager.get_user_permissions(current_user).get("can_manage_users", False)
    if not is_admin and current_user.get("user_id") != user_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient permissions")
    update_dict = {
        k: v
        for k, v in updates.model_dump(exclude_unset=True).items()
        if v is not None or k in NULLABLE_FIELDS
    }
    if "disabled" in update_dict and not is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient permissions")
    with service_errors():
        return await UserService.update_user(user_id, update_dict, acting_user_id=current_user.get("user_id"))


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: int,
    current_user: dict = Depends(require_permission("can_manage_users")),
) -> None:
    if current_user.get("user_id") == user_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Cannot delete your own account")
    with service_errors():
        await UserService.delete_user(user_id, acting_user_id=current_user.get("user_id"))
    return None

