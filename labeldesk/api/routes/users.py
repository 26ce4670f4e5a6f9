"""Admin-only user management: list, create, delete."""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.orm import Session

from labeldesk.api.routes.auth import require_admin
from labeldesk.core.database import get_db
from labeldesk.core.errors import ApiError, invalid_input
from labeldesk.core.security import LOGIN_MAX_LEN
from labeldesk.schemas.auth import (
    CreateUserRequest,
    DeleteUserResponse,
    PublicUser,
    UserResponse,
    UsersListResponse,
)
from labeldesk.services.users import (
    InvalidRoleError,
    LoginAlreadyExistsError,
    create_user,
    delete_user,
    list_users,
    to_public_user,
)

router = APIRouter()

# Larger ids cannot be bound to an SQLite INTEGER; they fail path validation (INVALID_ID).
SQLITE_MAX_INTEGER = 2**63 - 1


@router.get("", response_model=UsersListResponse)
def get_users(
    _admin: Annotated[PublicUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> UsersListResponse:
    """List all users ordered by id."""
    return UsersListResponse(users=[to_public_user(u) for u in list_users(db)])


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def post_user(
    body: CreateUserRequest,
    _admin: Annotated[PublicUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> UserResponse:
    login = (body.login or "").strip()
    if not login or not body.password or len(login) > LOGIN_MAX_LEN:
        raise invalid_input()
    try:
        user = create_user(db, login, body.password, role="user" if body.role is None else body.role)
    except InvalidRoleError:
        raise ApiError(status.HTTP_400_BAD_REQUEST, "INVALID_ROLE")
    except LoginAlreadyExistsError:
        raise ApiError(status.HTTP_409_CONFLICT, "LOGIN_ALREADY_EXISTS")
    return UserResponse(user=to_public_user(user))


@router.delete("/{user_id}", response_model=DeleteUserResponse)
def remove_user(
    user_id: Annotated[int, Path(le=SQLITE_MAX_INTEGER)],
    admin: Annotated[PublicUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> DeleteUserResponse:
    """Delete a user. Admins cannot delete their own account (no lockout)."""
    if user_id <= 0:
        raise ApiError(status.HTTP_400_BAD_REQUEST, "INVALID_ID")
    if admin.id == user_id:
        raise ApiError(status.HTTP_400_BAD_REQUEST, "CANNOT_DELETE_SELF")
    return DeleteUserResponse(deleted=delete_user(db, user_id))
