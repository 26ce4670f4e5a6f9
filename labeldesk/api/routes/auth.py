"""Cookie session login/logout/me and auth dependencies (get_current_user, require_admin)."""

import logging
from typing import Annotated

import jwt
from fastapi import APIRouter, Depends, Response
from fastapi.security import APIKeyCookie
from sqlalchemy.orm import Session

from labeldesk.core.config import settings
from labeldesk.core.database import get_db
from labeldesk.core.errors import ApiError, forbidden, invalid_input, unauthorized
from labeldesk.core.security import (
    cookie_max_age_seconds,
    create_session_token,
    session_user_id,
    verify_password,
)
from labeldesk.schemas.auth import LoginRequest, OkResponse, PublicUser, UserResponse
from labeldesk.services.users import get_user_by_id, get_user_by_login, to_public_user

logger = logging.getLogger(__name__)
router = APIRouter()
session_cookie = APIKeyCookie(name=settings.AUTH_COOKIE_NAME, auto_error=False)


def set_auth_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=settings.AUTH_COOKIE_NAME,
        value=token,
        httponly=True,
        samesite="lax",
        secure=settings.is_production,
        path="/",
        max_age=cookie_max_age_seconds(),
    )


def clear_auth_cookie(response: Response) -> None:
    response.delete_cookie(key=settings.AUTH_COOKIE_NAME, path="/")


@router.post("/login", response_model=UserResponse)
def login(
    body: LoginRequest,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
) -> UserResponse:
    """
    Authenticate with login and password; sets the HTTP-only session cookie.
    Unknown login and wrong password give the same 401 so logins cannot be enumerated.
    """
    login_name = (body.login or "").strip()
    if not login_name or not body.password:
        raise invalid_input()

    user = get_user_by_login(db, login_name)
    if user is None or not verify_password(body.password, user.password_hash):
        logger.info("Login failed", extra={"reason": "invalid_credentials"})
        raise ApiError(401, "INVALID_CREDENTIALS")

    token = create_session_token(user.id, user.role)
    set_auth_cookie(response, token)
    logger.info("Login succeeded", extra={"user_id": user.id})
    return UserResponse(user=to_public_user(user))


@router.post("/logout", response_model=OkResponse)
def logout(response: Response) -> OkResponse:
    clear_auth_cookie(response)
    return OkResponse()


def get_current_user(
    token: Annotated[str | None, Depends(session_cookie)],
    db: Annotated[Session, Depends(get_db)],
) -> PublicUser:
    """Dependency: require a valid session cookie and return the current user. Raises 401 otherwise."""
    if not token:
        raise unauthorized()
    try:
        user_id = session_user_id(token)
    except jwt.PyJWTError:
        raise unauthorized()
    user = get_user_by_id(db, user_id)
    if user is None:
        raise unauthorized()
    return to_public_user(user)


def require_admin(
    current_user: Annotated[PublicUser, Depends(get_current_user)],
) -> PublicUser:
    """Dependency: require authenticated user with role 'admin'. Raises 403 for non-admin."""
    if current_user.role != "admin":
        raise forbidden()
    return current_user


@router.get("/me", response_model=UserResponse)
def me(current_user: Annotated[PublicUser, Depends(get_current_user)]) -> UserResponse:
    return UserResponse(user=current_user)
