"""Request/response schemas for auth and user-management endpoints."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

UserRole = Literal["admin", "user"]


class LoginRequest(BaseModel):
    """Credentials for login. Emptiness is checked by the route (400 INVALID_INPUT)."""

    login: str | None = Field(default=None, description="Login")
    password: str | None = Field(default=None, description="Password")


class CreateUserRequest(BaseModel):
    """Body for POST /users (admin only)."""

    login: str | None = None
    password: str | None = None
    role: str | None = Field(default=None, description="'admin' or 'user'; defaults to 'user'")


class PublicUser(BaseModel):
    """User without the password hash; attached to authenticated requests."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    login: str
    role: UserRole


class UserResponse(BaseModel):
    """Response wrapping a single user (login, me, create)."""

    user: PublicUser


class UsersListResponse(BaseModel):
    """Response for GET /users (admin only)."""

    users: list[PublicUser]


class OkResponse(BaseModel):
    ok: bool = True


class DeleteUserResponse(BaseModel):
    """Response for DELETE /users/{id}; deleted is 0 when the id did not exist."""

    ok: bool = True
    deleted: int = 0
