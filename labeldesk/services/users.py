"""User store: lookups, creation, deletion and first-run admin provisioning."""

import logging
from typing import TYPE_CHECKING

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from labeldesk.core.security import hash_password
from labeldesk.models.user import USER_ROLES, User
from labeldesk.schemas.auth import PublicUser

if TYPE_CHECKING:
    from labeldesk.core.config import Settings

logger = logging.getLogger(__name__)


class LoginAlreadyExistsError(Exception):
    """Raised when a user with the same login is already stored."""

    def __init__(self, login: str) -> None:
        self.login = login
        self.message = f"Login '{login}' already exists."
        super().__init__(self.message)


class InvalidRoleError(Exception):
    """Raised when a role outside USER_ROLES is requested."""

    def __init__(self, role: str) -> None:
        self.role = role
        self.message = f"Role must be one of {list(USER_ROLES)}, got {role!r}."
        super().__init__(self.message)


def to_public_user(user: User) -> PublicUser:
    """Strip the password hash."""
    return PublicUser(id=user.id, login=user.login, role=user.role)


def get_user_by_login(db: Session, login: str) -> User | None:
    return db.query(User).filter(User.login == login).first()


def get_user_by_id(db: Session, user_id: int) -> User | None:
    return db.query(User).filter(User.id == user_id).first()


def list_users(db: Session) -> list[User]:
    return db.query(User).order_by(User.id.asc()).all()


def create_user(db: Session, login: str, password: str, role: str = "user") -> User:
    """
    Insert a user with a freshly hashed password.

    Duplicate logins are detected from the UNIQUE constraint on users.login:
    the IntegrityError is turned into LoginAlreadyExistsError after rollback.
    """
    if role not in USER_ROLES:
        raise InvalidRoleError(role)
    user = User(login=login, password_hash=hash_password(password), role=role)
    db.add(user)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        if get_user_by_login(db, login) is not None:
            raise LoginAlreadyExistsError(login) from e
        raise
    db.refresh(user)
    logger.info("User created", extra={"user_id": user.id, "role": user.role})
    return user


def delete_user(db: Session, user_id: int) -> int:
    """Delete by id; returns the number of rows removed (0 or 1)."""
    deleted = (
        db.query(User)
        .filter(User.id == user_id)
        .delete(synchronize_session=False)
    )
    db.commit()
    if deleted:
        logger.info("User deleted", extra={"user_id": user_id})
    return deleted


def ensure_initial_admin(db: Session, settings: "Settings") -> bool:
    """
    Provision the default admin account when no user with INITIAL_ADMIN_LOGIN exists.

    Returns True when a row was inserted. Idempotent: safe to run on every startup.
    """
    login = settings.INITIAL_ADMIN_LOGIN
    if get_user_by_login(db, login) is not None:
        return False
    try:
        create_user(
            db,
            login,
            settings.INITIAL_ADMIN_PASSWORD.get_secret_value(),
            role="admin",
        )
    except LoginAlreadyExistsError:
        # Another process provisioned it between the lookup and the insert.
        return False
    logger.warning(
        "Provisioned initial admin account '%s'; change its password for production use.",
        login,
    )
    return True
