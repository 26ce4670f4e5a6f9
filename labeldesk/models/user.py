"""ORM model for application users (auth and RBAC)."""

from sqlalchemy import CheckConstraint, Column, Integer, String

from labeldesk.models.base import Base

USER_ROLES = ("admin", "user")


class User(Base):
    """
    User account for cookie-based JWT authentication and role checks.

    role: 'admin' or 'user'
    """

    __tablename__ = "users"
    __table_args__ = (
        # Rendered as ck_users_role by the metadata naming convention.
        CheckConstraint("role IN ('admin', 'user')", name="role"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    login = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(32), nullable=False, default="user")
