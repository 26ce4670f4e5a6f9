"""SQLAlchemy ORM models."""

from labeldesk.models.base import Base
from labeldesk.models.user import User

__all__ = ["Base", "User"]
