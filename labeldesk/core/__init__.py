"""Core app configuration and database."""

from labeldesk.core.config import get_settings, settings
from labeldesk.core.database import get_db

__all__ = ["get_settings", "settings", "get_db"]
