"""Core app configuration and database."""

from citylinker.core.config import get_settings, settings
from citylinker.core.database import get_db

__all__ = ["get_settings", "settings", "get_db"]
