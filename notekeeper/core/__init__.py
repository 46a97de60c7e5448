"""Core app configuration, database and security primitives."""

from notekeeper.core.config import get_settings, settings
from notekeeper.core.database import get_db

__all__ = ["get_settings", "settings", "get_db"]
