"""Core app configuration, database client, security and permissions."""

from humpswiki.core.config import Settings, get_settings
from humpswiki.core.database import Database, get_db

__all__ = ["Database", "Settings", "get_db", "get_settings"]
