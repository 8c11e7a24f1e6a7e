"""Core configuration, database, security primitives and authorization."""

from app.core.config import Settings, get_settings, settings
from app.core.database import get_db

__all__ = ["Settings", "get_db", "get_settings", "settings"]
