# room_directory/api/__init__.py
from .v1.api import api_router
from .deps import db_session, directory_service

__all__ = ["api_router", "db_session", "directory_service"]
