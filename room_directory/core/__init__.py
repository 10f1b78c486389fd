# room_directory/core/__init__.py

from ..config import get_settings
from .exceptions import (
    AppError,
    InvalidFilterError,
    RoomNotFoundError,
)


__all__ = [
    "get_settings",
    "AppError",
    "InvalidFilterError",
    "RoomNotFoundError",
]
