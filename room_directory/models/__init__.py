# room_directory/models/__init__.py

from .base import Base
from .directory import (
    Building,
    Room,
    Feature,
    RoomFeature,
    RoomType,
    FeatureCategory,
)

__all__ = [
    "Base",
    "Building",
    "Room",
    "Feature",
    "RoomFeature",
    "RoomType",
    "FeatureCategory",
]
