# room_directory/schemas/__init__.py
"""Expose the primary Pydantic models for convenient imports."""

from .directory import (
    BuildingRead,
    FeatureRead,
    RoomFeatureRead,
    RoomWithDetails,
    RoomSearchFilters,
)

__all__ = [
    "BuildingRead",
    "FeatureRead",
    "RoomFeatureRead",
    "RoomWithDetails",
    "RoomSearchFilters",
]
