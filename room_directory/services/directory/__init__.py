# room_directory/services/directory/__init__.py

"""
Directory services package.

- room_directory_service: room search, room detail lookup and the reference
  data accessors used to populate filter choices.
- feature_match: pure helpers for the all-of-features match and enrichment.
"""

from .room_directory_service import RoomDirectoryService
from .feature_match import rooms_with_all_features, group_feature_ids

__all__ = [
    "RoomDirectoryService",
    "rooms_with_all_features",
    "group_feature_ids",
]
