# room_directory/api/v1/routes/rooms.py
"""API endpoints for searching rooms and viewing a single room."""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from ....api.deps import directory_service
from ....core.exceptions import RoomNotFoundError
from ....schemas.directory import RoomSearchFilters, RoomWithDetails
from ....services.directory import RoomDirectoryService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=List[RoomWithDetails])
async def search_rooms(
    building_id: Optional[str] = Query(None, alias="buildingId"),
    room_type: Optional[str] = Query(None, alias="roomType"),
    min_capacity: Optional[str] = Query(None, alias="minCapacity"),
    max_capacity: Optional[str] = Query(None, alias="maxCapacity"),
    floor: Optional[str] = Query(None, description="0 is the ground floor"),
    accessible: Optional[str] = Query(None, description="true or false"),
    q: Optional[str] = Query(None, description="Matches room number or display name"),
    feature_ids: List[str] = Query([], alias="featureId"),
    service: RoomDirectoryService = Depends(directory_service),
):
    """Search rooms; every omitted parameter leaves that attribute unconstrained.

    Values arrive as text and are checked by RoomSearchFilters, so every
    malformed filter is answered with the same invalid_filter error body.
    """
    filters = RoomSearchFilters.from_raw(
        {
            "building_id": building_id,
            "room_type": room_type,
            "min_capacity": min_capacity,
            "max_capacity": max_capacity,
            "floor": floor,
            "accessible": accessible,
            "search_query": q,
            "feature_ids": feature_ids,
        }
    )
    return await service.search_rooms(filters)


@router.get("/{room_id}", response_model=RoomWithDetails)
async def get_room(
    room_id: str,
    service: RoomDirectoryService = Depends(directory_service),
):
    """Retrieve a single room with its full feature list."""
    room = await service.get_room_by_id(room_id)
    if room is None:
        raise RoomNotFoundError(room_id)
    return room
