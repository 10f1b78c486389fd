# room_directory/api/v1/routes/reference.py
"""Reference data used to populate search filter choices."""

from typing import List

from fastapi import APIRouter, Depends

from ....api.deps import directory_service
from ....schemas.directory import BuildingRead, FeatureRead
from ....services.directory import RoomDirectoryService

router = APIRouter()


@router.get("/buildings", response_model=List[BuildingRead])
async def list_buildings(service: RoomDirectoryService = Depends(directory_service)):
    """All buildings ordered by abbreviation."""
    return await service.get_buildings()


@router.get("/features", response_model=List[FeatureRead])
async def list_features(service: RoomDirectoryService = Depends(directory_service)):
    """All features ordered by category, then name."""
    return await service.get_features()
