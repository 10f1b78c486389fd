# room_directory/api/v1/routes/__init__.py
from fastapi import APIRouter
from .rooms import router as rooms_router
from .reference import router as reference_router

router = APIRouter()

router.include_router(rooms_router, prefix="/rooms", tags=["Rooms"])
router.include_router(reference_router, tags=["Reference Data"])

__all__ = ["router"]
