# room_directory/api/deps.py
from typing import AsyncGenerator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db
from ..services.directory import RoomDirectoryService


async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Dependency to get a database session."""
    async for session in get_db():
        yield session


async def directory_service(
    db: AsyncSession = Depends(db_session),
) -> RoomDirectoryService:
    """Dependency that builds the read service over the request's session."""
    return RoomDirectoryService(db)
