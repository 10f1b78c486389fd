# room_directory/tests/conftest.py

import os

os.environ.setdefault("ENVIRONMENT", "testing")

from typing import Any, AsyncGenerator, Dict, List

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from ..api.deps import db_session
from ..database import DatabaseManager, db_manager
from ..main import app
from ..models import (
    Building,
    Feature,
    FeatureCategory,
    Room,
    RoomFeature,
    RoomType,
)

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


class StatementRecorder:
    """Collects every SQL statement sent to the database."""

    def __init__(self) -> None:
        self.statements: List[str] = []

    def __call__(self, conn, cursor, statement, parameters, context, executemany):
        self.statements.append(statement)

    def clear(self) -> None:
        self.statements.clear()

    def touching(self, table: str) -> List[str]:
        return [s for s in self.statements if table in s]


@pytest_asyncio.fixture
async def test_engine() -> AsyncGenerator[AsyncEngine, None]:
    """A fresh in-memory database with all tables, per test."""
    manager = DatabaseManager()
    await manager.initialize(database_url=TEST_DATABASE_URL, max_retries=1)
    await manager.create_tables()
    engine = manager.engine
    assert engine is not None

    yield engine

    await manager.close()


@pytest_asyncio.fixture
async def test_session(test_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    session_maker = async_sessionmaker(
        test_engine, expire_on_commit=False, class_=AsyncSession
    )
    async with session_maker() as session:
        yield session


@pytest.fixture
def statement_recorder(test_engine: AsyncEngine):
    recorder = StatementRecorder()
    event.listen(test_engine.sync_engine, "before_cursor_execute", recorder)
    yield recorder
    event.remove(test_engine.sync_engine, "before_cursor_execute", recorder)


@pytest_asyncio.fixture
async def directory_data(test_session: AsyncSession) -> Dict[str, Any]:
    """
    Two buildings, five rooms and four features.

    Room numbers and abbreviations are chosen so that lexicographic and
    numeric ordering differ ("B10" < "B2").
    """
    data: Dict[str, Any] = {}

    data["buildings"] = [
        Building(id="B1", name="Science Center", abbreviation="SCI"),
        Building(id="B2", name="Carver Hall", abbreviation="CH"),
    ]
    data["features"] = [
        Feature(id="F1", name="Projector", category=FeatureCategory.DISPLAY),
        Feature(id="F2", name="Whiteboard", category=FeatureCategory.DISPLAY),
        Feature(id="F3", name="Microphone", category=FeatureCategory.AUDIO),
        Feature(id="F4", name="Air Conditioning", category=FeatureCategory.CLIMATE),
    ]
    data["rooms"] = [
        Room(
            id="R1",
            building_id="B1",
            room_number="101",
            room_type=RoomType.CLASSROOM,
            capacity=30,
            floor=1,
            accessible=True,
        ),
        Room(
            id="R2",
            building_id="B1",
            room_number="B10",
            room_type=RoomType.LAB,
            capacity=20,
            floor=0,
            accessible=True,
            notes="Fume hoods",
        ),
        Room(
            id="R3",
            building_id="B1",
            room_number="B2",
            room_type=RoomType.LAB,
            capacity=20,
            floor=0,
            accessible=False,
        ),
        Room(
            id="R4",
            building_id="B2",
            room_number="CH101",
            room_type=RoomType.LECTURE_HALL,
            capacity=150,
            floor=2,
            accessible=True,
            photo_front="/photos/ch101-front.jpg",
        ),
        Room(
            id="R5",
            building_id="B2",
            room_number="G05",
            room_type=RoomType.STUDY_ROOM,
            display_name="Room 101 Annex",
            capacity=8,
            floor=0,
            accessible=False,
        ),
    ]
    data["room_features"] = [
        RoomFeature(room_id="R1", feature_id="F1", quantity=1),
        RoomFeature(room_id="R1", feature_id="F2", quantity=2, details="front and back"),
        RoomFeature(room_id="R2", feature_id="F2", quantity=1),
        RoomFeature(room_id="R3", feature_id="F1", quantity=1),
        RoomFeature(room_id="R4", feature_id="F1", quantity=3, details="ceiling mounted"),
        RoomFeature(room_id="R4", feature_id="F2", quantity=1),
        RoomFeature(room_id="R4", feature_id="F3", quantity=2),
    ]

    test_session.add_all(data["buildings"])
    test_session.add_all(data["features"])
    await test_session.flush()
    test_session.add_all(data["rooms"])
    await test_session.flush()
    test_session.add_all(data["room_features"])
    await test_session.commit()

    return data


@pytest_asyncio.fixture
async def client(
    test_engine: AsyncEngine, test_session: AsyncSession
) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client bound to the test database."""
    db_manager.bind(test_engine)

    async def override_db_session():
        yield test_session

    app.dependency_overrides[db_session] = override_db_session

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://testserver"
    ) as test_client:
        yield test_client

    app.dependency_overrides.clear()
    db_manager.unbind()
