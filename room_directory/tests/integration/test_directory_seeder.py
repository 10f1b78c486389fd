# room_directory/tests/integration/test_directory_seeder.py

import pytest
from sqlalchemy import func, select

from room_directory.models import Building, Feature, Room, RoomFeature
from room_directory.services.directory import RoomDirectoryService
from room_directory.services.seeding import DirectorySeeder
from room_directory.services.seeding.directory_seeder import (
    SAMPLE_BUILDINGS,
    SAMPLE_FEATURES,
    SAMPLE_ROOMS,
)

pytestmark = pytest.mark.asyncio


async def count(session, model):
    return (await session.execute(select(func.count()).select_from(model))).scalar_one()


class TestDirectorySeeder:
    async def test_sample_directory(self, test_session):
        summary = await DirectorySeeder(test_session).seed_sample_directory()
        await test_session.commit()

        assert summary.buildings == len(SAMPLE_BUILDINGS)
        assert summary.features == len(SAMPLE_FEATURES)
        assert summary.rooms == len(SAMPLE_ROOMS)
        assert summary.room_features == sum(len(r["features"]) for r in SAMPLE_ROOMS)
        assert await count(test_session, Room) == len(SAMPLE_ROOMS)
        assert await count(test_session, RoomFeature) == summary.room_features

    async def test_seeding_is_idempotent(self, test_session):
        seeder = DirectorySeeder(test_session)
        await seeder.seed_sample_directory()
        await test_session.commit()

        again = await seeder.seed_sample_directory()
        await test_session.commit()

        assert again.rooms == 0
        assert again.skipped == {
            "buildings": len(SAMPLE_BUILDINGS),
            "features": len(SAMPLE_FEATURES),
            "rooms": len(SAMPLE_ROOMS),
        }
        assert await count(test_session, Building) == len(SAMPLE_BUILDINGS)

    async def test_sample_directory_is_searchable(self, test_session):
        await DirectorySeeder(test_session).seed_sample_directory()
        await test_session.commit()
        service = RoomDirectoryService(test_session)

        rooms = await service.search_rooms({"searchQuery": "101"})

        assert [r.room_number for r in rooms] == ["CH101", "210", "101"]

    async def test_fake_rooms(self, test_session):
        seeder = DirectorySeeder(test_session)
        await seeder.seed_sample_directory()

        summary = await seeder.seed_fake_rooms(25, seed=7)
        await test_session.commit()

        assert summary.rooms == 25
        assert await count(test_session, Room) == len(SAMPLE_ROOMS) + 25
        feature_ids = set(
            (await test_session.execute(select(Feature.id))).scalars().all()
        )
        linked = set(
            (await test_session.execute(select(RoomFeature.feature_id))).scalars().all()
        )
        assert linked <= feature_ids

    async def test_fake_rooms_need_buildings(self, test_session):
        with pytest.raises(ValueError):
            await DirectorySeeder(test_session).seed_fake_rooms(3)

    async def test_zero_fake_rooms(self, test_session):
        summary = await DirectorySeeder(test_session).seed_fake_rooms(0)

        assert summary.as_dict()["rooms"] == 0
