# room_directory/services/seeding/directory_seeder.py

"""
Loads directory data (buildings, features, rooms and their feature links).

Seeding is administrative data entry that happens outside the read path. It
is idempotent: rows whose id already exists are left untouched.
"""

import logging
import random
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Type

from faker import Faker
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ...models.directory import (
    Building,
    Feature,
    FeatureCategory,
    Room,
    RoomFeature,
    RoomType,
)

logger = logging.getLogger(__name__)


SAMPLE_BUILDINGS: List[Dict[str, Any]] = [
    {"id": "bld-sci", "name": "Science Center", "abbreviation": "SCI"},
    {"id": "bld-ch", "name": "Carver Hall", "abbreviation": "CH"},
    {"id": "bld-lib", "name": "Main Library", "abbreviation": "LIB"},
]

SAMPLE_FEATURES: List[Dict[str, Any]] = [
    {"id": "feat-projector", "name": "Projector", "category": FeatureCategory.DISPLAY},
    {"id": "feat-whiteboard", "name": "Whiteboard", "category": FeatureCategory.DISPLAY},
    {"id": "feat-tv", "name": "Wall Display", "category": FeatureCategory.DISPLAY},
    {"id": "feat-mic", "name": "Microphone", "category": FeatureCategory.AUDIO},
    {"id": "feat-speakers", "name": "Speakers", "category": FeatureCategory.AUDIO},
    {"id": "feat-hdmi", "name": "HDMI Input", "category": FeatureCategory.CONNECTIVITY},
    {"id": "feat-outlets", "name": "Power Outlets", "category": FeatureCategory.CONNECTIVITY},
    {"id": "feat-movable", "name": "Movable Seating", "category": FeatureCategory.FURNITURE},
    {"id": "feat-ac", "name": "Air Conditioning", "category": FeatureCategory.CLIMATE},
    {"id": "feat-hearing", "name": "Hearing Loop", "category": FeatureCategory.ACCESSIBILITY},
]

SAMPLE_ROOMS: List[Dict[str, Any]] = [
    {
        "id": "room-sci-101",
        "building_id": "bld-sci",
        "room_number": "101",
        "room_type": RoomType.LECTURE_HALL,
        "capacity": 120,
        "floor": 1,
        "accessible": True,
        "features": [
            ("feat-projector", 2, "ceiling mounted"),
            ("feat-mic", 1, None),
            ("feat-speakers", 4, None),
            ("feat-hdmi", 1, "at lectern"),
        ],
    },
    {
        "id": "room-sci-b12",
        "building_id": "bld-sci",
        "room_number": "B12",
        "room_type": RoomType.LAB,
        "capacity": 24,
        "floor": 0,
        "accessible": True,
        "notes": "Fume hoods along the north wall.",
        "features": [("feat-whiteboard", 2, None), ("feat-outlets", 24, "outlets at benches")],
    },
    {
        "id": "room-ch-101",
        "building_id": "bld-ch",
        "room_number": "CH101",
        "room_type": RoomType.CLASSROOM,
        "capacity": 30,
        "floor": 1,
        "accessible": False,
        "features": [("feat-projector", 1, None), ("feat-whiteboard", 1, None)],
    },
    {
        "id": "room-ch-chapel",
        "building_id": "bld-ch",
        "room_number": "G01",
        "room_type": RoomType.CHAPEL,
        "display_name": "Chapel",
        "capacity": 80,
        "floor": 0,
        "accessible": True,
        "features": [("feat-speakers", 2, None), ("feat-hearing", 1, None)],
    },
    {
        "id": "room-lib-210",
        "building_id": "bld-lib",
        "room_number": "210",
        "room_type": RoomType.STUDY_ROOM,
        "display_name": "Room 101 Annex",
        "capacity": 8,
        "floor": 2,
        "accessible": True,
        "features": [("feat-tv", 1, None), ("feat-hdmi", 1, None), ("feat-outlets", 6, None)],
    },
]


@dataclass
class SeedSummary:
    """Counts of rows inserted by a seeding run."""

    buildings: int = 0
    features: int = 0
    rooms: int = 0
    room_features: int = 0
    skipped: Dict[str, int] = field(default_factory=dict)

    def skip(self, entity: str) -> None:
        self.skipped[entity] = self.skipped.get(entity, 0) + 1

    def as_dict(self) -> Dict[str, Any]:
        return {
            "buildings": self.buildings,
            "features": self.features,
            "rooms": self.rooms,
            "room_features": self.room_features,
            "skipped": dict(self.skipped),
        }


class DirectorySeeder:
    """Inserts directory rows through the given session; the caller commits."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _existing_ids(self, model: Type[Any], ids: Sequence[str]) -> set:
        if not ids:
            return set()
        result = await self.session.execute(select(model.id).where(model.id.in_(ids)))
        return set(result.scalars().all())

    async def seed_sample_directory(self) -> SeedSummary:
        """Load the bundled sample directory."""
        summary = SeedSummary()
        await self._add_buildings(SAMPLE_BUILDINGS, summary)
        await self._add_features(SAMPLE_FEATURES, summary)
        await self._add_rooms(SAMPLE_ROOMS, summary)
        await self.session.flush()
        logger.info("Seeded sample directory: %s", summary.as_dict())
        return summary

    async def seed_fake_rooms(
        self, count: int, seed: Optional[int] = None
    ) -> SeedSummary:
        """Generate ``count`` extra rooms spread over the existing buildings.

        Requires at least one building. Each room gets a random subset of the
        existing features.
        """
        summary = SeedSummary()
        if count <= 0:
            return summary

        faker = Faker()
        rng = random.Random(seed)
        if seed is not None:
            faker.seed_instance(seed)

        buildings = (
            await self.session.execute(select(Building.id, Building.abbreviation))
        ).all()
        if not buildings:
            raise ValueError("Cannot generate rooms without any buildings")
        feature_ids = list(
            (await self.session.execute(select(Feature.id))).scalars().all()
        )

        room_types = list(RoomType)
        rooms: List[Dict[str, Any]] = []
        for index in range(count):
            building_id, abbrev = rng.choice(buildings)
            floor = rng.randint(0, 4)
            number = f"{floor}{rng.randint(0, 99):02d}"
            picked = rng.sample(feature_ids, k=rng.randint(0, min(4, len(feature_ids))))
            rooms.append(
                {
                    "id": f"room-{abbrev.lower()}-{faker.unique.bothify('????-####')}",
                    "building_id": building_id,
                    "room_number": number,
                    "room_type": rng.choice(room_types),
                    "display_name": (
                        f"{faker.last_name()} Room" if rng.random() < 0.2 else None
                    ),
                    "capacity": rng.choice([8, 12, 20, 24, 30, 40, 60, 120]),
                    "floor": floor,
                    "accessible": rng.random() < 0.8,
                    "notes": faker.sentence() if rng.random() < 0.3 else None,
                    "features": [(fid, rng.randint(1, 3), None) for fid in picked],
                }
            )

        await self._add_rooms(rooms, summary)
        await self.session.flush()
        logger.info("Generated %d fake rooms", summary.rooms)
        return summary

    async def _add_buildings(
        self, rows: Sequence[Dict[str, Any]], summary: SeedSummary
    ) -> None:
        existing = await self._existing_ids(Building, [r["id"] for r in rows])
        for row in rows:
            if row["id"] in existing:
                summary.skip("buildings")
                continue
            self.session.add(Building(**row))
            summary.buildings += 1

    async def _add_features(
        self, rows: Sequence[Dict[str, Any]], summary: SeedSummary
    ) -> None:
        existing = await self._existing_ids(Feature, [r["id"] for r in rows])
        for row in rows:
            if row["id"] in existing:
                summary.skip("features")
                continue
            self.session.add(Feature(**row))
            summary.features += 1

    async def _add_rooms(
        self, rows: Sequence[Dict[str, Any]], summary: SeedSummary
    ) -> None:
        # Buildings and features must exist before rooms reference them
        await self.session.flush()
        existing = await self._existing_ids(Room, [r["id"] for r in rows])
        for row in rows:
            if row["id"] in existing:
                summary.skip("rooms")
                continue
            data = dict(row)
            links = data.pop("features", [])
            room = Room(**data)
            for feature_id, quantity, details in links:
                room.feature_links.append(
                    RoomFeature(feature_id=feature_id, quantity=quantity, details=details)
                )
                summary.room_features += 1
            self.session.add(room)
            summary.rooms += 1


__all__ = [
    "DirectorySeeder",
    "SeedSummary",
    "SAMPLE_BUILDINGS",
    "SAMPLE_FEATURES",
    "SAMPLE_ROOMS",
]
