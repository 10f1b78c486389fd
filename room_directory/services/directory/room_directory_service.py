# room_directory/services/directory/room_directory_service.py

"""
Read-only service for searching the room directory.

Search runs in phases:

1. attribute predicates select candidate rooms (one query, joined to the
   owning building for its name and abbreviation);
2. when features are required, the ``(room_id, feature_id)`` links of the
   candidates are fetched and checked for the all-of match in memory;
3. the surviving rooms are enriched with their full feature lists.

Phases 2 and 3 are skipped when there is nothing to look up, so no query is
ever issued with an empty ``IN`` list.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence, Union, Mapping

from sqlalchemy import and_, or_, select, Select
from sqlalchemy.engine import Row
from sqlalchemy.ext.asyncio import AsyncSession

from ...models.directory import Building, Room, Feature, RoomFeature
from ...schemas.directory import (
    BuildingRead,
    FeatureRead,
    RoomFeatureRead,
    RoomSearchFilters,
    RoomWithDetails,
)
from .feature_match import group_by_room, rooms_with_all_features

logger = logging.getLogger(__name__)

LIKE_ESCAPE = "\\"


def _like_pattern(term: str) -> str:
    """Wrap ``term`` for a substring LIKE, matching wildcards literally."""
    escaped = (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"


def build_room_predicates(filters: RoomSearchFilters) -> List[Any]:
    """One conjunctive predicate per filter field that is set."""
    conditions: List[Any] = []

    if filters.building_id is not None:
        conditions.append(Room.building_id == filters.building_id)

    if filters.room_type is not None:
        conditions.append(Room.room_type == filters.room_type)

    if filters.min_capacity is not None:
        conditions.append(Room.capacity >= filters.min_capacity)

    if filters.max_capacity is not None:
        conditions.append(Room.capacity <= filters.max_capacity)

    if filters.floor is not None:
        conditions.append(Room.floor == filters.floor)

    if filters.accessible is not None:
        conditions.append(Room.accessible == filters.accessible)

    if filters.search_query:
        pattern = _like_pattern(filters.search_query)
        conditions.append(
            or_(
                Room.room_number.ilike(pattern, escape=LIKE_ESCAPE),
                Room.display_name.ilike(pattern, escape=LIKE_ESCAPE),
            )
        )

    return conditions


def room_details_query() -> Select:
    """Rooms joined to their building, in directory order."""
    return (
        select(
            Room.id,
            Room.building_id,
            Room.room_number,
            Room.room_type,
            Room.display_name,
            Room.capacity,
            Room.floor,
            Room.accessible,
            Room.notes,
            Room.photo_front,
            Room.photo_back,
            Building.name.label("building_name"),
            Building.abbreviation.label("building_abbrev"),
        )
        .join(Building, Room.building_id == Building.id)
        .order_by(Building.abbreviation, Room.room_number)
    )


class RoomDirectoryService:
    """Search and lookup over buildings, rooms and their features."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def search_rooms(
        self, filters: Union[RoomSearchFilters, Mapping[str, Any], None] = None
    ) -> List[RoomWithDetails]:
        """Return every room matching all set filters, with full feature lists.

        Raises InvalidFilterError for malformed criteria before any query runs.
        """
        if not isinstance(filters, RoomSearchFilters):
            filters = RoomSearchFilters.from_raw(filters)

        if filters.is_empty:
            logger.debug("No filters set, listing the whole directory")
        else:
            logger.debug(
                "Searching rooms with filters: %s",
                filters.model_dump(exclude_defaults=True),
            )

        conditions = build_room_predicates(filters)
        stmt = room_details_query()
        if conditions:
            stmt = stmt.where(and_(*conditions))

        result = await self.session.execute(stmt)
        rooms = list(result.all())
        logger.debug("Attribute filters matched %d rooms", len(rooms))

        if filters.feature_ids:
            rooms = await self._filter_by_features(rooms, filters.feature_ids)

        return await self._attach_features(rooms)

    async def get_room_by_id(self, room_id: str) -> Optional[RoomWithDetails]:
        """Return one room with its complete feature list, or None."""
        stmt = room_details_query().where(Room.id == room_id).limit(1)
        result = await self.session.execute(stmt)
        room = result.first()
        if room is None:
            logger.debug("Room %s not found", room_id)
            return None

        rooms = await self._attach_features([room])
        return rooms[0]

    async def get_buildings(self) -> List[BuildingRead]:
        """All buildings ordered by abbreviation."""
        stmt = select(Building.id, Building.name, Building.abbreviation).order_by(
            Building.abbreviation
        )
        result = await self.session.execute(stmt)
        return [BuildingRead.model_validate(row._mapping) for row in result.all()]

    async def get_features(self) -> List[FeatureRead]:
        """All features ordered by category, then name."""
        stmt = select(Feature.id, Feature.name, Feature.category).order_by(
            Feature.category, Feature.name
        )
        result = await self.session.execute(stmt)
        return [FeatureRead.model_validate(row._mapping) for row in result.all()]

    async def _filter_by_features(
        self, rooms: Sequence[Row], feature_ids: Sequence[str]
    ) -> List[Row]:
        if not rooms:
            logger.debug("No candidate rooms, skipping feature lookup")
            return []

        room_ids = [room.id for room in rooms]
        stmt = select(RoomFeature.room_id, RoomFeature.feature_id).where(
            RoomFeature.room_id.in_(room_ids)
        )
        result = await self.session.execute(stmt)
        matching = set(
            rooms_with_all_features(room_ids, result.all(), feature_ids)
        )
        logger.debug(
            "%d of %d candidate rooms have all %d required features",
            len(matching),
            len(room_ids),
            len(feature_ids),
        )
        return [room for room in rooms if room.id in matching]

    async def _attach_features(self, rooms: Sequence[Row]) -> List[RoomWithDetails]:
        if not rooms:
            return []

        stmt = (
            select(
                RoomFeature.room_id,
                RoomFeature.feature_id.label("id"),
                Feature.name,
                Feature.category,
                RoomFeature.quantity,
                RoomFeature.details,
            )
            .join(Feature, RoomFeature.feature_id == Feature.id)
            .where(RoomFeature.room_id.in_([room.id for room in rooms]))
            .order_by(Feature.name, Feature.id)
        )
        result = await self.session.execute(stmt)
        features_by_room: Dict[Any, List[Dict[str, Any]]] = group_by_room(
            row._mapping for row in result.all()
        )

        return [
            RoomWithDetails(
                **room._mapping,
                features=[
                    RoomFeatureRead(**feature)
                    for feature in features_by_room.get(room.id, [])
                ],
            )
            for room in rooms
        ]


__all__ = [
    "RoomDirectoryService",
    "build_room_predicates",
    "room_details_query",
]
