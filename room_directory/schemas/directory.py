# room_directory/schemas/directory.py
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)
from pydantic.alias_generators import to_camel

from ..core.exceptions import InvalidFilterError
from ..models.directory import FeatureCategory, RoomType

# camelCase on the wire, snake_case in Python
MODEL_CONFIG = ConfigDict(
    from_attributes=True, populate_by_name=True, alias_generator=to_camel
)


class BuildingRead(BaseModel):
    model_config = MODEL_CONFIG

    id: str
    name: str
    abbreviation: str


class FeatureRead(BaseModel):
    model_config = MODEL_CONFIG

    id: str
    name: str
    category: FeatureCategory


class RoomFeatureRead(BaseModel):
    """A feature attached to a room, with the room-specific metadata."""

    model_config = MODEL_CONFIG

    id: str
    name: str
    category: FeatureCategory
    quantity: int = 1
    details: Optional[str] = None


class RoomWithDetails(BaseModel):
    model_config = MODEL_CONFIG

    id: str
    building_id: str
    room_number: str
    room_type: RoomType
    display_name: Optional[str] = None
    capacity: int
    floor: int
    accessible: bool
    notes: Optional[str] = None
    photo_front: Optional[str] = None
    photo_back: Optional[str] = None
    building_name: str
    building_abbrev: str
    features: List[RoomFeatureRead] = Field(default_factory=list)


class RoomSearchFilters(BaseModel):
    """Search criteria; every unset field leaves its attribute unconstrained.

    ``floor`` and ``accessible`` are true optionals: ``0`` and ``False`` are
    real filter values, only ``None`` means "not set".
    """

    model_config = ConfigDict(
        populate_by_name=True,
        alias_generator=to_camel,
        extra="forbid",
        frozen=True,
    )

    building_id: Optional[str] = None
    room_type: Optional[RoomType] = None
    min_capacity: Optional[int] = Field(default=None, ge=0)
    max_capacity: Optional[int] = Field(default=None, ge=0)
    floor: Optional[int] = None
    # also "true"/"false", "1"/"0", "yes"/"no" as sent in a query string
    accessible: Optional[bool] = None
    search_query: Optional[str] = None
    feature_ids: List[str] = Field(default_factory=list)

    @field_validator(
        "building_id",
        "room_type",
        "min_capacity",
        "max_capacity",
        "floor",
        "accessible",
        "search_query",
        mode="before",
    )
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v

    @field_validator("feature_ids", mode="before")
    @classmethod
    def normalize_feature_ids(cls, v: Any) -> Any:
        if v is None:
            return []
        if isinstance(v, str):
            v = [v]
        return v

    @field_validator("feature_ids")
    @classmethod
    def dedupe_feature_ids(cls, v: List[str]) -> List[str]:
        seen: Dict[str, None] = {}
        for feature_id in v:
            feature_id = feature_id.strip()
            if feature_id:
                seen.setdefault(feature_id, None)
        return list(seen)

    @property
    def is_empty(self) -> bool:
        return not self.model_dump(exclude_defaults=True)

    @classmethod
    def from_raw(cls, data: Optional[Mapping[str, Any]] = None) -> "RoomSearchFilters":
        """Build filters from untrusted input, raising InvalidFilterError."""
        try:
            return cls.model_validate(dict(data or {}))
        except ValidationError as exc:
            errors = [
                {
                    "loc": [str(part) for part in err["loc"]],
                    "msg": err["msg"],
                    "type": err["type"],
                }
                for err in exc.errors()
            ]
            fields = sorted({e["loc"][0] for e in errors if e["loc"]})
            raise InvalidFilterError(
                f"Invalid search filter: {', '.join(fields) or 'input'}",
                field=fields[0] if len(fields) == 1 else None,
                validation_errors=errors,
                cause=exc,
            ) from exc


__all__ = [
    "BuildingRead",
    "FeatureRead",
    "RoomFeatureRead",
    "RoomWithDetails",
    "RoomSearchFilters",
]
