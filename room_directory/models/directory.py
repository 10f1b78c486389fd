# room_directory/models/directory.py

import enum
from datetime import datetime
from typing import List
from sqlalchemy import (
    String,
    Boolean,
    Integer,
    ForeignKey,
    Text,
    DateTime,
    Enum,
    CheckConstraint,
    func,
    true,
)
from sqlalchemy.orm import relationship, Mapped, mapped_column
from .base import Base, TimestampMixin


class RoomType(str, enum.Enum):
    CLASSROOM = "classroom"
    LECTURE_HALL = "lecture-hall"
    LAB = "lab"
    COMPUTER_LAB = "computer-lab"
    SEMINAR_ROOM = "seminar-room"
    CONFERENCE_ROOM = "conference-room"
    STUDY_ROOM = "study-room"
    AUDITORIUM = "auditorium"
    CHAPEL = "chapel"
    OTHER = "other"


class FeatureCategory(str, enum.Enum):
    DISPLAY = "display"
    AUDIO = "audio"
    CONNECTIVITY = "connectivity"
    FURNITURE = "furniture"
    CLIMATE = "climate"
    ACCESSIBILITY = "accessibility"
    OTHER = "other"


def _enum_values(enum_cls):
    # Persist the wire value ("lecture-hall"), not the member name
    return [member.value for member in enum_cls]


class Building(Base, TimestampMixin):
    __tablename__ = "buildings"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    abbreviation: Mapped[str] = mapped_column(String, unique=True, nullable=False)

    rooms: Mapped[List["Room"]] = relationship(
        back_populates="building", cascade="all, delete-orphan", passive_deletes=True
    )


class Room(Base, TimestampMixin):
    __tablename__ = "rooms"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    building_id: Mapped[str] = mapped_column(
        String, ForeignKey("buildings.id", ondelete="CASCADE"), nullable=False, index=True
    )
    room_number: Mapped[str] = mapped_column(String, nullable=False)
    room_type: Mapped[RoomType] = mapped_column(
        Enum(
            RoomType,
            name="room_type",
            native_enum=False,
            length=32,
            values_callable=_enum_values,
        ),
        nullable=False,
    )
    # Optional special name, e.g. "Chapel"
    display_name: Mapped[str | None] = mapped_column(String)
    capacity: Mapped[int] = mapped_column(Integer, nullable=False)
    # 0 is the ground floor
    floor: Mapped[int] = mapped_column(Integer, nullable=False)
    accessible: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=true()
    )
    notes: Mapped[str | None] = mapped_column(Text)
    photo_front: Mapped[str | None] = mapped_column(String)
    photo_back: Mapped[str | None] = mapped_column(String)

    building: Mapped["Building"] = relationship(back_populates="rooms")
    feature_links: Mapped[List["RoomFeature"]] = relationship(
        back_populates="room", cascade="all, delete-orphan", passive_deletes=True
    )

    __table_args__ = (CheckConstraint("capacity > 0", name="positive_capacity"),)


class Feature(Base, TimestampMixin):
    __tablename__ = "features"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    name: Mapped[str] = mapped_column(String, unique=True, nullable=False)
    category: Mapped[FeatureCategory] = mapped_column(
        Enum(
            FeatureCategory,
            name="feature_category",
            native_enum=False,
            length=32,
            values_callable=_enum_values,
        ),
        nullable=False,
    )

    room_links: Mapped[List["RoomFeature"]] = relationship(
        back_populates="feature", cascade="all, delete-orphan", passive_deletes=True
    )


# Association table for Room <-> Feature with per-room metadata
class RoomFeature(Base):
    __tablename__ = "room_features"

    room_id: Mapped[str] = mapped_column(
        String, ForeignKey("rooms.id", ondelete="CASCADE"), primary_key=True
    )
    feature_id: Mapped[str] = mapped_column(
        String, ForeignKey("features.id", ondelete="CASCADE"), primary_key=True
    )
    quantity: Mapped[int] = mapped_column(
        Integer, nullable=False, default=1, server_default="1"
    )
    # Extra info like "outlets at tables", "ceiling mounted"
    details: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    room: Mapped["Room"] = relationship(back_populates="feature_links")
    feature: Mapped["Feature"] = relationship(back_populates="room_links")

    __table_args__ = (CheckConstraint("quantity >= 1", name="positive_quantity"),)
