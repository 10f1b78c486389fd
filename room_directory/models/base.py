# room_directory/models/base.py
from datetime import datetime
from sqlalchemy import DateTime, func, MetaData
from sqlalchemy.orm import Mapped, mapped_column, declarative_base

# Deterministic constraint names so migrations and SQLite/PostgreSQL DDL agree
metadata = MetaData(
    naming_convention={
        "ix": "ix_%(column_0_label)s",
        "pk":"pk_%(table_name)s",
        "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
        "uq": "uq_%(table_name)s_%(column_0_name)s",
        "ck": "ck_%(table_name)s_%(constraint_name)s",
    }
)

Base = declarative_base(metadata=metadata)


class TimestampMixin:
    """Mixin for created_at and updated_at timestamps"""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
