# room_directory/database.py

"""
Engine and session lifecycle for the directory store.

The API works through the module level ``db_manager``. Tests and scripts may
build their own ``DatabaseManager`` or hand an existing engine to ``bind``.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional

from sqlalchemy import event, text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from .config import DEFAULT_DATABASE_URL
from .models import Base

logger = logging.getLogger(__name__)


def engine_options(
    url: str,
    *,
    pool_size: int = 10,
    max_overflow: int = 20,
    pool_timeout: int = 30,
    pool_recycle: int = 3600,
) -> Dict[str, Any]:
    """Pool arguments for ``url``; SQLite gets none of the server pool knobs."""
    parsed = make_url(url)
    if parsed.get_backend_name() != "sqlite":
        return {
            "pool_size": pool_size,
            "max_overflow": max_overflow,
            "pool_timeout": pool_timeout,
            "pool_recycle": pool_recycle,
            "pool_pre_ping": True,
        }

    options: Dict[str, Any] = {"connect_args": {"check_same_thread": False}}
    if parsed.database in (None, "", ":memory:"):
        # one shared connection, or every checkout sees an empty database
        options["poolclass"] = StaticPool
    return options


def install_connection_listeners(engine: AsyncEngine) -> None:
    """Per-connection setup run by the sync engine underneath ``engine``."""
    sync_engine = engine.sync_engine
    dialect = sync_engine.dialect.name

    @event.listens_for(sync_engine, "connect")
    def prepare_connection(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        try:
            if dialect == "sqlite":
                # ON DELETE CASCADE is ignored until this is switched on
                cursor.execute("PRAGMA foreign_keys=ON")
            elif dialect == "postgresql":
                cursor.execute("SET TIME ZONE 'UTC'")
        finally:
            cursor.close()


class DatabaseManager:
    """Owns one async engine and the session factory bound to it."""

    def __init__(self) -> None:
        self.engine: Optional[AsyncEngine] = None
        self.session_factory: Optional[async_sessionmaker[AsyncSession]] = None

    @property
    def is_initialized(self) -> bool:
        return self.session_factory is not None

    async def initialize(
        self,
        database_url: Optional[str] = None,
        *,
        echo: bool = False,
        max_retries: int = 3,
        retry_delay: float = 1.0,
        **pool_options: Any,
    ) -> None:
        """Create the engine and prove it can connect.

        Connection attempts back off linearly (``retry_delay``, then twice
        that, ...). After ``max_retries`` failures a RuntimeError chained to
        the last error is raised and the manager stays uninitialized.
        """
        if self.is_initialized:
            logger.warning("DatabaseManager.initialize called twice; ignoring")
            return

        url = database_url or DEFAULT_DATABASE_URL
        if url.startswith("postgresql://"):
            url = "postgresql+asyncpg://" + url[len("postgresql://"):]

        attempts = max(1, max_retries)
        failure: Optional[Exception] = None
        for attempt in range(1, attempts + 1):
            engine = create_async_engine(
                url, echo=echo, **engine_options(url, **pool_options)
            )
            install_connection_listeners(engine)
            try:
                await self._ping(engine)
            except Exception as exc:
                failure = exc
                await engine.dispose()
                logger.warning(
                    "Database connection attempt %d/%d failed: %s",
                    attempt,
                    attempts,
                    exc,
                )
                if attempt < attempts:
                    await asyncio.sleep(retry_delay * attempt)
                continue

            self.bind(engine)
            logger.info(
                "Connected to %s database on attempt %d", engine.dialect.name, attempt
            )
            return

        raise RuntimeError(
            f"Could not connect to the database after {attempts} attempts"
        ) from failure

    def bind(self, engine: AsyncEngine) -> None:
        """Use ``engine`` as is; the caller keeps responsibility for disposing it."""
        self.engine = engine
        self.session_factory = async_sessionmaker(
            bind=engine, expire_on_commit=False, class_=AsyncSession
        )

    def unbind(self) -> None:
        """Forget the engine without disposing it."""
        self.engine = None
        self.session_factory = None

    @staticmethod
    async def _ping(engine: AsyncEngine) -> None:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    def _factory(self) -> async_sessionmaker[AsyncSession]:
        if self.session_factory is None:
            raise RuntimeError("DatabaseManager is not initialized")
        return self.session_factory

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """A session for reads; rolled back if the block raises."""
        async with self._factory()() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[AsyncSession]:
        """A session committed when the block exits cleanly."""
        async with self._factory()() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                logger.exception("Rolling back failed transaction")
                await session.rollback()
                raise

    def _require_engine(self) -> AsyncEngine:
        if self.engine is None:
            raise RuntimeError("DatabaseManager is not initialized")
        return self.engine

    async def create_tables(self) -> None:
        async with self._require_engine().begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Directory tables are in place")

    async def drop_tables(self) -> None:
        async with self._require_engine().begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
        logger.info("Directory tables dropped")

    def pool_status(self) -> Dict[str, Any]:
        engine = self._require_engine()
        pool = engine.sync_engine.pool
        return {
            "dialect": engine.dialect.name,
            "pool_class": type(pool).__name__,
            "summary": pool.status(),
        }

    async def close(self) -> None:
        """Dispose the engine and return to the uninitialized state."""
        engine = self.engine
        self.unbind()
        if engine is not None:
            await engine.dispose()
            logger.info("Database engine disposed")


db_manager = DatabaseManager()


async def get_db() -> AsyncIterator[AsyncSession]:
    """Request-scoped session from the global manager."""
    async with db_manager.session() as session:
        yield session


async def init_db(
    database_url: Optional[str] = None,
    create_tables: bool = False,
    **options: Any,
) -> DatabaseManager:
    await db_manager.initialize(database_url, **options)
    if create_tables:
        await db_manager.create_tables()
    return db_manager


async def check_db_health() -> Dict[str, Any]:
    """Round-trip ``SELECT 1`` through the global engine."""
    if db_manager.engine is None:
        return {"status": "unhealthy", "error": "DatabaseManager is not initialized"}

    try:
        await DatabaseManager._ping(db_manager.engine)
    except Exception as exc:
        logger.warning("Database health check failed: %s", exc)
        return {"status": "unhealthy", "error": str(exc)}

    return {"status": "healthy", "pool": db_manager.pool_status()}


__all__ = [
    "DatabaseManager",
    "db_manager",
    "engine_options",
    "install_connection_listeners",
    "get_db",
    "init_db",
    "check_db_health",
]
