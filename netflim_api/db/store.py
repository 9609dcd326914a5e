import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from netflim_api.db.tables import Base

logger = logging.getLogger(__name__)


def _on_connect(dbapi_connection, connection_record) -> None:
    # take transaction control away from the driver, see _on_begin
    dbapi_connection.isolation_level = None
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _on_begin(conn) -> None:
    # IMMEDIATE: the write lock is taken up front, so two writers queue on
    # the busy timeout instead of deadlocking on a shared->reserved upgrade
    conn.exec_driver_sql("BEGIN IMMEDIATE")


class Database:
    """SQLite store: owns the engine and hands out sessions.

    One instance per process, created at startup and closed at shutdown.
    """

    def __init__(self, path: str, echo: bool = False,
                 busy_timeout: float = 5.0) -> None:
        self.path = path
        self.echo = echo
        self.busy_timeout = busy_timeout
        self._engine: AsyncEngine | None = None
        self._sessionmaker: async_sessionmaker[AsyncSession] | None = None

    @property
    def url(self) -> str:
        return f"sqlite+aiosqlite:///{self.path}"

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise RuntimeError("database_not_connected")
        return self._engine

    async def connect(self) -> None:
        if self._engine is not None:
            return
        Path(self.path).parent.mkdir(parents=True, exist_ok=True)
        engine = create_async_engine(
            self.url,
            echo=self.echo,
            connect_args={"timeout": self.busy_timeout},
        )
        event.listen(engine.sync_engine, "connect", _on_connect)
        event.listen(engine.sync_engine, "begin", _on_begin)

        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

        self._engine = engine
        self._sessionmaker = async_sessionmaker(engine,
                                                expire_on_commit=False)
        logger.info("database_connected", extra={"db_path": self.path})

    async def close(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._sessionmaker = None
            logger.info("database_closed", extra={"db_path": self.path})

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        if self._sessionmaker is None:
            raise RuntimeError("database_not_connected")
        async with self._sessionmaker() as session:
            yield session
