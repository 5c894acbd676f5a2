"""Database Session Manager — lazily opened async connection pool with rollback and health checks.

Invariants:
    - Constructing the manager performs no I/O; the engine is created by open()
    - open()/ping() failures surface as DatabaseConnectionError (core/errors.py)
    - Every session auto-rolls-back on exception (no partial commits leak)
    - SQLAlchemy exceptions raised inside a session mapped to DatabaseError

Design Decisions:
    - Singleton db_manager registered by init_db: the init gate owns open/close
      (ADR: no global import side effects, cold starts pay for I/O on first request)
    - Driver timeouts (asyncpg timeout/command_timeout) instead of gate timeouts
    - expire_on_commit=False: prevents lazy-load issues in async context
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.exc import (
    IntegrityError, OperationalError, DBAPIError, SQLAlchemyError,
)
from sqlalchemy import text

from app.core.errors import DatabaseConnectionError, DatabaseError

logger = logging.getLogger(__name__)


class DatabaseSessionManager:
    """Owns the async engine: open, probe, close, and per-request sessions."""

    def __init__(
        self,
        database_url: str,
        pool_size: int = 5,
        max_overflow: int = 5,
        connect_timeout: float = 10,
        query_timeout: float = 15,
    ):
        self.database_url = database_url
        self.engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None
        self._engine_options = _engine_options(
            database_url, pool_size, max_overflow, connect_timeout, query_timeout,
        )

    @property
    def is_open(self) -> bool:
        return self.engine is not None

    async def open(self) -> AsyncEngine:
        """Create the engine if needed and check out one connection."""
        try:
            if self.engine is None:
                self.engine = create_async_engine(
                    self.database_url, **self._engine_options,
                )
                self._session_factory = async_sessionmaker(
                    self.engine, class_=AsyncSession, expire_on_commit=False,
                )
            async with self.engine.connect():
                pass
        except (SQLAlchemyError, OSError, asyncio.TimeoutError) as e:
            logger.error(f"DB connect failed: {e}")
            await self.close()
            raise DatabaseConnectionError(_describe(e), "connect") from e
        return self.engine

    async def ping(self) -> None:
        """Liveness probe — SELECT 1 on a pooled connection."""
        if self.engine is None:
            raise DatabaseConnectionError("engine is not open", "probe")
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError, asyncio.TimeoutError) as e:
            logger.error(f"DB probe failed: {e}")
            raise DatabaseConnectionError(_describe(e), "probe") from e

    async def close(self) -> None:
        if self.engine is not None:
            await self.engine.dispose()
        self.engine = None
        self._session_factory = None

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide session with auto-rollback on exception."""
        if self._session_factory is None:
            raise RuntimeError("Database not initialized")
        session = self._session_factory()
        try:
            yield session
        except IntegrityError as e:
            await session.rollback()
            logger.error(f"DB integrity error: {e}")
            raise DatabaseError("Integrity constraint violated", "commit")
        except OperationalError as e:
            await session.rollback()
            logger.error(f"DB operational error: {e}")
            raise DatabaseError("Connection or operational error", "execute")
        except DBAPIError as e:
            await session.rollback()
            logger.error(f"DB driver error: {e}")
            raise DatabaseError("Database driver error", "query")
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"SQLAlchemy error: {e}")
            raise DatabaseError("Database operation failed", "unknown")
        finally:
            await session.close()

    async def health_check(self) -> bool:
        """Check database connectivity (for readiness probes)."""
        try:
            await self.ping()
            return True
        except DatabaseConnectionError:
            return False


def _engine_options(
    database_url: str,
    pool_size: int,
    max_overflow: int,
    connect_timeout: float,
    query_timeout: float,
) -> dict[str, Any]:
    options: dict[str, Any] = {"pool_pre_ping": True, "pool_recycle": 3600}
    if database_url.startswith("sqlite"):
        # SQLite pools (StaticPool / NullPool) reject sizing arguments
        return options
    options["pool_size"] = pool_size
    options["max_overflow"] = max_overflow
    if "+asyncpg" in database_url:
        options["connect_args"] = {
            "timeout": connect_timeout,
            "command_timeout": query_timeout,
        }
    return options


def _describe(exc: BaseException) -> str:
    if isinstance(exc, asyncio.TimeoutError):
        return "timeout"
    return type(exc).__name__


# Singleton (registered by init_db, opened by the init gate)
db_manager: DatabaseSessionManager | None = None


def init_db(database_url: str, **kwargs) -> DatabaseSessionManager:
    global db_manager
    db_manager = DatabaseSessionManager(database_url, **kwargs)
    return db_manager


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for database sessions."""
    if not db_manager:
        raise RuntimeError("Database not initialized")
    async with db_manager.session() as session:
        yield session
