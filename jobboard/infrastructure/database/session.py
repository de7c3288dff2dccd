"""Process-wide database connection lifecycle.

Every action in the gateway needs the database, and many of them run
concurrently on one event loop. Opening a connection is the expensive, slow
part (a network handshake), so the process keeps exactly one connection handle
and shares it between all operations for the life of the process.

``ConnectionManager`` owns that handle and moves it through four states:

- **UNINITIALIZED**: nothing has asked for a connection yet
- **CONNECTING**: one connection attempt is in flight
- **ESTABLISHED**: the handshake succeeded; the engine is handed out without I/O
- **FAILED**: the last attempt failed; the next ``acquire()`` starts a fresh one

Concurrent callers that arrive while an attempt is in flight await that same
attempt instead of starting their own, so at most one physical connection
attempt exists at any time. A failed attempt is reported to every caller that
was waiting on it.

The endpoint is read from configuration when the first attempt starts. A
missing endpoint raises ``ConfigurationError`` before any I/O.

Teardown is driven by the process lifecycle (``close_database`` from the
application lifespan), never by individual requests.
"""

import asyncio
import time
from collections.abc import AsyncGenerator, Callable
from contextlib import asynccontextmanager
from enum import Enum
from typing import Any
from weakref import WeakKeyDictionary

from loguru import logger
from sqlalchemy import event, text
from sqlalchemy.engine import Connection
from sqlalchemy.engine.interfaces import DBAPICursor, ExecutionContext
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from jobboard.core.config import get_settings
from jobboard.core.context import current_correlation_id
from jobboard.core.error_context import sanitize_sql_params
from jobboard.core.exceptions import ConfigurationError, DatabaseConnectionError
from jobboard.infrastructure.database.models import create_all_tables

POOL_RECYCLE_SECONDS = 3600  # 1 hour
COMMAND_TIMEOUT_SECONDS = 60
MAX_LOGGED_STATEMENT_LENGTH = 500

_query_start_times: WeakKeyDictionary[ExecutionContext, float] = WeakKeyDictionary()


class ConnectionState(Enum):
    """Liveness of the shared connection handle."""

    UNINITIALIZED = "uninitialized"
    CONNECTING = "connecting"
    ESTABLISHED = "established"
    FAILED = "failed"


def _before_cursor_execute(
    _conn: Connection,
    _cursor: DBAPICursor,
    _statement: str,
    _parameters: object,
    context: ExecutionContext,
    _executemany: bool,
) -> None:
    """Record when a statement started executing."""
    _query_start_times[context] = time.perf_counter()


def _after_cursor_execute(
    _conn: Connection,
    cursor: DBAPICursor,
    statement: str,
    parameters: object,
    context: ExecutionContext,
    executemany: bool,
) -> None:
    """Log statements slower than the configured threshold."""
    start_time = _query_start_times.pop(context, None)
    if start_time is None:
        return

    duration_ms = round((time.perf_counter() - start_time) * 1000, 2)
    threshold_ms = get_settings().log_config.slow_query_threshold_ms
    if duration_ms < threshold_ms:
        return

    clean_statement = " ".join(statement.split())[:MAX_LOGGED_STATEMENT_LENGTH]
    logger.warning(
        "Slow query detected: {}... Duration: {}ms",
        clean_statement[:100],
        duration_ms,
        query=clean_statement,
        duration_ms=duration_ms,
        rows_affected=getattr(cursor, "rowcount", -1),
        parameters=sanitize_sql_params(parameters),
        correlation_id=current_correlation_id(),
        executemany=executemany,
        threshold_ms=threshold_ms,
    )


def create_database_engine(database_url: str) -> AsyncEngine:
    """Create an async SQLAlchemy engine for the given endpoint.

    Creating the engine performs no I/O; the first connection is opened by
    the handshake in ``ConnectionManager``.

    Args:
        database_url: Async driver URL of the database endpoint.

    Returns:
        AsyncEngine: Configured async engine instance.
    """
    settings = get_settings()
    db_config = settings.database_config

    options: dict[str, Any] = {
        "echo": db_config.echo,
        "pool_pre_ping": db_config.pool_pre_ping,
    }
    if database_url.startswith("postgresql+asyncpg://"):
        options.update(
            pool_size=db_config.pool_size,
            max_overflow=db_config.max_overflow,
            pool_timeout=db_config.pool_timeout,
            pool_recycle=POOL_RECYCLE_SECONDS,
            connect_args={"command_timeout": COMMAND_TIMEOUT_SECONDS},
        )

    engine = create_async_engine(database_url, **options)

    if settings.log_config.enable_sql_logging:
        # Cursor events only exist on the sync engine
        sync_engine = engine.sync_engine
        event.listen(sync_engine, "before_cursor_execute", _before_cursor_execute)
        event.listen(sync_engine, "after_cursor_execute", _after_cursor_execute)
        logger.info("Registered slow query event listeners")

    logger.info(
        "Created database engine - dialect: {}, pool_size: {}",
        engine.dialect.name,
        options.get("pool_size", "default"),
    )

    return engine


class ConnectionManager:
    """Owns the single shared database connection for the process.

    Args:
        database_url: Endpoint to connect to. Read from settings on the first
            acquisition when not given.
        engine_factory: Builds the engine for an endpoint. Must not perform I/O.
        create_tables: Create missing tables after the handshake. Read from
            settings when not given.
    """

    def __init__(
        self,
        database_url: str | None = None,
        engine_factory: Callable[[str], AsyncEngine] = create_database_engine,
        *,
        create_tables: bool | None = None,
    ) -> None:
        self._database_url = database_url
        self._engine_factory = engine_factory
        self._create_tables = create_tables
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None
        self._attempt: asyncio.Future[AsyncEngine] | None = None
        self._state = ConnectionState.UNINITIALIZED
        self._connection_attempts = 0

    @property
    def state(self) -> ConnectionState:
        """Current liveness state of the connection handle."""
        return self._state

    @property
    def connection_attempts(self) -> int:
        """Number of physical connection attempts started so far."""
        return self._connection_attempts

    @property
    def attempt_in_flight(self) -> bool:
        """Whether a connection attempt is currently pending."""
        return self._attempt is not None

    def _resolve_database_url(self) -> str:
        database_url = self._database_url or get_settings().database_config.database_url
        if not database_url:
            msg = (
                "Database endpoint is not configured; set "
                "DATABASE_CONFIG__DATABASE_URL in the environment or .env file"
            )
            raise ConfigurationError(msg, context={"setting": "database_url"})
        return database_url

    def _should_create_tables(self) -> bool:
        if self._create_tables is not None:
            return self._create_tables
        return get_settings().database_config.create_tables

    async def acquire(self) -> AsyncEngine:
        """Return the shared engine, connecting on first use.

        Safe to call from any number of concurrent tasks: only the first
        caller starts a connection attempt, the others await it.

        Returns:
            AsyncEngine: The established engine.

        Raises:
            ConfigurationError: If no endpoint is configured.
            DatabaseConnectionError: If the shared connection attempt failed.
        """
        if self._state is ConnectionState.ESTABLISHED and self._engine is not None:
            return self._engine

        if self._attempt is None:
            database_url = self._resolve_database_url()
            self._state = ConnectionState.CONNECTING
            self._connection_attempts += 1
            self._attempt = asyncio.ensure_future(self._connect(database_url))
        else:
            logger.debug("Awaiting in-flight database connection attempt")

        # One waiter being cancelled must not cancel the attempt for the others
        return await asyncio.shield(self._attempt)

    async def _connect(self, database_url: str) -> AsyncEngine:
        engine: AsyncEngine | None = None
        try:
            # Malformed URLs and missing drivers surface from the factory
            engine = self._engine_factory(database_url)
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            if self._should_create_tables():
                await create_all_tables(engine)
        except asyncio.CancelledError:
            await self._abandon_attempt(engine, ConnectionState.UNINITIALIZED)
            raise
        except Exception as e:  # noqa: BLE001 - every failure ends the attempt
            await self._abandon_attempt(engine, ConnectionState.FAILED)
            logger.error(
                "Database connection failed: {}: {}",
                type(e).__name__,
                e,
                attempt=self._connection_attempts,
            )
            msg = "Could not establish the database connection"
            raise DatabaseConnectionError(
                msg,
                context={"driver": database_url.partition("://")[0]},
                cause=e,
            ) from e

        self._engine = engine
        self._session_factory = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        self._state = ConnectionState.ESTABLISHED
        self._attempt = None
        logger.info("New database connection successful")
        return engine

    async def _abandon_attempt(
        self, engine: AsyncEngine | None, state: ConnectionState
    ) -> None:
        """Clear the in-flight marker so the next ``acquire()`` retries."""
        self._state = state
        self._attempt = None
        if engine is not None:
            await engine.dispose()

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession]:
        """Open a session on the shared connection.

        The session is committed when the block exits normally and rolled
        back when it raises.

        Yields:
            AsyncSession: Session bound to the shared engine.
        """
        await self.acquire()
        if self._session_factory is None:
            msg = "Connection was closed while a session was being opened"
            raise DatabaseConnectionError(msg)

        async with self._session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                logger.debug("Database session rolled back due to error")
                raise

    async def close(self) -> None:
        """Dispose the shared engine and forget the connection."""
        if self._attempt is not None:
            self._attempt.cancel()
            self._attempt = None
        if self._engine is not None:
            await self._engine.dispose()
            logger.info("Database engine disposed")
        self.reset()

    def reset(self) -> None:
        """Forget all state without disposing anything. Used by tests."""
        self._engine = None
        self._session_factory = None
        self._attempt = None
        self._state = ConnectionState.UNINITIALIZED
        self._connection_attempts = 0


_connection_manager = ConnectionManager()


def get_connection_manager() -> ConnectionManager:
    """Get the process-wide connection manager."""
    return _connection_manager


async def close_database() -> None:
    """Close the shared connection during application shutdown."""
    await _connection_manager.close()


async def check_database_connection() -> tuple[bool, str | None]:
    """Check that the shared connection can run a trivial query.

    Returns:
        tuple[bool, str | None]: Success flag and the failure reason, if any.
    """
    try:
        engine = await _connection_manager.acquire()
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except (ConfigurationError, DatabaseConnectionError, SQLAlchemyError) as e:
        return False, str(e)
    else:
        return True, None
