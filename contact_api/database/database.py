import asyncio
from collections.abc import Awaitable, Callable
from datetime import datetime, timezone
from typing import Any, TypeVar

from sqlalchemy import DateTime, TypeDecorator, exc, text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.sql.functions import FunctionElement

from .errors import ConnectivityError, QueryError, StoreError, UnknownStoreError
from ..logger import get_logger, setup_sql_logging


T = TypeVar("T")

logger = get_logger(__name__)


class Base(DeclarativeBase):
    pass


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Any) -> datetime | None:
        if value is None:
            return None
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value

    def process_result_value(self, value: datetime | None, dialect: Any) -> datetime | None:
        if value is None:
            return None
        if value.tzinfo is not None:
            return value.astimezone(timezone.utc)
        return value.replace(tzinfo=timezone.utc)


class days_ago(FunctionElement[datetime]):  # noqa: N801
    """The store's current time minus a number of days."""

    type = UTCDateTime()
    inherit_cache = True
    name = "days_ago"


@compiles(days_ago)
def _days_ago_default(element: days_ago, compiler: Any, **kw: Any) -> str:
    return f"CURRENT_TIMESTAMP - ({compiler.process(element.clauses, **kw)}) * INTERVAL '1 day'"


@compiles(days_ago, "postgresql")
def _days_ago_postgresql(element: days_ago, compiler: Any, **kw: Any) -> str:
    return f"now() - make_interval(days => {compiler.process(element.clauses, **kw)})"


@compiles(days_ago, "mysql")
def _days_ago_mysql(element: days_ago, compiler: Any, **kw: Any) -> str:
    return f"DATE_SUB(NOW(), INTERVAL {compiler.process(element.clauses, **kw)} DAY)"


@compiles(days_ago, "mssql")
def _days_ago_mssql(element: days_ago, compiler: Any, **kw: Any) -> str:
    return f"DATEADD(day, -({compiler.process(element.clauses, **kw)}), GETDATE())"


@compiles(days_ago, "sqlite")
def _days_ago_sqlite(element: days_ago, compiler: Any, **kw: Any) -> str:
    return f"datetime('now', '-' || ({compiler.process(element.clauses, **kw)}) || ' days')"


def classify_error(error: Exception) -> StoreError:
    """Map a driver or SQLAlchemy exception to the store error taxonomy."""

    if isinstance(error, exc.DBAPIError):
        if error.connection_invalidated or isinstance(error, (exc.OperationalError, exc.InterfaceError)):
            return ConnectivityError(type(error).__name__)
        if isinstance(error, (exc.ProgrammingError, exc.DataError, exc.IntegrityError)):
            return QueryError(type(error).__name__)
        return UnknownStoreError(type(error).__name__)
    if isinstance(error, (exc.TimeoutError, exc.DisconnectionError, OSError)):
        return ConnectivityError(type(error).__name__)
    if isinstance(error, (exc.StatementError, exc.CompileError)):
        return QueryError(type(error).__name__)
    return UnknownStoreError(type(error).__name__)


class DB:
    """
    Owner of the connection pool of the message store.

    Every call to `run` borrows one connection for a single session and transaction and returns it afterwards.
    The pool has to be opened with `connect` before the first request and drained with `close` on shutdown.

    SQLAlchemy pools have no idle timeout. `pool_recycle` replaces a connection at checkout once it is older than
    that many seconds, whether it was idle or not, and `pool_pre_ping` drops connections the server has closed.
    """

    def __init__(
        self,
        url: str,
        *,
        pool_size: int = 10,
        pool_recycle: int = 30,
        pool_timeout: int = 30,
        query_timeout: float = 30,
        echo: bool = False,
    ) -> None:
        options: dict[str, Any] = {}
        if not url.startswith("sqlite"):
            options = {
                "pool_size": pool_size,
                "max_overflow": 0,
                "pool_recycle": pool_recycle,
                "pool_timeout": pool_timeout,
                "pool_pre_ping": True,
            }
        if echo:
            setup_sql_logging()

        self.url = url
        self.query_timeout = query_timeout
        self.engine = create_async_engine(url, **options)
        self._sessionmaker = async_sessionmaker(self.engine, expire_on_commit=False)

    async def _run(self, operation: Callable[[AsyncSession], Awaitable[T]]) -> T:
        async with self._sessionmaker() as session, session.begin():
            return await operation(session)

    async def run(self, operation: Callable[[AsyncSession], Awaitable[T]]) -> T:
        try:
            return await asyncio.wait_for(self._run(operation), self.query_timeout)
        except StoreError:
            raise
        except Exception as e:
            raise classify_error(e) from e

    async def connect(self) -> None:
        async def ping(session: AsyncSession) -> None:
            await session.execute(text("SELECT 1"))

        await self.run(ping)
        logger.info("Connected to database", dialect=self.engine.dialect.name, database=self.engine.url.database)

    async def create_tables(self) -> None:
        from .. import models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def close(self) -> None:
        await self.engine.dispose()
        logger.info("Database connection pool closed")
