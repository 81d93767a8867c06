"""
Async SQLAlchemy engine and session management.
One engine per process, one session per unit of work.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import structlog
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import StaticPool

logger = structlog.get_logger(__name__)

Base = declarative_base()


class DatabaseManager:
    """
    Owns the async engine and the session factory.

    The engine is created lazily on first use and disposed by ``close``.
    """

    def __init__(self, database_url: str, echo: bool = False):
        """
        Initialize the database manager.

        Args:
            database_url: SQLAlchemy async database URL
            echo: Log every SQL statement
        """
        self.database_url = database_url
        self.echo = echo
        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker] = None

    @property
    def engine(self) -> AsyncEngine:
        """Get or create the async engine."""
        if self._engine is None:
            if self.database_url.startswith("sqlite"):
                engine_options = {"connect_args": {"check_same_thread": False}}
                if ":memory:" in self.database_url or self.database_url.endswith("://"):
                    # An in-memory database lives only as long as its single connection
                    engine_options["poolclass"] = StaticPool
                self._engine = create_async_engine(
                    self.database_url, echo=self.echo, **engine_options
                )
            else:
                self._engine = create_async_engine(
                    self.database_url,
                    echo=self.echo,
                    pool_size=10,
                    max_overflow=20,
                    pool_pre_ping=True,
                )
            logger.info("Database engine created", url=self._engine.url.render_as_string(hide_password=True))
        return self._engine

    @property
    def session_factory(self) -> async_sessionmaker:
        """Get or create the session factory."""
        if self._session_factory is None:
            self._session_factory = async_sessionmaker(
                bind=self.engine,
                class_=AsyncSession,
                autoflush=False,
                expire_on_commit=False,
            )
        return self._session_factory

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """
        Provide a session that is closed on exit.

        Commit and rollback are left to the caller; uncommitted work is
        rolled back when the session closes.
        """
        async with self.session_factory() as session:
            yield session

    async def init_database(self, drop_existing: bool = False) -> None:
        """
        Create all tables registered on ``Base``.

        Args:
            drop_existing: Drop every table first
        """
        # Table modules must be imported so their metadata is registered
        import accounts.schema  # noqa: F401
        import catalog.schema  # noqa: F401

        async with self.engine.begin() as conn:
            if drop_existing:
                logger.warning("Dropping all existing tables")
                await conn.run_sync(Base.metadata.drop_all)
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database schema ready")

    async def verify_connection(self) -> bool:
        """
        Verify the database connection is working.

        Returns:
            True if a trivial query succeeds, False otherwise
        """
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error("Database connection check failed", error=str(e))
            return False

    async def close(self) -> None:
        """Dispose the engine and forget the session factory."""
        if self._engine is not None:
            await self._engine.dispose()
            logger.info("Database engine disposed")
        self._engine = None
        self._session_factory = None
