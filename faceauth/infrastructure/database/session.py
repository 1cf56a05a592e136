"""Database engine and session management."""
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine
)

from faceauth.core.exceptions import IdentityStoreError
from faceauth.core.logging import get_logger
from faceauth.infrastructure.database.models import Base

logger = get_logger(__name__)


class Database:
    """Owns the async engine and session factory for one database URL."""

    def __init__(self, url: str, echo: bool = False) -> None:
        """Initialize the engine.

        Args:
            url: SQLAlchemy async connection URL
            echo: Log emitted SQL statements
        """
        self.url = url
        self.engine = create_async_engine(url, echo=echo)
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False
        )

    async def create_all(self) -> None:
        """Create missing tables."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database schema ready", url=self.engine.url.render_as_string(hide_password=True))

    async def dispose(self) -> None:
        """Close every pooled connection."""
        await self.engine.dispose()

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Get database session.

        Yields:
            AsyncSession: Database session

        Raises:
            IdentityStoreError: If a database operation fails

        Example:
            ```python
            async with database.session() as session:
                await session.execute(query)
                await session.commit()
            ```
        """
        session = self.session_factory()
        logger.debug("Creating new database session")
        try:
            yield session
        except SQLAlchemyError as e:
            logger.error(
                "Database operation failed",
                error=str(e),
                exc_info=True
            )
            await session.rollback()
            raise IdentityStoreError("Identity store operation failed", details={"error": str(e)}) from e
        except Exception as e:
            logger.error(
                "Database session error",
                error=str(e),
                exc_info=True
            )
            await session.rollback()
            raise
        finally:
            logger.debug("Closing database session")
            await session.close()
