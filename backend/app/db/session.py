"""Async Session Factory — provides async DB sessions for direct usage outside FastAPI.

Invariants:
    - Meant for the admin CLI (app.manage) and test fixtures
    - Caller owns the engine lifetime (dispose when done)

Design Decisions:
    - Separate from infrastructure/database.py: no pooling, no error mapping —
      CLI failures should surface with their original traceback
"""

from sqlalchemy.ext.asyncio import (
    AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker,
)


def create_session_factory(
    database_url: str,
) -> tuple[AsyncEngine, async_sessionmaker[AsyncSession]]:
    """Create an engine and async session factory for the given database URL."""
    engine = create_async_engine(database_url, echo=False)
    factory = async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False,
    )
    return engine, factory
