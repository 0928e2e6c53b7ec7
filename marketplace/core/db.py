from collections.abc import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from marketplace.core.config import settings

engine = create_async_engine(settings.database_url, future=True, pool_pre_ping=True)

# Rows returned by storage are serialized after commit, keep them loaded.
SessionLocal = async_sessionmaker(bind=engine, expire_on_commit=False, class_=AsyncSession)


async def get_db() -> AsyncIterator[AsyncSession]:
    """
    One session per request. Uncommitted work is rolled back on close.
    """
    async with SessionLocal() as session:
        yield session
