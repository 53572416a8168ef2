"""
Database session configuration for the CRM store.

One async engine per process, built from ``settings.database_url``. Each
request gets its own ``AsyncSession`` through ``get_db``; services commit
explicitly, and objects stay usable after commit (``expire_on_commit=False``)
so handlers can serialize them without a reload.
"""

from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base
from crm_backend.app.core.config import settings

# Create async engine
engine = create_async_engine(
    settings.database_url,
    echo=settings.db_echo,
    pool_size=settings.db_pool_size,
    max_overflow=settings.db_max_overflow,
    future=True,
)

# Create async session factory
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)

# Create declarative base for models
Base = declarative_base()


async def get_db():
    """
    FastAPI dependency: one session per request.

    Anything a service flushed but did not commit (a failed expression
    create, a rejected insert) is rolled back when the session closes.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()
