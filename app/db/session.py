# app/db/session.py
import logging
from collections.abc import AsyncGenerator

from sqlalchemy import create_engine as create_sync_engine
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from app.core.config import get_settings
from app.db.base import Base

# Import ORM models so that Base.metadata is aware of them.
from app.models import standup, team, user  # noqa: F401

logger = logging.getLogger(__name__)

settings = get_settings()

IS_TEST = settings.APP_ENV.lower() == "test"

# ---------------------------------------------------------------------------
# Main application engine + session
# ---------------------------------------------------------------------------
engine = create_async_engine(
    settings.DB_URL,
    echo=False,
    # Tests drive the app from several event loops (TestClient + pytest-asyncio),
    # so connections must never be reused across loops.
    poolclass=NullPool if IS_TEST else None,
)

AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    autoflush=False,
    expire_on_commit=False,
    class_=AsyncSession,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides an async SQLAlchemy session.

    The session is automatically closed when the request is completed.
    """
    async with AsyncSessionLocal() as session:
        yield session


# ---------------------------------------------------------------------------
# PRODUCTION / DEV: DB init for app startup
# ---------------------------------------------------------------------------
async def init_db_for_startup() -> None:
    """
    Initialize DB schema and sample data for application startup.

    Creates missing tables (existing ones are left untouched) and, when
    SEED_SAMPLE_DATA is enabled, inserts the sample team and users.
    """
    from app.db.seed import seed_sample_data

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    if get_settings().SEED_SAMPLE_DATA:
        async with AsyncSessionLocal() as session:
            await seed_sample_data(session)

    logger.info("Database initialised (%s)", engine.url.render_as_string(hide_password=True))


# ---------------------------------------------------------------------------
# TESTS ONLY: reset schema using a SYNC engine
# ---------------------------------------------------------------------------

def _build_sync_db_url(async_url: str) -> str:
    """
    Convert an async driver URL into its synchronous equivalent:

    - 'postgresql+asyncpg://...'  -> 'postgresql+psycopg://...' (psycopg 3)
    - 'sqlite+aiosqlite:///...'   -> 'sqlite:///...'
    """
    for async_driver, sync_driver in (("+asyncpg", "+psycopg"), ("+aiosqlite", "")):
        if async_driver in async_url:
            return async_url.replace(async_driver, sync_driver)
    return async_url


def reset_schema_sync() -> None:
    """
    TEST-ONLY: drop and recreate every table using a synchronous engine.

    Running DDL through a sync engine keeps schema resets independent of
    whichever event loop the test happens to be on.
    """
    sync_url = _build_sync_db_url(settings.DB_URL)
    sync_engine = create_sync_engine(sync_url)

    with sync_engine.begin() as conn:
        Base.metadata.drop_all(bind=conn)
        Base.metadata.create_all(bind=conn)

    sync_engine.dispose()
