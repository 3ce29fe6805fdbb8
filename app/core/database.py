from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from app.shared.models.base import Base
from app.shared.utils.logger import get_logger
from .config import settings

logger = get_logger(__name__)


def _engine_options() -> dict:
    if settings.is_sqlite:
        # aiosqlite connections are bound to the loop that opened them
        return {"poolclass": NullPool}
    return {
        "pool_size": 20,
        "max_overflow": 10,
        "pool_timeout": 30,
        "pool_recycle": 3600,
        "pool_pre_ping": True,
    }


engine = create_async_engine(settings.DATABASE_URL, **_engine_options())

AsyncSessionLocal = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@asynccontextmanager
async def get_db() -> AsyncIterator[AsyncSession]:
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


def _import_models():
    from app.domains.auth import models as _auth  # noqa: F401
    from app.domains.comments import models as _comments  # noqa: F401
    from app.domains.events import models as _events  # noqa: F401
    from app.domains.friends import models as _friends  # noqa: F401
    from app.domains.groups import models as _groups  # noqa: F401
    from app.domains.marketplace import models as _marketplace  # noqa: F401
    from app.domains.messages import models as _messages  # noqa: F401
    from app.domains.notifications import models as _notifications  # noqa: F401
    from app.domains.posts import models as _posts  # noqa: F401
    from app.domains.reactions import models as _reactions  # noqa: F401


async def init_db():
    _import_models()
    if settings.AUTO_CREATE_TABLES:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables ensured")
    else:
        # Outside local/test the schema comes from alembic migrations
        logger.info("Skipping auto table creation")


async def drop_db():
    _import_models()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


async def check_connection() -> bool:
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
            return True
    except Exception as e:
        logger.warning(f"Database check failed: {e}")
        return False
