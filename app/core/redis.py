from typing import Iterable

from redis.asyncio import Redis

from app.shared.utils.logger import get_logger
from .config import settings

logger = get_logger(__name__)

ONLINE_USERS_KEY = "presence:online"


class RedisManager:
    _instance = None

    @classmethod
    def get_client(cls) -> Redis:
        if cls._instance is None:
            cls._instance = Redis.from_url(
                settings.REDIS_URL,
                decode_responses=True,
                socket_connect_timeout=2,
            )
        return cls._instance


async def check_connection() -> bool:
    try:
        client = RedisManager.get_client()
        await client.ping()
        return True
    except Exception:
        return False


async def publish_presence(online_user_ids: Iterable[str]):
    """Mirror the online-user set so other workers and jobs can read it."""
    if not settings.REDIS_PRESENCE_ENABLED:
        return
    client = RedisManager.get_client()
    try:
        ids = list(online_user_ids)
        async with client.pipeline(transaction=True) as pipe:
            pipe.delete(ONLINE_USERS_KEY)
            if ids:
                pipe.sadd(ONLINE_USERS_KEY, *ids)
            await pipe.execute()
    except Exception as e:
        logger.warning(f"Presence mirror failed: {e}")
