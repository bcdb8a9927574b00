import redis.asyncio as redis
import logging
from typing import Optional

from home_energy.core.config import settings

logger = logging.getLogger(__name__)

# Global Redis client
redis_client: Optional[redis.Redis] = None


async def init_redis() -> None:
    """Initialize Redis connection"""
    global redis_client

    try:
        redis_client = redis.from_url(
            settings.REDIS_URL,
            password=settings.REDIS_PASSWORD,
            db=settings.REDIS_DB,
            decode_responses=True,
            socket_connect_timeout=5,
            socket_timeout=5,
            retry_on_timeout=True,
            health_check_interval=30
        )
        await redis_client.ping()
        logger.info("Redis connection established successfully")
    except redis.RedisError as e:
        logger.error(f"Failed to connect to Redis: {e}")
        raise


async def get_redis() -> redis.Redis:
    """Get Redis client instance"""
    if redis_client is None:
        raise RuntimeError("Redis client not initialized")
    return redis_client


async def close_redis() -> None:
    """Close Redis connection"""
    global redis_client
    if redis_client:
        await redis_client.aclose()
        redis_client = None
        logger.info("Redis connection closed")


class TokenRevocationStore:
    """Per-user token revocation markers.

    Logout writes a marker that outlives any token issued before it; a
    successful login clears it. Redis outages degrade to "not revoked" so
    device control keeps working.
    """

    def __init__(self):
        self.client = None

    async def get_client(self) -> redis.Redis:
        if not self.client:
            self.client = await get_redis()
        return self.client

    @staticmethod
    def _key(user_id: str) -> str:
        return f"blacklist:token:{user_id}"

    async def revoke(self, user_id: str) -> bool:
        try:
            client = await self.get_client()
            return bool(await client.set(self._key(user_id), "revoked", ex=settings.TOKEN_REVOCATION_TTL_SECONDS))
        except (redis.RedisError, RuntimeError) as e:
            logger.error(f"Token revocation failed for user {user_id}: {e}")
            return False

    async def clear(self, user_id: str) -> bool:
        try:
            client = await self.get_client()
            return bool(await client.delete(self._key(user_id)))
        except (redis.RedisError, RuntimeError) as e:
            logger.error(f"Failed to clear token revocation for user {user_id}: {e}")
            return False

    async def is_revoked(self, user_id: str) -> bool:
        try:
            client = await self.get_client()
            return bool(await client.exists(self._key(user_id)))
        except (redis.RedisError, RuntimeError) as e:
            logger.error(f"Token revocation lookup failed for user {user_id}: {e}")
            return False


# Global service instance
token_store = TokenRevocationStore()
