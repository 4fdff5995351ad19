"""
Daily AI generation counters per user and category.
Redis when REDIS_URL is set and reachable, in-process memory otherwise.
"""

import logging
from datetime import date
from threading import Lock
from typing import Optional

import redis

from ... import config

logger = logging.getLogger(__name__)

# Counters expire a day after the date in their key
COUNTER_TTL_SECONDS = 2 * 24 * 3600

redis_client: Optional[redis.Redis] = None
redis_unavailable = False

# Format: {key: count}
memory_counters: dict[str, int] = {}
counters_lock = Lock()


def get_redis_client() -> Optional[redis.Redis]:
    """Get or create the Redis client; None when Redis is not configured or down"""
    global redis_client, redis_unavailable

    if redis_client is not None or redis_unavailable:
        return redis_client
    if not config.REDIS_URL:
        redis_unavailable = True
        logger.info("📡 REDIS_URL not set - AI usage counters kept in memory")
        return None

    try:
        client = redis.from_url(
            config.REDIS_URL,
            decode_responses=True,
            socket_connect_timeout=5,
            socket_timeout=5,
        )
        client.ping()
        redis_client = client
        logger.info("Redis connected successfully for AI usage counters")
    except Exception as e:
        redis_unavailable = True
        logger.error(f"❌ Failed to connect to Redis: {str(e)}")
        logger.warning("⚠️ AI usage counters fall back to in-memory storage")
    return redis_client


def usage_key(user_id: int, category: str, day: Optional[date] = None) -> str:
    day = day or date.today()
    return f"beautyflow_usage_{user_id}_{category}_{day.isoformat()}"


def cleanup_expired_counters(today: Optional[date] = None):
    """Remove memory counters for days before today"""
    cutoff = (today or date.today()).isoformat()

    with counters_lock:
        expired_keys = [k for k in memory_counters if k.rsplit("_", 1)[-1] < cutoff]
        for k in expired_keys:
            del memory_counters[k]

        if expired_keys:
            logger.debug(f"🧹 Cleaned up {len(expired_keys)} expired AI usage counters")


class UsageLimiter:
    """Counts generations per (user, category, day) against a daily limit"""

    def __init__(self, limit: Optional[int] = None, client: Optional[redis.Redis] = None, use_redis: bool = True):
        self.limit = config.AI_DAILY_LIMIT if limit is None else limit
        self.client = client if client is not None else (get_redis_client() if use_redis else None)

    def get_usage(self, user_id: int, category: str, day: Optional[date] = None) -> int:
        key = usage_key(user_id, category, day)
        if self.client is not None:
            try:
                return int(self.client.get(key) or 0)
            except redis.RedisError as e:
                logger.warning(f"⚠️ Redis read failed for {key}, using memory: {e}")
        with counters_lock:
            return memory_counters.get(key, 0)

    def try_consume(self, user_id: int, category: str, day: Optional[date] = None) -> bool:
        """Record one generation. False (nothing recorded) when the limit is reached."""
        key = usage_key(user_id, category, day)
        if self.client is not None:
            try:
                count = self.client.incr(key)
                if count == 1:
                    self.client.expire(key, COUNTER_TTL_SECONDS)
                if count > self.limit:
                    self.client.decr(key)
                    return False
                return True
            except redis.RedisError as e:
                logger.warning(f"⚠️ Redis write failed for {key}, using memory: {e}")
        cleanup_expired_counters(day)
        with counters_lock:
            count = memory_counters.get(key, 0)
            if count >= self.limit:
                return False
            memory_counters[key] = count + 1
            return True

    def remaining(self, user_id: int, category: str, day: Optional[date] = None) -> int:
        return max(self.limit - self.get_usage(user_id, category, day), 0)
