import redis
from typing import Optional
from ..config import settings
from ..application.ports import ILayoutInvalidator

_redis_client: Optional[redis.Redis] = None

def get_redis() -> redis.Redis:
    global _redis_client
    if _redis_client is None:
        _redis_client = redis.from_url(
            settings.REDIS_URL,
            decode_responses=True,
            socket_connect_timeout=5,
            socket_timeout=5,
            retry_on_timeout=True
        )
    return _redis_client

def delete_cache_pattern(pattern: str) -> int:
    """Удалить все ключи по паттерну"""
    try:
        client = get_redis()
        keys = client.keys(pattern)
        if keys:
            return client.delete(*keys)
        return 0
    except redis.RedisError:
        # Если Redis недоступен, просто игнорируем
        return 0


class CacheLayoutInvalidator(ILayoutInvalidator):
    """Drops the cached page layouts so the next render sees the new session."""

    def __init__(self, pattern: str = settings.LAYOUT_CACHE_PATTERN):
        self.pattern = pattern

    def invalidate_layout(self) -> None:
        delete_cache_pattern(self.pattern)
