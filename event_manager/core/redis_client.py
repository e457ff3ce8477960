from collections.abc import Iterator
from functools import lru_cache

import redis

from event_manager.core.config import get_redis_url


@lru_cache(maxsize=1)
def get_redis_client() -> redis.Redis:
    """Get the shared Redis client used for ledger locks and login throttling."""
    return redis.from_url(get_redis_url(), decode_responses=True)


def get_redis() -> Iterator[redis.Redis]:
    yield get_redis_client()
