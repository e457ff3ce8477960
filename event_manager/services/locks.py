from collections.abc import Iterator
from contextlib import contextmanager

import redis
from loguru import logger

from event_manager.core.config import get_event_lock_blocking_timeout, get_event_lock_timeout
from event_manager.services.errors import LedgerBusyError


def event_lock_key(event_id: int) -> str:
    return f"event_lock:{event_id}"


@contextmanager
def event_lock(redis_client: redis.Redis, event_id: int) -> Iterator[None]:
    """
    Hold the Redis lock for one event while its ledger rows are checked and written.
    Only one request per event can be inside this block at a time.
    """
    blocking_timeout = get_event_lock_blocking_timeout()
    lock = redis_client.lock(
        event_lock_key(event_id),
        timeout=get_event_lock_timeout(),
        blocking_timeout=blocking_timeout,
    )

    try:
        acquired = lock.acquire(blocking=True, blocking_timeout=blocking_timeout)
    except redis.exceptions.LockError:
        acquired = False
    if not acquired:
        logger.warning("Timed out waiting for ledger lock of event {}", event_id)
        raise LedgerBusyError()

    try:
        yield
    finally:
        try:
            lock.release()
        except redis.exceptions.LockNotOwnedError:
            # Lock expired while the work was still running
            logger.error("Ledger lock of event {} expired before release", event_id)
