"""Organiser access gate: one shared password plus per-client login throttling."""

import hmac
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass

import redis
from loguru import logger

from event_manager.core.config import get_login_lockout_seconds, get_login_max_attempts
from event_manager.services.errors import InvalidCredentialsError, LoginLockedError


def verify_password(provided: str | None, expected: str | None) -> bool:
    """Compare passwords in constant time. Empty values never match."""
    if not provided or not expected:
        return False
    return hmac.compare_digest(provided.encode("utf-8"), expected.encode("utf-8"))


@dataclass(frozen=True)
class LockoutStatus:
    locked: bool
    seconds_left: int = 0

    @property
    def minutes_left(self) -> int:
        return max(1, math.ceil(self.seconds_left / 60))


class LoginRateLimiter(ABC):
    """Interface for counting failed logins per client key."""

    @abstractmethod
    def check(self, key: str) -> LockoutStatus:
        """Return whether ``key`` is currently locked out."""
        ...

    @abstractmethod
    def record(self, key: str, success: bool) -> None:
        """Record the outcome of a login attempt for ``key``."""
        ...


class RedisLoginRateLimiter(LoginRateLimiter):
    """
    Failed-attempt counter kept in Redis with key expiry.

    Every failure restarts the window, so a locked client stays locked until
    ``window_seconds`` have passed since its last failed attempt.
    """

    def __init__(
        self,
        redis_client: redis.Redis,
        max_attempts: int | None = None,
        window_seconds: int | None = None,
        prefix: str = "login_attempts",
    ) -> None:
        self._redis = redis_client
        self.max_attempts = max_attempts if max_attempts is not None else get_login_max_attempts()
        self.window_seconds = window_seconds if window_seconds is not None else get_login_lockout_seconds()
        self._prefix = prefix

    def _key(self, key: str) -> str:
        return f"{self._prefix}:{key}"

    def check(self, key: str) -> LockoutStatus:
        count = self._redis.get(self._key(key))
        if count is None or int(count) < self.max_attempts:
            return LockoutStatus(locked=False)
        ttl = self._redis.ttl(self._key(key))
        return LockoutStatus(locked=True, seconds_left=max(int(ttl), 0))

    def record(self, key: str, success: bool) -> None:
        if success:
            self._redis.delete(self._key(key))
            return
        pipe = self._redis.pipeline()
        pipe.incr(self._key(key))
        pipe.expire(self._key(key), self.window_seconds)
        pipe.execute()


def authenticate(limiter: LoginRateLimiter, client_key: str, password: str | None, expected: str) -> None:
    """Raise unless ``password`` is correct and ``client_key`` is not locked out."""
    status = limiter.check(client_key)
    if status.locked:
        logger.warning("Login refused for {}: locked out for {}s", client_key, status.seconds_left)
        raise LoginLockedError(status.minutes_left)

    if not verify_password(password, expected):
        limiter.record(client_key, success=False)
        logger.warning("Failed organiser login from {}", client_key)
        raise InvalidCredentialsError()

    limiter.record(client_key, success=True)
    logger.info("Organiser logged in from {}", client_key)
