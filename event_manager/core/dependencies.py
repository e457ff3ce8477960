import redis
from fastapi import Depends, HTTPException, Request, status

from event_manager.core.redis_client import get_redis
from event_manager.services.auth import LoginRateLimiter, RedisLoginRateLimiter

SESSION_AUTH_KEY = "is_authenticated"


def client_key(request: Request) -> str:
    return request.client.host if request.client else "unknown"


def get_login_rate_limiter(redis_client: redis.Redis = Depends(get_redis)) -> LoginRateLimiter:
    return RedisLoginRateLimiter(redis_client)


def require_organiser(request: Request) -> None:
    if not request.session.get(SESSION_AUTH_KEY):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Organiser login required")
