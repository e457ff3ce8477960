from fastapi import APIRouter, Depends, Request

from event_manager.core.config import get_organiser_password
from event_manager.core.dependencies import (
    SESSION_AUTH_KEY,
    client_key,
    get_login_rate_limiter,
    require_organiser,
)
from event_manager.schemas.auth import LoginRequest, SessionOut
from event_manager.services.auth import LoginRateLimiter, authenticate

router = APIRouter(prefix="/organiser", tags=["auth"])


@router.post("/login", response_model=SessionOut)
def login(
    payload: LoginRequest,
    request: Request,
    limiter: LoginRateLimiter = Depends(get_login_rate_limiter),
):
    authenticate(limiter, client_key(request), payload.password, get_organiser_password())
    request.session[SESSION_AUTH_KEY] = True
    return SessionOut(authenticated=True)


@router.post("/logout", response_model=SessionOut, dependencies=[Depends(require_organiser)])
def logout(request: Request):
    request.session.clear()
    return SessionOut(authenticated=False)


@router.get("/session", response_model=SessionOut)
def session_status(request: Request):
    return SessionOut(authenticated=bool(request.session.get(SESSION_AUTH_KEY)))
