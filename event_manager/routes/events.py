from typing import Any

import redis
from fastapi import APIRouter, Body, Depends, Response
from sqlalchemy.orm import Session

from event_manager.core.dependencies import require_organiser
from event_manager.core.redis_client import get_redis
from event_manager.database.db import get_db
from event_manager.schemas.events import EventOut, OrganiserOverviewOut
from event_manager.services.events import (
    create_draft_event,
    delete_event,
    edit_event,
    get_event,
    organiser_overview,
    publish_event,
)

router = APIRouter(prefix="/organiser", tags=["events"], dependencies=[Depends(require_organiser)])


@router.get("", response_model=OrganiserOverviewOut)
def dashboard(db: Session = Depends(get_db)):
    """Published events with sold counts, then drafts newest first."""
    return OrganiserOverviewOut.model_validate(organiser_overview(db))


@router.post("/events", response_model=EventOut, status_code=201)
def create_event(db: Session = Depends(get_db)):
    return create_draft_event(db)


@router.get("/events/{event_id}", response_model=EventOut)
def read_event(event_id: int, db: Session = Depends(get_db)):
    return get_event(db, event_id)


@router.put("/events/{event_id}", response_model=EventOut)
def update_event(
    event_id: int,
    payload: dict[str, Any] = Body(...),
    db: Session = Depends(get_db),
    redis_client: redis.Redis = Depends(get_redis),
):
    return edit_event(db, redis_client, event_id, payload)


@router.post("/events/{event_id}/publish", response_model=EventOut)
def publish(
    event_id: int,
    db: Session = Depends(get_db),
    redis_client: redis.Redis = Depends(get_redis),
):
    return publish_event(db, redis_client, event_id)


@router.delete("/events/{event_id}", status_code=204)
def remove_event(
    event_id: int,
    db: Session = Depends(get_db),
    redis_client: redis.Redis = Depends(get_redis),
):
    delete_event(db, redis_client, event_id)
    return Response(status_code=204)
