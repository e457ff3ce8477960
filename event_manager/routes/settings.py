from typing import Any

from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session

from event_manager.core.dependencies import require_organiser
from event_manager.database.db import get_db
from event_manager.schemas.site_settings import SiteSettingsOut
from event_manager.services.site_settings import get_site_settings, update_site_settings

router = APIRouter(prefix="/organiser/settings", tags=["settings"], dependencies=[Depends(require_organiser)])


@router.get("", response_model=SiteSettingsOut)
def read_settings(db: Session = Depends(get_db)):
    return get_site_settings(db)


@router.put("", response_model=SiteSettingsOut)
def write_settings(payload: dict[str, Any] = Body(...), db: Session = Depends(get_db)):
    return update_site_settings(db, payload)
