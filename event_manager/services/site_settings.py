from collections.abc import Mapping
from typing import Any

import pydantic
from loguru import logger
from sqlalchemy import select
from sqlalchemy.orm import Session

from event_manager.database.db import transaction
from event_manager.models.site_settings import DEFAULT_SITE_DESCRIPTION, DEFAULT_SITE_NAME, SiteSettings
from event_manager.schemas.site_settings import SiteSettingsUpdate
from event_manager.services.errors import ValidationError
from event_manager.services.events import first_error_message


def get_site_settings(db: Session) -> SiteSettings:
    settings = db.scalar(select(SiteSettings).order_by(SiteSettings.id).limit(1))
    if settings is None:
        return SiteSettings(site_name=DEFAULT_SITE_NAME, site_description=DEFAULT_SITE_DESCRIPTION)
    return settings


def update_site_settings(db: Session, data: Mapping[str, Any]) -> SiteSettings:
    try:
        fields = SiteSettingsUpdate.model_validate(dict(data))
    except pydantic.ValidationError as exc:
        raise ValidationError(first_error_message(exc)) from exc

    with transaction(db):
        settings = db.scalar(select(SiteSettings).order_by(SiteSettings.id).limit(1).with_for_update())
        if settings is None:
            settings = SiteSettings()
            db.add(settings)
        settings.site_name = fields.site_name
        settings.site_description = fields.site_description

    db.refresh(settings)
    logger.info("Site settings updated")
    return settings
