from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from event_manager.database.db import Base

DEFAULT_SITE_NAME = "Event Manager"
DEFAULT_SITE_DESCRIPTION = "Book your events"


class SiteSettings(Base):
    __tablename__ = "site_settings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    site_name: Mapped[str] = mapped_column(String(100), nullable=False, default=DEFAULT_SITE_NAME)
    site_description: Mapped[str] = mapped_column(String(500), nullable=False, default=DEFAULT_SITE_DESCRIPTION)
