from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.sessions import SessionMiddleware

from event_manager.core.config import get_app_env, get_organiser_password, get_session_secret
from event_manager.core.errors import register_exception_handlers
from event_manager.core.logging import setup_logging
from event_manager.database.db import Base, engine
from event_manager.routes import auth, bookings, events, reports, settings

# Import models so that they register with Base.metadata
import event_manager.models.bookings  # noqa: F401, E402
import event_manager.models.events  # noqa: F401, E402
import event_manager.models.site_settings  # noqa: F401, E402


def create_app() -> FastAPI:
    setup_logging()
    # Fail fast when the organiser secrets are missing
    get_organiser_password()
    session_secret = get_session_secret()

    app = FastAPI(title="Event Manager")

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(
        SessionMiddleware,
        secret_key=session_secret,
        session_cookie="sessionId",
        max_age=60 * 60 * 24,
        same_site="strict",
        https_only=get_app_env() == "production",
    )
    register_exception_handlers(app)

    # Create all tables (in production, use migrations such as Alembic)
    Base.metadata.create_all(bind=engine)

    # Include the routers
    app.include_router(auth.router)
    app.include_router(bookings.router)
    app.include_router(events.router)
    app.include_router(reports.router)
    app.include_router(settings.router)

    @app.get("/")
    def index():
        return {"attendee": "/attendee", "organiser": "/organiser"}

    return app


app = create_app()
