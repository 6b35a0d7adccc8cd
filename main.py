from contextlib import asynccontextmanager

from fastapi import FastAPI

from notification_engine.application.services import PreferenceCache
from notification_engine.config import get_settings
from notification_engine.infrastructure.database import engine, initialize_database
from notification_engine.interfaces.api.routes import register_routes


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the tables on startup and release the connection pool on shutdown."""

    initialize_database()
    yield
    engine.dispose()


def create_app() -> FastAPI:
    """Build and configure the FastAPI application."""

    settings = get_settings()
    app = FastAPI(title="Notification Engine", lifespan=lifespan)
    app.state.preference_cache = PreferenceCache(settings.preference_cache_ttl_seconds)

    register_routes(app)
    return app


app = create_app()
