"""
Validation API - Main Layer

FastAPI application exposing the plugin catalogue and stage validation to a
pipeline UI.
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI

from marklogic_plugin.main.config import get_settings
from marklogic_plugin.main.container import init_container
from marklogic_plugin.presentation.controllers import plugins_router
from marklogic_plugin.shared import configure_logging, get_logger, update_logging_from_settings

# Logging is needed while the settings themselves load
configure_logging()
update_logging_from_settings(get_settings())

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.started_at = datetime.now(timezone.utc)
    logger.info("Application starting up")
    yield
    logger.info("Application shutting down")


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        FastAPI: The configured FastAPI application
    """
    settings = get_settings()
    container = init_container(settings)

    app = FastAPI(
        title=settings.api.title,
        description=settings.api.description,
        version=settings.api.version,
        lifespan=lifespan,
    )
    app.state.container = container
    app.include_router(plugins_router)

    return app


app = create_app()
