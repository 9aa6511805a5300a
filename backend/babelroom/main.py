"""
BabelRoom Relay - Main Application

This is the entry point for the FastAPI application.
It handles:
- REST API endpoints (room info, room codes, one-off translation)
- WebSocket connections for multilingual rooms
- Background cache expiry
"""
from contextlib import asynccontextmanager
import logging
from datetime import datetime, UTC
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from babelroom.api import router as api_router
from babelroom.api.websocket import router as ws_router
from babelroom.config.settings import Settings, settings as default_settings
from babelroom.services.container import RelayServices
from babelroom.services.metrics import start_metrics_server

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    services: Optional[RelayServices] = None
) -> FastAPI:
    """
    Build the application around one RelayServices container.

    Args:
        settings: Configuration; defaults to environment/.env settings
        services: Prebuilt services (tests); built from settings at startup
            otherwise
    """
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Application lifespan manager.

        Handles startup and shutdown events using the modern FastAPI pattern.
        """
        # === STARTUP ===
        logger.info("🚀 Starting BabelRoom relay...")

        relay = services if services is not None else RelayServices.from_settings(settings)
        app.state.services = relay
        await relay.start()
        logger.info("✅ Translation cache sweeper started")

        if settings.METRICS_PORT:
            start_metrics_server(settings.METRICS_PORT)

        logger.info(f"✅ Provider chain: {' -> '.join(relay.chain.provider_names)}")

        yield  # Application runs here

        # === SHUTDOWN ===
        logger.info("🛑 Shutting down...")
        await relay.close()

    app = FastAPI(
        title="BabelRoom Relay",
        description="Multilingual rooms with per-listener live translation",
        version="1.0.0",
        lifespan=lifespan
    )
    app.state.services = services
    app.state.settings = settings

    # CORS configuration
    app.add_middleware(
        CORSMiddleware,
        allow_origin_regex=settings.CORS_ORIGIN_REGEX,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include REST API routes
    app.include_router(api_router, prefix="/api")

    # Include WebSocket routes
    app.include_router(ws_router)

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {
            "name": "BabelRoom Relay",
            "version": "1.0.0",
            "status": "running"
        }

    @app.get("/health")
    async def health(request: Request):
        """Health check endpoint."""
        services = request.app.state.services
        return {
            "status": "ok",
            "timestamp": datetime.now(UTC).isoformat(),
            "active_rooms": services.rooms.get_active_room_count(),
            "active_sessions": services.rooms.get_active_session_count(),
            "total_connections": services.hub.get_total_connections()
        }

    return app


# Configure logging
logging.basicConfig(level=default_settings.LOG_LEVEL.upper())

app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "babelroom.main:app",
        host=default_settings.API_HOST,
        port=default_settings.API_PORT,
        reload=default_settings.DEBUG,
    )
