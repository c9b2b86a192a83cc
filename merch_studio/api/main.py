"""
FastAPI application entry point.

Wires the studio page, the enhance API and the health endpoints together and
owns the EnhancerManager for the lifetime of the process.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator, Optional, Union
import logging

from .routers import enhance, health, studio
from merch_studio.models.manager import EnhancerManager, resolve_config_path

logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).parent / "static"

# Global application state
app_state = {}

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    The configuration and prompt templates are loaded once at startup;
    provider clients are built per request because every request carries
    its own API key.
    """
    if "enhancer_manager" not in app_state:
        config_path = resolve_config_path()
        logger.info(f"Starting Merch Studio with config {config_path}")
        app_state["enhancer_manager"] = EnhancerManager(config_path=config_path)

    manager = app_state["enhancer_manager"]
    logger.info(f"Providers available: {', '.join(manager.provider_names())}")

    yield  # Server runs here

    logger.info("Shutting down Merch Studio")
    app_state.clear()

def create_app(manager: Optional[EnhancerManager] = None, config_path: Optional[Union[Path, str]] = None) -> FastAPI:
    """
    Factory function to create and configure the FastAPI application.

    A manager (or a config path) can be passed in for tests and embedding;
    otherwise the lifespan loads the default configuration.
    """
    if manager is None and config_path is not None:
        manager = EnhancerManager(config_path=config_path)
    if manager is not None:
        app_state["enhancer_manager"] = manager

    app = FastAPI(
        title="Merch Studio",
        description="Design studio that turns uploaded artwork into AI-enhanced merchandise mockups",
        version="1.0.0",
        lifespan=lifespan
    )

    cors_origins = manager.server_settings.get("cors_origins") if manager else None
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins or ["http://localhost:3000", "http://localhost:8000"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")

    app.include_router(studio.router, tags=["studio"])
    app.include_router(enhance.router, prefix="/api", tags=["enhance"])
    app.include_router(health.router, prefix="/health", tags=["health"])

    return app
