"""FastAPI application entry point."""

import logging
import threading
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from no_repeats.config import get_database_path, settings
from no_repeats.api.routes.match import router as match_router
from no_repeats.errors import MatchDbError
from no_repeats.models.commands import Exit, OpenDatabase
from no_repeats.services.match_controller import LifecyclePhase, MatchController

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Startup: Initialize controller and open the store
    if not hasattr(app.state, "controller"):
        app.state.controller = MatchController(record_matches=settings.record_matches)
        app.state.controller_lock = threading.Lock()
        if settings.open_database_on_startup:
            try:
                app.state.controller.apply(OpenDatabase(path=get_database_path()))
            except MatchDbError:
                logger.exception("Database unavailable at startup; waiting for open_database")
    yield
    # Shutdown: close the store
    with app.state.controller_lock:
        if app.state.controller.phase != LifecyclePhase.EXIT:
            app.state.controller.apply(Exit())


app = FastAPI(
    title="No Repeats",
    description="Best-of-five 3v3 match tracker with hero reuse rules",
    version="0.1.0",
    lifespan=lifespan,
)

# Configure CORS for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "no-repeats"}


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "name": "No Repeats API",
        "version": "0.1.0",
        "docs": "/docs",
    }


# Register routers
app.include_router(match_router)
