"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ..config import settings
from ..editor import EditorSession
from ..memory import SheetStore
from .routes import router

logger = logging.getLogger(__name__)

# Global session and store instances
_session: Optional[EditorSession] = None
_store: Optional[SheetStore] = None


def get_session() -> EditorSession:
    """Get the global editor session."""
    global _session
    if _session is None:
        _session = EditorSession()
    return _session


def get_store() -> Optional[SheetStore]:
    """Get the global store, or None before startup."""
    return _store


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle."""
    global _store
    # Startup
    _store = SheetStore()
    await _store.initialize()
    saved = await _store.load_snapshot(settings.autosave_snapshot_name)
    if saved is not None:
        get_session().history.reset(saved)
        logger.info(f"Restored autosaved sheet ({len(saved)} rows)")
    yield
    # Shutdown
    await _store.close()
    _store = None


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="FeedSmith",
        description="AI-assisted product feed spreadsheet editor",
        version="0.1.0",
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # API routes
    app.include_router(router, prefix="/api")

    return app
