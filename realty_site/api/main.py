"""
FastAPI main application for the realty site.
"""

# Load environment variables from .env file
from dotenv import load_dotenv
load_dotenv()

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from typing import Optional
import logging

from realty_site import __version__
from realty_site.admin import AdminSession
from realty_site.config import SiteSettings, get_site_settings
from realty_site.error_handling import (
    CriteriaError,
    NotAuthorizedError,
    StoreError,
    ValidationError,
)
from realty_site.search import LocationSuggestionResolver, PropertyQueryComposer, ResultBroadcast
from realty_site.store import DataStore, create_store

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def attach_store(app: FastAPI, store: DataStore) -> None:
    """Build the per-process services around a store."""
    settings: SiteSettings = app.state.settings
    app.state.store = store
    app.state.composer = PropertyQueryComposer(store, app.state.broadcast)
    app.state.resolver = LocationSuggestionResolver(
        store, min_chars=settings.search.suggestion_min_chars
    )
    # Admin sign-in must not change the credentials of anonymous requests
    app.state.admin_session = AdminSession(store.fork())


def create_app(
    settings: Optional[SiteSettings] = None,
    store: Optional[DataStore] = None
) -> FastAPI:
    """Create the API application.

    Args:
        settings: Site settings, read from the environment when omitted
        store: Data store to use; when omitted one is created from the
            settings at startup and closed at shutdown
    """
    settings = settings or get_site_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup and shutdown events"""
        # Startup
        logger.info(f"Starting {settings.site_name} API...")
        owns_store = app.state.store is None
        if owns_store:
            attach_store(app, create_store(settings.store))
            logger.info(f"Data store initialized ({settings.store.backend})")

        yield

        # Shutdown
        logger.info(f"Shutting down {settings.site_name} API...")
        await app.state.composer.wait_for_history()
        await app.state.admin_session.store.close()
        if owns_store:
            await app.state.store.close()
            app.state.store = None

    app = FastAPI(
        title=f"{settings.site_name} API",
        description="Property search, listings and back office",
        version=__version__,
        lifespan=lifespan
    )

    app.state.settings = settings
    app.state.broadcast = ResultBroadcast()
    app.state.store = None
    if store is not None:
        attach_store(app, store)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.api.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(StoreError)
    async def store_error_handler(request: Request, exc: StoreError):
        logger.error(f"Unhandled store error on {request.url.path}: {exc}")
        return JSONResponse(status_code=502, content={"detail": "Database error"})

    @app.exception_handler(CriteriaError)
    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: Exception):
        return JSONResponse(status_code=422, content={"detail": str(exc)})

    @app.exception_handler(NotAuthorizedError)
    async def not_authorized_handler(request: Request, exc: NotAuthorizedError):
        return JSONResponse(status_code=401, content={"detail": str(exc)})

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {
            "status": "healthy",
            "version": __version__,
            "store": "ready" if app.state.store is not None else "not initialized",
        }

    @app.get("/")
    async def root():
        """Root endpoint"""
        return {
            "message": f"{settings.site_name} API",
            "docs": "/docs",
            "health": "/health",
        }

    # Import and include routers
    from realty_site.api.routers import admin, contact, listings, search

    app.include_router(search.router, prefix="/api", tags=["search"])
    app.include_router(listings.router, prefix="/api", tags=["listings"])
    app.include_router(contact.router, prefix="/api", tags=["contact"])
    app.include_router(admin.router, prefix="/api", tags=["admin"])

    return app


app = create_app()
