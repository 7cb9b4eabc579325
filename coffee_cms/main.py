"""Main FastAPI application."""

import logging
import time
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.orm import Session

from . import __version__
from .api import content_router, maintenance_router
from .content_types import CONTENT_TYPE_REGISTRY
from .core.config import settings, ConfigurationError
from .core.logging_config import setup_logging, mask_database_url
from .database import engine, Base, get_db, DATABASE_URL
from .exceptions import CmsException
from .middleware.exception_handler import cms_exception_handler
from .middleware.request_context import RequestContextMiddleware
from .repositories import ContentRepository

setup_logging(log_level=settings.log_level, log_format=settings.log_format)
logger = logging.getLogger(__name__)


def _init_database() -> None:
    """Verify the database is reachable and create missing tables.

    Exits with a clear message on failure.
    """
    masked = mask_database_url(DATABASE_URL)
    logger.info(f"Connecting to database: {masked}")

    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        Base.metadata.create_all(bind=engine)
    except Exception as e:
        logger.critical(
            "Database initialisation failed.\n"
            f"  DATABASE_URL: {masked}\n"
            "  Check that the database server is running (PostgreSQL) or that the\n"
            "  directory exists and is writable (SQLite).\n"
            f"  Error: {e}"
        )
        raise SystemExit(1) from e

    logger.info("Database connection verified")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup / shutdown lifecycle for the content API."""
    logger.info(f"Environment: {settings.environment.value}")
    try:
        settings.validate_production_config()
    except ConfigurationError as e:
        logger.critical(f"STARTUP BLOCKED: {e}")
        raise SystemExit(1) from e

    _init_database()

    logger.info(
        "Content API started | env=%s | content_types=%s | cors=%s",
        settings.environment.value,
        ",".join(CONTENT_TYPE_REGISTRY),
        ",".join(settings.get_cors_origins()),
    )

    yield


app = FastAPI(
    title="Coffee Content CMS",
    description=(
        "Headless content API for articles, categories, products, recipes, and "
        "brewing guides. Meta descriptions longer than 160 characters are "
        "shortened on every write, and metadata-only edits keep the entry's "
        "original publish timestamp."
    ),
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "Origin", "Accept"],
)
app.add_middleware(RequestContextMiddleware)

app.add_exception_handler(CmsException, cms_exception_handler)

app.include_router(content_router)
app.include_router(maintenance_router)


@app.get("/")
def root():
    """Root endpoint."""
    return {
        "name": "Coffee Content CMS",
        "version": __version__,
        "status": "running",
        "content_types": list(CONTENT_TYPE_REGISTRY),
    }


_startup_time = time.monotonic()


@app.get("/health")
def health_check(db: Session = Depends(get_db)):
    """Health check returning database status, uptime, and entry count.

    Never raises: returns degraded status on DB failure so load balancers
    can still probe without receiving 5xx.
    """
    db_status = "ok"
    entry_count = 0
    try:
        entry_count = ContentRepository(db).count()
    except Exception:
        logger.warning("Health check database query failed", exc_info=True)
        db_status = "error"

    return {
        "status": "healthy" if db_status == "ok" else "degraded",
        "db": db_status,
        "uptime_seconds": round(time.monotonic() - _startup_time),
        "version": __version__,
        "entry_count": entry_count,
    }
