"""FastAPI application — main entry point."""

import structlog
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from staffpicks.config import get_settings
from staffpicks.core.exceptions import register_exception_handlers
from staffpicks.core.logging import configure_logging
from staffpicks.core.middleware import setup_middleware
from staffpicks.infrastructure.database import close_client, ensure_indexes, get_database

# Import routers
from staffpicks.interfaces.api.auth import router as auth_router
from staffpicks.interfaces.api.books import router as books_router
from staffpicks.interfaces.api.company import router as company_router
from staffpicks.interfaces.api.isbn import router as isbn_router
from staffpicks.interfaces.api.lists import router as lists_router
from staffpicks.interfaces.api.profile import router as profile_router
from staffpicks.interfaces.api.stores import router as stores_router
from staffpicks.interfaces.api.uploads import router as uploads_router
from staffpicks.interfaces.api.users import router as users_router

settings = get_settings()

# Configure logging immediately
configure_logging()
logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan — startup and shutdown events."""
    logger.info("Starting StaffPicks API...", env=settings.ENVIRONMENT)

    ensure_indexes(get_database())
    logger.info("Database indexes created/verified")

    yield

    close_client()
    logger.info("StaffPicks API stopped")


app = FastAPI(
    title="StaffPicks",
    description="API Backend — curated bookstore recommendation lists",
    version="1.0.0",
    lifespan=lifespan,
)

# Setup Middleware (Correlation ID, Logging)
setup_middleware(app)

# Error envelope for AppError, validation, duplicate keys and the rest
register_exception_handlers(app)

# Credentialed CORS needs explicit origins; the session is a cookie
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(auth_router)
app.include_router(company_router)
app.include_router(stores_router)
app.include_router(users_router)
app.include_router(profile_router)
app.include_router(books_router)
app.include_router(lists_router)
app.include_router(uploads_router)
app.include_router(isbn_router)


@app.get("/")
def root():
    return {
        "name": "StaffPicks",
        "version": "1.0.0",
        "status": "running",
        "docs": "/docs",
    }


@app.get("/health")
def health():
    return {"status": "healthy"}
