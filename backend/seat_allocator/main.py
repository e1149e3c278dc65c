"""Seat Allocator API - FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map SeatAllocatorError -> structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database initialized on startup via lifespan context manager

Design Decisions:
    - Startup and shutdown paired in one lifespan context manager
    - Static presentation layer mounted last so /api/v1/* always takes precedence
"""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from seat_allocator.api.error_handlers import register_error_handlers
from seat_allocator.api.routes import health, seats, students, transport_routes
from seat_allocator.config import get_settings
from seat_allocator.infrastructure.database import init_db
from seat_allocator.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    logger.info("Seat Allocator API started")
    yield
    logger.info("Seat Allocator API shutting down")


app = FastAPI(
    title="Seat Allocator API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(transport_routes.router)
app.include_router(students.router)
app.include_router(seats.router)

register_error_handlers(app)

# html=True serves index.html for unknown paths (SPA fallback)
if os.path.isdir("static"):
    app.mount("/", StaticFiles(directory="static", html=True), name="static")
