"""Task Ranking API: FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map TaskRankError -> structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database initialized on startup via lifespan context manager
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse

import taskrank.infrastructure.database as database
from taskrank.api.error_handlers import register_error_handlers
from taskrank.api.routes import health, owners, tasks
from taskrank.config import get_settings
from taskrank.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    manager = database.init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
        echo=settings.database_echo,
    )
    logger.info("Task Ranking API started")
    yield
    logger.info("Task Ranking API shutting down")
    await manager.dispose()


app = FastAPI(
    title="Task Ranking API", version="0.1.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(owners.router)
app.include_router(tasks.router)

register_error_handlers(app)


@app.get("/", include_in_schema=False)
async def root():
    """Send the bare root to the caller's task list."""
    return RedirectResponse(url=tasks.router.prefix)
