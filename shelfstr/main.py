"""Main FastAPI application."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from shelfstr.api.codec_routes import router as codec_router
from shelfstr.api.routes import router as library_router
from shelfstr.core.config import settings
from shelfstr.infrastructure.database.connection import init_db

# Configure logging
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    logger.info("Starting Shelfstr application")
    await init_db()
    logger.info("Database initialized")
    yield
    logger.info("Shutting down Shelfstr application")


app = FastAPI(
    title="Shelfstr",
    description="Books, shelves, reviews and book clubs as signed network events",
    version="1.0.0",
    lifespan=lifespan,
)

app.include_router(codec_router)
app.include_router(library_router)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
