"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from recipebook.api import recipes, users
from recipebook.config import get_settings

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle application startup and shutdown events."""
    logger.info(
        f"Starting recipebook ({settings.environment}, storage={settings.storage_backend})"
    )
    yield


app = FastAPI(
    title="Recipebook API",
    description="Community recipe sharing: recipes with steps, media, likes and comments",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware for development
if settings.is_development:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:3000", "http://localhost:5173"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

# Register routers
app.include_router(recipes.router)
app.include_router(users.router)

# Locally stored uploads are served by the API itself
if settings.storage_backend == "local" and settings.media_public_base_url.startswith("/"):
    app.mount(
        settings.media_public_base_url,
        StaticFiles(directory=settings.media_root, check_dir=False),
        name="media",
    )


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "environment": settings.environment}
