"""FastAPI application entry point."""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from treestudio import __version__
from treestudio.api import diagram_router, tree_router
from treestudio.config import configure_logging, get_settings
from treestudio.storage import get_database_url, init_db

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    settings = get_settings()
    configure_logging(settings.log_level)
    logger.info("Starting %s...", settings.app_name)
    logger.info("Database: %s", get_database_url())

    init_db()

    yield

    logger.info("Shutting down...")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Decision tree editor with Mermaid and Graphviz export",
        version=__version__,
        lifespan=lifespan,
    )

    # CORS middleware - configurable via CORS_ORIGINS env var
    cors_origins_str = os.getenv("CORS_ORIGINS", "*")
    cors_origins = cors_origins_str.split(",") if cors_origins_str != "*" else ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(tree_router)     # /tree
    app.include_router(diagram_router)  # /diagram

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {
            "name": settings.app_name,
            "version": __version__,
            "endpoints": {
                "tree": "/tree - Build, import and export the decision tree",
                "diagram": "/diagram/* - Mermaid and Graphviz diagram text",
            },
        }

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {"status": "healthy"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
