"""
Main application entry point.
"""

from typing import Optional

from fastapi import FastAPI

from ebookstore import __version__
from ebookstore.api.v1.dependencies import Container, build_container
from ebookstore.api.v1.ebook_endpoints import router as ebook_router
from ebookstore.config import Settings
from ebookstore.logging_config import configure_logging


def create_app(
    settings: Optional[Settings] = None,
    container: Optional[Container] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Configuration; read from the environment when omitted
        container: Pre-wired dependencies; built from settings when omitted
    """
    settings = settings or Settings.from_env()

    app = FastAPI(
        title="Ebook Store API",
        description="Creates ebook records for content producers.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.settings = settings
    app.state.container = container or build_container(settings)

    # Include API routers
    app.include_router(ebook_router, prefix="/api/v1", tags=["ebooks"])

    @app.get("/")
    def read_root():
        """Root endpoint."""
        return {
            "message": "Welcome to the Ebook Store API",
            "docs": "/docs",
            "health": "/api/v1/health",
        }

    return app


def run() -> None:
    """Run the service with uvicorn."""
    import uvicorn

    settings = Settings.from_env()
    configure_logging(settings.log_level)
    uvicorn.run(create_app(settings), host="0.0.0.0", port=8000)


if __name__ == "__main__":
    run()
