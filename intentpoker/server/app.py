"""
FastAPI Application Entry Point for IntentPoker.

This module creates and configures the FastAPI application with:
- HTTP routes for table management and play
- CORS middleware for development
"""

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from intentpoker import __version__
from intentpoker.server.routes import close_session, router

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("IntentPoker server starting up...")
    yield
    await close_session()
    logger.info("IntentPoker server shutting down...")


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance
    """
    app = FastAPI(
        title="IntentPoker",
        description="Texas Hold'em table with intent-coordinated bots",
        version=__version__,
        lifespan=lifespan,
    )

    # CORS middleware for development
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure appropriately for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include HTTP routes
    app.include_router(router)

    return app


# Create the application instance
app = create_app()


def main():
    """Run the server (for use as entry point)."""
    import uvicorn
    uvicorn.run(
        "intentpoker.server.app:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )


if __name__ == "__main__":
    main()
