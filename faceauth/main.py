"""Main application module for the face authentication service."""
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from faceauth.api import router as api_router
from faceauth.core.config import settings
from faceauth.core.container import ServiceContainer
from faceauth.core.logging import get_logger, setup_logging

setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[Any, None]:
    """Handle application startup and shutdown events.

    Args:
        app: FastAPI application instance

    Returns:
        AsyncGenerator[Any, None]: Async context manager for app lifecycle
    """
    logger.info(
        "Starting up face authentication service",
        version=settings.VERSION,
        environment=settings.ENVIRONMENT,
    )

    container: ServiceContainer = app.state.container
    await container.initialize()
    logger.info("Initialized application services")

    yield

    logger.info("Shutting down face authentication service")
    await container.cleanup()
    logger.info("Cleaned up application resources")


def create_app(container: Optional[ServiceContainer] = None) -> FastAPI:
    """Build the FastAPI application.

    Args:
        container: Service container to use; defaults to one built from settings

    Returns:
        FastAPI: Configured application
    """
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        openapi_url=f"{settings.API_PREFIX}/openapi.json",
        docs_url="/docs" if settings.ENVIRONMENT == "development" else None,
        lifespan=lifespan,
    )
    app.state.container = container or ServiceContainer(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router, prefix=settings.API_PREFIX)

    @app.get("/health")
    async def health_check() -> dict:
        """Basic health check endpoint.

        Returns:
            dict: Health status
        """
        return {"status": "healthy"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("faceauth.main:app", host=settings.HOST, port=settings.PORT, reload=settings.DEBUG)
