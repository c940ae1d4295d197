"""
Main FastAPI application for the usergraph backend
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .. import __version__
from ..config import settings
from ..database import get_async_sessionmaker, init_database
from ..database.connection import check_database_connection, dispose_database
from ..logging import configure_logging, get_logger
from ..middleware import LoggingContextMiddleware
from ..services.user import UserService

# Configure logging before creating logger
configure_logging(debug=settings.debug)
logger = get_logger(__name__)


class StartupError(RuntimeError):
    """Raised when the application cannot start safely."""


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("Starting usergraph API...")

    owns_database = getattr(app.state, "user_service", None) is None
    if owns_database:
        init_database()
        app.state.user_service = UserService(get_async_sessionmaker())
        logger.info("Database initialized")

        ok, message = await check_database_connection()
        if not ok:
            logger.error("Database connection check failed", error=message)
            if settings.environment.lower() in ("production", "prod"):
                raise StartupError(message)

    yield

    logger.info("Shutting down usergraph API...")
    if owns_database:
        app.state.user_service = None
        await dispose_database()


def create_app(user_service: UserService | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Passing ``user_service`` skips database setup in the lifespan; the given
    service is used for every GraphQL request.
    """
    app = FastAPI(
        title="usergraph API",
        description="CRUD GraphQL API for user records",
        version=__version__,
        lifespan=lifespan,
        debug=settings.debug,
    )
    app.state.user_service = user_service

    app.add_middleware(LoggingContextMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health_check():  # pyright: ignore [reportUnusedFunction]
        """Health check endpoint."""
        return {"status": "healthy", "version": __version__}

    try:
        from ..graphql.schema import create_graphql_router, validate_schema

        # Fail fast on a broken schema or a field mapping mismatch
        logger.info("Validating GraphQL schema...")
        validate_schema()

        graphql_router = create_graphql_router(user_service)
        app.include_router(graphql_router, prefix="")
        logger.info("GraphQL endpoint initialized successfully", endpoint="/graphql")
    except Exception as e:  # pragma: no cover
        logger.error("Failed to initialize GraphQL endpoint", error=str(e))
        raise

    return app


# Create the main application instance
app = create_app()

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "usergraph.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
        log_level=settings.log_level.lower(),
    )
