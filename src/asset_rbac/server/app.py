"""ASGI application for standalone deployment."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.cors import CORSMiddleware

from asset_rbac.auth.repository import ProfileRepository
from asset_rbac.backends.database.sqlite import SQLiteDatabase
from asset_rbac.config import Config
from asset_rbac.exceptions import ConfigError
from asset_rbac.observability import configure_logging, get_logger
from asset_rbac.protocols import Database
from asset_rbac.server.middleware import ProfileMiddleware
from asset_rbac.server.routes import create_routes

logger = get_logger(__name__)


def create_database(config: Config) -> Database:
    """Open the configured profile store."""
    if config.database.backend == "sqlite":
        return SQLiteDatabase(path=config.database.path)
    raise ConfigError(f"Unsupported database backend: {config.database.backend}")


def create_app(config: Config | None = None, database: Database | None = None) -> Starlette:
    """Create the ASGI application.

    Args:
        config: Service configuration, defaults apply when omitted
        database: Profile store; opened from config when omitted

    Returns:
        Starlette application
    """
    config = config or Config()
    configure_logging(config.logging.level, config.logging.format)

    owns_database = database is None
    db = database if database is not None else create_database(config)
    repository = ProfileRepository(db)

    @asynccontextmanager
    async def lifespan(app: Starlette) -> AsyncIterator[None]:
        await repository.initialize_schema()
        logger.info("Profile store ready", context={"backend": config.database.backend})
        try:
            yield
        finally:
            if owns_database:
                await db.close()

    # Middleware stack: CORS -> Profile -> Route handler
    middleware = [
        Middleware(
            CORSMiddleware,
            allow_origins=config.server.cors_origins or ["*"],
            allow_methods=["*"],
            allow_headers=["*"],
        ),
        Middleware(
            ProfileMiddleware,
            repository=repository,
            header_name=config.server.profile_header,
            public_paths=config.server.public_paths,
        ),
    ]

    app = Starlette(
        routes=create_routes(repository),
        middleware=middleware,
        lifespan=lifespan,
    )
    app.state.repository = repository
    return app


def serve(config: Config | None = None) -> None:
    """Run the service with uvicorn.

    Args:
        config: Service configuration; host and port come from ``server``
    """
    import uvicorn

    config = config or Config()
    uvicorn.run(
        create_app(config),
        host=config.server.host,
        port=config.server.port,
    )
