"""
Main application entry point for the auth service.
Configures the FastAPI application with middleware, routers and handlers.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from authservice.core.config import Settings, get_settings
from authservice.db.session import close_db, create_engine, create_session_factory, init_db
from authservice.api.v1 import auth, health
from authservice.middleware.error_handler import ErrorHandlerMiddleware, register_exception_handlers
from authservice.middleware.logging import LoggingMiddleware
from authservice.services.auth import AuthService
from authservice.services.notification import ResetNotifier
from authservice.services.session_store import SessionStore, create_redis_client
from authservice.services.user import SQLAlchemyUserRepository

logger = logging.getLogger("authservice")


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL),
        format=settings.LOG_FORMAT
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Builds the store, repository and AuthService on startup unless one was
    injected, and releases connections on shutdown.
    """
    settings: Settings = app.state.settings
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")

    if getattr(app.state, "auth_service", None) is not None:
        yield
        logger.info("Application shutdown complete")
        return

    engine = create_engine(settings)
    try:
        await init_db(engine)
    except Exception as e:
        logger.error(f"Failed to initialize database: {e}")
        await close_db(engine)
        raise

    store = SessionStore(create_redis_client(settings))
    users = SQLAlchemyUserRepository(create_session_factory(engine))
    app.state.auth_service = AuthService.from_settings(
        settings, store, users, notifier=app.state.reset_notifier
    )
    logger.info("Application startup complete")

    try:
        yield
    finally:
        logger.info("Shutting down application")
        await store.close()
        await close_db(engine)
        logger.info("Application shutdown complete")


def create_application(
    settings: Optional[Settings] = None,
    auth_service: Optional[AuthService] = None,
    reset_notifier: Optional[ResetNotifier] = None
) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        settings: Application settings; loaded from the environment when absent
        auth_service: Prebuilt service, used by tests to skip real connections
        reset_notifier: Delivers password reset tokens; without one, only
            development builds log them

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(
        title=settings.APP_NAME,
        description="Authentication and session token service",
        version=settings.APP_VERSION,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
        openapi_url="/openapi.json" if settings.DEBUG else None,
        lifespan=lifespan
    )
    app.state.settings = settings
    app.state.auth_service = auth_service
    app.state.reset_notifier = reset_notifier

    # Added last runs first: logging assigns the request ID the error handler reports
    app.add_middleware(ErrorHandlerMiddleware, debug=settings.DEBUG)
    app.add_middleware(
        LoggingMiddleware,
        exclude_paths=[f"{settings.API_V1_STR}/health"]
    )

    register_exception_handlers(app)

    app.include_router(health.router, prefix=settings.API_V1_STR)
    app.include_router(auth.router, prefix=settings.API_V1_STR)

    @app.get("/", include_in_schema=False)
    async def root():
        return {
            "name": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "status": "operational"
        }

    return app


app = create_application()

if __name__ == "__main__":
    import uvicorn

    _settings = get_settings()
    uvicorn.run(
        "authservice.main:app",
        host="0.0.0.0",
        port=8000,
        reload=_settings.DEBUG,
        log_level=_settings.LOG_LEVEL.lower()
    )
