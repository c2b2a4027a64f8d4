import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from entitlement_engine.config import settings
from entitlement_engine.engine import AuthorizationEngine
from entitlement_engine.exception_handlers import register_exception_handlers
from entitlement_engine.middleware.logging import StructuredLoggingMiddleware, setup_structured_logging
from entitlement_engine.middleware.tenant import TenantContextMiddleware
from entitlement_engine.middleware.usage_limit import UsageLimitMiddleware
from entitlement_engine.routes import entitlements, monitoring
from entitlement_engine.scheduler import schedule_usage_cache_sweep, scheduler
from entitlement_engine.services.collaborators import InMemoryDirectory

logger = logging.getLogger(__name__)


def create_app(engine: AuthorizationEngine | None = None, configure_logging: bool = True) -> FastAPI:
    """
    Create the FastAPI application.

    Without an engine, every collaborator is served from an empty
    InMemoryDirectory. An authentication layer is expected to set
    request.state.principal before TenantContextMiddleware runs.
    """
    if configure_logging:
        setup_structured_logging(log_level=settings.log_level, json_format=settings.json_logs)

    engine = engine or AuthorizationEngine.from_directory(InMemoryDirectory())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting up the application...")
        schedule_usage_cache_sweep(engine.usage.cache)
        scheduler.start()
        yield
        logger.info("Shutting down the application...")
        scheduler.shutdown(wait=False)

    app = FastAPI(
        title=settings.app_name,
        description="Tenant, entitlement, usage and resource access decisions",
        debug=settings.debug,
        version=settings.app_version,
        lifespan=lifespan,
    )
    app.state.engine = engine

    register_exception_handlers(app)

    # Starlette middleware is LIFO: logging runs first, then tenant, then usage
    app.add_middleware(UsageLimitMiddleware, governor=engine.usage)
    app.add_middleware(TenantContextMiddleware, resolver=engine.tenants)
    app.add_middleware(StructuredLoggingMiddleware)

    app.include_router(entitlements.router)
    app.include_router(monitoring.router)

    if settings.debug:
        logger.info(f"Running in {settings.environment} mode")

    return app
