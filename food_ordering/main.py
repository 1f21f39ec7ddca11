"""
FastAPI Application Entry Point

Food Ordering API - restaurant catalog, menus, search and orders.

The application is built by ``create_app``; the module-level ``app`` uses the
environment's settings and is what uvicorn serves:

    uvicorn food_ordering.main:app --port 3001
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from food_ordering.api import router
from food_ordering.core.config import Settings, get_settings, setup_logging
from food_ordering.core.errors import OrderingError
from food_ordering.database import Database
from food_ordering.seed import seed_catalog
from food_ordering.stores import InMemoryCatalogStore, InMemoryDataset, SqlCatalogStore

logger = logging.getLogger(__name__)


# =============================================================================
# APPLICATION LIFECYCLE
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application startup and shutdown events.
    """
    settings: Settings = app.state.settings

    logger.info("=" * 60)
    logger.info(f"🚀 Starting {settings.app_name}")
    logger.info(f"   Version: {settings.app_version}")
    logger.info(f"   Environment: {settings.env_mode.value}")
    logger.info(f"   Storage: {settings.storage_backend.value}")
    logger.info(f"   Debug: {settings.debug}")
    logger.info("=" * 60)

    if settings.uses_memory_storage:
        app.state.dataset = InMemoryDataset()
        if settings.seed_sample_data:
            await seed_catalog(InMemoryCatalogStore(app.state.dataset))
    else:
        database = Database(settings)
        await database.init()
        app.state.database = database
        logger.info("✅ Database initialized")

        if settings.seed_sample_data:
            async with database.session_maker() as session:
                await seed_catalog(SqlCatalogStore(session))

    logger.info("✅ Application ready!")

    yield  # Application runs

    # Shutdown
    logger.info("Shutting down...")
    if app.state.database is not None:
        await app.state.database.dispose()
        app.state.database = None
    app.state.dataset = None
    logger.info("✅ Cleanup complete")


# =============================================================================
# ERROR HANDLERS
# =============================================================================

def missing_field(errors: list[dict]) -> bool:
    return any(
        error["type"] == "missing"
        or (error["type"] == "too_short" and error["loc"][-1] == "items")
        for error in errors
    )


async def ordering_error_handler(request: Request, exc: OrderingError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Request bodies that fail validation are client errors (400)."""
    errors = exc.errors()
    if missing_field(errors):
        message = "Missing required fields"
    else:
        message = "; ".join(
            f"{'.'.join(str(p) for p in error['loc'] if p != 'body')}: {error['msg']}"
            for error in errors
        )
    logger.debug(f"Rejected request to {request.url.path}: {message}")
    return JSONResponse(status_code=400, content={"error": message})


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


def build_global_exception_handler(settings: Settings):
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Catch-all exception handler."""
        logger.exception(f"Unhandled exception: {exc}")

        content = {"error": "Something went wrong!"}
        if settings.debug and not settings.is_production:
            content["detail"] = str(exc)
        return JSONResponse(status_code=500, content=content)

    return global_exception_handler


# =============================================================================
# APPLICATION INSTANCE
# =============================================================================

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Explicit settings (tests); defaults to the environment's

    Returns:
        FastAPI: Application with routes, middleware and error handlers
    """
    settings = settings or get_settings()
    setup_logging(settings)

    app = FastAPI(
        title=settings.app_name,
        description="Restaurant catalog, menus, search and order placement.",
        version=settings.app_version,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.settings = settings
    app.state.database = None
    app.state.dataset = None

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router)

    app.add_exception_handler(OrderingError, ordering_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, build_global_exception_handler(settings))

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "food_ordering.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug and settings.is_development,
    )
