"""
Main FastAPI application entry point
"""
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from sitetags import __version__
from sitetags.api.routes import catalog as catalog_routes
from sitetags.api.routes import health, metrics
from sitetags.core.config import Settings, get_settings
from sitetags.core.errors import (ArithmeticOverflow, CatalogError,
                                  DuplicateName, InvalidAmount, InvalidName,
                                  NotFound, PaymentSinkError)
from sitetags.core.logging_config import LoggingConfig
from sitetags.core.middleware import (BudgetClockMiddleware,
                                      LoggingContextMiddleware)
from sitetags.core.middleware_metrics import MetricsMiddleware
from sitetags.registry.service import CatalogService

logger = LoggingConfig.get_logger(__name__)

ERROR_STATUS = {
    InvalidName: status.HTTP_400_BAD_REQUEST,
    InvalidAmount: status.HTTP_400_BAD_REQUEST,
    DuplicateName: status.HTTP_409_CONFLICT,
    NotFound: status.HTTP_404_NOT_FOUND,
    ArithmeticOverflow: 422,
    PaymentSinkError: status.HTTP_502_BAD_GATEWAY,
}


def status_for(exc: CatalogError) -> int:
    for error_class, code in ERROR_STATUS.items():
        if isinstance(exc, error_class):
            return code
    return status.HTTP_400_BAD_REQUEST


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan events for FastAPI app"""
    settings = app.state.settings
    catalog = app.state.catalog
    logger.info(
        f"Starting {settings.app_name} in {settings.app_env} mode...",
        extra={"payment_sink": catalog.sink.name, "cost_signal": catalog.cost_signal.name},
    )

    yield

    logger.info(f"Shutting down {settings.app_name}...")
    close = getattr(catalog.sink, "close", None)
    if close is not None:
        close()


def create_app(settings: Optional[Settings] = None, catalog: Optional[CatalogService] = None) -> FastAPI:
    """
    Build the application around one catalog instance

    Args:
        settings: Settings to use (defaults to cached environment settings)
        catalog: Catalog to serve (defaults to one built from settings)
    """
    settings = settings or get_settings()
    # force: import-time get_logger() calls already configured from the environment
    LoggingConfig.configure(settings, force=True)

    app = FastAPI(
        title=settings.app_name,
        description="Catalog of sites and tags with paid, weighted endorsements",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.catalog = catalog if catalog is not None else CatalogService.from_settings(settings)

    app.add_middleware(LoggingContextMiddleware)
    if settings.enable_metrics:
        app.add_middleware(MetricsMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    # Outermost, so the cost signal measures from request arrival
    app.add_middleware(BudgetClockMiddleware)

    @app.exception_handler(CatalogError)
    async def catalog_error_handler(request: Request, exc: CatalogError):
        code = status_for(exc)
        logger.warning(
            f"{exc.kind}: {exc.message}",
            extra={
                "error_type": exc.kind,
                "status_code": code,
            }
        )
        return JSONResponse(status_code=code, content=exc.to_dict())

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Global exception handler to log all unhandled errors"""
        logger.error(
            "Unhandled exception",
            exc_info=exc,
            extra={
                "error": str(exc),
                "error_type": type(exc).__name__,
            }
        )
        return JSONResponse(
            status_code=500,
            content={
                "detail": str(exc),
                "type": type(exc).__name__
            }
        )

    app.include_router(catalog_routes.router)
    app.include_router(health.router)
    if settings.enable_metrics:
        app.include_router(metrics.router)

    @app.get("/api")
    async def root():
        """Root API endpoint"""
        return {
            "name": settings.app_name,
            "version": __version__,
            "status": "running",
            "environment": settings.app_env,
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    uvicorn.run(
        "sitetags.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.app_env == "development",
    )
