"""FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from perfboard.config.settings import get_settings
from perfboard.config.logging_config import setup_logging
from perfboard.app_context import AppContext
from perfboard.api.routers import account_router, market_router, dashboard_router
from perfboard.core.exceptions import AppError, ConfigurationError


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    setup_logging()
    context = getattr(app.state, "context", None)
    if context is None:
        context = AppContext(get_settings())
        app.state.context = context
    if context.settings.auto_refresh_enabled:
        context.scheduler.start()
    yield
    # Shutdown
    await context.aclose()


settings = get_settings()

app = FastAPI(
    title=settings.app_name,
    description="Trading account performance: equity history, benchmarks and position valuation",
    version=settings.app_version,
    lifespan=lifespan,
)

# Include routers
app.include_router(account_router)
app.include_router(market_router)
app.include_router(dashboard_router)


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError) -> JSONResponse:
    """Missing credentials: the one failure surfaced to the presentation layer."""
    return JSONResponse(
        status_code=503,
        content={"error": exc.code, "message": exc.message},
    )


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Global handler for application errors."""
    return JSONResponse(
        status_code=400,
        content={"error": exc.code, "message": exc.message},
    )


@app.get("/health")
def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}


@app.get("/")
def root() -> dict[str, str]:
    """Root endpoint with API info."""
    return {
        "app": settings.app_name,
        "version": settings.app_version,
        "docs": "/docs",
    }
