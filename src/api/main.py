"""Main FastAPI application entry point."""

from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, status
from fastapi.responses import JSONResponse

from entries.presentation import routes as entry_routes
from identity.presentation import routes as identity_routes
from infrastructure.database.dependencies import (
    check_database_health,
    close_database_connections,
)
from infrastructure.logging import configure_logging
from infrastructure.settings import get_settings
from infrastructure.version import __version__


@asynccontextmanager
async def tbr_lifespan(app: FastAPI):
    """Application lifespan context.

    Manages:
    - Logging configuration at startup
    - Database engine lifecycle (created lazily, disposed on shutdown)
    """
    settings = get_settings()
    configure_logging(debug=settings.debug, log_format=settings.log_format)
    yield
    await close_database_connections()


app = FastAPI(
    title=get_settings().app_name,
    description="Personal reading-list tracker",
    version=__version__,
    lifespan=tbr_lifespan,
)

app.include_router(entry_routes.router)
app.include_router(identity_routes.router)


@app.get("/health")
def health():
    """Basic health check endpoint."""
    return {"status": "ok"}


@app.get("/health/db")
async def health_db() -> JSONResponse:
    """Check that the database answers a trivial query."""
    if await check_database_health():
        return JSONResponse(content={"status": "ok", "connected": True})
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"status": "unhealthy", "connected": False},
    )


def serve() -> None:
    """Run the API with uvicorn, bound to the configured host and port."""
    settings = get_settings()
    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    serve()
