"""FastAPI application factory."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlmodel import SQLModel

from vitals.api.routes import history, profile, series
from vitals.db.engine import get_engine
from vitals.errors import InvalidArgument, StoreUnavailable

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """Build and return the FastAPI app."""

    engine = get_engine()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Create tables on startup (idempotent)
        SQLModel.metadata.create_all(engine)
        yield

    app = FastAPI(
        title="Vitals API",
        description="Daily health metrics history and chart series",
        version="0.1.0",
        lifespan=lifespan,
    )

    @app.exception_handler(InvalidArgument)
    async def invalid_argument_handler(request: Request, exc: InvalidArgument):
        logger.warning("Invalid argument on %s: %s", request.url.path, exc)
        return JSONResponse(status_code=422, content={"detail": str(exc)})

    @app.exception_handler(StoreUnavailable)
    async def store_unavailable_handler(request: Request, exc: StoreUnavailable):
        logger.error("Store unavailable on %s: %s", request.url.path, exc)
        return JSONResponse(status_code=503, content={"detail": "Store unavailable"})

    app.include_router(series.router, prefix="/series", tags=["series"])
    app.include_router(history.router, prefix="/history", tags=["history"])
    app.include_router(profile.router, prefix="/profile", tags=["profile"])

    return app


# Module-level app instance for uvicorn
app = create_app()
