from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette import status
from starlette.requests import Request
from starlette.responses import JSONResponse

from leaguify.config import config
from leaguify.database import create_database
from leaguify.routes import games, leagues, statistics
from leaguify.utils.alembic import alembic_run_migrations
from leaguify.utils.errors import (
    ConflictError,
    LeaguifyError,
    NotFoundError,
    PreconditionError,
    ValidationError,
)
from leaguify.utils.logging import logger

_ERROR_STATUS_CODES: dict[type[LeaguifyError], int] = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    PreconditionError: status.HTTP_400_BAD_REQUEST,
    ConflictError: status.HTTP_409_CONFLICT,
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    if config.auto_run_migrations:
        alembic_run_migrations()

    database = create_database(config.pg_dsn)
    await database.connect()
    app.state.database = database
    try:
        yield
    finally:
        await database.disconnect()


async def leaguify_error_handler(request: Request, exc: LeaguifyError) -> JSONResponse:
    status_code = _ERROR_STATUS_CODES.get(type(exc), status.HTTP_400_BAD_REQUEST)
    return JSONResponse({"detail": exc.message}, status_code=status_code)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Request failed: %s %s", request.method, request.url.path)
    return JSONResponse(
        {"detail": "Something went wrong"},
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


def create_app() -> FastAPI:
    app_ = FastAPI(title="Leaguify API", lifespan=lifespan)
    app_.add_middleware(
        CORSMiddleware,
        allow_origins=[origin.strip() for origin in config.cors_origins.split(",")],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app_.add_exception_handler(LeaguifyError, leaguify_error_handler)
    app_.add_exception_handler(Exception, unhandled_error_handler)

    @app_.get("/health")
    async def get_health() -> dict[str, str]:
        return {"status": "ok"}

    for router in (leagues.router, games.router, statistics.router):
        app_.include_router(router)

    return app_


app = create_app()
