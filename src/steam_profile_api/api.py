"""
FastAPI application serving the three aggregated responses.

Routes:
    GET /health
    GET /api/steam-user
    GET /api/steam-games
    GET /api/steam-achievements
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from steam_profile_api import __version__
from steam_profile_api.aggregation import ProfileService
from steam_profile_api.cache import TTLCache, get_cache
from steam_profile_api.config import load_settings
from steam_profile_api.errors import (
    INTERNAL_ERROR,
    METHOD_NOT_ALLOWED,
    NOT_FOUND,
    ConfigurationError,
)
from steam_profile_api.handler import HandlerResponse, cors_headers, error_response, handle_request
from steam_profile_api.logger import get_logger
from steam_profile_api.models import ResponseKind

logger = get_logger(__name__, component="api")

ALL_METHODS = ["GET", "OPTIONS", "POST", "PUT", "PATCH", "DELETE"]

ROUTES: dict[str, ResponseKind] = {
    "/api/steam-user": ResponseKind.USER,
    "/api/steam-games": ResponseKind.GAMES,
    "/api/steam-achievements": ResponseKind.ACHIEVEMENTS,
}


def _to_response(result: HandlerResponse) -> Response:
    return Response(
        content=result.body,
        status_code=result.status_code,
        headers={k: v for k, v in result.headers.items() if k != "Content-Type"},
        media_type=result.headers.get("Content-Type"),
    )


def _get_service(app: FastAPI) -> ProfileService | None:
    """
    The app-wide service, built on first use.

    Returns None while the environment is unusable so the handler can
    report the configuration error itself.
    """
    service: ProfileService | None = app.state.service
    if service is None:
        try:
            settings = load_settings()
        except ConfigurationError:
            return None
        service = ProfileService.from_settings(settings, cache=app.state.cache)
        app.state.service = service
    return service


def create_app(
    *,
    service: ProfileService | None = None,
    cache: TTLCache | None = None,
) -> FastAPI:
    """
    Build the application.

    Args:
        service: Aggregation service (built from the environment if None)
        cache: Cache for the lazily built service (process-wide if None)
    """
    app_cache = service.cache if service is not None else (cache or get_cache())

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        app_cache.start()
        logger.info("API started", sweeping=app_cache.is_sweeping)
        yield
        if app.state.service is not None:
            await app.state.service.close()
        await app_cache.close()
        logger.info("API stopped")

    app = FastAPI(title="Steam Profile API", version=__version__, lifespan=lifespan)
    app.state.service = service
    app.state.cache = app_cache

    @app.get("/health")
    async def health() -> JSONResponse:
        return JSONResponse(
            {
                "status": "ok",
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "cache": app.state.cache.stats(),
            },
            headers=cors_headers(),
        )

    def register(path: str, kind: ResponseKind) -> None:
        async def endpoint(request: Request) -> Response:
            result = await handle_request(
                request.method,
                kind,
                service=_get_service(app),
                region=request.query_params.get("cc"),
            )
            return _to_response(result)

        app.add_api_route(path, endpoint, methods=ALL_METHODS, name=kind.value)

    for path, kind in ROUTES.items():
        register(path, kind)

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException) -> Response:
        if exc.status_code == 404:
            return _to_response(error_response(404, "Not found", NOT_FOUND))
        if exc.status_code == 405:
            return _to_response(error_response(405, "Method not allowed", METHOD_NOT_ALLOWED))
        return _to_response(error_response(exc.status_code, str(exc.detail), INTERNAL_ERROR))

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception) -> Response:
        logger.error("Unhandled error", error=str(exc), path=request.url.path)
        return _to_response(error_response(500, "Internal server error", INTERNAL_ERROR))

    return app
