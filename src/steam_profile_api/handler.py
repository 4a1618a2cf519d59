"""
Platform-neutral request handling.

Turns one request for a response kind into a status code, CORS headers
and a JSON body. Hosting adapters (the FastAPI app, serverless entry
points) only translate their native request/response objects.
"""

import json
from dataclasses import dataclass, field

from steam_profile_api.aggregation import AggregationResult, ProfileService
from steam_profile_api.config import ServerConfig, load_settings
from steam_profile_api.errors import (
    METHOD_NOT_ALLOWED,
    STEAM_API_ERROR,
    ConfigurationError,
)
from steam_profile_api.logger import get_logger
from steam_profile_api.models import (
    ErrorResponse,
    ResponseKind,
    ResponseMetadata,
    ResponseModel,
    SuccessResponse,
)

logger = get_logger(__name__, component="handler")

FAILURE_MESSAGES: dict[ResponseKind, str] = {
    ResponseKind.USER: "Failed to fetch Steam user data",
    ResponseKind.GAMES: "Failed to fetch Steam games data",
    ResponseKind.ACHIEVEMENTS: "Failed to fetch Steam achievements data",
}


def cors_headers(origin: str | None = None) -> dict[str, str]:
    return {
        "Access-Control-Allow-Origin": origin or "*",
        "Access-Control-Allow-Methods": "GET, OPTIONS",
        "Access-Control-Allow-Headers": "Content-Type",
        "Content-Type": "application/json; charset=utf-8",
    }


@dataclass
class HandlerResponse:
    """Transport-independent response."""

    status_code: int
    body: str
    headers: dict[str, str] = field(default_factory=cors_headers)


def _render(model: ResponseModel) -> str:
    return json.dumps(model.to_json_dict(), ensure_ascii=False)


def error_response(
    status_code: int, message: str, code: str, *, origin: str | None = None
) -> HandlerResponse:
    return HandlerResponse(
        status_code=status_code,
        body=_render(ErrorResponse(error=message, code=code)),
        headers=cors_headers(origin),
    )


def success_response(
    result: AggregationResult, *, origin: str | None = None
) -> HandlerResponse:
    envelope = SuccessResponse(
        data=result.payload.to_json_dict(),
        metadata=ResponseMetadata(
            cached=result.cached,
            cached_at=result.cached_at,
            cache_expiry=result.cache_expiry,
            fetch_duration=result.fetch_duration,
        ),
    )
    return HandlerResponse(status_code=200, body=_render(envelope), headers=cors_headers(origin))


async def handle_request(
    method: str,
    kind: ResponseKind,
    *,
    service: ProfileService | None = None,
    region: str | None = None,
) -> HandlerResponse:
    """
    Serve one request for ``kind``.

    Args:
        method: HTTP method of the incoming request
        kind: Which aggregated response to return
        service: Long-lived service to use; a throwaway one backed by the
            process-wide cache is built (and closed) if None
        region: Store country code for this request (``cc`` query
            parameter); switches the region of the service's client

    Returns:
        HandlerResponse: 200 with the success envelope, 200 with an empty
        body for preflight, 405 for other methods, 500 for configuration
        or upstream failures
    """
    origin = ServerConfig().cors_origin

    if method == "OPTIONS":
        return HandlerResponse(status_code=200, body="", headers=cors_headers(origin))

    if method != "GET":
        return error_response(405, "Method not allowed", METHOD_NOT_ALLOWED, origin=origin)

    try:
        settings = load_settings()
    except ConfigurationError as e:
        logger.error("Environment validation failed", error=str(e))
        return error_response(500, str(e), e.code, origin=origin)

    owns_service = service is None
    active = service or ProfileService.from_settings(settings)

    if region:
        active.client.set_region(region)

    try:
        result = await active.fetch(kind, settings.steam.user_id)
    except Exception as e:
        logger.error("API error", kind=kind.value, error=str(e), error_type=type(e).__name__)
        return error_response(500, FAILURE_MESSAGES[kind], STEAM_API_ERROR, origin=origin)
    finally:
        if owns_service:
            await active.close()

    return success_response(result, origin=origin)
