"""
Serverless function entry points.

Each function takes an API Gateway / Netlify style event (a dict with
``httpMethod`` and optionally ``queryStringParameters``) and returns
``{"statusCode", "headers", "body"}``.
The cache is process-wide, so warm invocations are served from it.
"""

import asyncio
from typing import Any

from steam_profile_api.handler import handle_request
from steam_profile_api.logger import setup_logging
from steam_profile_api.models import ResponseKind

setup_logging()


def _invoke(event: dict[str, Any], kind: ResponseKind) -> dict[str, Any]:
    method = str(event.get("httpMethod") or event.get("method") or "GET").upper()
    query = event.get("queryStringParameters") or {}
    result = asyncio.run(handle_request(method, kind, region=query.get("cc")))
    return {
        "statusCode": result.status_code,
        "headers": result.headers,
        "body": result.body,
    }


def steam_user(event: dict[str, Any], context: Any = None) -> dict[str, Any]:
    return _invoke(event, ResponseKind.USER)


def steam_games(event: dict[str, Any], context: Any = None) -> dict[str, Any]:
    return _invoke(event, ResponseKind.GAMES)


def steam_achievements(event: dict[str, Any], context: Any = None) -> dict[str, Any]:
    return _invoke(event, ResponseKind.ACHIEVEMENTS)
