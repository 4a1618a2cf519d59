"""
Command-line interface for the Steam Profile API.

Provides commands to check configuration, run the aggregators once
and start the HTTP server.
"""

import asyncio
import json
import sys
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field

from steam_profile_api.config import is_valid_steam_id, load_settings
from steam_profile_api.logger import get_logger, setup_logging
from steam_profile_api.models import ResponseKind

# Initialize logging
setup_logging()
logger = get_logger(__name__, component="cli")

FETCH_COMMANDS: dict[str, ResponseKind] = {
    "user": ResponseKind.USER,
    "games": ResponseKind.GAMES,
    "achievements": ResponseKind.ACHIEVEMENTS,
}


class CLIOutput(BaseModel):
    """Structured output for CLI commands."""

    success: bool
    command: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    data: dict[str, Any] | list[Any] | None = None
    metadata: dict[str, Any] | None = None
    error: str | None = None


def print_json(output: CLIOutput) -> None:
    """Print output as formatted JSON."""
    print(json.dumps(output.model_dump(), indent=2, default=str, ensure_ascii=False))


async def cmd_fetch(command: str, user_id: str | None = None) -> None:
    """Run one aggregator and print its payload."""
    from steam_profile_api.aggregation import ProfileService

    settings = load_settings()
    kind = FETCH_COMMANDS[command]
    target = user_id or settings.steam.user_id

    logger.info("Fetching", kind=kind.value, user_id=target)

    service = ProfileService.from_settings(settings)
    try:
        result = await service.fetch(kind, target)
    finally:
        await service.close()

    output = CLIOutput(
        success=True,
        command=command,
        data=result.payload.to_json_dict(),
        metadata={
            "cached": result.cached,
            "fetch_duration": result.fetch_duration,
        },
    )
    print_json(output)


async def cmd_test_config() -> None:
    """Test configuration loading."""
    settings = load_settings()
    ttl = settings.cache.ttl()

    output = CLIOutput(
        success=True,
        command="test-config",
        data={
            "environment": settings.environment,
            "steam_base_url": settings.steam.base_url,
            "steam_store_url": settings.steam.store_url,
            "steam_user_id": settings.steam.user_id,
            "country_code": settings.steam.country_code,
            "max_concurrency": settings.steam.max_concurrency,
            "ttl_ms": {"user": ttl.user, "games": ttl.games, "achievements": ttl.achievements},
            "api_key_configured": bool(settings.steam.api_key.get_secret_value()),
        },
    )
    print_json(output)


def cmd_serve() -> None:
    """Run the HTTP server."""
    import uvicorn

    from steam_profile_api.api import create_app
    from steam_profile_api.config import ServerConfig

    server = ServerConfig()
    logger.info("Starting server", host=server.host, port=server.port)
    uvicorn.run(create_app(), host=server.host, port=server.port, log_config=None)


def print_usage() -> None:
    """Print CLI usage information."""
    usage = """
Steam Profile API CLI
=====================

Usage: steam-profile-api <command> [arguments]

Commands:
  test-config                 Test configuration loading
  user [steam_id]             Print the user summary
  games [steam_id]            Print the games library
  achievements [steam_id]     Print the achievements detail
  serve                       Start the HTTP server

steam_id defaults to STEAM_USER_ID.

Examples:
  steam-profile-api games 76561197960287930
"""
    print(usage)


def main() -> None:
    """Main CLI entry point."""
    if len(sys.argv) < 2:
        print_usage()
        sys.exit(1)

    command = sys.argv[1]

    try:
        if command == "test-config":
            asyncio.run(cmd_test_config())

        elif command in FETCH_COMMANDS:
            user_id = sys.argv[2] if len(sys.argv) > 2 else None
            if user_id is not None and not is_valid_steam_id(user_id):
                print("Error: steam_id must be a 17-digit number")
                sys.exit(1)
            asyncio.run(cmd_fetch(command, user_id))

        elif command == "serve":
            cmd_serve()

        elif command in ("help", "--help", "-h"):
            print_usage()

        else:
            print(f"Unknown command: {command}")
            print_usage()
            sys.exit(1)

    except KeyboardInterrupt:
        print("\nInterrupted by user")
        sys.exit(130)
    except Exception as e:
        logger.exception("CLI error", error=str(e))
        output = CLIOutput(
            success=False,
            command=command,
            error=str(e),
        )
        print_json(output)
        sys.exit(1)


if __name__ == "__main__":
    main()
