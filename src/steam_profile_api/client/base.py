"""
Base HTTP client with retry logic, rate limiting, and error handling.

Provides the transport used by the Steam Web API client: a pooled
httpx client, exponential backoff on transient failures, a shared
token bucket, and structured logging.
"""

from typing import Any

import httpx
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from tenacity import (
    AsyncRetrying,
    RetryError,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from steam_profile_api.config import RetryConfig
from steam_profile_api.errors import RateLimitError, ResponseValidationError, UpstreamError
from steam_profile_api.logger import get_logger
from steam_profile_api.utils.rate_limiter import RateLimiter


def is_retryable(error: BaseException) -> bool:
    """Transport failures, throttling and 5xx are worth another attempt."""
    if isinstance(error, (httpx.TransportError, RateLimitError)):
        return True
    if isinstance(error, UpstreamError):
        return error.status_code is not None and error.status_code >= 500
    return False


class BaseSteamClient:
    """
    Shared transport for Steam API clients.

    Provides common functionality including:
    - HTTP client management
    - Retry logic with exponential backoff
    - Token-bucket throttling
    - Structured logging
    - Payload validation into pydantic contracts
    """

    source_name = "steam_api"

    def __init__(
        self,
        *,
        retry_config: RetryConfig,
        timeout: float,
        rate_limiter: RateLimiter | None = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            retry_config: Retry configuration
            timeout: Default HTTP request timeout in seconds
            rate_limiter: Token bucket shared by every request (unthrottled if None)
        """
        self._retry_config = retry_config
        self._timeout = timeout
        self._rate_limiter = rate_limiter
        self._logger = get_logger(
            self.__class__.__name__,
            component="steam_client",
            source=self.source_name,
        )
        self._client: httpx.AsyncClient | None = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self._timeout),
                follow_redirects=True,
                headers={
                    "User-Agent": "SteamProfileAPI/1.0",
                    "Accept": "application/json",
                },
            )
        return self._client

    async def close(self) -> None:
        """Close HTTP client and release resources."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "BaseSteamClient":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    def _log_retry_attempt(self, retry_state: Any) -> None:
        """Log retry attempts for observability."""
        self._logger.warning(
            "Retrying request",
            attempt=retry_state.attempt_number,
            wait_seconds=retry_state.next_action.sleep if retry_state.next_action else 0,
            exception=str(retry_state.outcome.exception()) if retry_state.outcome else None,
        )

    async def _send(self, url: str, params: dict[str, Any], timeout: float | None) -> httpx.Response:
        if self._rate_limiter is not None:
            await self._rate_limiter.acquire()

        self._logger.debug("Making request", url=url)
        request_timeout = httpx.Timeout(timeout) if timeout is not None else httpx.USE_CLIENT_DEFAULT
        response = await self.client.get(url, params=params, timeout=request_timeout)

        if response.status_code == 429:
            retry_after = response.headers.get("Retry-After", "60")
            raise RateLimitError(
                f"Rate limit exceeded. Retry after {retry_after}s",
                source=self.source_name,
                endpoint=url,
                status_code=429,
            )

        if response.status_code >= 400:
            raise UpstreamError(
                f"API error: {response.status_code}",
                source=self.source_name,
                endpoint=url,
                status_code=response.status_code,
            )

        return response

    async def _get_json(
        self,
        url: str,
        *,
        params: dict[str, Any],
        timeout: float | None = None,
        retry: bool = True,
    ) -> Any:
        """
        GET ``url`` and decode its JSON body.

        Args:
            url: Request URL
            params: Query parameters
            timeout: Per-call timeout overriding the client default
            retry: Whether transient failures are retried

        Returns:
            Decoded JSON payload

        Raises:
            RateLimitError: If rate limit exceeded after retries
            UpstreamError: If the API errors, the transport fails, or the
                body is not JSON
        """
        attempts = self._retry_config.max_attempts if retry else 1
        retrying = AsyncRetrying(
            retry=retry_if_exception(is_retryable),
            stop=stop_after_attempt(attempts),
            wait=wait_exponential(
                multiplier=self._retry_config.base_delay_seconds,
                max=self._retry_config.max_delay_seconds,
                exp_base=self._retry_config.exponential_base,
            ),
            before_sleep=self._log_retry_attempt,
            reraise=True,
        )

        try:
            response = await retrying(self._send, url, params, timeout)
        except RetryError as e:
            raise UpstreamError(
                f"Request failed after {attempts} attempts",
                source=self.source_name,
                endpoint=url,
                original_error=e,
            ) from e
        except httpx.HTTPError as e:
            raise UpstreamError(
                f"Request failed: {e.__class__.__name__}",
                source=self.source_name,
                endpoint=url,
                original_error=e,
            ) from e

        try:
            return response.json()
        except ValueError as e:
            raise UpstreamError(
                "Response body is not valid JSON",
                source=self.source_name,
                endpoint=url,
                status_code=response.status_code,
                original_error=e,
            ) from e

    def _validate(self, model: type[BaseModel], raw_data: Any, *, endpoint: str) -> Any:
        """
        Validate raw JSON into a contract model.

        Raises:
            ResponseValidationError: If the payload doesn't match the contract
        """
        try:
            return model.model_validate(raw_data)
        except PydanticValidationError as e:
            raise ResponseValidationError(
                f"Response validation failed: {e}",
                source=self.source_name,
                endpoint=endpoint,
                original_error=e,
            ) from e
