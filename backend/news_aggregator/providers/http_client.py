"""
Outbound HTTP for news providers.

``HttpClient.get`` never raises: any failure is logged and reported as
``None`` so providers can treat "no data" and "error" the same way.
"""
from typing import Any, Optional, Union

import httpx
import structlog
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from news_aggregator.core.text import truncate

JSONPayload = Union[dict[str, Any], list[Any]]

# Cap on response body text copied into error logs
LOG_BODY_LIMIT = 500


class HttpClient:
    """Thin wrapper around a shared ``httpx.AsyncClient``."""

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        retry_attempts: int = 1,
        logger: Optional[structlog.stdlib.BoundLogger] = None,
    ):
        """
        Args:
            client: Preconfigured client (tests inject one with a mock transport)
            retry_attempts: Attempts per request on transport errors; 1 disables retries
            logger: Logger for failed requests
        """
        self._client = client
        self._owns_client = client is None
        self.retry_attempts = max(1, retry_attempts)
        self.logger = logger or structlog.get_logger(__name__)

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(headers={"Accept": "application/json"})
        return self._client

    async def get(
        self,
        url: str,
        params: Optional[dict[str, Any]] = None,
        timeout: float = 30,
    ) -> Optional[JSONPayload]:
        """
        GET ``url`` and decode the JSON body.

        Returns:
            The decoded payload on a 2xx response ({} for an empty body),
            None on any transport error, non-2xx status or undecodable body.
        """
        try:
            response = await self._send(url, params or {}, timeout)
        except Exception as e:
            self.logger.error(
                "HTTP request exception",
                url=url,
                error=str(e),
                error_type=type(e).__name__,
            )
            return None

        if not response.is_success:
            self.logger.error(
                "HTTP request failed",
                url=url,
                status=response.status_code,
                body=truncate(response.text, LOG_BODY_LIMIT),
            )
            return None

        if not response.content.strip():
            return {}

        try:
            payload = response.json()
        except ValueError as e:
            self.logger.error(
                "HTTP response is not valid JSON",
                url=url,
                status=response.status_code,
                error=str(e),
                body=truncate(response.text, LOG_BODY_LIMIT),
            )
            return None

        return {} if payload is None else payload

    async def _send(self, url: str, params: dict[str, Any], timeout: float) -> httpx.Response:
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self.retry_attempts),
            wait=wait_exponential(multiplier=1, min=1, max=10),
            retry=retry_if_exception_type(httpx.TransportError),
            reraise=True,
        ):
            with attempt:
                return await self.client.get(url, params=params, timeout=timeout)

    async def aclose(self) -> None:
        """Close the underlying client if this instance created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "HttpClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()
