"""
HTTP transport using httpx for async requests.

Provides:
- The fetch collaborator contract used by endpoints
- Configurable timeouts
- Proxy support
- Automatic header management
"""

from __future__ import annotations

import importlib.util
import os
from collections.abc import Awaitable, Callable
from contextlib import suppress
from importlib.metadata import PackageNotFoundError, version
from typing import Any, Protocol

import httpx

from ogc_client_python.errors import TransportError
from ogc_client_python.telemetry import get_logger

# Default timeouts
_DEFAULT_TIMEOUT = 30.0
_DEFAULT_CONNECT_TIMEOUT = 10.0


_UA_VERSION: str | None = None

logger = get_logger(__name__)


class FetchResponse(Protocol):
    """What an endpoint needs from an HTTP response."""

    @property
    def status(self) -> int: ...

    @property
    def ok(self) -> bool: ...

    async def text(self) -> str: ...


# Signature of the fetch collaborator: async (url) -> FetchResponse
Fetcher = Callable[[str], Awaitable[FetchResponse]]


def _http2_enabled() -> bool:
    """Enable HTTP/2 only when optional dependency is present."""
    return importlib.util.find_spec("h2") is not None


def _trust_env_enabled() -> bool:
    """Use env proxy settings only when explicitly enabled."""
    return os.getenv("WMS_HTTP_TRUST_ENV", "0") == "1"


def _get_ua_version() -> str:
    """Get package version for User-Agent (cached)."""
    global _UA_VERSION
    if _UA_VERSION is None:
        try:
            _UA_VERSION = version("ogc-client-python")
        except PackageNotFoundError:
            _UA_VERSION = "0.1.0"
    return _UA_VERSION


class HttpResponse:
    """Adapts an ``httpx.Response`` to the :class:`FetchResponse` contract."""

    def __init__(self, response: httpx.Response) -> None:
        self._response = response

    @property
    def status(self) -> int:
        return self._response.status_code

    @property
    def ok(self) -> bool:
        return self._response.is_success

    async def text(self) -> str:
        await self._response.aread()
        return self._response.text

    @property
    def raw(self) -> httpx.Response:
        """The underlying httpx response."""
        return self._response


class HttpTransport:
    """HTTP transport for OGC service requests.

    Uses httpx for async GET requests. Only transport-level failures raise;
    HTTP error statuses are returned to the caller for classification.

    Example:
        >>> async with HttpTransport(timeout=10) as transport:
        ...     response = await transport.fetch(url)
        ...     if response.ok:
        ...         body = await response.text()
    """

    def __init__(
        self,
        *,
        timeout: float | None = None,
        proxy: str | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        """Initialize HTTP transport.

        Args:
            timeout: Request timeout in seconds
            proxy: Proxy URL
            headers: Extra headers sent with every request
        """
        self._timeout = timeout
        if self._timeout is None:
            env_timeout = os.getenv("WMS_HTTP_TIMEOUT_SECS")
            if env_timeout:
                with suppress(ValueError):
                    self._timeout = float(env_timeout)
        if self._timeout is None:
            self._timeout = _DEFAULT_TIMEOUT

        # Resolve proxy: default to direct connection unless trust_env is enabled.
        if proxy is not None:
            self._proxy = proxy
        elif _trust_env_enabled():
            self._proxy = os.getenv("WMS_PROXY_URL")
        else:
            self._proxy = None

        self._extra_headers = dict(headers or {})

        # Client instance (lazy initialization)
        self._client: httpx.AsyncClient | None = None

    @property
    def timeout(self) -> float:
        return self._timeout  # type: ignore[return-value]

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            timeout = httpx.Timeout(
                self._timeout,
                connect=_DEFAULT_CONNECT_TIMEOUT,
            )

            self._client = httpx.AsyncClient(
                timeout=timeout,
                proxy=self._proxy,
                http2=_http2_enabled(),
                trust_env=_trust_env_enabled(),
                follow_redirects=True,
            )

        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def _build_headers(self) -> dict[str, str]:
        headers = {
            "Accept": "application/xml, text/xml;q=0.9, */*;q=0.8",
            "User-Agent": f"ogc-client-python/{_get_ua_version()}",
        }
        headers.update(self._extra_headers)
        return headers

    async def fetch(self, url: str) -> HttpResponse:
        """Issue a GET request for an absolute URL.

        Args:
            url: Fully built request URL

        Returns:
            Response wrapper exposing status, ok and text()

        Raises:
            TransportError: When no HTTP response could be obtained
        """
        client = self._get_client()
        logger.debug("HTTP GET", url=url)

        try:
            response = await client.get(url, headers=self._build_headers())
        except httpx.ConnectError as e:
            raise TransportError(
                f"Connection failed: {e}",
                url=url,
                cause=e,
            ) from e
        except httpx.TimeoutException as e:
            raise TransportError(
                f"Request timed out: {e}",
                url=url,
                cause=e,
            ) from e
        except httpx.HTTPError as e:
            raise TransportError(
                f"HTTP error: {e}",
                url=url,
                cause=e,
            ) from e

        return HttpResponse(response)

    async def __aenter__(self) -> HttpTransport:
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.close()
