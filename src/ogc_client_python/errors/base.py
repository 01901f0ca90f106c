"""
Base error classes for ogc-client-python.

Provides a layered error hierarchy:
- OgcClientError: Base class for all library errors
- TransportError: HTTP/network errors raised by the fetch collaborator
- EndpointError: Initialization failure surfaced by WmsEndpoint.is_ready()
- EndpointNotReadyError: Accessor called before the endpoint is ready
- CapabilityParseError: Malformed or incomplete capabilities document
- UnsupportedVersionError: Capabilities document in an unknown WMS version
- LayerNotFoundError: Lookup of a layer name absent from the catalog
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class ErrorContext:
    """Structured error context for diagnostics.

    Provides actionable information for debugging and error handling.
    """

    field_path: str | None = None
    """Path to the problematic element (e.g., 'Capability/Layer')"""

    details: dict[str, Any] = field(default_factory=dict)
    """Additional details about the error"""

    source: str | None = None
    """Error source (e.g., 'parser', 'transport', 'endpoint')"""

    hint: str | None = None
    """Actionable hint for resolving the error"""

    def __str__(self) -> str:
        parts = []
        if self.source:
            parts.append(f"[{self.source}]")
        if self.field_path:
            parts.append(f"at '{self.field_path}'")
        if self.hint:
            parts.append(f"(hint: {self.hint})")
        return " ".join(parts)


class OgcClientError(Exception):
    """Base class for all ogc-client-python errors.

    All errors from this library inherit from this class, making it easy
    to catch all library errors with a single except clause.

    Attributes:
        message: Human-readable error message
        context: Optional structured error context
    """

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
    ) -> None:
        self.message = message
        self.context = context or ErrorContext()
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the full error message."""
        ctx_str = str(self.context)
        if ctx_str:
            return f"{self.message} {ctx_str}"
        return self.message

    def with_hint(self, hint: str) -> OgcClientError:
        """Add a hint to this error."""
        self.context.hint = hint
        self.args = (self._format_message(),)
        return self


class TransportError(OgcClientError):
    """Error during HTTP transport.

    Raised when no HTTP response could be obtained:
    - Network connection failure
    - Timeout
    - SSL/TLS errors
    - Cross-origin or proxy rejection
    """

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        *,
        url: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        ctx = context or ErrorContext(source="transport")
        if url:
            ctx.details["url"] = url
        super().__init__(message, ctx)
        self.url = url
        self.__cause__ = cause


class EndpointError(OgcClientError):
    """Failure of an endpoint's capabilities initialization.

    This is the only error raised by awaiting ``WmsEndpoint.is_ready()``.

    Attributes:
        http_status: HTTP status code, 0 if no response was ever received
        is_cors: True when the request failed before any HTTP response
            (network, CORS or proxy level failure)
        cause: Underlying parser or transport error, if any
    """

    def __init__(
        self,
        message: str,
        http_status: int = 0,
        is_cors: bool = False,
        *,
        cause: Exception | None = None,
    ) -> None:
        ctx = ErrorContext(source="endpoint")
        ctx.details["http_status"] = http_status
        ctx.details["is_cors"] = is_cors
        super().__init__(message, ctx)
        self.http_status = http_status
        self.is_cors = is_cors
        self.cause = cause
        self.__cause__ = cause

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, EndpointError):
            return NotImplemented
        return (
            self.message == other.message
            and self.http_status == other.http_status
            and self.is_cors == other.is_cors
        )

    def __hash__(self) -> int:
        return hash((self.message, self.http_status, self.is_cors))


class EndpointNotReadyError(OgcClientError):
    """Accessor called on an endpoint that is not ready.

    Raised while the endpoint is still pending or after it failed.
    """

    def __init__(self, message: str, *, state: str | None = None) -> None:
        ctx = ErrorContext(source="endpoint")
        if state:
            ctx.details["state"] = state
        super().__init__(message, ctx)
        self.state = state


class CapabilityParseError(OgcClientError):
    """Error while parsing a capabilities document.

    Raised when:
    - The body is not well-formed XML
    - The server returned a ServiceExceptionReport
    - The mandatory Service or Capability/Layer element is missing
    """

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        *,
        element: str | None = None,
        version: str | None = None,
    ) -> None:
        ctx = context or ErrorContext(source="parser")
        if element:
            ctx.field_path = element
        if version:
            ctx.details["version"] = version
        super().__init__(message, ctx)
        self.element = element
        self.version = version


class UnsupportedVersionError(CapabilityParseError):
    """Capabilities document declares or implies an unknown WMS version."""

    def __init__(self, message: str, *, version: str | None = None) -> None:
        super().__init__(message, version=version)


class LayerNotFoundError(OgcClientError):
    """No layer with the requested name exists in the catalog."""

    def __init__(self, layer_name: str) -> None:
        ctx = ErrorContext(source="catalog")
        ctx.details["layer_name"] = layer_name
        super().__init__(f"Layer '{layer_name}' not found", ctx)
        self.layer_name = layer_name
