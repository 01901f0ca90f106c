"""
Error hierarchy for ogc-client-python.

Provides structured error types for transport, parsing and catalog lookups.
"""

from ogc_client_python.errors.base import (
    CapabilityParseError,
    EndpointError,
    EndpointNotReadyError,
    ErrorContext,
    LayerNotFoundError,
    OgcClientError,
    TransportError,
    UnsupportedVersionError,
)

__all__ = [
    "CapabilityParseError",
    "EndpointError",
    "EndpointNotReadyError",
    "ErrorContext",
    "LayerNotFoundError",
    "OgcClientError",
    "TransportError",
    "UnsupportedVersionError",
]
