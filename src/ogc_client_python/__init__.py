"""ogc-client-python: client-side model of OGC Web Map Services.

Negotiates a WMS endpoint's capabilities, exposes its service metadata and
inherited layer tree, and builds protocol-conformant request URLs.
"""
from __future__ import annotations

from ogc_client_python.errors import (
    CapabilityParseError,
    EndpointError,
    EndpointNotReadyError,
    LayerNotFoundError,
    OgcClientError,
    TransportError,
    UnsupportedVersionError,
)
from ogc_client_python.wms import (
    EndpointState,
    LayerAttribution,
    LayerDetail,
    LayerStyle,
    LayerSummary,
    ServiceInfo,
    WmsEndpoint,
    build_request_url,
)

__version__ = "0.1.0"

__all__ = [
    # Errors
    "CapabilityParseError",
    "EndpointError",
    "EndpointNotReadyError",
    # Endpoint
    "EndpointState",
    "LayerAttribution",
    "LayerDetail",
    "LayerNotFoundError",
    "LayerStyle",
    "LayerSummary",
    "OgcClientError",
    "ServiceInfo",
    "TransportError",
    "UnsupportedVersionError",
    "WmsEndpoint",
    "build_request_url",
    # Version
    "__version__",
]
