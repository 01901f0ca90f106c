"""
WMS layer - capabilities parsing, layer inheritance and request URLs.

This module handles:
- Detecting the WMS version of a capabilities document
- Parsing WMS 1.1.1 and 1.3.0 capabilities into one model
- Resolving inherited layer attributes
- Building GetCapabilities and GetMap URLs
- The WmsEndpoint lifecycle
"""

from ogc_client_python.wms.catalog import LayerCatalog
from ogc_client_python.wms.endpoint import WmsEndpoint
from ogc_client_python.wms.model import (
    DEFAULT_CONSTRAINTS,
    DEFAULT_FEES,
    BoundingBox,
    EndpointState,
    LayerAttribution,
    LayerDetail,
    LayerStyle,
    LayerSummary,
    RawLayerNode,
    ResolvedLayerNode,
    ResolvedLayerTree,
    ServiceInfo,
)
from ogc_client_python.wms.parser import (
    CapabilitiesParser,
    ParsedCapabilities,
    Wms111Parser,
    Wms130Parser,
    get_parser,
    parse_capabilities,
    read_document,
)
from ogc_client_python.wms.resolver import resolve_layers
from ogc_client_python.wms.url import build_request_url, reserved_params
from ogc_client_python.wms.version import VersionInfo, WmsVersion, detect_version

__all__ = [
    "BoundingBox",
    "CapabilitiesParser",
    "DEFAULT_CONSTRAINTS",
    "DEFAULT_FEES",
    "EndpointState",
    "LayerAttribution",
    "LayerCatalog",
    "LayerDetail",
    "LayerStyle",
    "LayerSummary",
    "ParsedCapabilities",
    "RawLayerNode",
    "ResolvedLayerNode",
    "ResolvedLayerTree",
    "ServiceInfo",
    "VersionInfo",
    "Wms111Parser",
    "Wms130Parser",
    "WmsEndpoint",
    "WmsVersion",
    "build_request_url",
    "detect_version",
    "get_parser",
    "parse_capabilities",
    "read_document",
    "reserved_params",
    "resolve_layers",
]
