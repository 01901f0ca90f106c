"""
WMS request URL construction.

Caller query parameters on the base URL are kept, except those whose key
(compared case-insensitively) is reserved by the protocol for the requested
operation. Reserved parameters are emitted once, with uppercase keys, after
the caller's parameters.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any
from urllib.parse import parse_qsl, quote, urlencode, urlsplit, urlunsplit

if TYPE_CHECKING:
    from collections.abc import Mapping

SERVICE_TYPE = "WMS"

# Reserved for every operation
COMMON_RESERVED_PARAMS: tuple[str, ...] = ("SERVICE", "REQUEST")

# Reserved per operation, on top of the common ones
OPERATION_RESERVED_PARAMS: dict[str, tuple[str, ...]] = {
    "GetCapabilities": (),
    "GetMap": (
        "VERSION",
        "LAYERS",
        "STYLES",
        "CRS",
        "SRS",
        "BBOX",
        "WIDTH",
        "HEIGHT",
        "FORMAT",
        "TRANSPARENT",
    ),
}

# Characters left unescaped in query values (CRS codes, bbox and layer lists)
_SAFE_CHARS = ":,/"


def reserved_params(operation: str) -> tuple[str, ...]:
    """Uppercase parameter keys reserved for ``operation``."""
    return COMMON_RESERVED_PARAMS + OPERATION_RESERVED_PARAMS.get(operation, ())


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, (list, tuple)):
        return ",".join(_format_value(item) for item in value)
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def build_request_url(
    base_url: str,
    operation: str,
    extra_params: Mapping[str, Any] | None = None,
) -> str:
    """Build a WMS request URL for ``operation`` from a base URL.

    Args:
        base_url: Service URL, possibly carrying its own query parameters
        operation: WMS operation name, e.g. "GetCapabilities" or "GetMap"
        extra_params: Protocol parameters for the operation; keys are
            uppercased, entries with a None value are left out

    Returns:
        Request URL with scheme, host and path of ``base_url`` unchanged

    Example:
        >>> build_request_url(
        ...     "https://my.test.service/ogc/wms?service=wms&request=GetMap&aa=bb",
        ...     "GetCapabilities",
        ... )
        'https://my.test.service/ogc/wms?aa=bb&SERVICE=WMS&REQUEST=GetCapabilities'
    """
    reserved = set(reserved_params(operation))
    protocol: dict[str, str] = {"SERVICE": SERVICE_TYPE, "REQUEST": operation}
    for key, value in (extra_params or {}).items():
        key = key.upper()
        if value is None or key in ("SERVICE", "REQUEST"):
            continue
        reserved.add(key)
        protocol[key] = _format_value(value)

    parts = urlsplit(base_url)
    kept = [
        (key, value)
        for key, value in parse_qsl(parts.query, keep_blank_values=True)
        if key.upper() not in reserved
    ]

    query = urlencode(kept + list(protocol.items()), quote_via=quote, safe=_SAFE_CHARS)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))
