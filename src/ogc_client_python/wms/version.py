"""
WMS version detection.

The version attribute on the document root selects the grammar. Only a
document without that attribute is identified by its root element name.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from lxml import etree

from ogc_client_python.errors import UnsupportedVersionError

if TYPE_CHECKING:
    from lxml.etree import _Element

WMS_NAMESPACE = "http://www.opengis.net/wms"


class WmsVersion(str, Enum):
    """Capabilities grammars understood by the parser."""

    V1_1_1 = "1.1.1"
    V1_3_0 = "1.3.0"


# Declared version strings -> grammar
_DECLARED_VERSIONS: dict[str, WmsVersion] = {
    "1.1.0": WmsVersion.V1_1_1,
    "1.1.1": WmsVersion.V1_1_1,
    "1.3.0": WmsVersion.V1_3_0,
}

# Root element (namespace, local name) -> grammar, used without a version attribute
_ROOT_ELEMENTS: dict[tuple[str | None, str], WmsVersion] = {
    (None, "WMT_MS_Capabilities"): WmsVersion.V1_1_1,
    (WMS_NAMESPACE, "WMS_Capabilities"): WmsVersion.V1_3_0,
}


@dataclass(frozen=True)
class VersionInfo:
    """Grammar to parse with, and the version string the document declared."""

    grammar: WmsVersion
    declared: str


def detect_version(root: _Element) -> VersionInfo:
    """Determine which WMS grammar applies to a capabilities document.

    Args:
        root: Root element of the parsed document

    Returns:
        VersionInfo with the grammar and declared version

    Raises:
        UnsupportedVersionError: If the version is unknown
    """
    declared = root.get("version")
    if declared is not None:
        declared = declared.strip()
        grammar = _DECLARED_VERSIONS.get(declared)
        if grammar is None:
            raise UnsupportedVersionError(
                f"Unsupported WMS version '{declared}'",
                version=declared,
            ).with_hint("Supported versions: " + ", ".join(sorted(_DECLARED_VERSIONS)))
        return VersionInfo(grammar=grammar, declared=declared)

    qname = etree.QName(root)
    grammar = _ROOT_ELEMENTS.get((qname.namespace, qname.localname))
    if grammar is None:
        raise UnsupportedVersionError(
            f"Cannot determine WMS version of document with root <{qname.localname}>"
        )
    return VersionInfo(grammar=grammar, declared=grammar.value)
