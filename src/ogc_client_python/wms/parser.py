"""
Capabilities document parsing.

Turns a WMS GetCapabilities response into service metadata, the as-declared
layer tree and the GetMap operation details. WMS 1.1.1 and 1.3.0 differ in
namespace, CRS element names and bounding box representation; each grammar
has its own CapabilitiesParser subclass and both produce the same
ParsedCapabilities structure.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

from lxml import etree

from ogc_client_python.errors import CapabilityParseError
from ogc_client_python.wms.model import (
    DEFAULT_ABSTRACT,
    DEFAULT_CONSTRAINTS,
    DEFAULT_FEES,
    LAT_LON_CRS,
    BoundingBox,
    LayerAttribution,
    LayerStyle,
    RawLayerNode,
    ServiceInfo,
)
from ogc_client_python.wms.version import WMS_NAMESPACE, WmsVersion

if TYPE_CHECKING:
    from collections.abc import Iterator

    from lxml.etree import _Element

XLINK_HREF = "{http://www.w3.org/1999/xlink}href"

_EXCEPTION_REPORT = "ServiceExceptionReport"


@dataclass(frozen=True)
class ParsedCapabilities:
    """Version-independent result of parsing a capabilities document."""

    service: ServiceInfo
    layers: tuple[RawLayerNode, ...]
    crs_codes: tuple[str, ...] = ()
    get_map_url: str | None = None
    get_map_formats: tuple[str, ...] = ()

    @property
    def root_layer(self) -> RawLayerNode:
        """The first top-level layer."""
        return self.layers[0]


def read_document(text: str | bytes) -> _Element:
    """Parse response text into an element tree.

    Args:
        text: Body of the capabilities response

    Returns:
        Root element

    Raises:
        CapabilityParseError: If the body is not well-formed XML or is a
            ServiceExceptionReport
    """
    # decoded text ignores the encoding named in the XML declaration
    encoding = "utf-8" if isinstance(text, str) else None
    data = text.encode("utf-8") if isinstance(text, str) else text
    parser = etree.XMLParser(
        encoding=encoding,
        resolve_entities=False,
        no_network=True,
        remove_comments=True,
        huge_tree=True,
    )
    try:
        root = etree.fromstring(data, parser=parser)
    except etree.XMLSyntaxError as e:
        raise CapabilityParseError(f"Invalid capabilities document: {e}") from e
    if root is None:
        raise CapabilityParseError("Empty capabilities document")

    if etree.QName(root).localname == _EXCEPTION_REPORT:
        messages = [
            " ".join(child.text.split())
            for child in root
            if isinstance(child.tag, str) and child.text and child.text.strip()
        ]
        detail = "; ".join(messages) or "no details given"
        raise CapabilityParseError(
            f"Service returned an exception: {detail}",
            element=_EXCEPTION_REPORT,
        )
    return root


class CapabilitiesParser(ABC):
    """Extraction of the capabilities model for one WMS grammar.

    Subclasses set the namespace and implement the CRS and bounding box
    rules, which are the parts that differ between versions.
    """

    version: ClassVar[WmsVersion]
    namespace: ClassVar[str | None] = None

    def __init__(self, root: _Element) -> None:
        self.root = root

    def tag(self, path: str) -> str:
        """Qualify a slash-separated element path with the grammar's namespace."""
        if not self.namespace:
            return path
        return "/".join(f"{{{self.namespace}}}{part}" for part in path.split("/"))

    def find(self, elem: _Element, path: str) -> _Element | None:
        return elem.find(self.tag(path))

    def findall(self, elem: _Element, path: str) -> list[_Element]:
        return elem.findall(self.tag(path))

    def findtext(self, elem: _Element, path: str) -> str | None:
        text = elem.findtext(self.tag(path))
        if text is None:
            return None
        return text.strip()

    def href(self, elem: _Element, path: str) -> str | None:
        resource = self.find(elem, path)
        if resource is None:
            return None
        return resource.get(XLINK_HREF)

    def parse(self) -> ParsedCapabilities:
        """Extract service, layer tree and GetMap details.

        Raises:
            CapabilityParseError: If the root namespace does not match the
                grammar, or Service or Capability/Layer is missing
        """
        self.check_namespace()
        service = self.parse_service()

        layer_elems = self.findall(self.root, "Capability/Layer")
        if not layer_elems:
            raise CapabilityParseError(
                "Capabilities document has no root layer",
                element="Capability/Layer",
                version=self.version.value,
            )
        layers = tuple(self.parse_layer(elem) for elem in layer_elems)

        formats = tuple(
            elem.text.strip()
            for elem in self.findall(self.root, "Capability/Request/GetMap/Format")
            if elem.text and elem.text.strip()
        )

        return ParsedCapabilities(
            service=service,
            layers=layers,
            crs_codes=tuple(dict.fromkeys(_iter_crs(layers))),
            get_map_url=self.href(
                self.root, "Capability/Request/GetMap/DCPType/HTTP/Get/OnlineResource"
            ),
            get_map_formats=formats,
        )

    def check_namespace(self) -> None:
        found = etree.QName(self.root).namespace
        if found != self.namespace:
            raise CapabilityParseError(
                f"Expected namespace {self.namespace or 'none'} for WMS {self.version.value}, "
                f"found {found or 'none'}",
                element=etree.QName(self.root).localname,
                version=self.version.value,
            )

    def parse_service(self) -> ServiceInfo:
        elem = self.find(self.root, "Service")
        if elem is None:
            raise CapabilityParseError(
                "Capabilities document has no Service element",
                element="Service",
                version=self.version.value,
            )
        return ServiceInfo(
            name=self.findtext(elem, "Name") or "",
            title=self.findtext(elem, "Title") or "",
            abstract=self.findtext(elem, "Abstract") or DEFAULT_ABSTRACT,
            fees=self.findtext(elem, "Fees") or DEFAULT_FEES,
            constraints=self.findtext(elem, "AccessConstraints") or DEFAULT_CONSTRAINTS,
        )

    def parse_layer(self, elem: _Element) -> RawLayerNode:
        return RawLayerNode(
            title=self.findtext(elem, "Title") or "",
            name=self.findtext(elem, "Name") or None,
            abstract=self.findtext(elem, "Abstract") or DEFAULT_ABSTRACT,
            crs=self.layer_crs(elem),
            bounding_boxes=self.layer_bounding_boxes(elem),
            styles=self.layer_styles(elem),
            attribution=self.layer_attribution(elem),
            queryable=elem.get("queryable", "0").strip() in ("1", "true"),
            children=[self.parse_layer(child) for child in self.findall(elem, "Layer")],
        )

    def layer_styles(self, elem: _Element) -> list[LayerStyle]:
        styles = []
        for style_elem in self.findall(elem, "Style"):
            name = self.findtext(style_elem, "Name")
            if not name:
                continue
            styles.append(
                LayerStyle(
                    name=name,
                    title=self.findtext(style_elem, "Title") or "",
                    legend_url=self.href(style_elem, "LegendURL/OnlineResource"),
                )
            )
        return styles

    def layer_attribution(self, elem: _Element) -> LayerAttribution | None:
        attr_elem = self.find(elem, "Attribution")
        if attr_elem is None:
            return None
        attribution = LayerAttribution(
            title=self.findtext(attr_elem, "Title") or None,
            url=self.href(attr_elem, "OnlineResource"),
            logo_url=self.href(attr_elem, "LogoURL/OnlineResource"),
        )
        if attribution == LayerAttribution():
            return None
        return attribution

    @staticmethod
    def read_box(elem: _Element) -> BoundingBox | None:
        try:
            return (
                float(elem.get("minx")),
                float(elem.get("miny")),
                float(elem.get("maxx")),
                float(elem.get("maxy")),
            )
        except (TypeError, ValueError):
            return None

    @abstractmethod
    def layer_crs(self, elem: _Element) -> list[str]:
        """CRS codes declared on the layer itself."""

    @abstractmethod
    def layer_bounding_boxes(self, elem: _Element) -> dict[str, BoundingBox]:
        """Bounding boxes declared on the layer itself, keyed by CRS code."""


class Wms111Parser(CapabilitiesParser):
    """WMS 1.1.1: no namespace, SRS elements, LatLonBoundingBox."""

    version = WmsVersion.V1_1_1

    def layer_crs(self, elem: _Element) -> list[str]:
        codes: list[str] = []
        for srs_elem in self.findall(elem, "SRS"):
            # one SRS element may list several codes (WMS 1.1.1 7.1.4.5.5)
            for code in (srs_elem.text or "").split():
                if code not in codes:
                    codes.append(code)
        return codes

    def layer_bounding_boxes(self, elem: _Element) -> dict[str, BoundingBox]:
        boxes: dict[str, BoundingBox] = {}
        latlon_elem = self.find(elem, "LatLonBoundingBox")
        if latlon_elem is not None:
            box = self.read_box(latlon_elem)
            if box is not None:
                boxes[LAT_LON_CRS] = box
        for bbox_elem in self.findall(elem, "BoundingBox"):
            srs = bbox_elem.get("SRS")
            box = self.read_box(bbox_elem)
            if srs and box is not None:
                boxes[srs.strip()] = box
        return boxes


class Wms130Parser(CapabilitiesParser):
    """WMS 1.3.0: WMS namespace, CRS elements, BoundingBox@CRS."""

    version = WmsVersion.V1_3_0
    namespace = WMS_NAMESPACE

    def layer_crs(self, elem: _Element) -> list[str]:
        codes: list[str] = []
        for crs_elem in self.findall(elem, "CRS"):
            code = (crs_elem.text or "").strip()
            if code and code not in codes:
                codes.append(code)
        return codes

    def layer_bounding_boxes(self, elem: _Element) -> dict[str, BoundingBox]:
        boxes: dict[str, BoundingBox] = {}
        for bbox_elem in self.findall(elem, "BoundingBox"):
            crs = bbox_elem.get("CRS")
            box = self.read_box(bbox_elem)
            if crs and box is not None:
                boxes[crs.strip()] = box
        return boxes


_PARSERS: dict[WmsVersion, type[CapabilitiesParser]] = {
    WmsVersion.V1_1_1: Wms111Parser,
    WmsVersion.V1_3_0: Wms130Parser,
}


def get_parser(version: WmsVersion) -> type[CapabilitiesParser]:
    """Return the parser class for a grammar."""
    return _PARSERS[version]


def parse_capabilities(root: _Element, version: WmsVersion) -> ParsedCapabilities:
    """Parse a capabilities document with the grammar of ``version``.

    Args:
        root: Root element from :func:`read_document`
        version: Grammar chosen by :func:`detect_version`

    Returns:
        ParsedCapabilities

    Raises:
        CapabilityParseError: If mandatory elements are missing
    """
    return get_parser(version)(root).parse()


def _iter_crs(layers: tuple[RawLayerNode, ...]) -> Iterator[str]:
    stack = list(reversed(layers))
    while stack:
        node = stack.pop()
        yield from node.crs
        stack.extend(reversed(node.children))
