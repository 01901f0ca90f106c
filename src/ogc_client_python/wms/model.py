"""
WMS capabilities data model.

Public views (ServiceInfo, LayerSummary, LayerDetail, ...) are immutable
Pydantic models. The layer trees used while building them are plain
dataclasses: RawLayerNode is the as-declared form taken from the document,
ResolvedLayerNode lives in an index-addressed arena with inheritance applied.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

BoundingBox = tuple[float, float, float, float]
"""(minx, miny, maxx, maxy) in the axis order declared by the document."""

DEFAULT_FEES = "None"
DEFAULT_CONSTRAINTS = "None"
DEFAULT_ABSTRACT = ""

LAT_LON_CRS = "CRS:84"
"""Key under which a 1.1.1 LatLonBoundingBox is stored."""


class EndpointState(str, Enum):
    """Lifecycle of an endpoint; READY and FAILED are terminal."""

    PENDING = "pending"
    READY = "ready"
    FAILED = "failed"


class ServiceInfo(BaseModel):
    """Service-level metadata from the capabilities document."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Service name, e.g. 'WMS' or 'OGC:WMS'")
    title: str = Field(default="", description="Human-readable title")
    abstract: str = Field(default=DEFAULT_ABSTRACT, description="Narrative description")
    fees: str = Field(default=DEFAULT_FEES, description="Fees, 'None' if not declared")
    constraints: str = Field(
        default=DEFAULT_CONSTRAINTS, description="Access constraints, 'None' if not declared"
    )


class LayerStyle(BaseModel):
    """A named rendering style offered by a layer."""

    model_config = ConfigDict(frozen=True)

    name: str
    title: str = ""
    legend_url: str | None = None


class LayerAttribution(BaseModel):
    """Attribution of a layer's data provider."""

    model_config = ConfigDict(frozen=True)

    title: str | None = None
    url: str | None = None
    logo_url: str | None = None


class LayerSummary(BaseModel):
    """Display-oriented projection of a layer and its whole subtree."""

    model_config = ConfigDict(frozen=True)

    name: str | None = None
    title: str = ""
    abstract: str = DEFAULT_ABSTRACT
    children: list[LayerSummary] = Field(default_factory=list)


class LayerDetail(BaseModel):
    """Fully resolved description of a single named layer.

    Children are summaries; they are never expanded into details.
    """

    model_config = ConfigDict(frozen=True)

    name: str | None = None
    title: str = ""
    abstract: str = DEFAULT_ABSTRACT
    available_crs: list[str] = Field(default_factory=list)
    bounding_boxes: dict[str, BoundingBox] = Field(default_factory=dict)
    styles: list[LayerStyle] = Field(default_factory=list)
    attribution: LayerAttribution | None = None
    queryable: bool = False
    children: list[LayerSummary] = Field(default_factory=list)


@dataclass
class RawLayerNode:
    """A <Layer> element as declared, without inherited values."""

    title: str = ""
    name: str | None = None
    abstract: str = DEFAULT_ABSTRACT
    crs: list[str] = field(default_factory=list)
    bounding_boxes: dict[str, BoundingBox] = field(default_factory=dict)
    styles: list[LayerStyle] = field(default_factory=list)
    attribution: LayerAttribution | None = None
    queryable: bool = False
    children: list[RawLayerNode] = field(default_factory=list)


@dataclass(frozen=True)
class ResolvedLayerNode:
    """Arena entry holding a layer with all inherited attributes applied.

    Tree links are indices into ``ResolvedLayerTree.nodes``.
    """

    index: int
    parent: int | None
    children: tuple[int, ...]
    name: str | None
    title: str
    abstract: str
    crs: tuple[str, ...]
    bounding_boxes: dict[str, BoundingBox]
    styles: tuple[LayerStyle, ...]
    attribution: LayerAttribution | None
    queryable: bool


@dataclass(frozen=True)
class ResolvedLayerTree:
    """Resolved layers in document pre-order plus the top-level indices."""

    nodes: tuple[ResolvedLayerNode, ...] = ()
    roots: tuple[int, ...] = ()

    def __len__(self) -> int:
        return len(self.nodes)

    def as_raw(self) -> list[RawLayerNode]:
        """Re-express the resolved tree as raw nodes declaring every value."""

        def build(index: int) -> RawLayerNode:
            node = self.nodes[index]
            return RawLayerNode(
                title=node.title,
                name=node.name,
                abstract=node.abstract,
                crs=list(node.crs),
                bounding_boxes=dict(node.bounding_boxes),
                styles=list(node.styles),
                attribution=node.attribution,
                queryable=node.queryable,
                children=[build(child) for child in node.children],
            )

        return [build(root) for root in self.roots]
