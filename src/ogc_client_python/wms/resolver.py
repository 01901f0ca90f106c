"""
Layer attribute inheritance.

WMS child layers inherit from their ancestors:
- CRS codes are added to the inherited list
- bounding boxes override the inherited box of the same CRS only
- styles and attribution replace the inherited value as a whole

Resolution walks the raw tree in pre-order and writes each node into an
arena, so a node's parent is always resolved before the node itself.
"""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING

from ogc_client_python.wms.model import (
    RawLayerNode,
    ResolvedLayerNode,
    ResolvedLayerTree,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

# Parent of a top-level layer: nothing to inherit
_EMPTY_PARENT = ResolvedLayerNode(
    index=-1,
    parent=None,
    children=(),
    name=None,
    title="",
    abstract="",
    crs=(),
    bounding_boxes={},
    styles=(),
    attribution=None,
    queryable=False,
)


def resolve_layer(raw: RawLayerNode, parent: ResolvedLayerNode, index: int) -> ResolvedLayerNode:
    """Merge a node's own attributes over its resolved parent's.

    The returned node has no children yet; :func:`resolve_layers` fills
    them in once the subtree indices are known.
    """
    crs = parent.crs + tuple(code for code in dict.fromkeys(raw.crs) if code not in parent.crs)
    return ResolvedLayerNode(
        index=index,
        parent=None if parent is _EMPTY_PARENT else parent.index,
        children=(),
        name=raw.name,
        title=raw.title,
        abstract=raw.abstract,
        crs=crs,
        bounding_boxes={**parent.bounding_boxes, **raw.bounding_boxes},
        styles=tuple(raw.styles) if raw.styles else parent.styles,
        attribution=raw.attribution if raw.attribution is not None else parent.attribution,
        queryable=raw.queryable or parent.queryable,
    )


def resolve_layers(roots: RawLayerNode | Iterable[RawLayerNode]) -> ResolvedLayerTree:
    """Resolve inherited attributes for one or more top-level layers.

    Args:
        roots: Top-level raw layer, or several in document order

    Returns:
        ResolvedLayerTree with nodes in document pre-order
    """
    top_level = [roots] if isinstance(roots, RawLayerNode) else list(roots)

    nodes: list[ResolvedLayerNode] = []
    child_indices: list[list[int]] = []
    root_indices: list[int] = []

    # (raw node, parent arena index or None)
    stack: list[tuple[RawLayerNode, int | None]] = [(raw, None) for raw in reversed(top_level)]
    while stack:
        raw, parent_index = stack.pop()
        parent = _EMPTY_PARENT if parent_index is None else nodes[parent_index]
        index = len(nodes)
        nodes.append(resolve_layer(raw, parent, index))
        child_indices.append([])

        if parent_index is None:
            root_indices.append(index)
        else:
            child_indices[parent_index].append(index)

        stack.extend((child, index) for child in reversed(raw.children))

    linked = tuple(replace(node, children=tuple(child_indices[node.index])) for node in nodes)
    return ResolvedLayerTree(nodes=linked, roots=tuple(root_indices))
