"""
Layer catalog built on a resolved layer tree.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ogc_client_python.errors import LayerNotFoundError
from ogc_client_python.wms.model import LayerDetail, LayerSummary

if TYPE_CHECKING:
    from collections.abc import Iterator

    from ogc_client_python.wms.model import ResolvedLayerNode, ResolvedLayerTree


class LayerCatalog:
    """Summary and detail views over a resolved layer tree.

    Example:
        >>> catalog = LayerCatalog(resolve_layers(parsed.layers))
        >>> [summary.title for summary in catalog.get_layers()]
        >>> detail = catalog.get_layer_by_name("GEOLOGIE")
    """

    def __init__(self, tree: ResolvedLayerTree) -> None:
        self._tree = tree
        # first pre-order occurrence wins for duplicated names
        self._by_name: dict[str, int] = {}
        for node in tree.nodes:
            if node.name is not None:
                self._by_name.setdefault(node.name, node.index)
        self._summaries: list[LayerSummary] | None = None

    @property
    def tree(self) -> ResolvedLayerTree:
        return self._tree

    def __len__(self) -> int:
        return len(self._tree.nodes)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def _summary(self, index: int) -> LayerSummary:
        node = self._tree.nodes[index]
        return LayerSummary(
            name=node.name,
            title=node.title,
            abstract=node.abstract,
            children=[self._summary(child) for child in node.children],
        )

    def get_layers(self) -> list[LayerSummary]:
        """Summaries of the top-level layers with their full subtrees."""
        if self._summaries is None:
            self._summaries = [self._summary(root) for root in self._tree.roots]
        return list(self._summaries)

    def get_layer_by_name(self, name: str) -> LayerDetail:
        """Resolved detail of the first layer carrying ``name``.

        Raises:
            LayerNotFoundError: If no layer has that name
        """
        index = self._by_name.get(name)
        if index is None:
            raise LayerNotFoundError(name)
        node = self._tree.nodes[index]
        return LayerDetail(
            name=node.name,
            title=node.title,
            abstract=node.abstract,
            available_crs=list(node.crs),
            bounding_boxes=dict(node.bounding_boxes),
            styles=list(node.styles),
            attribution=node.attribution,
            queryable=node.queryable,
            children=[self._summary(child) for child in node.children],
        )

    def iter_named_layers(self) -> Iterator[ResolvedLayerNode]:
        """Resolved layers that carry a name, in document order."""
        return (node for node in self._tree.nodes if node.name is not None)
