"""Node classification over a relational map.

Partitions the pool into root nodes (no in-pool referencers), leaf nodes
(no in-pool dependencies) and circular nodes (members of a dependency
cycle that lies entirely inside the pool).
"""

from __future__ import annotations

from dataclasses import dataclass

from assetsweep.graph.relational_map import GraphNode, NodeKind, RelationalMap
from assetsweep.models.asset import AssetId


@dataclass(frozen=True, slots=True)
class Classification:
    """Result of classifying a relational map.

    Attributes:
        roots: Nodes with an empty referencer set, in map order.
        leaves: Nodes with an empty dependency set, in map order. A node can
            be a leaf and also have another primary kind.
        circulars: Nodes whose primary kind is CIRCULAR, in map order.
        components: Cyclic components whose members are not roots.
    """

    roots: tuple[AssetId, ...] = ()
    leaves: tuple[AssetId, ...] = ()
    circulars: tuple[AssetId, ...] = ()
    components: tuple[tuple[AssetId, ...], ...] = ()

    @property
    def is_empty(self) -> bool:
        """True if there are neither roots nor circular nodes."""
        return not self.roots and not self.circulars


def classify(relational_map: RelationalMap) -> Classification:
    """Classify every node of a relational map.

    A node is a root iff its referencer set is empty, a leaf iff its
    dependency set is empty, and circular iff it lies on an in-pool cycle
    (a strongly connected component of size > 1, or a self-loop). When a
    node is both a root and on a cycle it counts as a root.

    Args:
        relational_map: Map to classify.

    Returns:
        Classification with ordered id tuples.
    """
    roots: list[AssetId] = []
    leaves: list[AssetId] = []
    circulars: list[AssetId] = []

    for asset_id, node in relational_map.items():
        if node.is_root:
            roots.append(asset_id)
        elif node.kind == NodeKind.CIRCULAR:
            circulars.append(asset_id)
        if node.is_leaf:
            leaves.append(asset_id)

    circular_set = set(circulars)
    components = tuple(
        members
        for members in (
            tuple(asset_id for asset_id in component if asset_id in circular_set)
            for component in relational_map.circular_components
        )
        if members
    )

    return Classification(
        roots=tuple(roots),
        leaves=tuple(leaves),
        circulars=tuple(circulars),
        components=components,
    )


def select_nodes(
    relational_map: RelationalMap, asset_ids: tuple[AssetId, ...]
) -> tuple[GraphNode, ...]:
    """Resolve classified ids back to their nodes."""
    return tuple(relational_map[asset_id] for asset_id in asset_ids)

