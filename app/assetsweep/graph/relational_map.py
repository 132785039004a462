"""Relational map of the candidate asset pool.

The relational map is a directed graph of "depends-on" and "referenced-by"
edges restricted to the assets in the current pool. Nodes hold asset ids,
never references to each other, and the map owns every node. The map is
rebuilt from scratch whenever the pool changes.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from enum import Enum

from assetsweep.errors import MissingRecordError
from assetsweep.graph.components import cyclic_components
from assetsweep.models.asset import AssetId, AssetRecord

logger = logging.getLogger(__name__)


class NodeKind(str, Enum):
    """Primary classification of a graph node.

    Precedence when a node satisfies several predicates is
    ROOT > CIRCULAR > LEAF > INTERNAL.

    Attributes:
        ROOT: Nothing in the pool references the node.
        CIRCULAR: The node lies on a dependency cycle inside the pool.
        LEAF: The node depends on nothing in the pool.
        INTERNAL: The node has both in-pool referencers and dependencies.
    """

    ROOT = "root"
    CIRCULAR = "circular"
    LEAF = "leaf"
    INTERNAL = "internal"


@dataclass(frozen=True, slots=True)
class GraphNode:
    """A pool member with its pool-restricted edges.

    Attributes:
        asset_id: Identifier of the asset this node stands for.
        dependencies: In-pool assets this asset depends on.
        referencers: In-pool assets that depend on this asset.
        kind: Primary classification of the node.
    """

    asset_id: AssetId
    dependencies: tuple[AssetId, ...]
    referencers: tuple[AssetId, ...]
    kind: NodeKind

    @property
    def is_root(self) -> bool:
        """Nothing in the pool still needs this asset."""
        return not self.referencers

    @property
    def is_leaf(self) -> bool:
        """This asset needs nothing else in the pool."""
        return not self.dependencies

    @property
    def is_circular(self) -> bool:
        """This asset lies on an in-pool dependency cycle."""
        return self.kind == NodeKind.CIRCULAR


class RelationalMap(Mapping[AssetId, GraphNode]):
    """Read-only mapping of asset id to graph node over exactly one pool.

    Every id appearing in a node's edge sets is itself a key of the map.
    Instances are snapshots: a changed pool gets a new map.
    """

    __slots__ = ("_circular_components", "_nodes")

    def __init__(
        self,
        nodes: dict[AssetId, GraphNode],
        circular_components: tuple[tuple[AssetId, ...], ...] = (),
    ) -> None:
        self._nodes = nodes
        self._circular_components = circular_components

    def __getitem__(self, asset_id: AssetId) -> GraphNode:
        return self._nodes[asset_id]

    def __iter__(self) -> Iterator[AssetId]:
        return iter(self._nodes)

    def __len__(self) -> int:
        return len(self._nodes)

    def __repr__(self) -> str:
        return f"RelationalMap(nodes={len(self._nodes)}, edges={self.edge_count})"

    @property
    def pool(self) -> frozenset[AssetId]:
        """The pool this map was built over."""
        return frozenset(self._nodes)

    @property
    def edge_count(self) -> int:
        """Number of pool-internal dependency edges."""
        return sum(len(node.dependencies) for node in self._nodes.values())

    @property
    def circular_components(self) -> tuple[tuple[AssetId, ...], ...]:
        """Cyclic strongly connected components, each as a tuple of ids."""
        return self._circular_components

    def nodes(self) -> tuple[GraphNode, ...]:
        """All nodes in map order."""
        return tuple(self._nodes.values())


def _restrict(ids: Iterable[AssetId], pool: frozenset[AssetId]) -> dict[AssetId, None]:
    """Keep pool members only, as an insertion-ordered set."""
    return dict.fromkeys(asset_id for asset_id in ids if asset_id in pool)


def _kind_of(
    dependencies: dict[AssetId, None],
    referencers: dict[AssetId, None],
    circular: bool,
) -> NodeKind:
    if not referencers:
        return NodeKind.ROOT
    if circular:
        return NodeKind.CIRCULAR
    if not dependencies:
        return NodeKind.LEAF
    return NodeKind.INTERNAL


def build_relational_map(
    pool: Iterable[str],
    records: Mapping[AssetId, AssetRecord],
) -> RelationalMap:
    """Build the relational map of a pool from pre-fetched catalog records.

    For every pool member a node is created whose dependency set is the
    record's dependencies intersected with the pool and whose referencer
    set is the record's referencers intersected with the pool. Edges are
    made symmetric: an in-pool dependency edge A -> B always shows up as a
    referencer A on B, even if B's record does not list it. Assets outside
    the pool contribute neither nodes nor edges.

    Nodes are keyed in sorted id order so that two builds over the same
    inputs produce identical maps.

    Args:
        pool: Candidate asset ids.
        records: Catalog records for (at least) every pool member.

    Returns:
        A freshly built RelationalMap.

    Raises:
        MissingRecordError: If a pool member has no record.
    """
    members = frozenset(AssetId(asset_id) for asset_id in pool)
    ordered = sorted(members)

    dependencies: dict[AssetId, dict[AssetId, None]] = {}
    referencers: dict[AssetId, dict[AssetId, None]] = {}

    for asset_id in ordered:
        record = records.get(asset_id)
        if record is None:
            raise MissingRecordError(asset_id)
        dependencies[asset_id] = _restrict(record.dependencies, members)
        referencers[asset_id] = _restrict(record.referencers, members)

    # Symmetrise so that referencer sets agree with dependency edges
    for asset_id in ordered:
        for target in dependencies[asset_id]:
            referencers[target].setdefault(asset_id)
        for source in tuple(referencers[asset_id]):
            dependencies[source].setdefault(asset_id)

    adjacency = {asset_id: tuple(targets) for asset_id, targets in dependencies.items()}
    components = cyclic_components(ordered, adjacency)
    circular = {asset_id for component in components for asset_id in component}

    nodes = {
        asset_id: GraphNode(
            asset_id=asset_id,
            dependencies=tuple(dependencies[asset_id]),
            referencers=tuple(referencers[asset_id]),
            kind=_kind_of(dependencies[asset_id], referencers[asset_id], asset_id in circular),
        )
        for asset_id in ordered
    }

    relational_map = RelationalMap(nodes, tuple(components))
    logger.debug("Built %r with %d circular component(s)", relational_map, len(components))
    return relational_map
