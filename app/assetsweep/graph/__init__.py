"""Dependency-graph engine.

This package builds the relational map of a candidate pool, classifies its
nodes, propagates exclusions across dependency edges and sequences the
multi-round deletion loop.
"""

from assetsweep.graph.classifier import Classification, classify
from assetsweep.graph.exclusion import (
    ExclusionRules,
    ExclusionSet,
    apply_exclusions,
    propagate,
    resolve_explicit,
)
from assetsweep.graph.relational_map import (
    GraphNode,
    NodeKind,
    RelationalMap,
    build_relational_map,
)
from assetsweep.graph.sequencer import (
    BatchSelection,
    DeletionOutcome,
    DeletionSequencer,
    RoundEvent,
    select_batch,
)

__all__ = [
    "BatchSelection",
    "Classification",
    "DeletionOutcome",
    "DeletionSequencer",
    "ExclusionRules",
    "ExclusionSet",
    "GraphNode",
    "NodeKind",
    "RelationalMap",
    "RoundEvent",
    "apply_exclusions",
    "build_relational_map",
    "classify",
    "propagate",
    "resolve_explicit",
    "select_batch",
]
