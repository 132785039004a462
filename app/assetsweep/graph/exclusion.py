"""Exclusion rules and their propagation over the relational map.

Explicitly excluded assets are protected from deletion, and so is every
asset they need to function: each asset reachable from an excluded asset
by following dependency edges forward is marked "linked". Assets that
merely depend on an excluded asset are not protected.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator

from assetsweep.graph.relational_map import RelationalMap, build_relational_map
from assetsweep.models.asset import AssetId, AssetRecord, is_under_path, normalize_path

if TYPE_CHECKING:
    from assetsweep.catalog.base import AssetCatalog

logger = logging.getLogger(__name__)


class ExclusionRules(BaseModel):
    """User- or policy-driven exclusion rules.

    Attributes:
        assets: Exact asset ids to exclude.
        paths: Folder paths whose assets (at any depth) are excluded.
        classes: Asset class tags to exclude.
    """

    model_config = ConfigDict(extra="forbid")

    assets: Annotated[
        list[str],
        Field(default_factory=list, description="Asset ids to exclude"),
    ]
    paths: Annotated[
        list[str],
        Field(default_factory=list, description="Folder paths to exclude"),
    ]
    classes: Annotated[
        list[str],
        Field(default_factory=list, description="Asset classes to exclude"),
    ]

    @field_validator("paths")
    @classmethod
    def normalize_paths(cls, v: list[str]) -> list[str]:
        """Normalize folder paths and drop duplicates."""
        return list(dict.fromkeys(normalize_path(p) for p in v if p.strip()))

    @field_validator("assets", "classes")
    @classmethod
    def drop_duplicates(cls, v: list[str]) -> list[str]:
        """Drop blank and duplicate entries, keeping order."""
        return list(dict.fromkeys(s.strip() for s in v if s.strip()))

    @property
    def is_empty(self) -> bool:
        """True if no rule is configured."""
        return not (self.assets or self.paths or self.classes)

    def exclude_assets(self, asset_ids: Iterable[str]) -> ExclusionRules:
        """Return rules with additional excluded assets."""
        return self.model_copy(update={"assets": [*self.assets, *asset_ids]}).validated()

    def include_assets(self, asset_ids: Iterable[str]) -> ExclusionRules:
        """Return rules with the given assets no longer explicitly excluded."""
        removed = set(asset_ids)
        return self.model_copy(update={"assets": [a for a in self.assets if a not in removed]})

    def exclude_path(self, path: str) -> ExclusionRules:
        """Return rules with an additional excluded folder path."""
        return self.model_copy(update={"paths": [*self.paths, path]}).validated()

    def include_path(self, path: str) -> ExclusionRules:
        """Return rules without the folder path or any explicit asset under it."""
        folder = normalize_path(path)
        return self.model_copy(
            update={
                "paths": [p for p in self.paths if p != folder],
                "assets": [a for a in self.assets if not is_under_path(a, folder)],
            }
        )

    def exclude_class(self, asset_class: str) -> ExclusionRules:
        """Return rules with an additional excluded asset class."""
        return self.model_copy(update={"classes": [*self.classes, asset_class]}).validated()

    def include_class(self, asset_class: str) -> ExclusionRules:
        """Return rules without the given asset class."""
        return self.model_copy(update={"classes": [c for c in self.classes if c != asset_class]})

    def include_all(self) -> ExclusionRules:
        """Return empty rules."""
        return ExclusionRules()

    def validated(self) -> ExclusionRules:
        """Re-run validation (model_copy skips validators)."""
        return ExclusionRules.model_validate(self.model_dump())


@dataclass(frozen=True, slots=True)
class ExclusionSet:
    """Published result of exclusion propagation.

    Attributes:
        excluded: Explicitly excluded pool members.
        linked: Pool members reachable from an excluded asset via
            dependency edges, minus the excluded assets themselves.
    """

    excluded: frozenset[AssetId] = frozenset()
    linked: frozenset[AssetId] = frozenset()

    def __post_init__(self) -> None:
        """Validate that excluded and linked do not overlap."""
        overlap = self.excluded & self.linked
        if overlap:
            msg = f"Excluded and linked assets must be disjoint: {sorted(overlap)}"
            raise ValueError(msg)

    @property
    def protected(self) -> frozenset[AssetId]:
        """All assets that must not be deleted."""
        return self.excluded | self.linked


def resolve_explicit(
    rules: ExclusionRules,
    records: Mapping[AssetId, AssetRecord],
    catalog: AssetCatalog | None = None,
) -> set[AssetId]:
    """Expand exclusion rules into the set of explicitly excluded ids.

    Exact asset rules are taken as-is. Path rules are expanded through the
    catalog's folder index when a catalog is given, otherwise by folder
    prefix over the supplied records. Class rules match record classes.

    Args:
        rules: Exclusion rules to expand.
        records: Records of every known asset.
        catalog: Optional catalog used to resolve folder paths.

    Returns:
        Explicitly excluded asset ids (may include ids outside any pool).
    """
    explicit: set[AssetId] = {AssetId(asset_id) for asset_id in rules.assets}

    for path in rules.paths:
        if catalog is not None:
            explicit.update(catalog.get_assets_under_path(path))
        else:
            explicit.update(asset_id for asset_id in records if is_under_path(asset_id, path))

    if rules.classes:
        classes = set(rules.classes)
        explicit.update(
            asset_id for asset_id, record in records.items() if record.asset_class in classes
        )

    return explicit


def propagate(relational_map: RelationalMap, explicit: Iterable[str]) -> ExclusionSet:
    """Propagate exclusion state across dependency edges.

    Args:
        relational_map: Map of the current pool.
        explicit: Explicitly excluded ids; ids outside the pool are dropped.

    Returns:
        ExclusionSet where linked = reachable(excluded) - excluded.
    """
    excluded = frozenset(AssetId(a) for a in explicit if a in relational_map)

    reached: set[AssetId] = set()
    queue: deque[AssetId] = deque(excluded)
    while queue:
        asset_id = queue.popleft()
        for dependency in relational_map[asset_id].dependencies:
            if dependency not in reached:
                reached.add(dependency)
                queue.append(dependency)

    return ExclusionSet(excluded=excluded, linked=frozenset(reached - excluded))


def apply_exclusions(
    pool: Iterable[str],
    records: Mapping[AssetId, AssetRecord],
    rules: ExclusionRules,
    catalog: AssetCatalog | None = None,
) -> tuple[frozenset[AssetId], ExclusionSet]:
    """Remove excluded and linked assets from a pool.

    Builds a relational map over the pool, expands the rules, propagates
    them, and returns the pool minus every protected asset. Callers rebuild
    their map over the returned pool.

    Args:
        pool: Candidate asset ids.
        records: Catalog records.
        rules: Exclusion rules to apply.
        catalog: Optional catalog for path expansion.

    Returns:
        Tuple of (deletable pool, exclusion set).

    Raises:
        MissingRecordError: If a pool member has no record.
    """
    relational_map = build_relational_map(pool, records)
    if rules.is_empty:
        return relational_map.pool, ExclusionSet()

    exclusions = propagate(relational_map, resolve_explicit(rules, records, catalog))
    logger.info(
        "Excluded %d asset(s), %d linked",
        len(exclusions.excluded),
        len(exclusions.linked),
    )
    return relational_map.pool - exclusions.protected, exclusions
