"""Cleaner facade over the dependency engine.

ProjectCleaner ties the collaborators together: it reads records from the
catalog, determines the unused pool, applies exclusion rules, keeps the
relational map of the deletable pool current and runs the deletion loop.
Callers pull snapshots after every mutating call; the cleaner never pushes
state anywhere.
"""

import logging
import threading
from collections.abc import Iterable
from dataclasses import replace
from pathlib import Path

from assetsweep.catalog.base import AssetCatalog
from assetsweep.catalog.project_files import InvalidProjectFiles, find_invalid_project_files
from assetsweep.catalog.source_scanner import IndirectReference, SourceScanner
from assetsweep.core.policy import CleanerPolicy
from assetsweep.core.usage import UnusedPool, compute_unused_pool
from assetsweep.graph.classifier import Classification, classify, select_nodes
from assetsweep.graph.exclusion import ExclusionRules, ExclusionSet, apply_exclusions
from assetsweep.graph.relational_map import GraphNode, RelationalMap, build_relational_map
from assetsweep.graph.sequencer import DeletionOutcome, DeletionSequencer, ProgressCallback
from assetsweep.models.asset import AssetId, AssetRecord, total_size
from assetsweep.models.report import CleanerStats
from assetsweep.operators.base import DeletionExecutor
from assetsweep.operators.folders import DEFAULT_MOUNT_POINT, content_folder, find_empty_folders

logger = logging.getLogger(__name__)


class ProjectCleaner:
    """Finds unused assets and deletes them in dependency order.

    Call scan() first; every other query works on the state the last scan
    or rule change produced.

    Args:
        catalog: Source of asset records.
        executor: Collaborator that physically deletes assets. Only needed
            by run_deletion_loop().
        policy: Cleaner policy; its exclusion rules are the starting rules.
        source_scanner: Optional scanner for indirect references. Built from
            the policy's source roots when omitted.
        content_root: Directory the mount point maps to. When given, scan()
            also reports empty folders and files the catalog does not know.
        mount_point: Asset path prefix of the content root.
    """

    def __init__(
        self,
        catalog: AssetCatalog,
        executor: DeletionExecutor | None = None,
        policy: CleanerPolicy | None = None,
        source_scanner: SourceScanner | None = None,
        content_root: Path | None = None,
        mount_point: str = DEFAULT_MOUNT_POINT,
    ) -> None:
        self._catalog = catalog
        self._executor = executor
        self._policy = policy or CleanerPolicy()
        self._rules = self._policy.exclusions
        if source_scanner is None and self._policy.source_roots:
            source_scanner = SourceScanner(
                self._policy.source_roots, extensions=self._policy.source_extensions
            )
        self._source_scanner = source_scanner
        self._content_root = content_root
        self._mount_point = mount_point

        self._records: dict[AssetId, AssetRecord] = {}
        self._unused = UnusedPool(pool=frozenset(), used=frozenset())
        self._exclusions = ExclusionSet()
        self._map = RelationalMap({})
        self._invalid_files = InvalidProjectFiles()
        self._empty_folders: tuple[Path, ...] = ()
        self._scanned = False

    # === Snapshots ===

    @property
    def rules(self) -> ExclusionRules:
        """Current exclusion rules."""
        return self._rules

    @property
    def records(self) -> dict[AssetId, AssetRecord]:
        """Records read by the last scan."""
        return self._records

    @property
    def excluded(self) -> frozenset[AssetId]:
        """Explicitly excluded candidates."""
        return self._exclusions.excluded

    @property
    def linked(self) -> frozenset[AssetId]:
        """Candidates protected through an excluded asset."""
        return self._exclusions.linked

    @property
    def unused(self) -> frozenset[AssetId]:
        """Deletable pool: unused assets minus excluded and linked ones."""
        return self._map.pool

    @property
    def indirect_references(self) -> tuple[IndirectReference, ...]:
        """Source references found by the last scan."""
        return self._unused.indirect

    @property
    def invalid_files(self) -> InvalidProjectFiles:
        """Non-asset and corrupted files found by the last scan."""
        return self._invalid_files

    @property
    def empty_folders(self) -> tuple[Path, ...]:
        """Empty folders found by the last scan, deepest first."""
        return self._empty_folders

    def get_relational_map(self) -> RelationalMap:
        """Return the relational map of the deletable pool."""
        return self._map

    def get_classification(self) -> Classification:
        """Classify the current relational map."""
        return classify(self._map)

    def get_root_nodes(self) -> tuple[GraphNode, ...]:
        """Deletable nodes that nothing in the pool references."""
        return select_nodes(self._map, self.get_classification().roots)

    def get_circular_nodes(self) -> tuple[GraphNode, ...]:
        """Deletable nodes that lie on an in-pool cycle."""
        return select_nodes(self._map, self.get_classification().circulars)

    def get_leaf_nodes(self) -> tuple[GraphNode, ...]:
        """Deletable nodes that depend on nothing in the pool."""
        return select_nodes(self._map, self.get_classification().leaves)

    def unused_records(self) -> list[AssetRecord]:
        """Records of the deletable pool, sorted by id."""
        return [self._records[asset_id] for asset_id in sorted(self._map.pool)]

    @property
    def stats(self) -> CleanerStats:
        """Statistics of the current state."""
        classification = self.get_classification()
        return CleanerStats(
            total_count=len(self._records),
            used_count=len(self._unused.used),
            indirect_count=len({ref.asset_id for ref in self._unused.indirect}),
            unused_count=len(self._map),
            unused_size=total_size(self.unused_records()),
            excluded_count=len(self._exclusions.excluded),
            linked_count=len(self._exclusions.linked),
            root_count=len(classification.roots),
            circular_count=len(classification.circulars),
            empty_folder_count=len(self._empty_folders),
            non_asset_count=len(self._invalid_files.non_asset_files),
            corrupted_count=len(self._invalid_files.corrupted_files),
        )

    # === Mutations ===

    def scan(self) -> CleanerStats:
        """Read fresh records and rebuild every derived structure.

        Raises:
            CatalogError: If the catalog cannot be read.
            MissingRecordError: If the catalog is internally inconsistent.
        """
        self._catalog.reload()
        self._records = dict(self._catalog.get_all_asset_records())

        indirect: list[IndirectReference] = []
        if self._source_scanner is not None:
            skip = [self._catalog.path] if self._catalog.path is not None else []
            indirect = self._source_scanner.scan(self._records, skip=skip)

        self._unused = compute_unused_pool(self._records, self._policy, indirect)
        if self._content_root is not None:
            self._invalid_files = find_invalid_project_files(
                self._content_root, self._records, mount_point=self._mount_point
            )
            self._empty_folders = tuple(self.find_empty_folders())
        self._scanned = True
        self._rebuild()
        return self.stats

    def set_explicit_exclusions(
        self,
        asset_ids: Iterable[str] = (),
        paths: Iterable[str] = (),
        classes: Iterable[str] = (),
    ) -> None:
        """Replace the exclusion rules and rebuild."""
        self._set_rules(
            ExclusionRules(assets=list(asset_ids), paths=list(paths), classes=list(classes))
        )

    def exclude_assets(self, asset_ids: Iterable[str]) -> None:
        """Exclude assets and rebuild."""
        self._set_rules(self._rules.exclude_assets(asset_ids))

    def include_assets(self, asset_ids: Iterable[str]) -> None:
        """Stop excluding assets and rebuild."""
        self._set_rules(self._rules.include_assets(asset_ids))

    def include_path(self, path: str) -> None:
        """Stop excluding a folder (and explicit assets inside it) and rebuild."""
        self._set_rules(self._rules.include_path(path))

    def include_all(self) -> None:
        """Drop every exclusion rule and rebuild."""
        self._set_rules(self._rules.include_all())

    def run_deletion_loop(
        self,
        progress: ProgressCallback | None = None,
        cancel: threading.Event | None = None,
    ) -> DeletionOutcome:
        """Delete the deletable pool in dependency order.

        Deleted assets are dropped from the cleaner state afterwards and the
        map is rebuilt over the rest. This also happens when the loop stops
        with an exception; the exception itself propagates unchanged.

        Raises:
            NoProgressError: If a round deleted nothing.
            MissingRecordError: If a pool member lost its record.
            OSError: Whatever the executor raises.
        """
        if self._executor is None:
            msg = "A deletion executor is required to delete assets"
            raise RuntimeError(msg)

        sequencer = DeletionSequencer(
            self._records,
            self._executor,
            chunk_limit=self._policy.chunk_limit,
            retry_on_no_progress=self._policy.retry_on_no_progress,
        )
        try:
            return sequencer.run(self._map.pool, progress=progress, cancel=cancel)
        finally:
            self._forget(sequencer.deleted)

    def find_empty_folders(self) -> list[Path]:
        """Find empty folders under the content root, deepest first.

        Developer folders are left alone unless the policy scans them.
        Returns an empty list without a content root.
        """
        if self._content_root is None:
            return []
        skip: list[Path] = []
        if not self._policy.scan_developer_folders:
            for folder in self._policy.developer_paths:
                directory = content_folder(self._content_root, folder, self._mount_point)
                if directory is not None:
                    skip.append(directory)
        return find_empty_folders(self._content_root, skip=skip)

    # === Internals ===

    def _set_rules(self, rules: ExclusionRules) -> None:
        self._rules = rules
        if self._scanned:
            self._rebuild()

    def _rebuild(self) -> None:
        deletable, self._exclusions = apply_exclusions(
            self._unused.pool, self._records, self._rules, self._catalog
        )
        self._map = build_relational_map(deletable, self._records)
        logger.debug("Rebuilt %r", self._map)

    def _forget(self, deleted: Iterable[AssetId]) -> None:
        gone = frozenset(deleted)
        if not gone:
            return
        for asset_id in gone:
            self._records.pop(asset_id, None)
        self._unused = replace(self._unused, pool=self._unused.pool - gone)
        self._rebuild()
