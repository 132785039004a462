"""Used-asset detection.

An asset is used when it is reachable, through dependency edges, from a
used root: primary content, content referenced by path from source or
config files, or content in developer folders when those are not scanned.
Everything else forms the candidate pool for cleanup.
"""

import logging
from collections import deque
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from assetsweep.catalog.source_scanner import IndirectReference
from assetsweep.core.policy import CleanerPolicy
from assetsweep.models.asset import AssetId, AssetRecord, is_under_path

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class UnusedPool:
    """Split of the catalog into used assets and cleanup candidates.

    Attributes:
        pool: Assets not reachable from any used root.
        used: Assets reachable from a used root (roots included).
        indirect: Source references that made assets used.
        developer: Assets skipped because they live in developer folders.
    """

    pool: frozenset[AssetId]
    used: frozenset[AssetId]
    indirect: tuple[IndirectReference, ...] = ()
    developer: frozenset[AssetId] = frozenset()


def reachable_from(
    roots: Iterable[AssetId],
    records: Mapping[AssetId, AssetRecord],
) -> set[AssetId]:
    """Collect roots and every known asset they transitively depend on.

    Dependencies without a record (engine or plugin content) are ignored.
    """
    seen: set[AssetId] = {root for root in roots if root in records}
    queue: deque[AssetId] = deque(seen)
    while queue:
        asset_id = queue.popleft()
        for dependency in records[asset_id].dependencies:
            if dependency in records and dependency not in seen:
                seen.add(dependency)
                queue.append(dependency)
    return seen


def find_primary_assets(
    records: Mapping[AssetId, AssetRecord],
    primary_classes: Iterable[str],
) -> set[AssetId]:
    """Return assets flagged primary or whose class is a primary class."""
    classes = set(primary_classes)
    return {
        asset_id
        for asset_id, record in records.items()
        if record.primary or record.asset_class in classes
    }


def compute_unused_pool(
    records: Mapping[AssetId, AssetRecord],
    policy: CleanerPolicy,
    indirect: Iterable[IndirectReference] = (),
) -> UnusedPool:
    """Compute the candidate pool of unused assets.

    Args:
        records: Every catalog record.
        policy: Cleaner policy (primary classes, developer folders).
        indirect: References found by the source scan.

    Returns:
        UnusedPool with the pool and the used set.
    """
    references = tuple(indirect)
    roots = find_primary_assets(records, policy.primary_classes)
    roots.update(reference.asset_id for reference in references)

    developer: set[AssetId] = set()
    if not policy.scan_developer_folders:
        developer = {
            asset_id
            for asset_id in records
            if any(is_under_path(asset_id, path) for path in policy.developer_paths)
        }

    # Developer content is kept together with everything it needs
    used = reachable_from(roots | developer, records)
    pool = frozenset(records) - used

    logger.info(
        "%d asset(s) in use (%d in developer folders), %d unused",
        len(used),
        len(developer),
        len(pool),
    )
    return UnusedPool(
        pool=pool,
        used=frozenset(used),
        indirect=references,
        developer=frozenset(developer),
    )
