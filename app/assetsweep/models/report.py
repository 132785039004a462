"""Scan report model for display and JSON export.

This module defines the cleanup statistics of a scan and the report
structure exported to JSON with metadata.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from assetsweep.models.asset import AssetRecord


@dataclass(frozen=True, slots=True)
class CleanerStats:
    """Counts describing the current cleanup state.

    Attributes:
        total_count: Assets known to the catalog.
        used_count: Assets reachable from a used root.
        indirect_count: Assets referenced from source or config files.
        unused_count: Deletable assets after exclusions.
        unused_size: Total size of the deletable assets in bytes.
        excluded_count: Explicitly excluded candidates.
        linked_count: Candidates protected through an excluded asset.
        root_count: Deletable assets with no in-pool referencers.
        circular_count: Deletable assets on an in-pool cycle.
        empty_folder_count: Folders under the content root that hold no files.
        non_asset_count: Files under the content root the engine does not load.
        corrupted_count: Package files under the content root with no catalog
            record.
    """

    total_count: int = 0
    used_count: int = 0
    indirect_count: int = 0
    unused_count: int = 0
    unused_size: int = 0
    excluded_count: int = 0
    linked_count: int = 0
    root_count: int = 0
    circular_count: int = 0
    empty_folder_count: int = 0
    non_asset_count: int = 0
    corrupted_count: int = 0

    def to_dict(self) -> dict[str, int]:
        """Convert to dictionary for JSON serialization."""
        return {
            "total": self.total_count,
            "used": self.used_count,
            "indirect": self.indirect_count,
            "unused": self.unused_count,
            "unused_size_bytes": self.unused_size,
            "excluded": self.excluded_count,
            "linked": self.linked_count,
            "roots": self.root_count,
            "circular": self.circular_count,
            "empty_folders": self.empty_folder_count,
            "non_asset_files": self.non_asset_count,
            "corrupted_files": self.corrupted_count,
        }


@dataclass(frozen=True, slots=True)
class ScanReport:
    """Complete scan result for export.

    Attributes:
        timestamp: ISO format timestamp of the scan.
        catalog: Catalog the records were read from.
        version: Version of assetsweep that performed the scan.
        stats: Cleanup statistics.
        unused: Deletable asset records.
        excluded: Explicitly excluded asset ids.
        linked: Linked asset ids.
        non_asset_files: Files under the content root the engine does not load.
        corrupted_files: Package files with no catalog record.
    """

    timestamp: str
    catalog: str
    version: str
    stats: CleanerStats
    unused: tuple[AssetRecord, ...]
    excluded: tuple[str, ...] = ()
    linked: tuple[str, ...] = ()
    non_asset_files: tuple[str, ...] = ()
    corrupted_files: tuple[str, ...] = ()

    @classmethod
    def create(
        cls,
        catalog: str,
        stats: CleanerStats,
        unused: list[AssetRecord],
        excluded: list[str],
        linked: list[str],
        non_asset_files: list[str] | None = None,
        corrupted_files: list[str] | None = None,
    ) -> ScanReport:
        """Create a ScanReport stamped with the current time and version."""
        from assetsweep import __version__

        return cls(
            timestamp=datetime.now(UTC).isoformat(),
            catalog=catalog,
            version=__version__,
            stats=stats,
            unused=tuple(unused),
            excluded=tuple(sorted(excluded)),
            linked=tuple(sorted(linked)),
            non_asset_files=tuple(non_asset_files or ()),
            corrupted_files=tuple(corrupted_files or ()),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "metadata": {
                "timestamp": self.timestamp,
                "catalog": self.catalog,
                "assetsweep_version": self.version,
            },
            "summary": self.stats.to_dict(),
            "unused": [_record_to_dict(record) for record in self.unused],
            "excluded": list(self.excluded),
            "linked": list(self.linked),
            "invalid_files": {
                "non_asset": list(self.non_asset_files),
                "corrupted": list(self.corrupted_files),
            },
        }


def _record_to_dict(record: AssetRecord) -> dict[str, Any]:
    """Convert an AssetRecord to a dictionary."""
    return {
        "id": record.asset_id,
        "class": record.asset_class,
        "size_bytes": record.size_bytes,
        "dependencies": list(record.dependencies),
        "referencers": list(record.referencers),
    }
