"""Asset domain models.

This module defines the identifier and record types the dependency engine
operates on. Records are supplied by an asset catalog and are never mutated
by the engine; it only filters their edge lists against the current pool.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import NewType

AssetId = NewType("AssetId", str)
"""Package path of an asset, e.g. ``/Game/Props/Chair``."""


def normalize_path(path: str) -> str:
    """Normalize a content folder path for prefix comparison.

    Strips trailing slashes and guarantees a leading slash, so that
    ``Game/Props/`` and ``/Game/Props`` compare equal.

    Args:
        path: Folder path as typed by the user or read from a policy file.

    Returns:
        Normalized folder path ("/" for the content root).
    """
    stripped = path.strip().strip("/")
    return f"/{stripped}" if stripped else "/"


def is_under_path(asset_id: str, path: str) -> bool:
    """Check whether an asset id lives under a folder path.

    Matching respects folder boundaries: ``/Game/Props`` contains
    ``/Game/Props/Chair`` and ``/Game/Props/Sub/Lamp`` but not
    ``/Game/PropsOld/Chair``.

    Args:
        asset_id: Asset package path.
        path: Folder path (normalized or not).

    Returns:
        True if the asset is inside the folder (at any depth).
    """
    folder = normalize_path(path)
    if folder == "/":
        return True
    return asset_id.startswith(folder + "/")


@dataclass(frozen=True, slots=True)
class AssetRecord:
    """Catalog metadata for a single asset.

    Attributes:
        asset_id: Unique, stable package path of the asset.
        size_bytes: On-disk size of the asset in bytes.
        asset_class: Class/type tag (e.g., "StaticMesh", "Material").
        dependencies: Assets this asset depends on.
        referencers: Assets that depend on this asset.
        primary: Whether the catalog flags the asset as primary content.
    """

    asset_id: AssetId
    size_bytes: int = 0
    asset_class: str = "Unknown"
    dependencies: tuple[AssetId, ...] = ()
    referencers: tuple[AssetId, ...] = ()
    primary: bool = False

    def __post_init__(self) -> None:
        """Validate record data after initialization."""
        if not self.asset_id:
            msg = "Asset id cannot be empty"
            raise ValueError(msg)
        if self.size_bytes < 0:
            msg = f"Asset size cannot be negative, got {self.size_bytes}"
            raise ValueError(msg)

    @property
    def path(self) -> str:
        """Folder containing the asset (e.g., ``/Game/Props``)."""
        folder, _, _ = self.asset_id.rpartition("/")
        return folder or "/"

    @property
    def name(self) -> str:
        """Asset name without its folder (e.g., ``Chair``)."""
        return self.asset_id.rpartition("/")[2]

    def is_under(self, path: str) -> bool:
        """Check whether this asset lives under the given folder path."""
        return is_under_path(self.asset_id, path)


def total_size(records: list[AssetRecord]) -> int:
    """Sum the sizes of a list of asset records."""
    return sum(record.size_bytes for record in records)
