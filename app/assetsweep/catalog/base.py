"""Abstract base class for asset catalogs.

This module defines the AssetCatalog interface that every source of asset
metadata must implement. The dependency engine reads all records once per
scan and never queries the catalog per node.
"""

from abc import ABC, abstractmethod
from pathlib import Path

from assetsweep.errors import AssetSweepError
from assetsweep.models.asset import AssetId, AssetRecord, is_under_path


class CatalogError(AssetSweepError):
    """Raised when an asset catalog cannot be read."""


class AssetCatalog(ABC):
    """Abstract base class for all asset catalogs.

    Example:
        >>> catalog = JsonCatalog(Path("assets.json"))
        >>> if catalog.is_available():
        ...     records = catalog.get_all_asset_records()
    """

    @abstractmethod
    def get_all_asset_records(self) -> dict[AssetId, AssetRecord]:
        """Return every well-formed asset record keyed by id.

        Raises:
            CatalogError: If the catalog cannot be read.
        """

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the catalog source can be read.

        Returns:
            True if the catalog can be used, False otherwise.
        """

    @property
    def path(self) -> Path | None:
        """File the records are read from, if the catalog has one."""
        return None

    def reload(self) -> None:
        """Forget cached records so the next read returns fresh data."""
        return None

    def get_assets_under_path(self, path: str) -> set[AssetId]:
        """Return ids of all assets under a folder path, at any depth."""
        return {
            asset_id for asset_id in self.get_all_asset_records() if is_under_path(asset_id, path)
        }

    def dependencies_of(self, asset_id: str) -> tuple[AssetId, ...]:
        """Return the declared dependencies of an asset (empty if unknown)."""
        record = self.get_all_asset_records().get(AssetId(asset_id))
        return record.dependencies if record else ()

    def referencers_of(self, asset_id: str) -> tuple[AssetId, ...]:
        """Return the declared referencers of an asset (empty if unknown)."""
        record = self.get_all_asset_records().get(AssetId(asset_id))
        return record.referencers if record else ()
