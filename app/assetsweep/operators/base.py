"""Abstract base class for deletion executors.

This module defines the DeletionExecutor interface through which the
deletion sequencer physically removes assets, and the per-asset result
type executors report.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass

from assetsweep.models.asset import AssetId


@dataclass(frozen=True, slots=True)
class DeletionResult:
    """Result of deleting a single asset.

    Attributes:
        asset_id: Asset that was operated on.
        success: Whether the asset is gone afterwards.
        error: Error message if the deletion failed, None otherwise.
        dry_run: Whether this was a dry-run (nothing was touched).
    """

    asset_id: AssetId
    success: bool
    error: str | None = None
    dry_run: bool = False

    @property
    def failed(self) -> bool:
        """Check if the deletion failed."""
        return not self.success


class DeletionExecutor(ABC):
    """Abstract base class for all deletion executors.

    Executors may refuse some requested assets (locked files, assets still
    referenced from outside the pool, protected ids) but must never remove
    an asset that was not requested.
    """

    @abstractmethod
    def delete_with_results(self, asset_ids: Iterable[AssetId]) -> list[DeletionResult]:
        """Delete assets and report one result per requested id.

        Args:
            asset_ids: Assets to delete.

        Returns:
            List of DeletionResult in request order.
        """

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the executor can operate.

        Returns:
            True if deletions can be performed, False otherwise.
        """

    def delete(self, asset_ids: Iterable[AssetId]) -> set[AssetId]:
        """Delete assets and return the ids that were actually removed.

        Args:
            asset_ids: Assets to delete.

        Returns:
            Subset of asset_ids confirmed deleted.
        """
        requested = sorted(set(asset_ids))
        return {
            result.asset_id for result in self.delete_with_results(requested) if result.success
        }
