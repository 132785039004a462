"""Filesystem deletion executor.

Deletes the on-disk files backing content assets, with dry-run support and
a protected-asset check. An asset id such as ``/Game/Props/Chair`` maps to
``<content_root>/Props/Chair.uasset`` (and the other configured extensions).
"""

import logging
from collections.abc import Iterable
from pathlib import Path

from assetsweep.models.asset import AssetId
from assetsweep.operators.base import DeletionExecutor, DeletionResult
from assetsweep.operators.folders import DEFAULT_MOUNT_POINT

logger = logging.getLogger(__name__)

DEFAULT_ASSET_EXTENSIONS: tuple[str, ...] = (".uasset", ".umap", ".uexp", ".ubulk")


class FilesystemExecutor(DeletionExecutor):
    """Deletes asset files under a content root.

    Attributes:
        _content_root: Directory the mount point maps to.
        _mount_point: Asset path prefix that maps to the content root.
        _extensions: File suffixes that make up one asset on disk.
        _protected: Asset ids that must never be deleted.
        _dry_run: If True, simulate deletions without modifying the filesystem.
    """

    def __init__(
        self,
        content_root: Path,
        *,
        mount_point: str = DEFAULT_MOUNT_POINT,
        extensions: Iterable[str] = DEFAULT_ASSET_EXTENSIONS,
        protected: Iterable[str] = (),
        dry_run: bool = False,
    ) -> None:
        """Initialize the FilesystemExecutor.

        Args:
            content_root: Directory holding the mount point's files.
            mount_point: Asset path prefix mapped to content_root.
            extensions: File suffixes belonging to an asset.
            protected: Asset ids to refuse.
            dry_run: If True, report what would be deleted without deleting.
        """
        self._content_root = content_root
        self._mount_point = "/" + mount_point.strip("/")
        self._extensions = tuple(extensions)
        self._protected = frozenset(protected)
        self._dry_run = dry_run

    @property
    def content_root(self) -> Path:
        """Directory the mount point maps to."""
        return self._content_root

    @property
    def dry_run(self) -> bool:
        """Whether deletions are simulated."""
        return self._dry_run

    def is_available(self) -> bool:
        """Check if the content root exists."""
        return self._content_root.is_dir()

    def files_for(self, asset_id: str) -> list[Path]:
        """Return the existing files backing an asset.

        Args:
            asset_id: Asset package path.

        Returns:
            Existing files, in extension order. Empty if the asset lies
            outside the mount point or has no files on disk.
        """
        prefix = self._mount_point + "/"
        if not asset_id.startswith(prefix):
            return []
        relative = asset_id[len(prefix) :]
        base = self._content_root / relative
        return [
            candidate
            for ext in self._extensions
            if (candidate := base.with_name(base.name + ext)).is_file()
        ]

    def delete_with_results(self, asset_ids: Iterable[AssetId]) -> list[DeletionResult]:
        """Delete multiple assets and return results.

        Each asset is checked against the protected set before deletion.
        Failures are isolated per asset.

        Args:
            asset_ids: Assets to delete.

        Returns:
            List of DeletionResult, one per input id.
        """
        results: list[DeletionResult] = []

        for asset_id in asset_ids:
            if asset_id in self._protected:
                results.append(
                    DeletionResult(
                        asset_id=asset_id,
                        success=False,
                        error=f"Protected asset cannot be deleted: {asset_id}",
                    )
                )
                continue

            results.append(self._delete_single(asset_id))

        return results

    def _delete_single(self, asset_id: AssetId) -> DeletionResult:
        """Delete the files of a single asset.

        Args:
            asset_id: Asset to delete.

        Returns:
            DeletionResult indicating success or failure.
        """
        files = self.files_for(asset_id)
        if not files:
            return DeletionResult(
                asset_id=asset_id,
                success=False,
                error=f"No files on disk for asset: {asset_id}",
            )

        if self._dry_run:
            logger.info("Dry-run: would delete %s (%d file(s))", asset_id, len(files))
            return DeletionResult(asset_id=asset_id, success=True, dry_run=True)

        try:
            for path in files:
                path.unlink()
        except OSError as e:
            logger.warning("Failed to delete %s: %s", asset_id, e)
            return DeletionResult(asset_id=asset_id, success=False, error=str(e))

        logger.debug("Deleted %s", asset_id)
        return DeletionResult(asset_id=asset_id, success=True)
