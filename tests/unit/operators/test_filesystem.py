"""Unit tests for FilesystemExecutor.

Tests mapping of asset ids to files, deletion, dry-run mode, protected
asset rejection and error handling.
"""

from pathlib import Path
from unittest.mock import patch

import pytest
from assetsweep.models.asset import AssetId
from assetsweep.operators.filesystem import FilesystemExecutor


@pytest.fixture
def content(tmp_path: Path) -> Path:
    """Content root with a two-file asset and a single-file map."""
    root = tmp_path / "Content"
    (root / "Props").mkdir(parents=True)
    (root / "Props" / "Chair.uasset").write_bytes(b"header")
    (root / "Props" / "Chair.uexp").write_bytes(b"data")
    (root / "Maps").mkdir()
    (root / "Maps" / "Main.umap").write_bytes(b"map")
    return root


class TestFilesFor:
    """Tests for FilesystemExecutor.files_for()."""

    def test_all_backing_files(self, content: Path) -> None:
        """Every existing file with a known suffix belongs to the asset."""
        executor = FilesystemExecutor(content)

        files = executor.files_for("/Game/Props/Chair")

        assert files == [content / "Props" / "Chair.uasset", content / "Props" / "Chair.uexp"]

    def test_outside_mount_point(self, content: Path) -> None:
        """Assets outside the mount point have no files."""
        assert FilesystemExecutor(content).files_for("/Engine/Props/Chair") == []

    def test_custom_mount_point(self, content: Path) -> None:
        """Plugin mount points map to their own content root."""
        executor = FilesystemExecutor(content, mount_point="/MyPlugin/")

        assert executor.files_for("/MyPlugin/Maps/Main") == [content / "Maps" / "Main.umap"]

class TestDeleteWithResults:
    """Tests for FilesystemExecutor.delete_with_results()."""

    def test_deletes_every_file(self, content: Path) -> None:
        """Deleting an asset removes all of its files."""
        executor = FilesystemExecutor(content)

        results = executor.delete_with_results([AssetId("/Game/Props/Chair")])

        assert len(results) == 1
        assert results[0].success is True
        assert results[0].dry_run is False
        assert not (content / "Props" / "Chair.uasset").exists()
        assert not (content / "Props" / "Chair.uexp").exists()

    def test_dry_run_keeps_files(self, content: Path) -> None:
        """Dry-run reports success without touching disk."""
        executor = FilesystemExecutor(content, dry_run=True)

        results = executor.delete_with_results([AssetId("/Game/Maps/Main")])

        assert results[0].success is True
        assert results[0].dry_run is True
        assert (content / "Maps" / "Main.umap").exists()
        assert executor.dry_run

    def test_protected_asset_refused(self, content: Path) -> None:
        """Protected assets are never deleted."""
        executor = FilesystemExecutor(content, protected=["/Game/Maps/Main"])

        results = executor.delete_with_results([AssetId("/Game/Maps/Main")])

        assert results[0].failed
        assert "Protected asset" in (results[0].error or "")
        assert (content / "Maps" / "Main.umap").exists()

    def test_missing_files_fail(self, content: Path) -> None:
        """An asset without files on disk is reported as failed."""
        results = FilesystemExecutor(content).delete_with_results([AssetId("/Game/Ghost")])

        assert results[0].failed
        assert "No files on disk" in (results[0].error or "")

    def test_os_error_isolated(self, content: Path) -> None:
        """A failing unlink fails only its own asset."""
        executor = FilesystemExecutor(content)
        original_unlink = Path.unlink

        def _unlink(path: Path, missing_ok: bool = False) -> None:
            if path.name.startswith("Chair"):
                raise PermissionError("locked")
            original_unlink(path, missing_ok=missing_ok)

        with patch.object(Path, "unlink", _unlink):
            results = executor.delete_with_results(
                [AssetId("/Game/Props/Chair"), AssetId("/Game/Maps/Main")]
            )

        assert results[0].failed
        assert results[0].error == "locked"
        assert results[1].success

    def test_delete_returns_successful_ids(self, content: Path) -> None:
        """delete() returns only the ids that were removed."""
        executor = FilesystemExecutor(content)

        deleted = executor.delete([AssetId("/Game/Maps/Main"), AssetId("/Game/Ghost")])

        assert deleted == {"/Game/Maps/Main"}

    def test_is_available(self, content: Path, tmp_path: Path) -> None:
        """The executor needs an existing content root."""
        assert FilesystemExecutor(content).is_available()
        assert not FilesystemExecutor(tmp_path / "missing").is_available()
