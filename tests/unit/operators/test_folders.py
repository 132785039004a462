"""Unit tests for empty folder detection and cleanup."""

from pathlib import Path
from unittest.mock import patch

from assetsweep.operators.folders import content_folder, delete_empty_folders, find_empty_folders


class TestContentFolder:
    """Tests for content_folder()."""

    def test_maps_folders_under_mount_point(self, tmp_path: Path) -> None:
        """Content folders map to directories under the root."""
        assert content_folder(tmp_path, "/Game") == tmp_path
        assert content_folder(tmp_path, "/Game/Developers/") == tmp_path / "Developers"
        assert content_folder(tmp_path, "/Plugin/Maps", "/Plugin/") == tmp_path / "Maps"

    def test_outside_mount_point(self, tmp_path: Path) -> None:
        """Folders of other mount points have no directory."""
        assert content_folder(tmp_path, "/Other/Developers") is None
        assert content_folder(tmp_path, "/GameExtra") is None


class TestFindEmptyFolders:
    """Tests for find_empty_folders()."""

    def test_nested_empty_folders(self, tmp_path: Path) -> None:
        """Folders holding only empty folders are empty too, deepest first."""
        (tmp_path / "Old" / "Deep").mkdir(parents=True)
        (tmp_path / "Kept").mkdir()
        (tmp_path / "Kept" / "A.uasset").write_bytes(b"x")

        folders = find_empty_folders(tmp_path)

        assert folders == [tmp_path / "Old" / "Deep", tmp_path / "Old"]

    def test_root_never_reported(self, tmp_path: Path) -> None:
        """An empty root is left alone."""
        assert find_empty_folders(tmp_path) == []

    def test_missing_root(self, tmp_path: Path) -> None:
        """A missing root has no empty folders."""
        assert find_empty_folders(tmp_path / "missing") == []

    def test_skipped_folders_keep_parents(self, tmp_path: Path) -> None:
        """Skipped folders are neither reported nor make parents removable."""
        (tmp_path / "Developers" / "Me").mkdir(parents=True)
        (tmp_path / "Empty").mkdir()

        folders = find_empty_folders(tmp_path, skip=[Path("Developers")])

        assert folders == [tmp_path / "Empty"]


class TestDeleteEmptyFolders:
    """Tests for delete_empty_folders()."""

    def test_removes_folders(self, tmp_path: Path) -> None:
        """Empty folders are removed, children before parents."""
        (tmp_path / "Old" / "Deep").mkdir(parents=True)

        result = delete_empty_folders([tmp_path / "Old", tmp_path / "Old" / "Deep"])

        assert result.removed == (tmp_path / "Old" / "Deep", tmp_path / "Old")
        assert result.failed == ()
        assert not (tmp_path / "Old").exists()

    def test_dry_run(self, tmp_path: Path) -> None:
        """Dry-run reports folders without removing them."""
        (tmp_path / "Old").mkdir()

        result = delete_empty_folders([tmp_path / "Old"], dry_run=True)

        assert result.dry_run
        assert result.removed == (tmp_path / "Old",)
        assert (tmp_path / "Old").exists()

    def test_failures_collected(self, tmp_path: Path) -> None:
        """Folders that cannot be removed are reported, not raised."""
        (tmp_path / "Old").mkdir()

        with patch.object(Path, "rmdir", side_effect=OSError("busy")):
            result = delete_empty_folders([tmp_path / "Old"])

        assert result.removed == ()
        assert result.failed == ((tmp_path / "Old", "busy"),)
