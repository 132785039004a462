"""Empty folder detection and cleanup.

After unused assets are deleted their folders are often left behind empty.
A folder counts as empty when neither it nor any folder below it holds a
file.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_MOUNT_POINT = "/Game"


@dataclass(frozen=True, slots=True)
class FolderCleanupResult:
    """Result of an empty folder cleanup.

    Attributes:
        removed: Folders that were removed (or would be, in dry-run).
        failed: Folders that could not be removed, with error messages.
        dry_run: Whether this was a dry-run.
    """

    removed: tuple[Path, ...]
    failed: tuple[tuple[Path, str], ...] = ()
    dry_run: bool = False


def content_folder(
    content_root: Path, path: str, mount_point: str = DEFAULT_MOUNT_POINT
) -> Path | None:
    """Map a content folder path such as ``/Game/Props`` to its directory.

    Returns:
        Directory path, or None if the folder lies outside the mount point.
    """
    folder = "/" + path.strip("/")
    mount = "/" + mount_point.strip("/")
    if folder == mount:
        return content_root
    if not folder.startswith(mount + "/"):
        return None
    return content_root / folder[len(mount) + 1 :]


def find_empty_folders(root: Path, skip: Iterable[Path] = ()) -> list[Path]:
    """Find folders under root that contain no files at any depth.

    The root itself is never reported. Folders under a skipped path are
    never reported either.

    Args:
        root: Directory to search.
        skip: Directories (absolute or relative to root) to leave alone.

    Returns:
        Empty folders, deepest first so they can be removed in order.
    """
    if not root.is_dir():
        return []

    skipped = tuple((p if p.is_absolute() else root / p) for p in skip)
    has_files: dict[Path, bool] = {}

    # Deepest paths first so children are resolved before parents
    folders = sorted(
        (p for p in root.rglob("*") if p.is_dir() and not p.is_symlink()),
        key=lambda p: len(p.parts),
        reverse=True,
    )
    for folder in folders:
        if any(folder.is_relative_to(s) for s in skipped):
            # Skipped folders keep their parents alive
            has_files[folder] = True
            continue
        try:
            children = list(folder.iterdir())
        except PermissionError:
            logger.warning("Permission denied scanning directory: %s", folder)
            has_files[folder] = True
            continue
        has_files[folder] = any(
            has_files.get(child, True) if child.is_dir() and not child.is_symlink() else True
            for child in children
        )

    return [folder for folder in folders if not has_files[folder]]


def delete_empty_folders(folders: Iterable[Path], dry_run: bool = False) -> FolderCleanupResult:
    """Remove empty folders, deepest first.

    Args:
        folders: Folders returned by find_empty_folders().
        dry_run: If True, report without removing anything.

    Returns:
        FolderCleanupResult with removed and failed folders.
    """
    ordered = sorted(folders, key=lambda p: len(p.parts), reverse=True)
    if dry_run:
        return FolderCleanupResult(removed=tuple(ordered), dry_run=True)

    removed: list[Path] = []
    failed: list[tuple[Path, str]] = []
    for folder in ordered:
        try:
            folder.rmdir()
            removed.append(folder)
        except OSError as e:
            logger.warning("Cannot remove folder %s: %s", folder, e)
            failed.append((folder, str(e)))

    logger.info("Removed %d empty folder(s)", len(removed))
    return FolderCleanupResult(removed=tuple(removed), failed=tuple(failed))
