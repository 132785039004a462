"""Audit of the files under a content root against the catalog.

The catalog only describes assets the registry could load. Two kinds of
files on disk fall outside it:

- non-asset files: anything the engine does not read from a content folder
  (stray sources, archives, notes);
- corrupted files: package files (``.uasset``/``.umap``) that have no
  catalog record, typically broken or saved by another engine version.

Neither kind is ever deleted automatically; they are only reported.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from assetsweep.models.asset import AssetId
from assetsweep.operators.filesystem import DEFAULT_ASSET_EXTENSIONS, DEFAULT_MOUNT_POINT

logger = logging.getLogger(__name__)

PACKAGE_EXTENSIONS: tuple[str, ...] = (".uasset", ".umap")


@dataclass(frozen=True, slots=True)
class InvalidProjectFiles:
    """Files under the content root that the catalog does not account for.

    Attributes:
        non_asset_files: Files with a suffix the engine does not load.
        corrupted_files: Package files without a catalog record.
    """

    non_asset_files: tuple[Path, ...] = ()
    corrupted_files: tuple[Path, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.non_asset_files and not self.corrupted_files


def package_id(path: Path, content_root: Path, mount_point: str = DEFAULT_MOUNT_POINT) -> AssetId:
    """Asset id of a package file under the content root.

    ``<root>/Props/Chair.uasset`` becomes ``/Game/Props/Chair``.

    Raises:
        ValueError: If path is not under content_root.
    """
    relative = path.relative_to(content_root).with_suffix("")
    return AssetId("/".join(("/" + mount_point.strip("/"), *relative.parts)))


def find_invalid_project_files(
    content_root: Path,
    known_ids: Iterable[str],
    *,
    mount_point: str = DEFAULT_MOUNT_POINT,
    engine_extensions: Iterable[str] = DEFAULT_ASSET_EXTENSIONS,
) -> InvalidProjectFiles:
    """Compare the files on disk with the catalog ids.

    Args:
        content_root: Directory the mount point maps to.
        known_ids: Ids of every asset in the catalog.
        mount_point: Asset path prefix of the content root.
        engine_extensions: Suffixes the engine reads from content folders.

    Returns:
        Non-asset and corrupted files, each sorted by path. Empty when the
        content root does not exist.
    """
    if not content_root.is_dir():
        return InvalidProjectFiles()

    known = frozenset(known_ids)
    engine = {ext.lower() for ext in engine_extensions}.union(PACKAGE_EXTENSIONS)
    try:
        files = sorted(p for p in content_root.rglob("*") if p.is_file())
    except PermissionError:
        logger.warning("Permission denied scanning content root: %s", content_root)
        return InvalidProjectFiles()

    non_asset: list[Path] = []
    corrupted: list[Path] = []
    for path in files:
        suffix = path.suffix.lower()
        if suffix not in engine:
            non_asset.append(path)
        elif suffix in PACKAGE_EXTENSIONS:
            if package_id(path, content_root, mount_point) not in known:
                corrupted.append(path)

    if non_asset or corrupted:
        logger.info(
            "Content root holds %d non-asset and %d corrupted file(s)",
            len(non_asset),
            len(corrupted),
        )
    return InvalidProjectFiles(tuple(non_asset), tuple(corrupted))
