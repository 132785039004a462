"""Scanner for assets referenced indirectly from source and config files.

Assets can be loaded by path from code or configuration without any
catalog-level reference pointing at them. Such assets look unused to the
catalog but must be kept. The scanner walks the configured source roots and
collects every quoted asset path that names a known asset. Catalog exports
themselves name every asset, so they are never scanned.
"""

import logging
import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path

from assetsweep.catalog.json_catalog import is_catalog_export
from assetsweep.models.asset import AssetId

logger = logging.getLogger(__name__)

DEFAULT_SOURCE_EXTENSIONS: tuple[str, ...] = (
    ".py",
    ".cpp",
    ".h",
    ".cs",
    ".ini",
    ".json",
    ".cfg",
)

# Quoted package path, optionally followed by ".ObjectName" or ":Subobject"
_ASSET_LITERAL = re.compile(r"""["'](/[\w\-]+(?:/[\w\-]+)+)(?:[.:][\w\-]+)*["']""")


@dataclass(frozen=True, slots=True)
class IndirectReference:
    """A source location that references an asset by path.

    Attributes:
        asset_id: Referenced asset.
        file: Source file containing the reference.
        line: 1-based line number of the reference.
    """

    asset_id: AssetId
    file: str
    line: int


class SourceScanner:
    """Finds asset paths mentioned in source and config files.

    Args:
        roots: Directories to scan recursively.
        extensions: File suffixes to read (case-insensitive).
    """

    def __init__(
        self,
        roots: Iterable[Path],
        *,
        extensions: Iterable[str] = DEFAULT_SOURCE_EXTENSIONS,
    ) -> None:
        self._roots = tuple(roots)
        self._extensions = frozenset(ext.lower() for ext in extensions)

    def is_available(self) -> bool:
        """Check if at least one source root exists."""
        return any(root.is_dir() for root in self._roots)

    def scan(
        self, known_ids: Iterable[str], skip: Iterable[Path] = ()
    ) -> list[IndirectReference]:
        """Scan all roots for references to known assets.

        Non-existent roots are skipped silently; unreadable files are
        skipped with a warning. JSON files that parse as a catalog export
        are skipped as well.

        Args:
            known_ids: Asset ids that count as references when quoted.
            skip: Files to leave out, such as the catalog being scanned.

        Returns:
            References in file order, then line order.
        """
        known = frozenset(known_ids)
        skipped = {path.resolve() for path in skip}
        references: list[IndirectReference] = []
        for source_file in self._iter_source_files():
            if source_file.resolve() in skipped:
                logger.debug("Skipping %s", source_file)
                continue
            references.extend(self._scan_file(source_file, known))
        logger.debug("Found %d indirect asset reference(s)", len(references))
        return references

    def _iter_source_files(self) -> Iterator[Path]:
        """Yield matching files under every root, sorted per root."""
        for root in self._roots:
            if not root.is_dir():
                continue
            try:
                candidates = sorted(root.rglob("*"))
            except PermissionError:
                logger.warning("Permission denied scanning directory: %s", root)
                continue
            for candidate in candidates:
                if candidate.suffix.lower() in self._extensions and candidate.is_file():
                    yield candidate

    def _scan_file(self, path: Path, known: frozenset[str]) -> Iterator[IndirectReference]:
        """Yield references found in a single file."""
        try:
            text = path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            logger.warning("Cannot read source file %s: %s", path, e)
            return

        if path.suffix.lower() == ".json" and is_catalog_export(text):
            logger.debug("Skipping catalog export %s", path)
            return

        for line_number, line in enumerate(text.splitlines(), start=1):
            for match in _ASSET_LITERAL.finditer(line):
                asset_id = match.group(1)
                if asset_id in known:
                    yield IndirectReference(
                        asset_id=AssetId(asset_id),
                        file=str(path),
                        line=line_number,
                    )
