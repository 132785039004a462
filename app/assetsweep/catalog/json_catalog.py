"""Asset catalog backed by a JSON export.

Reads an asset registry export of the form::

    {
      "assets": [
        {"id": "/Game/Props/Chair", "size": 2048, "class": "StaticMesh",
         "dependencies": ["/Game/Materials/Wood"], "referencers": [],
         "primary": false}
      ]
    }

Each entry is validated with CatalogEntry. Malformed entries are skipped
with a warning so that they never enter the dependency graph. Referencer
lists that the export omits are derived from the dependency lists of the
other entries.
"""

import json
import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Annotated, Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StringConstraints,
    ValidationError,
    field_validator,
)

from assetsweep.catalog.base import AssetCatalog, CatalogError
from assetsweep.models.asset import AssetId, AssetRecord

logger = logging.getLogger(__name__)

NonEmptyStr = Annotated[str, StringConstraints(min_length=1)]


class CatalogEntry(BaseModel):
    """Single asset entry of a catalog export.

    Attributes:
        asset_id: Package path, read from ``id``.
        size: Size on disk in bytes.
        asset_class: Asset class name, read from ``class``.
        dependencies: Package paths this asset depends on.
        referencers: Package paths that depend on this asset.
        primary: Whether the catalog marks the asset as a primary asset.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    asset_id: Annotated[str, Field(alias="id", pattern=r"^/\S+")]
    size: Annotated[int, Field(ge=0, strict=True)] = 0
    asset_class: Annotated[str, Field(alias="class", min_length=1)] = "Unknown"
    dependencies: list[NonEmptyStr] = Field(default_factory=lambda: [])
    referencers: list[NonEmptyStr] = Field(default_factory=lambda: [])
    primary: bool = False

    @field_validator("dependencies", "referencers", mode="before")
    @classmethod
    def none_as_empty(cls, v: object) -> object:
        return [] if v is None else v

    def to_record(self) -> AssetRecord:
        return AssetRecord(
            asset_id=AssetId(self.asset_id),
            size_bytes=self.size,
            asset_class=self.asset_class,
            dependencies=tuple(AssetId(d) for d in self.dependencies),
            referencers=tuple(AssetId(r) for r in self.referencers),
            primary=self.primary,
        )


class CatalogExport(BaseModel):
    """Top level of a catalog export; entries are validated one by one."""

    model_config = ConfigDict(frozen=True)

    assets: list[Any]


def is_catalog_export(text: str) -> bool:
    """Check whether a JSON document has the shape of a catalog export."""
    try:
        CatalogExport.model_validate_json(text)
    except ValidationError:
        return False
    return True


def link_referencers(records: Iterable[AssetRecord]) -> dict[AssetId, AssetRecord]:
    """Complete referencer lists from the dependency lists of all records.

    Declared referencers keep their order; derived ones are appended.

    Args:
        records: Parsed records.

    Returns:
        Records keyed by id with completed referencer lists.
    """
    by_id = {record.asset_id: record for record in records}

    derived: dict[AssetId, dict[AssetId, None]] = {
        asset_id: dict.fromkeys(record.referencers) for asset_id, record in by_id.items()
    }
    for record in by_id.values():
        for dependency in record.dependencies:
            if dependency in derived:
                derived[dependency].setdefault(record.asset_id)

    return {
        asset_id: AssetRecord(
            asset_id=record.asset_id,
            size_bytes=record.size_bytes,
            asset_class=record.asset_class,
            dependencies=record.dependencies,
            referencers=tuple(derived[asset_id]),
            primary=record.primary,
        )
        for asset_id, record in by_id.items()
    }


class JsonCatalog(AssetCatalog):
    """Reads asset records from a JSON registry export.

    Records are loaded lazily and cached until reload() is called. The
    cleaner reloads at the start of every scan, so the folder queries of one
    scan share a single read.

    Args:
        path: Path to the JSON export.
    """

    def __init__(self, path: Path) -> None:
        self._path = path
        self._records: dict[AssetId, AssetRecord] | None = None

    @property
    def path(self) -> Path:
        """Location of the JSON export."""
        return self._path

    def is_available(self) -> bool:
        """Check if the export file exists."""
        return self._path.is_file()

    def reload(self) -> None:
        """Drop cached records so the next read hits the file again."""
        self._records = None

    def get_all_asset_records(self) -> dict[AssetId, AssetRecord]:
        """Load (once) and return all well-formed records.

        Raises:
            CatalogError: If the file is missing, unreadable or not a
                catalog export.
        """
        if self._records is not None:
            return self._records

        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except FileNotFoundError as e:
            raise CatalogError(f"Catalog not found: {self._path}") from e
        except json.JSONDecodeError as e:
            raise CatalogError(f"Invalid JSON in catalog {self._path}: {e}") from e
        except OSError as e:
            raise CatalogError(f"Failed to read catalog {self._path}: {e}") from e

        try:
            export = CatalogExport.model_validate(data)
        except ValidationError as e:
            raise CatalogError(f"Catalog {self._path} has no 'assets' list") from e

        records: list[AssetRecord] = []
        seen: set[str] = set()
        for position, entry in enumerate(export.assets):
            try:
                record = CatalogEntry.model_validate(entry).to_record()
            except ValidationError as e:
                logger.warning(
                    "Skipping malformed catalog entry #%d in %s (%d error(s))",
                    position,
                    self._path,
                    e.error_count(),
                )
                continue
            if record.asset_id in seen:
                logger.warning("Skipping duplicate catalog entry: %s", record.asset_id)
                continue
            seen.add(record.asset_id)
            records.append(record)

        self._records = link_referencers(records)
        logger.debug("Loaded %d asset record(s) from %s", len(self._records), self._path)
        return self._records


class InMemoryCatalog(AssetCatalog):
    """Catalog over records that are already in memory.

    Args:
        records: Asset records; referencer lists are completed on construction.
    """

    def __init__(self, records: Iterable[AssetRecord]) -> None:
        self._records = link_referencers(records)

    def is_available(self) -> bool:
        """Always available."""
        return True

    def get_all_asset_records(self) -> dict[AssetId, AssetRecord]:
        """Return the in-memory records."""
        return self._records
