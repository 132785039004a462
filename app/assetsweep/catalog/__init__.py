"""Asset catalog adapters.

Catalogs supply the asset records (ids, sizes, classes and dependency
edges) that the dependency engine operates on.
"""

from assetsweep.catalog.base import AssetCatalog, CatalogError
from assetsweep.catalog.json_catalog import CatalogEntry, InMemoryCatalog, JsonCatalog
from assetsweep.catalog.project_files import InvalidProjectFiles, find_invalid_project_files
from assetsweep.catalog.source_scanner import IndirectReference, SourceScanner

__all__ = [
    "AssetCatalog",
    "CatalogEntry",
    "CatalogError",
    "InMemoryCatalog",
    "IndirectReference",
    "InvalidProjectFiles",
    "JsonCatalog",
    "SourceScanner",
    "find_invalid_project_files",
]
