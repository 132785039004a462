"""Shared types and helpers for CLI commands.

This module provides the common enums, option aliases and cleaner loading
helper used across multiple CLI command modules.
"""

from enum import Enum
from pathlib import Path
from typing import Annotated

import typer

from assetsweep.catalog.base import CatalogError
from assetsweep.catalog.json_catalog import JsonCatalog
from assetsweep.core.cleaner import ProjectCleaner
from assetsweep.core.policy import CleanerPolicy, PolicyError, load_policy
from assetsweep.errors import AssetSweepError
from assetsweep.operators.base import DeletionExecutor
from assetsweep.operators.folders import DEFAULT_MOUNT_POINT
from assetsweep.utils.formatting import print_error, print_info


class OutputFormat(str, Enum):
    """Output format options."""

    TABLE = "table"
    JSON = "json"


CatalogArgument = Annotated[
    Path,
    typer.Argument(help="Asset registry export (JSON).", show_default=False),
]

PolicyOption = Annotated[
    Path | None,
    typer.Option(
        "--policy",
        "-p",
        help="Cleaner policy file (default: ~/.config/assetsweep/policy.toml).",
    ),
]

MountOption = Annotated[
    str,
    typer.Option("--mount", help="Asset path prefix of the content root."),
]


def require_policy(policy_path: Path | None = None) -> CleanerPolicy:
    """Load the policy or exit with a helpful error message.

    Raises:
        typer.Exit: If the policy cannot be loaded.
    """
    try:
        return load_policy(policy_path)
    except PolicyError as e:
        print_error(f"Failed to load policy: {e}")
        raise typer.Exit(code=1) from e


def require_cleaner(
    catalog_path: Path,
    policy: CleanerPolicy,
    executor: DeletionExecutor | None = None,
    content_root: Path | None = None,
    mount_point: str = DEFAULT_MOUNT_POINT,
) -> ProjectCleaner:
    """Create a cleaner and run its initial scan, or exit with an error.

    Args:
        catalog_path: JSON catalog export.
        policy: Loaded cleaner policy.
        executor: Deletion executor, required only for deleting.
        content_root: Content directory to audit, if any.
        mount_point: Asset path prefix of the content root.

    Returns:
        Scanned ProjectCleaner.

    Raises:
        typer.Exit: If the catalog is missing or inconsistent.
    """
    catalog = JsonCatalog(catalog_path)
    if not catalog.is_available():
        print_error(f"Catalog not found: {catalog_path}")
        print_info("Export the asset registry to JSON and pass its path.")
        raise typer.Exit(code=1)

    cleaner = ProjectCleaner(
        catalog, executor, policy, content_root=content_root, mount_point=mount_point
    )
    try:
        cleaner.scan()
    except CatalogError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
    except AssetSweepError as e:
        print_error(f"Inconsistent catalog: {e}")
        raise typer.Exit(code=1) from e
    return cleaner
