"""Scan command implementation.

Lists unused assets from an asset registry export after used, excluded and
linked assets have been removed from the candidate pool.
"""

import json
from pathlib import Path
from typing import Annotated

import typer

from assetsweep.cli.display import create_assets_table, print_invalid_files, print_stats
from assetsweep.cli.types import (
    CatalogArgument,
    MountOption,
    OutputFormat,
    PolicyOption,
    require_cleaner,
    require_policy,
)
from assetsweep.core.cleaner import ProjectCleaner
from assetsweep.models.report import ScanReport
from assetsweep.operators.folders import DEFAULT_MOUNT_POINT
from assetsweep.utils.formatting import console, print_error, print_info, print_success

app = typer.Typer(
    help="Scan an asset registry export for unused assets.",
    invoke_without_command=True,
    context_settings={"allow_interspersed_args": True},
)


@app.callback(invoke_without_command=True)
def scan_assets(
    catalog_path: CatalogArgument,
    policy_path: PolicyOption = None,
    content_root: Annotated[
        Path | None,
        typer.Option(
            "--content-root",
            "-r",
            help="Also report empty folders and files the catalog does not know.",
            exists=True,
            file_okay=False,
            dir_okay=True,
        ),
    ] = None,
    mount_point: MountOption = DEFAULT_MOUNT_POINT,
    output_format: Annotated[
        OutputFormat,
        typer.Option(
            "--format",
            "-f",
            help="Output format.",
            case_sensitive=False,
        ),
    ] = OutputFormat.TABLE,
    export_path: Annotated[
        Path | None,
        typer.Option(
            "--export",
            "-e",
            help="Export results to JSON file.",
        ),
    ] = None,
    limit: Annotated[
        int | None,
        typer.Option(
            "--limit",
            "-l",
            help="Limit number of listed assets.",
        ),
    ] = None,
) -> None:
    """Scan for unused assets.

    Examples:
        assetsweep scan assets.json
        assetsweep scan assets.json --format json
        assetsweep scan assets.json --export unused.json
        assetsweep scan assets.json -r Content
    """
    policy = require_policy(policy_path)
    cleaner = require_cleaner(
        catalog_path, policy, content_root=content_root, mount_point=mount_point
    )
    report = _build_report(cleaner, catalog_path)

    if export_path is not None:
        _export_report(report, export_path)

    if output_format == OutputFormat.JSON:
        console.print_json(json.dumps(report.to_dict()))
        return

    if not report.unused:
        print_success("No unused assets found.")
        print_stats(report.stats)
        print_invalid_files(report.non_asset_files, report.corrupted_files)
        return

    records = list(report.unused)
    shown = records[:limit] if limit else records
    console.print(create_assets_table(shown, dict(cleaner.get_relational_map())))
    print_stats(report.stats)
    print_invalid_files(report.non_asset_files, report.corrupted_files)
    if limit and len(shown) < len(records):
        console.print(f"[dim](showing {len(shown)} of {len(records)}, limited to {limit})[/dim]")


def _build_report(cleaner: ProjectCleaner, catalog_path: Path) -> ScanReport:
    """Create the export report from the cleaner state."""
    return ScanReport.create(
        catalog=str(catalog_path),
        stats=cleaner.stats,
        unused=cleaner.unused_records(),
        excluded=list(cleaner.excluded),
        linked=list(cleaner.linked),
        non_asset_files=[str(p) for p in cleaner.invalid_files.non_asset_files],
        corrupted_files=[str(p) for p in cleaner.invalid_files.corrupted_files],
    )


def _export_report(report: ScanReport, export_path: Path) -> None:
    """Export the scan report to a JSON file."""
    export_path = export_path.resolve()
    if export_path.is_dir():
        print_error(f"Export path is a directory: {export_path}")
        raise typer.Exit(code=1)

    try:
        export_path.parent.mkdir(parents=True, exist_ok=True)
        export_path.write_text(json.dumps(report.to_dict(), indent=2))
        print_info(f"Results exported to {export_path}")
    except OSError as e:
        print_error(f"Failed to export: {e}")
        raise typer.Exit(code=1) from e
