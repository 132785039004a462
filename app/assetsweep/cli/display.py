"""Shared Rich display functions for nodes, statistics and results.

Provides reusable table builders and summary printers used by the scan,
graph and clean commands.
"""

from rich.table import Table

from assetsweep.graph.relational_map import GraphNode, NodeKind
from assetsweep.graph.sequencer import RoundEvent
from assetsweep.models.asset import AssetId, AssetRecord
from assetsweep.models.report import CleanerStats
from assetsweep.operators.base import DeletionResult
from assetsweep.utils.formatting import console, format_size, print_success, print_warning

_KIND_STYLES: dict[NodeKind, str] = {
    NodeKind.ROOT: "root",
    NodeKind.CIRCULAR: "circular",
    NodeKind.LEAF: "leaf",
    NodeKind.INTERNAL: "internal",
}


def create_assets_table(records: list[AssetRecord], nodes: dict[AssetId, GraphNode]) -> Table:
    """Create a Rich table of deletable assets.

    Args:
        records: Records to list.
        nodes: Graph nodes of the deletable pool, for the kind column.

    Returns:
        Rich Table with Asset, Class, Size, Kind and Refs columns.
    """
    table = Table(
        title="Unused Assets",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Asset", no_wrap=True)
    table.add_column("Class", style="muted")
    table.add_column("Size", style="info", justify="right")
    table.add_column("Kind", width=9)
    table.add_column("Deps", justify="right", width=5)

    for record in records:
        node = nodes.get(record.asset_id)
        kind = node.kind if node else NodeKind.INTERNAL
        style = _KIND_STYLES[kind]
        table.add_row(
            record.asset_id,
            record.asset_class,
            format_size(record.size_bytes),
            f"[{style}]{kind.value}[/]",
            str(len(node.dependencies)) if node else "-",
        )

    return table


def create_nodes_table(title: str, nodes: tuple[GraphNode, ...]) -> Table:
    """Create a Rich table of graph nodes with their in-pool edges."""
    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Asset", no_wrap=True)
    table.add_column("Kind", width=9)
    table.add_column("Depends on")
    table.add_column("Referenced by")

    for node in nodes:
        style = _KIND_STYLES[node.kind]
        table.add_row(
            f"[{style}]{node.asset_id}[/]",
            node.kind.value,
            _format_ids(node.dependencies),
            _format_ids(node.referencers),
        )

    return table


def print_stats(stats: CleanerStats) -> None:
    """Print a one-paragraph summary of cleanup statistics."""
    console.print(
        f"\n[text]{stats.unused_count}[/] unused asset(s) "
        f"([info]{format_size(stats.unused_size)}[/]) of {stats.total_count} total"
    )
    parts = [
        f"[muted]{stats.used_count} in use[/]",
        f"[muted]{stats.indirect_count} referenced from source[/]",
        f"[excluded]{stats.excluded_count} excluded[/]",
        f"[linked]{stats.linked_count} linked[/]",
        f"[root]{stats.root_count} root[/]",
        f"[circular]{stats.circular_count} circular[/]",
    ]
    console.print(", ".join(parts))
    project = [
        f"[warning]{count} {label}[/]"
        for count, label in (
            (stats.empty_folder_count, "empty folder(s)"),
            (stats.non_asset_count, "non-asset file(s)"),
            (stats.corrupted_count, "corrupted file(s)"),
        )
        if count
    ]
    if project:
        console.print(", ".join(project))


def print_round(event: RoundEvent) -> None:
    """Print a progress line for a finished deletion round."""
    console.print(
        f"[muted]Round {event.round_number}:[/] "
        f"deleted {event.deleted}/{event.batch_size} {event.selection.value} asset(s), "
        f"{event.remaining} remaining"
    )


def print_deletion_failures(results: list[DeletionResult]) -> None:
    """Print assets the executor refused, if any."""
    failures = [r for r in results if r.failed]
    if not failures:
        return
    table = Table(title="Failed Deletions", show_lines=False)
    table.add_column("Asset", style="bold")
    table.add_column("Error", style="dim")
    for result in failures:
        table.add_row(result.asset_id, result.error or "Unknown error")
    console.print(table)


def print_invalid_files(non_asset_files: tuple[str, ...], corrupted_files: tuple[str, ...]) -> None:
    """Print files under the content root that the catalog does not know."""
    if not non_asset_files and not corrupted_files:
        return
    table = Table(title="Invalid Project Files", show_lines=False)
    table.add_column("File", style="bold")
    table.add_column("Problem", style="warning")
    for path in non_asset_files:
        table.add_row(path, "non-asset file")
    for path in corrupted_files:
        table.add_row(path, "not in catalog")
    console.print(table)


def print_deletion_summary(deleted: int, rounds: int, size_bytes: int, dry_run: bool) -> None:
    """Print the outcome of a deletion loop."""
    if dry_run:
        print_success(
            f"Dry-run: {deleted} asset(s) ({format_size(size_bytes)}) "
            f"would be deleted in {rounds} round(s)."
        )
    elif deleted:
        print_success(
            f"Deleted {deleted} asset(s) ({format_size(size_bytes)}) in {rounds} round(s)."
        )
    else:
        print_warning("No assets were deleted.")


def _format_ids(ids: tuple[AssetId, ...], limit: int = 3) -> str:
    if not ids:
        return "[muted]-[/]"
    shown = ", ".join(ids[:limit])
    if len(ids) > limit:
        shown += f" (+{len(ids) - limit} more)"
    return shown
