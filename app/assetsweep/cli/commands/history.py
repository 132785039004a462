"""History command for viewing past cleanup actions.

This module provides the `assetsweep history` command for viewing the
audit trail of deletions and exclusion rule changes.
"""

import json
from datetime import datetime
from typing import Annotated

import typer
from rich.table import Table

from assetsweep.core.state import StateManager
from assetsweep.models.history import HistoryActionType, HistoryEntry
from assetsweep.utils.formatting import console, format_size, print_info

app = typer.Typer(
    name="history",
    help="View history of cleanup actions.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def history(
    limit: Annotated[
        int,
        typer.Option(
            "--limit",
            "-n",
            help="Maximum number of entries to show.",
        ),
    ] = 20,
    action_type: Annotated[
        HistoryActionType | None,
        typer.Option(
            "--type",
            "-t",
            help="Only show entries of this action type.",
            case_sensitive=False,
        ),
    ] = None,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Output as JSON.",
        ),
    ] = False,
) -> None:
    """Show history of cleanup actions.

    Examples:
        assetsweep history              # Show last 20 entries
        assetsweep history -n 50        # Show last 50 entries
        assetsweep history -t delete    # Deletions only
        assetsweep history --json       # JSON output for scripting
    """
    entries = StateManager().get_history(limit=limit, action_type=action_type)

    if not entries:
        print_info("No history entries found.")
        return

    if json_output:
        console.print_json(json.dumps([entry.to_dict() for entry in entries]))
    else:
        _print_table(entries)


def _print_table(entries: list[HistoryEntry]) -> None:
    """Print history as a Rich table."""
    table = Table(title="Cleanup History")
    table.add_column("ID", style="dim")
    table.add_column("Timestamp", style="info")
    table.add_column("Action", style="success")
    table.add_column("Items", style="text")
    table.add_column("Size", justify="right")

    for entry in entries:
        count = len(entry.items)
        names = ", ".join(item.name for item in entry.items[:3])
        if count > 3:
            names += f" (+{count - 3} more)"

        action = entry.action_type.value
        if not entry.success:
            action += " [warning](partial)[/]"

        table.add_row(
            entry.id[:8],
            _format_timestamp(entry.timestamp),
            action,
            names,
            format_size(entry.total_size) if entry.total_size else "-",
        )

    console.print(table)


def _format_timestamp(iso_timestamp: str) -> str:
    """Format an ISO timestamp as YYYY-MM-DD HH:MM."""
    dt = datetime.fromisoformat(iso_timestamp.replace("Z", "+00:00"))
    return dt.strftime("%Y-%m-%d %H:%M")
