"""Exclusion rule commands.

Manage the assets, folders and classes the cleaner must never delete. Rules
live in the policy file; everything an excluded asset depends on is
protected as well.
"""

from pathlib import Path
from typing import Annotated

import typer
from rich.table import Table

from assetsweep.cli.types import PolicyOption, require_policy
from assetsweep.core.history import record_rule_change
from assetsweep.core.policy import CleanerPolicy, PolicyError, save_policy
from assetsweep.graph.exclusion import ExclusionRules
from assetsweep.models.history import HistoryActionType
from assetsweep.utils.formatting import (
    console,
    print_error,
    print_info,
    print_success,
    print_warning,
)

app = typer.Typer(
    help="Manage exclusion rules.",
    no_args_is_help=True,
)

AssetsOption = Annotated[
    list[str] | None,
    typer.Option("--asset", "-a", help="Asset id (repeatable)."),
]
PathsOption = Annotated[
    list[str] | None,
    typer.Option("--path", help="Folder path (repeatable)."),
]
ClassesOption = Annotated[
    list[str] | None,
    typer.Option("--class", "-c", help="Asset class (repeatable)."),
]


@app.command()
def add(
    assets: AssetsOption = None,
    paths: PathsOption = None,
    classes: ClassesOption = None,
    policy_path: PolicyOption = None,
) -> None:
    """Exclude assets, folders or classes from cleanup."""
    if not (assets or paths or classes):
        print_error("Nothing to exclude. Use --asset, --path or --class.")
        raise typer.Exit(code=1)

    policy = require_policy(policy_path)
    rules = policy.exclusions.exclude_assets(assets or [])
    for path in paths or []:
        rules = rules.exclude_path(path)
    for asset_class in classes or []:
        rules = rules.exclude_class(asset_class)

    _save(policy, rules, policy_path)
    _record(HistoryActionType.EXCLUDE, assets, paths, classes, "assetsweep exclude add")
    print_success("Exclusion rules updated.")


@app.command()
def remove(
    assets: AssetsOption = None,
    paths: PathsOption = None,
    classes: ClassesOption = None,
    policy_path: PolicyOption = None,
) -> None:
    """Stop excluding assets, folders or classes.

    Removing a folder also removes explicit asset rules inside it.
    """
    if not (assets or paths or classes):
        print_error("Nothing to include. Use --asset, --path or --class.")
        raise typer.Exit(code=1)

    policy = require_policy(policy_path)
    rules = policy.exclusions.include_assets(assets or [])
    for path in paths or []:
        rules = rules.include_path(path)
    for asset_class in classes or []:
        rules = rules.include_class(asset_class)

    if rules == policy.exclusions:
        print_warning("No matching exclusion rules found.")
        return

    _save(policy, rules, policy_path)
    _record(HistoryActionType.INCLUDE, assets, paths, classes, "assetsweep exclude remove")
    print_success("Exclusion rules updated.")


@app.command()
def clear(
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip confirmation prompt."),
    ] = False,
    policy_path: PolicyOption = None,
) -> None:
    """Remove every exclusion rule."""
    policy = require_policy(policy_path)
    current = policy.exclusions
    if current.is_empty:
        print_info("No exclusion rules configured.")
        return

    if not yes and not typer.confirm("Remove all exclusion rules?", default=False):
        print_info("Aborted.")
        raise typer.Exit(code=0)

    _save(policy, current.include_all(), policy_path)
    _record(
        HistoryActionType.INCLUDE,
        current.assets,
        current.paths,
        current.classes,
        "assetsweep exclude clear",
    )
    print_success("All exclusion rules removed.")


@app.command(name="list")
def list_rules(policy_path: PolicyOption = None) -> None:
    """Show configured exclusion rules."""
    rules = require_policy(policy_path).exclusions
    if rules.is_empty:
        print_info("No exclusion rules configured.")
        return

    table = Table(title="Exclusion Rules", header_style="bold_header", border_style="border")
    table.add_column("Kind", width=6)
    table.add_column("Rule", style="excluded")
    for asset_id in rules.assets:
        table.add_row("asset", asset_id)
    for path in rules.paths:
        table.add_row("path", path)
    for asset_class in rules.classes:
        table.add_row("class", asset_class)
    console.print(table)


def _save(policy: CleanerPolicy, rules: ExclusionRules, policy_path: Path | None) -> None:
    """Write the policy with new rules, or exit with an error."""
    updated = policy.model_copy(update={"exclusions": rules})
    try:
        save_policy(updated, policy_path)
    except PolicyError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e


def _record(
    action_type: HistoryActionType,
    assets: list[str] | None,
    paths: list[str] | None,
    classes: list[str] | None,
    command: str,
) -> None:
    """Record a rule change, warning instead of failing if history is unwritable."""
    try:
        record_rule_change(
            action_type,
            assets=assets or [],
            paths=paths or [],
            classes=classes or [],
            command=command,
        )
    except (OSError, RuntimeError) as e:
        print_warning(f"Could not record to history: {e}")
