"""Clean command implementation.

Deletes unused assets round by round in dependency order, then removes
folders the deletion left empty.
"""

import signal
import threading
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Annotated

import typer

from assetsweep.cli.display import (
    create_assets_table,
    print_deletion_failures,
    print_deletion_summary,
    print_round,
    print_stats,
)
from assetsweep.cli.types import (
    CatalogArgument,
    MountOption,
    PolicyOption,
    require_cleaner,
    require_policy,
)
from assetsweep.core.cleaner import ProjectCleaner
from assetsweep.core.history import record_deletions, record_folder_deletions
from assetsweep.errors import AssetSweepError, NoProgressError
from assetsweep.models.asset import AssetId
from assetsweep.operators.base import DeletionExecutor, DeletionResult
from assetsweep.operators.filesystem import DEFAULT_MOUNT_POINT, FilesystemExecutor
from assetsweep.operators.folders import delete_empty_folders
from assetsweep.utils.formatting import console, print_error, print_info, print_warning

app = typer.Typer(
    help="Delete unused assets in dependency order.",
    invoke_without_command=True,
    context_settings={"allow_interspersed_args": True},
)


class ReportingExecutor(DeletionExecutor):
    """Executor wrapper that keeps every per-asset result for display."""

    def __init__(self, inner: DeletionExecutor) -> None:
        self._inner = inner
        self.results: list[DeletionResult] = []

    def is_available(self) -> bool:
        """Delegate to the wrapped executor."""
        return self._inner.is_available()

    def delete_with_results(self, asset_ids: Iterable[AssetId]) -> list[DeletionResult]:
        """Delete through the wrapped executor and remember the results."""
        results = self._inner.delete_with_results(asset_ids)
        self.results.extend(results)
        return results

    def failures(self) -> list[DeletionResult]:
        """Results of assets that are still on disk, latest attempt only."""
        latest = {result.asset_id: result for result in self.results}
        return [result for result in latest.values() if result.failed]


@contextmanager
def _cancel_on_interrupt() -> Iterator[threading.Event]:
    """Turn Ctrl-C into a cancellation request honoured between rounds."""
    cancel = threading.Event()
    if threading.current_thread() is not threading.main_thread():
        yield cancel
        return

    def _request_cancel(signum: int, frame: object) -> None:
        print_warning("Cancelling after the current round...")
        cancel.set()

    previous = signal.signal(signal.SIGINT, _request_cancel)
    try:
        yield cancel
    finally:
        signal.signal(signal.SIGINT, previous)


@app.callback(invoke_without_command=True)
def clean(
    catalog_path: CatalogArgument,
    content_root: Annotated[
        Path,
        typer.Option(
            "--content-root",
            "-r",
            help="Directory the mount point maps to.",
            exists=True,
            file_okay=False,
            dir_okay=True,
        ),
    ],
    policy_path: PolicyOption = None,
    mount_point: MountOption = DEFAULT_MOUNT_POINT,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Show what would be deleted."),
    ] = False,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip confirmation prompt."),
    ] = False,
    keep_empty_folders: Annotated[
        bool,
        typer.Option("--keep-empty-folders", help="Do not remove empty folders."),
    ] = False,
) -> None:
    """Delete unused assets and empty folders.

    Circular groups are deleted together, then assets nothing else needs,
    round after round until no unused asset is left.

    Examples:
        assetsweep clean assets.json -r Content --dry-run
        assetsweep clean assets.json -r Content --yes
    """
    policy = require_policy(policy_path)
    filesystem = FilesystemExecutor(
        content_root,
        mount_point=mount_point,
        protected=policy.exclusions.assets,
        dry_run=dry_run,
    )
    executor = ReportingExecutor(filesystem)
    cleaner = require_cleaner(catalog_path, policy, executor, content_root, mount_point)

    records = cleaner.unused_records()
    if records:
        console.print(create_assets_table(records, dict(cleaner.get_relational_map())))
        print_stats(cleaner.stats)

        if not dry_run and not yes:
            confirmed = typer.confirm(
                f"\nProceed with deleting {len(records)} asset(s)?",
                default=False,
            )
            if not confirmed:
                print_info("Aborted.")
                raise typer.Exit(code=0)

        sizes = {record.asset_id: record.size_bytes for record in records}
        _run_deletion(cleaner, executor, sizes, dry_run)
    else:
        print_info("No unused assets to delete.")

    if not keep_empty_folders:
        _clean_empty_folders(cleaner, dry_run)


def _run_deletion(
    cleaner: ProjectCleaner,
    executor: ReportingExecutor,
    sizes: dict[AssetId, int],
    dry_run: bool,
) -> None:
    """Run the deletion loop, report the outcome and record history."""
    with _cancel_on_interrupt() as cancel:
        try:
            outcome = cleaner.run_deletion_loop(progress=print_round, cancel=cancel)
        except NoProgressError as e:
            print_deletion_failures(executor.failures())
            print_error(str(e))
            residual = set(e.residual)
            deleted = [asset_id for asset_id in sizes if asset_id not in residual]
            if deleted and not dry_run:
                _record(deleted, sizes, e.round_number, success=False)
            raise typer.Exit(code=1) from e
        except AssetSweepError as e:
            print_error(str(e))
            raise typer.Exit(code=1) from e

    print_deletion_failures(executor.failures())
    deleted_size = sum(sizes.get(asset_id, 0) for asset_id in outcome.deleted)
    print_deletion_summary(outcome.deleted_count, outcome.rounds, deleted_size, dry_run)
    if outcome.cancelled:
        print_warning(f"Cancelled: {len(outcome.residual)} unused asset(s) left.")

    if outcome.deleted and not dry_run:
        _record(list(outcome.deleted), sizes, outcome.rounds, success=not outcome.cancelled)


def _record(deleted: list[AssetId], sizes: dict[AssetId, int], rounds: int, success: bool) -> None:
    """Record deletions, warning instead of failing if history is unwritable."""
    try:
        record_deletions(deleted, sizes, rounds=rounds, success=success)
        print_info("Deletions recorded to history.")
    except (OSError, RuntimeError) as e:
        print_warning(f"Could not record to history: {e}")


def _clean_empty_folders(cleaner: ProjectCleaner, dry_run: bool) -> None:
    """Remove folders that hold no files, leaving developer folders alone."""
    folders = cleaner.find_empty_folders()
    if not folders:
        return

    result = delete_empty_folders(folders, dry_run=dry_run)
    if result.dry_run:
        print_info(f"Dry-run: {len(result.removed)} empty folder(s) would be removed.")
        return

    print_info(f"Removed {len(result.removed)} empty folder(s).")
    for folder, error in result.failed:
        print_warning(f"Could not remove {folder}: {error}")

    if result.removed:
        try:
            record_folder_deletions(result.removed)
        except (OSError, RuntimeError) as e:
            print_warning(f"Could not record to history: {e}")
