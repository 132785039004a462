"""History recording for cleanup operations.

Records asset deletions, folder removals and exclusion rule changes to the
shared history file, giving an audit trail for cleanup actions.
"""

from collections.abc import Iterable, Mapping
from pathlib import Path

from assetsweep.core.state import StateManager
from assetsweep.models.history import HistoryActionType, HistoryItem, create_history_entry


def record_deletions(
    deleted: Iterable[str],
    sizes: Mapping[str, int],
    *,
    rounds: int,
    success: bool = True,
    command: str = "assetsweep clean",
    state: StateManager | None = None,
) -> None:
    """Record deleted assets to history.

    Args:
        deleted: Asset ids that were deleted, in deletion order.
        sizes: Known asset sizes by id.
        rounds: Number of deletion rounds that ran.
        success: False if the loop stopped without deleting everything.
        command: Command that triggered the deletions.
        state: StateManager to write to (default location if None).

    Raises:
        ValueError: If deleted is empty.
    """
    items = [HistoryItem(name=asset_id, size_bytes=sizes.get(asset_id)) for asset_id in deleted]
    entry = create_history_entry(
        action_type=HistoryActionType.DELETE,
        items=items,
        success=success,
        metadata={"command": command, "rounds": rounds},
    )
    (state or StateManager()).record_action(entry)


def record_folder_deletions(
    folders: Iterable[Path],
    *,
    command: str = "assetsweep clean",
    state: StateManager | None = None,
) -> None:
    """Record removed empty folders to history.

    Raises:
        ValueError: If folders is empty.
    """
    entry = create_history_entry(
        action_type=HistoryActionType.FOLDER_DELETE,
        items=[HistoryItem(name=str(folder)) for folder in folders],
        metadata={"command": command},
    )
    (state or StateManager()).record_action(entry)


def record_rule_change(
    action_type: HistoryActionType,
    *,
    assets: Iterable[str] = (),
    paths: Iterable[str] = (),
    classes: Iterable[str] = (),
    command: str = "assetsweep exclude",
    state: StateManager | None = None,
) -> None:
    """Record an exclusion rule change to history.

    Items are named after the rule kind, e.g. ``path:/Game/Keep``.

    Raises:
        ValueError: If no rule is given.
    """
    items = [
        *(HistoryItem(name=f"asset:{a}") for a in assets),
        *(HistoryItem(name=f"path:{p}") for p in paths),
        *(HistoryItem(name=f"class:{c}") for c in classes),
    ]
    entry = create_history_entry(
        action_type=action_type,
        items=items,
        metadata={"command": command},
    )
    (state or StateManager()).record_action(entry)
