"""Append-only history log.

Each line of ``history.jsonl`` holds one serialized ``HistoryEntry``.
Lines are only ever appended, so a crash mid-write can at worst leave one
truncated trailing line, which readers skip.
"""

import json
import logging
from collections.abc import Iterator
from pathlib import Path

from assetsweep.core.paths import ensure_state_dir, get_state_dir
from assetsweep.models.history import HistoryActionType, HistoryEntry

logger = logging.getLogger(__name__)


class StateManager:
    """Reads and appends cleanup history.

    Args:
        state_dir: Directory holding ``history.jsonl``. Defaults to the XDG
            state directory.
    """

    HISTORY_FILENAME = "history.jsonl"

    def __init__(self, state_dir: Path | None = None) -> None:
        self._custom_dir = state_dir
        self._state_dir = state_dir if state_dir is not None else get_state_dir()

    @property
    def history_path(self) -> Path:
        return self._state_dir / self.HISTORY_FILENAME

    def record_action(self, entry: HistoryEntry) -> None:
        """Append ``entry``, creating the directory on first use.

        Raises:
            RuntimeError: The XDG state directory cannot be created.
            OSError: The history file cannot be written.
        """
        if self._custom_dir is None:
            ensure_state_dir()
        else:
            self._custom_dir.mkdir(parents=True, exist_ok=True)

        with self.history_path.open("a", encoding="utf-8") as f:
            print(entry.to_json_line(), file=f)

    def _read_entries(self) -> Iterator[HistoryEntry]:
        if not self.history_path.exists():
            return
        with self.history_path.open(encoding="utf-8") as f:
            for line_num, raw in enumerate(f, start=1):
                if not raw.strip():
                    continue
                try:
                    yield HistoryEntry.from_json_line(raw)
                except (json.JSONDecodeError, KeyError, ValueError) as e:
                    logger.warning("Skipping corrupt history line %d: %s", line_num, e)

    def get_history(
        self,
        limit: int | None = None,
        action_type: HistoryActionType | None = None,
    ) -> list[HistoryEntry]:
        """Return entries newest first, optionally filtered and truncated."""
        entries = [
            entry
            for entry in self._read_entries()
            if action_type is None or entry.action_type == action_type
        ]
        entries.reverse()
        return entries if limit is None else entries[:limit]
