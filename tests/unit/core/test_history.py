"""Unit tests for history recording helpers."""

from pathlib import Path

import pytest
from assetsweep.core.history import record_deletions, record_folder_deletions, record_rule_change
from assetsweep.core.state import StateManager
from assetsweep.models.history import HistoryActionType


@pytest.fixture
def state(tmp_path: Path) -> StateManager:
    """StateManager writing into a temporary directory."""
    return StateManager(state_dir=tmp_path)


class TestRecordDeletions:
    """Tests for record_deletions()."""

    def test_records_sizes_and_rounds(self, state: StateManager) -> None:
        """Deleted assets are recorded with their sizes."""
        record_deletions(
            ["/Game/A", "/Game/B"], {"/Game/A": 100}, rounds=2, state=state
        )

        (entry,) = state.get_history()
        assert entry.action_type == HistoryActionType.DELETE
        assert [item.name for item in entry.items] == ["/Game/A", "/Game/B"]
        assert entry.items[0].size_bytes == 100
        assert entry.items[1].size_bytes is None
        assert entry.metadata == {"command": "assetsweep clean", "rounds": 2}
        assert entry.success

    def test_partial_run(self, state: StateManager) -> None:
        """A stalled run is recorded as unsuccessful."""
        record_deletions(["/Game/A"], {}, rounds=1, success=False, state=state)

        assert state.get_history()[0].success is False

    def test_nothing_deleted(self, state: StateManager) -> None:
        """Empty deletions are not recordable."""
        with pytest.raises(ValueError):
            record_deletions([], {}, rounds=0, state=state)


class TestRecordFolderDeletions:
    """Tests for record_folder_deletions()."""

    def test_records_folders(self, state: StateManager, tmp_path: Path) -> None:
        """Folders are stored by path."""
        record_folder_deletions([tmp_path / "Old"], state=state)

        (entry,) = state.get_history()
        assert entry.action_type == HistoryActionType.FOLDER_DELETE
        assert entry.items[0].name == str(tmp_path / "Old")


class TestRecordRuleChange:
    """Tests for record_rule_change()."""

    def test_items_named_by_rule_kind(self, state: StateManager) -> None:
        """Each rule is prefixed with its kind."""
        record_rule_change(
            HistoryActionType.EXCLUDE,
            assets=["/Game/A"],
            paths=["/Game/Keep"],
            classes=["World"],
            state=state,
        )

        (entry,) = state.get_history()
        assert [item.name for item in entry.items] == [
            "asset:/Game/A",
            "path:/Game/Keep",
            "class:World",
        ]
        assert entry.metadata["command"] == "assetsweep exclude"
