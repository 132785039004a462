"""Unit tests for history models.

Tests for HistoryItem, HistoryEntry and create_history_entry.
"""

import json

import pytest
from assetsweep.models.history import (
    HistoryActionType,
    HistoryEntry,
    HistoryItem,
    create_history_entry,
)


class TestHistoryItem:
    """Tests for HistoryItem."""

    def test_size_is_optional_in_dict(self) -> None:
        """Items without a size serialize without the key."""
        assert HistoryItem(name="path:/Game/Keep").to_dict() == {"name": "path:/Game/Keep"}
        assert HistoryItem(name="/Game/A", size_bytes=5).to_dict() == {
            "name": "/Game/A",
            "size_bytes": 5,
        }

    def test_empty_name_rejected(self) -> None:
        """Items need a name."""
        with pytest.raises(ValueError, match="empty"):
            HistoryItem(name="")


class TestHistoryEntry:
    """Tests for HistoryEntry."""

    def test_json_line_round_trip(self) -> None:
        """An entry survives JSONL serialization."""
        entry = HistoryEntry(
            id="abc123456789",
            timestamp="2026-01-26T14:30:00+00:00",
            action_type=HistoryActionType.DELETE,
            items=(HistoryItem("/Game/A", 100), HistoryItem("/Game/B")),
            success=False,
            metadata={"rounds": 2},
        )

        line = entry.to_json_line()

        assert "\n" not in line
        assert HistoryEntry.from_json_line(line) == entry

    def test_total_size_ignores_unknown(self) -> None:
        """Items without a size count as zero."""
        entry = create_history_entry(
            HistoryActionType.DELETE, [HistoryItem("/Game/A", 100), HistoryItem("/Game/B")]
        )

        assert entry.total_size == 100

    def test_success_defaults_when_missing(self) -> None:
        """Older lines without a success flag load as successful."""
        data = {
            "id": "abc123456789",
            "timestamp": "2026-01-26T14:30:00+00:00",
            "action_type": "exclude",
            "items": [{"name": "asset:/Game/A"}],
        }

        entry = HistoryEntry.from_json_line(json.dumps(data))

        assert entry.success
        assert entry.metadata == {}

    def test_invalid_action_type(self) -> None:
        """Unknown action types are rejected."""
        data = {"id": "x", "timestamp": "t", "action_type": "install", "items": [{"name": "a"}]}

        with pytest.raises(ValueError):
            HistoryEntry.from_dict(data)

    def test_requires_items(self) -> None:
        """Entries need at least one item."""
        with pytest.raises(ValueError, match="items cannot be empty"):
            HistoryEntry(id="x", timestamp="t", action_type=HistoryActionType.DELETE, items=())


class TestCreateHistoryEntry:
    """Tests for create_history_entry()."""

    def test_generates_id_and_timestamp(self) -> None:
        """Factory fills id and timestamp."""
        entry = create_history_entry(HistoryActionType.INCLUDE, [HistoryItem("class:World")])

        assert len(entry.id) == 12
        assert entry.timestamp.endswith("+00:00")

    def test_rejects_empty_items(self) -> None:
        """Factory refuses to create empty entries."""
        with pytest.raises(ValueError, match="no items"):
            create_history_entry(HistoryActionType.DELETE, [])
