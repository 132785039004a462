"""Records of cleanup runs and exclusion changes.

Entries are appended to a JSONL file by ``core.state.StateManager`` and
never rewritten.
"""

from __future__ import annotations

import json
import uuid
from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any


class HistoryActionType(str, Enum):
    """What a history entry records."""

    DELETE = "delete"
    FOLDER_DELETE = "folder_delete"
    EXCLUDE = "exclude"
    INCLUDE = "include"


@dataclass(frozen=True, slots=True)
class HistoryItem:
    """An asset id, folder path or exclusion rule touched by an action."""

    name: str
    size_bytes: int | None = None

    def __post_init__(self) -> None:
        if not self.name:
            msg = "History item name cannot be empty"
            raise ValueError(msg)

    def to_dict(self) -> dict[str, Any]:
        return {k: v for k, v in asdict(self).items() if v is not None}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> HistoryItem:
        return cls(name=data["name"], size_bytes=data.get("size_bytes"))


@dataclass(frozen=True, slots=True)
class HistoryEntry:
    """One line of the history log.

    Attributes:
        id: 12-character hex id.
        timestamp: ISO 8601 time with UTC offset.
        action_type: Kind of action.
        items: Everything the action touched; never empty.
        success: False when a deletion loop stopped before finishing.
        metadata: Free-form context such as rounds, dry-run or the catalog path.
    """

    id: str
    timestamp: str
    action_type: HistoryActionType
    items: tuple[HistoryItem, ...]
    success: bool = True
    metadata: dict[str, Any] = field(default_factory=lambda: {})

    def __post_init__(self) -> None:
        for attr in ("id", "timestamp", "items"):
            if not getattr(self, attr):
                msg = f"History entry {attr} cannot be empty"
                raise ValueError(msg)

    @property
    def total_size(self) -> int:
        """Bytes freed, counting only items with a known size."""
        return sum(item.size_bytes or 0 for item in self.items)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "action_type": self.action_type.value,
            "items": [item.to_dict() for item in self.items],
            "success": self.success,
            "metadata": self.metadata,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> HistoryEntry:
        """Rebuild an entry from its stored form.

        Raises:
            KeyError: A required field is missing.
            ValueError: The action type or an item is invalid.
        """
        items = tuple(HistoryItem.from_dict(raw) for raw in data["items"])
        return cls(
            id=data["id"],
            timestamp=data["timestamp"],
            action_type=HistoryActionType(data["action_type"]),
            items=items,
            success=data.get("success", True),
            metadata=data.get("metadata", {}),
        )

    def to_json_line(self) -> str:
        """Compact JSON without a trailing newline."""
        return json.dumps(self.to_dict(), separators=(",", ":"))

    @classmethod
    def from_json_line(cls, line: str) -> HistoryEntry:
        return cls.from_dict(json.loads(line))


def create_history_entry(
    action_type: HistoryActionType,
    items: list[HistoryItem],
    success: bool = True,
    metadata: dict[str, Any] | None = None,
) -> HistoryEntry:
    """Stamp a new entry with a fresh id and the current UTC time.

    Raises:
        ValueError: If ``items`` is empty.
    """
    if not items:
        msg = "Cannot create history entry with no items"
        raise ValueError(msg)
    return HistoryEntry(
        id=uuid.uuid4().hex[:12],
        timestamp=datetime.now(UTC).isoformat(),
        action_type=action_type,
        items=tuple(items),
        success=success,
        metadata=metadata or {},
    )
