"""Data models for assetsweep.

This module exports the asset, history and report models.
"""

from assetsweep.models.asset import AssetId, AssetRecord, is_under_path, normalize_path
from assetsweep.models.history import (
    HistoryActionType,
    HistoryEntry,
    HistoryItem,
    create_history_entry,
)
from assetsweep.models.report import CleanerStats, ScanReport

__all__ = [
    "AssetId",
    "AssetRecord",
    "CleanerStats",
    "HistoryActionType",
    "HistoryEntry",
    "HistoryItem",
    "ScanReport",
    "create_history_entry",
    "is_under_path",
    "normalize_path",
]
