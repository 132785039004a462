"""Exception hierarchy for assetsweep.

Every error raised by the dependency engine, the catalog adapters and the
policy loader derives from AssetSweepError so the CLI can report them
uniformly. I/O errors raised by collaborators are not wrapped.
"""

from __future__ import annotations

from collections.abc import Iterable


class AssetSweepError(Exception):
    """Base exception for assetsweep errors."""


class MissingRecordError(AssetSweepError):
    """Raised when a pool member has no backing asset record.

    This signals an upstream data-consistency bug and is never retried.

    Attributes:
        asset_id: The pool identifier that could not be resolved.
    """

    def __init__(self, asset_id: str) -> None:
        self.asset_id = asset_id
        super().__init__(f"No asset record for pool member: {asset_id}")


class NoProgressError(AssetSweepError):
    """Raised when a deletion round removes nothing from a non-empty pool.

    Attributes:
        residual: Pool members that are still waiting for deletion.
        deleted_count: Number of assets deleted before the loop stalled.
        round_number: The round that made no progress (1-based).
    """

    def __init__(self, residual: Iterable[str], deleted_count: int, round_number: int) -> None:
        self.residual = tuple(residual)
        self.deleted_count = deleted_count
        self.round_number = round_number
        super().__init__(
            f"Deletion round {round_number} removed no assets; "
            f"{len(self.residual)} asset(s) remain after {deleted_count} deleted"
        )
