"""Multi-round deletion sequencing.

Each round builds the relational map of the current pool, classifies it,
selects a batch that is safe to delete, hands the batch to a deletion
executor and shrinks the pool by the assets the executor confirmed. Rounds
are strictly sequential because each one depends on the pool the previous
one left behind.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from assetsweep.errors import NoProgressError
from assetsweep.graph.classifier import Classification, classify
from assetsweep.graph.relational_map import RelationalMap, build_relational_map
from assetsweep.models.asset import AssetId, AssetRecord

if TYPE_CHECKING:
    from assetsweep.operators.base import DeletionExecutor

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_LIMIT = 100


class BatchSelection(str, Enum):
    """How a round's batch was chosen.

    Attributes:
        CIRCULAR: All members of all in-pool cycles.
        ROOTS: All nodes without in-pool referencers.
        FALLBACK: A prefix of the pool; only reachable with inconsistent data.
    """

    CIRCULAR = "circular"
    ROOTS = "roots"
    FALLBACK = "fallback"


@dataclass(frozen=True, slots=True)
class RoundEvent:
    """Progress event emitted after each deletion round.

    Attributes:
        round_number: 1-based round counter.
        selection: Policy that picked the batch.
        batch_size: Number of assets requested for deletion.
        deleted: Number of assets the executor confirmed.
        remaining: Pool size after the round.
    """

    round_number: int
    selection: BatchSelection
    batch_size: int
    deleted: int
    remaining: int


@dataclass(frozen=True, slots=True)
class DeletionOutcome:
    """Result of a complete deletion loop.

    Attributes:
        deleted: Assets confirmed deleted, in deletion order.
        rounds: Number of rounds that ran.
        residual: Pool members left undeleted (non-empty only when cancelled).
        cancelled: Whether the loop stopped early on request.
    """

    deleted: tuple[AssetId, ...]
    rounds: int
    residual: frozenset[AssetId] = frozenset()
    cancelled: bool = False

    @property
    def deleted_count(self) -> int:
        """Number of assets deleted."""
        return len(self.deleted)


ProgressCallback = Callable[[RoundEvent], None]


def select_batch(
    relational_map: RelationalMap,
    classification: Classification,
    chunk_limit: int = DEFAULT_CHUNK_LIMIT,
) -> tuple[BatchSelection, tuple[AssetId, ...]]:
    """Pick the assets to delete in the next round.

    Priority: every circular node if any exist, else every root node, else
    the first ``chunk_limit`` nodes of the map. The last case cannot happen
    on a consistent graph (a non-empty graph has a root or a cycle) and is
    kept to guarantee forward progress.

    Args:
        relational_map: Map of the current pool.
        classification: Classification of that map.
        chunk_limit: Maximum batch size for the fallback case.

    Returns:
        Tuple of (selection policy, batch ids).
    """
    if classification.circulars:
        return BatchSelection.CIRCULAR, classification.circulars
    if classification.roots:
        return BatchSelection.ROOTS, classification.roots

    chunk = tuple(relational_map)[:chunk_limit]
    if chunk:
        logger.warning(
            "No root or circular nodes among %d pool member(s); deleting a chunk of %d",
            len(relational_map),
            len(chunk),
        )
    return BatchSelection.FALLBACK, chunk


class DeletionSequencer:
    """Drives the deletion loop over a candidate pool.

    Attributes:
        _records: Catalog records for every pool member.
        _executor: Collaborator that physically deletes assets.
        _chunk_limit: Batch size for the fallback selection.
        _retry_on_no_progress: Allow one repeated round after a round that
            deleted nothing before raising NoProgressError.
    """

    def __init__(
        self,
        records: Mapping[AssetId, AssetRecord],
        executor: DeletionExecutor,
        *,
        chunk_limit: int = DEFAULT_CHUNK_LIMIT,
        retry_on_no_progress: bool = False,
    ) -> None:
        if chunk_limit < 1:
            msg = f"Chunk limit must be positive, got {chunk_limit}"
            raise ValueError(msg)
        self._records = records
        self._executor = executor
        self._chunk_limit = chunk_limit
        self._retry_on_no_progress = retry_on_no_progress
        self._deleted: list[AssetId] = []

    @property
    def deleted(self) -> tuple[AssetId, ...]:
        """Assets confirmed deleted by the current or last run, in order.

        Updated after every round, also when run() ends with an exception.
        """
        return tuple(self._deleted)

    def run(
        self,
        pool: Iterable[str],
        progress: ProgressCallback | None = None,
        cancel: threading.Event | None = None,
    ) -> DeletionOutcome:
        """Delete the pool round by round until it is empty.

        Cancellation is checked between rounds only; a cancelled run
        returns the undeleted remainder as ``residual``.

        Args:
            pool: Candidate asset ids to delete.
            progress: Optional callback receiving a RoundEvent per round.
            cancel: Optional event; when set, the loop stops before the
                next round.

        Returns:
            DeletionOutcome describing what was deleted.

        Raises:
            MissingRecordError: If a pool member has no record.
            NoProgressError: If a round deleted nothing while the pool is
                non-empty (after the optional retry).
        """
        remaining: set[AssetId] = {AssetId(asset_id) for asset_id in pool}
        self._deleted = []
        deleted = self._deleted
        round_number = 0
        stalled = False

        while remaining:
            if cancel is not None and cancel.is_set():
                logger.info("Deletion cancelled with %d asset(s) remaining", len(remaining))
                return DeletionOutcome(
                    deleted=tuple(deleted),
                    rounds=round_number,
                    residual=frozenset(remaining),
                    cancelled=True,
                )

            round_number += 1
            relational_map = build_relational_map(remaining, self._records)
            selection, batch = select_batch(
                relational_map, classify(relational_map), self._chunk_limit
            )

            logger.debug(
                "Round %d: requesting %d %s asset(s)", round_number, len(batch), selection.value
            )
            confirmed = self._delete(batch)

            # Deterministic order within a round
            removed = [asset_id for asset_id in batch if asset_id in confirmed]
            remaining.difference_update(removed)
            deleted.extend(removed)

            if progress is not None:
                progress(
                    RoundEvent(
                        round_number=round_number,
                        selection=selection,
                        batch_size=len(batch),
                        deleted=len(removed),
                        remaining=len(remaining),
                    )
                )

            if removed:
                stalled = False
                continue

            if self._retry_on_no_progress and not stalled:
                logger.warning("Round %d deleted nothing; retrying once", round_number)
                stalled = True
                continue

            raise NoProgressError(remaining, len(deleted), round_number)

        logger.info("Deleted %d asset(s) in %d round(s)", len(deleted), round_number)
        return DeletionOutcome(deleted=tuple(deleted), rounds=round_number)

    def _delete(self, batch: tuple[AssetId, ...]) -> set[AssetId]:
        """Ask the executor to delete a batch, keeping only requested ids."""
        if not batch:
            return set()

        confirmed = set(self._executor.delete(frozenset(batch)))
        unrequested = confirmed.difference(batch)
        if unrequested:
            logger.warning(
                "Executor reported %d unrequested asset(s) as deleted; ignoring them",
                len(unrequested),
            )
        return confirmed.intersection(batch)
