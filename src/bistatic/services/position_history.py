"""Per-target position history kept as a fixed-capacity ring buffer."""

import math
import threading
from collections.abc import Iterator

from src.bistatic.core.exceptions import HistoryOrderError
from src.bistatic.models.schemas import PositionSample
from src.bistatic.utils.logging import get_logger

logger = get_logger(__name__)

MIN_CAPACITY = 2


class PositionHistory:
    """
    Sliding window of position samples for one target.

    Samples live in a preallocated ring indexed by ``_head`` (oldest sample)
    and ``_count``; once full, each append overwrites the oldest sample.
    Timestamps are strictly increasing from oldest to newest.

    A single lock serializes appends against snapshots, so an estimator
    reading ``snapshot()`` never sees a half-written window.
    """

    def __init__(self, target_id: str, capacity: int = 10):
        """
        Initialize an empty history.

        Args:
            target_id: Identifier of the tracked target
            capacity: Maximum number of samples retained
        """
        if capacity < MIN_CAPACITY:
            raise ValueError(f"History capacity must be >= {MIN_CAPACITY}, got {capacity}")

        self.target_id = target_id
        self._capacity = capacity
        self._ring: list[PositionSample | None] = [None] * capacity
        self._head = 0
        self._count = 0
        self._lock = threading.Lock()

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def is_full(self) -> bool:
        with self._lock:
            return self._count == self._capacity

    @property
    def latest_timestamp(self) -> float | None:
        """Timestamp of the newest sample, or None when empty."""
        with self._lock:
            newest = self._newest()
        return newest.timestamp if newest is not None else None

    def _newest(self) -> PositionSample | None:
        if self._count == 0:
            return None
        return self._ring[(self._head + self._count - 1) % self._capacity]

    def append(self, sample: PositionSample) -> None:
        """
        Append a sample, evicting the oldest one when full.

        Raises:
            HistoryOrderError: If the timestamp is non-finite or not strictly newer than
                the newest one
        """
        if not math.isfinite(sample.timestamp):
            raise HistoryOrderError(
                f"Non-finite timestamp {sample.timestamp} for target {self.target_id}"
            )

        with self._lock:
            newest = self._newest()
            if newest is not None and sample.timestamp <= newest.timestamp:
                raise HistoryOrderError(
                    f"Sample at t={sample.timestamp} is not after t={newest.timestamp} "
                    f"for target {self.target_id}"
                )

            tail = (self._head + self._count) % self._capacity
            self._ring[tail] = sample
            if self._count < self._capacity:
                self._count += 1
            else:
                self._head = (self._head + 1) % self._capacity

    def snapshot(self) -> tuple[PositionSample, ...]:
        """Consistent copy of the window, oldest first."""
        with self._lock:
            return tuple(
                self._ring[(self._head + i) % self._capacity] for i in range(self._count)
            )

    def clear(self) -> None:
        with self._lock:
            self._ring = [None] * self._capacity
            self._head = 0
            self._count = 0

    def __len__(self) -> int:
        with self._lock:
            return self._count

    def __iter__(self) -> Iterator[PositionSample]:
        return iter(self.snapshot())

    def __repr__(self) -> str:
        return (
            f"PositionHistory(target={self.target_id}, "
            f"samples={len(self)}, capacity={self._capacity})"
        )


class PositionHistoryStore:
    """Owns one PositionHistory per target id.

    Histories are only released by ``remove`` or ``prune``; long-running
    sessions must call one of them as targets leave coverage.
    """

    def __init__(self, capacity: int = 10):
        if capacity < MIN_CAPACITY:
            raise ValueError(f"History capacity must be >= {MIN_CAPACITY}, got {capacity}")

        self.capacity = capacity
        self._histories: dict[str, PositionHistory] = {}
        self._lock = threading.Lock()

    def get_or_create(self, target_id: str) -> PositionHistory:
        with self._lock:
            history = self._histories.get(target_id)
            if history is None:
                history = PositionHistory(target_id, self.capacity)
                self._histories[target_id] = history
                logger.debug(f"Created position history for {target_id}")
            return history

    def get(self, target_id: str) -> PositionHistory | None:
        with self._lock:
            return self._histories.get(target_id)

    def remove(self, target_id: str) -> bool:
        """Drop a target's history. Returns True if one existed."""
        with self._lock:
            return self._histories.pop(target_id, None) is not None

    def prune(self, older_than: float) -> list[str]:
        """
        Drop histories whose newest sample is older than a cutoff.

        Args:
            older_than: Timestamp cutoff; empty histories are always dropped

        Returns:
            Sorted ids of the removed targets
        """
        with self._lock:
            stale = []
            for target_id, history in self._histories.items():
                latest = history.latest_timestamp
                if latest is None or latest < older_than:
                    stale.append(target_id)
            for target_id in stale:
                del self._histories[target_id]

        if stale:
            logger.debug(f"Pruned {len(stale)} stale histories")
        return sorted(stale)

    def target_ids(self) -> list[str]:
        with self._lock:
            return sorted(self._histories)

    def __len__(self) -> int:
        with self._lock:
            return len(self._histories)

    def __contains__(self, target_id: object) -> bool:
        with self._lock:
            return target_id in self._histories
