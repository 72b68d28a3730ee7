"""
Capacity-1 hand-off from the refresh thread to the UI thread.

The producer blocks while an undrained snapshot is waiting, so at most one
stale snapshot is ever buffered. The consumer drains without blocking and
keeps only the newest value.
"""

from __future__ import annotations

import queue
import threading
from typing import Optional

from ..models.market_data import MarketSnapshot
from ..utils.logging_setup import get_logger

logger = get_logger(__name__)


class SnapshotChannel:
    """Bounded queue of market snapshots (maxsize 1)."""

    def __init__(self, put_poll_sec: float = 0.1) -> None:
        self._queue: queue.Queue[MarketSnapshot] = queue.Queue(maxsize=1)
        self._put_poll_sec = put_poll_sec

    def send(self, snapshot: MarketSnapshot, stop_event: Optional[threading.Event] = None) -> bool:
        """
        Block until the snapshot is accepted.

        Args:
            snapshot: Snapshot to hand over.
            stop_event: When set, give up waiting.

        Returns:
            True if delivered, False if abandoned because of stop_event.
        """
        while True:
            if stop_event is not None and stop_event.is_set():
                logger.debug("Channel send abandoned: stopping")
                return False
            try:
                self._queue.put(snapshot, timeout=self._put_poll_sec)
                return True
            except queue.Full:
                continue

    def try_receive(self) -> Optional[MarketSnapshot]:
        """Drain without blocking and return the latest snapshot, or None."""
        latest: Optional[MarketSnapshot] = None
        try:
            while True:
                latest = self._queue.get_nowait()
        except queue.Empty:
            pass
        return latest

    def pending(self) -> bool:
        return not self._queue.empty()
