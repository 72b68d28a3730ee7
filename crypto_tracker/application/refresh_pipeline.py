"""
Background refresh pipeline.

A daemon thread fetches prices for the current token names, pushes each
successful snapshot into the SnapshotChannel and sleeps for the refresh
interval. Failures are logged and the loop carries on.

The token names are an immutable tuple. The UI thread replaces the reference
after every successful edit; a fetch already in flight keeps using the tuple
it read when it started.
"""

from __future__ import annotations

import threading
from typing import Optional, Sequence, Tuple

from ..domain.exceptions import PriceFetchError
from ..domain.interfaces.price_provider import PriceProvider
from ..models.market_data import MarketSnapshot
from ..utils.logging_setup import get_logger
from ..utils.trace_context import new_cycle
from .snapshot_channel import SnapshotChannel

logger = get_logger(__name__)


class RefreshPipeline:
    """Periodic price fetcher running on its own thread."""

    def __init__(
        self,
        provider: PriceProvider,
        api_key: str,
        token_names: Sequence[str],
        channel: SnapshotChannel,
        interval_sec: float = 60.0,
    ) -> None:
        """
        Args:
            provider: Price source.
            api_key: Provider API key.
            token_names: Initial token names.
            channel: Where successful snapshots are delivered.
            interval_sec: Pause between fetches.
        """
        self._provider = provider
        self._api_key = api_key
        self._token_names: Tuple[str, ...] = tuple(token_names)
        self._channel = channel
        self._interval_sec = interval_sec
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def token_names(self) -> Tuple[str, ...]:
        return self._token_names

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def update_token_names(self, token_names: Sequence[str]) -> None:
        """Swap in a new name list; picked up by the next fetch."""
        self._token_names = tuple(token_names)
        logger.debug(f"Token names updated ({len(self._token_names)} tokens)")

    def fetch_once(self) -> MarketSnapshot:
        """
        Fetch one snapshot for the current names (no channel involved).

        Raises:
            PriceFetchError: If the provider call fails.
        """
        names = self._token_names
        with new_cycle():
            snapshot = self._provider.fetch_prices(self._api_key, names)
            logger.info(f"Fetched {len(snapshot)} listings for {len(names)} tokens")
            return snapshot

    def run_once(self) -> bool:
        """
        One loop iteration: fetch and deliver.

        Returns:
            True if a snapshot was delivered.
        """
        try:
            snapshot = self.fetch_once()
        except PriceFetchError as e:
            logger.error(f"Background refresh failed: {e}")
            return False
        return self._channel.send(snapshot, self._stop_event)

    def start(self) -> None:
        if self.is_running:
            logger.warning("Refresh pipeline already running")
            return
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._run, name="refresh-pipeline", daemon=True
        )
        self._thread.start()
        logger.info(f"Refresh pipeline started (interval {self._interval_sec}s)")

    def stop(self, timeout: float = 5.0) -> None:
        """Signal the loop to exit and wait for the thread."""
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout=timeout)
            if self._thread.is_alive():
                logger.warning("Refresh pipeline did not stop within timeout")
            self._thread = None
        logger.info("Refresh pipeline stopped")

    def _run(self) -> None:
        while not self._stop_event.is_set():
            try:
                self.run_once()
            except Exception as e:
                logger.exception(f"Unexpected error in refresh loop: {e}")
            if self._stop_event.wait(self._interval_sec):
                break
