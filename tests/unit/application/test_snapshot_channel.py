"""Tests for the capacity-1 snapshot channel."""

from __future__ import annotations

import threading
import time

from crypto_tracker.application.snapshot_channel import SnapshotChannel
from crypto_tracker.models.market_data import MarketSnapshot


class TestSnapshotChannel:

    def test_receive_on_empty_returns_none(self) -> None:
        assert SnapshotChannel().try_receive() is None

    def test_send_then_receive(self, sample_snapshot: MarketSnapshot) -> None:
        channel = SnapshotChannel()
        assert channel.send(sample_snapshot) is True
        assert channel.pending() is True
        assert channel.try_receive() is sample_snapshot
        assert channel.try_receive() is None

    def test_second_send_blocks_until_drained(self) -> None:
        channel = SnapshotChannel(put_poll_sec=0.01)
        first, second = MarketSnapshot.empty(), MarketSnapshot.empty()
        channel.send(first)

        delivered = threading.Event()

        def producer() -> None:
            channel.send(second)
            delivered.set()

        thread = threading.Thread(target=producer, daemon=True)
        thread.start()

        assert delivered.wait(0.1) is False
        assert channel.try_receive() is first
        assert delivered.wait(2.0) is True
        assert channel.try_receive() is second
        thread.join(timeout=1.0)

    def test_stop_event_abandons_blocked_send(self) -> None:
        channel = SnapshotChannel(put_poll_sec=0.01)
        channel.send(MarketSnapshot.empty())
        stop = threading.Event()
        result = []

        thread = threading.Thread(
            target=lambda: result.append(channel.send(MarketSnapshot.empty(), stop)),
            daemon=True,
        )
        thread.start()
        time.sleep(0.05)
        stop.set()
        thread.join(timeout=1.0)

        assert result == [False]

    def test_consumer_applies_latest_of_many(self) -> None:
        channel = SnapshotChannel(put_poll_sec=0.01)
        snapshots = [MarketSnapshot.empty() for _ in range(5)]

        def producer() -> None:
            for snapshot in snapshots:
                channel.send(snapshot)

        thread = threading.Thread(target=producer, daemon=True)
        thread.start()

        received = []
        deadline = time.monotonic() + 5.0
        while time.monotonic() < deadline and (not received or received[-1] is not snapshots[-1]):
            snapshot = channel.try_receive()
            if snapshot is not None:
                received.append(snapshot)
            time.sleep(0.005)
        thread.join(timeout=1.0)

        assert received[-1] is snapshots[-1]
        assert len(received) <= len(snapshots)
