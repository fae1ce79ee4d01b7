"""Tests for the process-wide channel registry."""

import threading
from unittest.mock import MagicMock

from gym_access.registry import ChannelRegistry, get_registry


class TestChannelRegistry:
    def test_starts_empty(self):
        assert ChannelRegistry().size() == 0

    def test_register_is_idempotent(self):
        registry = ChannelRegistry()
        channel = MagicMock()

        registry.register(channel)
        registry.register(channel)

        assert registry.size() == 1
        assert registry.snapshot() == [channel]

    def test_unregister_unknown_is_noop(self):
        registry = ChannelRegistry()
        kept = MagicMock()
        registry.register(kept)

        registry.unregister(MagicMock())
        registry.unregister(kept)
        registry.unregister(kept)

        assert registry.size() == 0

    def test_size_tracks_distinct_channels(self):
        registry = ChannelRegistry()
        a, b, c = MagicMock(), MagicMock(), MagicMock()

        for op, ch in [("add", a), ("add", b), ("add", a), ("del", c), ("add", c), ("del", b)]:
            (registry.register if op == "add" else registry.unregister)(ch)

        assert registry.size() == 2
        assert set(registry.snapshot()) == {a, c}

    def test_snapshot_is_a_copy(self):
        registry = ChannelRegistry()
        channel = MagicMock()
        registry.register(channel)

        snapshot = registry.snapshot()
        registry.unregister(channel)

        assert snapshot == [channel]

    def test_concurrent_registration(self):
        registry = ChannelRegistry()
        channels = [MagicMock() for _ in range(200)]

        def worker(chunk):
            for ch in chunk:
                registry.register(ch)

        threads = [threading.Thread(target=worker, args=(channels[i::4],)) for i in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert registry.size() == 200


def test_get_registry_returns_same_instance():
    assert get_registry() is get_registry()
