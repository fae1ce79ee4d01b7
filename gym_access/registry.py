import logging, threading
from typing import Generic, List, Optional, Set, TypeVar

log = logging.getLogger("registry")

T = TypeVar("T")

class ChannelRegistry(Generic[T]):
    """Set of live channels shared by every request handled in this process."""

    def __init__(self):
        self._channels: Set[T] = set()
        self._lock = threading.Lock()

    def register(self, channel: T) -> None:
        with self._lock:
            self._channels.add(channel)

    def unregister(self, channel: T) -> None:
        with self._lock:
            self._channels.discard(channel)

    def size(self) -> int:
        with self._lock:
            return len(self._channels)

    def snapshot(self) -> List[T]:
        with self._lock:
            return list(self._channels)

_registry: Optional[ChannelRegistry] = None
_registry_lock = threading.Lock()

def get_registry() -> ChannelRegistry:
    # Built once; rebuilding would drop every connected subscriber.
    global _registry
    if _registry is None:
        with _registry_lock:
            if _registry is None:
                _registry = ChannelRegistry()
                log.debug("Channel registry created")
    return _registry
