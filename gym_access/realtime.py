import asyncio, itertools, logging
from typing import Any, AsyncIterator, Optional
import orjson
from fastapi import HTTPException
from pydantic import BaseModel
from .events import ConnectedEvent
from .registry import ChannelRegistry, get_registry

log = logging.getLogger("realtime")

_channel_ids = itertools.count(1)

class ChannelClosed(Exception):
    pass

def _default(obj: Any):
    if isinstance(obj, BaseModel):
        return obj.model_dump(mode="json", by_alias=True)
    raise TypeError(f"Type is not JSON serializable: {type(obj).__name__}")

def encode_frame(event: Any) -> bytes:
    return b"data: " + orjson.dumps(event, default=_default) + b"\n\n"

class Channel:
    """One subscriber's outbound stream: pending -> open -> closed."""

    def __init__(self):
        self.id = next(_channel_ids)
        self.state = "pending"
        self._queue: asyncio.Queue = asyncio.Queue()

    def open(self):
        if self.state == "pending":
            self.state = "open"

    def close(self):
        self.state = "closed"

    @property
    def closed(self) -> bool:
        return self.state == "closed"

    def write(self, frame: bytes) -> None:
        if self.state != "open":
            raise ChannelClosed(f"channel {self.id} is {self.state}")
        self._queue.put_nowait(frame)

    async def frames(self) -> AsyncIterator[bytes]:
        while not self.closed:
            yield await self._queue.get()

class Broadcaster:
    def __init__(self, registry: Optional[ChannelRegistry] = None):
        self._registry = registry if registry is not None else get_registry()

    @property
    def registry(self) -> ChannelRegistry:
        return self._registry

    def connect(self, identity) -> Channel:
        if identity is None:
            raise HTTPException(401, "Not authenticated")
        channel = Channel()
        self._registry.register(channel)
        channel.open()
        channel.write(encode_frame(ConnectedEvent()))
        log.info("Channel %d connected for %s; %d live", channel.id, identity.id, self._registry.size())
        return channel

    def disconnect(self, channel: Channel) -> None:
        already_closed = channel.closed
        channel.close()
        self._registry.unregister(channel)
        if not already_closed:
            log.info("Channel %d disconnected; %d live", channel.id, self._registry.size())

    async def broadcast(self, event: Any) -> None:
        channels = self._registry.snapshot()
        if not channels:
            return
        frame = encode_frame(event)
        for channel in channels:
            try:
                channel.write(frame)
            except Exception as e:
                log.warning("Dropping channel %s after failed write: %s", getattr(channel, "id", "?"), e)
                self._registry.unregister(channel)

    async def stream(self, channel: Channel) -> AsyncIterator[bytes]:
        try:
            async for frame in channel.frames():
                yield frame
        finally:
            self.disconnect(channel)

broadcaster = Broadcaster()
