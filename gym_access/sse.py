from sse_starlette.sse import EventSourceResponse
from typing import AsyncIterator
from .settings import settings

# Frames arrive already encoded; EventSourceResponse passes bytes through untouched.
STREAM_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
}

def sse_stream(frames: AsyncIterator[bytes]) -> EventSourceResponse:
    return EventSourceResponse(
        frames,
        headers=STREAM_HEADERS,
        ping=settings.SSE_PING_SECONDS,
        sep="\n",
    )
