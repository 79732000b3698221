# File: scribe/features/polishing/service/streaming.py
import json
from typing import AsyncIterator
from uuid import UUID

from ..domain.models import PolishEvent
from .pipeline import PolishingPipeline

SSE_HEADERS = {
    "Content-Type": "text/event-stream",
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
}


def encode_sse(event: PolishEvent) -> bytes:
    """Frames one event as a server-sent-events 'data:' record."""
    payload = json.dumps(event.to_dict(), ensure_ascii=False)
    return f"data: {payload}\n\n".encode("utf-8")


async def stream_polish_events(pipeline: PolishingPipeline, transcript_id: UUID) -> AsyncIterator[bytes]:
    """
    Adapts the pipeline to an HTTP body iterator.
    If the client disconnects the transport stops iterating; closing the inner
    generator releases the transcript lock. Committed batches stay committed.
    """
    events = pipeline.run(transcript_id)
    try:
        async for event in events:
            yield encode_sse(event)
    finally:
        await events.aclose()
