# File: scribe/features/polishing/service/api.py
from typing import AsyncIterator, Optional
from uuid import UUID

from ..data.gemini_adapter import GeminiRewriter
from ..domain.interfaces import ITextRewriter
from ..domain.models import PolishConfig, PolishEvent
from .pipeline import PolishingPipeline
from .streaming import stream_polish_events


def run_polishing(transcript_id: UUID,
                  rewriter: Optional[ITextRewriter] = None,
                  config: Optional[PolishConfig] = None) -> AsyncIterator[PolishEvent]:
    """
    Live progress stream for one polishing run.
    Defaults to the Gemini rewriter configured in Settings.
    """
    pipeline = PolishingPipeline(rewriter or GeminiRewriter(), config)
    return pipeline.run(transcript_id)


def polish_event_stream(transcript_id: UUID,
                        rewriter: Optional[ITextRewriter] = None,
                        config: Optional[PolishConfig] = None) -> AsyncIterator[bytes]:
    """Same run, already framed as text/event-stream chunks."""
    pipeline = PolishingPipeline(rewriter or GeminiRewriter(), config)
    return stream_polish_events(pipeline, transcript_id)
