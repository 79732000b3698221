# File: scribe/features/transcription/service/api.py
from typing import List, Optional
from uuid import UUID

from scribe.core.common.errors import TranscriptNotFoundError
from scribe.features.engines.service.registry import EngineRegistry
from ..data.repository import SqlTranscriptRepo
from ..domain.models import TranscriptRecord, SegmentRecord, DispatchResult, PollResult
from .dispatch import DispatchController
from .poller import CompletionPoller

_repo = SqlTranscriptRepo()


def create_transcript(audio_reference: str, title: Optional[str] = None) -> TranscriptRecord:
    """Registers an uploaded recording. The transcript starts out pending."""
    return _repo.create(audio_reference, title)


def get_transcript(transcript_id: UUID) -> TranscriptRecord:
    transcript = _repo.get(transcript_id)
    if transcript is None:
        raise TranscriptNotFoundError(transcript_id)
    return transcript


def list_segments(transcript_id: UUID) -> List[SegmentRecord]:
    return _repo.list_segments(transcript_id)


def submit_for_transcription(registry: EngineRegistry,
                             transcript_id: UUID,
                             audio_reference: str,
                             engine_id: str) -> DispatchResult:
    return DispatchController(registry).dispatch(transcript_id, audio_reference, engine_id)


def poll_status(registry: EngineRegistry, transcript_id: UUID) -> PollResult:
    return CompletionPoller(registry).poll(transcript_id)
