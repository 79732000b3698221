# File: scribe/features/transcription/domain/models.py
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional
from uuid import UUID

from scribe.core.common.enums import TranscriptStatus


@dataclass(frozen=True)
class SegmentRecord:
    id: UUID
    transcript_id: UUID
    speaker: str
    text: str
    edited_text: Optional[str]
    start_ms: int
    end_ms: int
    confidence: Optional[float] = None
    is_reviewed: bool = False

    @property
    def current_text(self) -> str:
        return self.edited_text or self.text


@dataclass(frozen=True)
class TranscriptRecord:
    id: UUID
    audio_reference: str
    status: TranscriptStatus
    title: Optional[str] = None
    engine_id: Optional[str] = None
    external_job_id: Optional[str] = None
    duration_seconds: Optional[int] = None
    speakers: Dict[str, str] = field(default_factory=dict)
    error_message: Optional[str] = None
    created_at: Optional[datetime] = None
    dispatched_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None


@dataclass(frozen=True)
class DispatchResult:
    transcript_id: UUID
    engine_id: str
    status: TranscriptStatus
    external_job_id: Optional[str] = None
    boost_term_count: int = 0


@dataclass(frozen=True)
class PollResult:
    """
    Outcome of one status check.
    no_op is True when there was nothing to ask an engine (no external job handle).
    error carries the engine diagnostic for a failed recognition.
    """
    transcript_id: UUID
    status: TranscriptStatus
    segments_created: int = 0
    engine_state: Optional[str] = None
    error: Optional[str] = None
    no_op: bool = False
