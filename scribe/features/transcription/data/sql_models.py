# File: scribe/features/transcription/data/sql_models.py
import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, String, Text, Float, Integer, Boolean, ForeignKey, DateTime, JSON, Enum as SQLEnum
from sqlalchemy.orm import relationship, validates
from sqlalchemy.dialects.postgresql import UUID
from scribe.core.database.base import Base
from scribe.core.common.enums import TranscriptStatus


def utc_now():
    return datetime.now(timezone.utc)


class TranscriptModel(Base):
    """
    The aggregate root for one audio submission.
    Status only changes through the state machine in domain/state_machine.py.
    """
    __tablename__ = "transcripts"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    title = Column(String, nullable=True)

    # Owned externally (storage bucket URL, local path)
    audio_reference = Column(String, nullable=False)

    engine_id = Column(String, ForeignKey("stt_engines.id"), nullable=True)
    external_job_id = Column(String, nullable=True, index=True)

    status = Column(SQLEnum(TranscriptStatus), default=TranscriptStatus.PENDING, nullable=False, index=True)
    duration_seconds = Column(Integer, nullable=True)

    # Engine speaker label -> display name, e.g. {"A": "A"} until renamed
    speakers = Column(JSON, default=dict)

    # Engine diagnostic when status == error
    error_message = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), default=utc_now)
    dispatched_at = Column(DateTime(timezone=True), nullable=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)

    engine = relationship("SttEngineModel")
    segments = relationship(
        "TranscriptSegmentModel",
        back_populates="transcript",
        order_by="TranscriptSegmentModel.start_ms"
    )


class TranscriptSegmentModel(Base):
    """
    One diarized utterance.
    'text' is the engine's output and is write-once; every correction goes to edited_text.
    """
    __tablename__ = "transcript_segments"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    transcript_id = Column(UUID(as_uuid=True), ForeignKey("transcripts.id"), nullable=False, index=True)

    speaker = Column(String, nullable=False, default="Unknown")
    text = Column(Text, nullable=False)
    edited_text = Column(Text, nullable=True)

    start_ms = Column(Integer, nullable=False, index=True)
    end_ms = Column(Integer, nullable=False)
    confidence = Column(Float, nullable=True)

    # Manual review flag, owned by the editor UI
    is_reviewed = Column(Boolean, default=False, nullable=False)

    transcript = relationship("TranscriptModel", back_populates="segments")

    @validates("text")
    def _text_is_write_once(self, key, value):
        if self.text is not None and value != self.text:
            raise ValueError("Segment text is immutable; write edited_text instead.")
        return value

    @property
    def current_text(self) -> str:
        return self.edited_text or self.text
