# File: scribe/features/transcription/data/repository.py
from typing import List, Optional
from uuid import UUID

from scribe.core.database.connection import SessionLocal
from .sql_models import TranscriptModel, TranscriptSegmentModel
from ..domain.models import TranscriptRecord, SegmentRecord


def transcript_to_domain(row: TranscriptModel) -> TranscriptRecord:
    return TranscriptRecord(
        id=row.id,
        audio_reference=row.audio_reference,
        status=row.status,
        title=row.title,
        engine_id=row.engine_id,
        external_job_id=row.external_job_id,
        duration_seconds=row.duration_seconds,
        speakers=dict(row.speakers or {}),
        error_message=row.error_message,
        created_at=row.created_at,
        dispatched_at=row.dispatched_at,
        completed_at=row.completed_at
    )


def segment_to_domain(row: TranscriptSegmentModel) -> SegmentRecord:
    return SegmentRecord(
        id=row.id,
        transcript_id=row.transcript_id,
        speaker=row.speaker,
        text=row.text,
        edited_text=row.edited_text,
        start_ms=row.start_ms,
        end_ms=row.end_ms,
        confidence=row.confidence,
        is_reviewed=bool(row.is_reviewed)
    )


class SqlTranscriptRepo:
    """Read side and creation of transcripts. Status changes live in the services."""

    def create(self, audio_reference: str, title: Optional[str] = None) -> TranscriptRecord:
        with SessionLocal() as db:
            row = TranscriptModel(audio_reference=audio_reference, title=title)
            db.add(row)
            db.commit()
            db.refresh(row)
            return transcript_to_domain(row)

    def get(self, transcript_id: UUID) -> Optional[TranscriptRecord]:
        with SessionLocal() as db:
            row = db.get(TranscriptModel, transcript_id)
            return transcript_to_domain(row) if row else None

    def list_segments(self, transcript_id: UUID) -> List[SegmentRecord]:
        with SessionLocal() as db:
            rows = (
                db.query(TranscriptSegmentModel)
                .filter(TranscriptSegmentModel.transcript_id == transcript_id)
                .order_by(TranscriptSegmentModel.start_ms, TranscriptSegmentModel.end_ms)
                .all()
            )
            return [segment_to_domain(r) for r in rows]
