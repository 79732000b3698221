# File: scribe/features/transcription/service/poller.py
import math
import logging
from datetime import datetime, timezone
from typing import Dict
from uuid import UUID

from scribe.core.common.enums import TranscriptStatus, JobState
from scribe.core.common.errors import TranscriptNotFoundError, InvalidEngineError
from scribe.core.database.connection import SessionLocal
from scribe.features.engines.domain.models import EngineJobStatus
from scribe.features.engines.service.registry import EngineRegistry
from ..data.sql_models import TranscriptModel, TranscriptSegmentModel
from ..domain.models import PollResult
from ..domain.state_machine import is_terminal, transition

logger = logging.getLogger(__name__)


class CompletionPoller:
    """
    Asks the engine how a transcript's job is doing and, once it is done,
    materializes the diarized output as segments.

    complete() is the single completion path: cloud polling and the local
    worker both end up there, and it inserts segments at most once per transcript.
    """

    def __init__(self, registry: EngineRegistry):
        self.registry = registry

    def poll(self, transcript_id: UUID) -> PollResult:
        with SessionLocal() as db:
            transcript = db.get(TranscriptModel, transcript_id)
            if not transcript:
                raise TranscriptNotFoundError(transcript_id)

            status = TranscriptStatus(transcript.status)
            engine_id = transcript.engine_id
            external_job_id = transcript.external_job_id

        # Local engines report through complete(); nothing to ask yet.
        if not external_job_id:
            return PollResult(transcript_id=transcript_id, status=status, no_op=True)

        if is_terminal(status):
            return PollResult(transcript_id=transcript_id, status=status)

        client = self.registry.client_for(engine_id, require_active=False)
        # EngineUnavailableError propagates to the caller
        job_status = client.get_status(external_job_id)

        if job_status.state == JobState.RUNNING:
            return PollResult(transcript_id=transcript_id, status=status, engine_state=job_status.raw_status)

        return self.complete(transcript_id, job_status)

    def complete(self, transcript_id: UUID, job_status: EngineJobStatus) -> PollResult:
        """Applies a finished (completed or errored) engine job to the transcript."""
        if job_status.state == JobState.RUNNING:
            raise ValueError("complete() requires a finished job status.")

        with SessionLocal() as db:
            # Row lock on Postgres so two concurrent completions serialize here
            transcript = (
                db.query(TranscriptModel)
                .filter(TranscriptModel.id == transcript_id)
                .with_for_update()
                .first()
            )
            if not transcript:
                raise TranscriptNotFoundError(transcript_id)

            current = TranscriptStatus(transcript.status)
            if is_terminal(current):
                # Repeat completion: never duplicate segments or flip a terminal state.
                logger.info(f"Transcript {transcript_id} already {current.value}; ignoring {job_status.state.value} report.")
                return PollResult(transcript_id=transcript_id, status=current, engine_state=job_status.raw_status)

            if job_status.state == JobState.ERROR:
                transition(transcript, TranscriptStatus.ERROR)
                transcript.error_message = job_status.error
                transcript.completed_at = datetime.now(timezone.utc)
                db.commit()
                logger.warning(f"Transcript {transcript_id} recognition failed: {job_status.error}")
                return PollResult(
                    transcript_id=transcript_id,
                    status=TranscriptStatus.ERROR,
                    engine_state=job_status.raw_status,
                    error=job_status.error
                )

            # 1. Speaker map in order of first appearance
            ordered = sorted(job_status.utterances, key=lambda u: u.start_ms)
            speakers: Dict[str, str] = {}
            for u in ordered:
                if u.speaker and u.speaker not in speakers:
                    speakers[u.speaker] = u.speaker

            # 2. Bulk insert
            db.add_all([
                TranscriptSegmentModel(
                    transcript_id=transcript.id,
                    speaker=u.speaker or "Unknown",
                    text=u.text,
                    start_ms=u.start_ms,
                    end_ms=u.end_ms,
                    confidence=u.confidence,
                    is_reviewed=False
                )
                for u in ordered
            ])

            # 3. Header
            transcript.duration_seconds = int(math.floor(job_status.duration_seconds or 0))
            transcript.speakers = speakers
            transcript.completed_at = datetime.now(timezone.utc)
            transition(transcript, TranscriptStatus.READY)
            db.commit()

            engine_id = transcript.engine_id
            wall_seconds = self._elapsed(transcript.dispatched_at, transcript.completed_at)

        logger.info(f"Transcript {transcript_id} ready. Segments: {len(ordered)}, Speakers: {len(speakers)}")
        self._record_usage(engine_id, job_status.duration_seconds or 0, wall_seconds)

        return PollResult(
            transcript_id=transcript_id,
            status=TranscriptStatus.READY,
            segments_created=len(ordered),
            engine_state=job_status.raw_status
        )

    @staticmethod
    def _elapsed(started, finished):
        if not started or not finished:
            return None
        # SQLite hands back naive datetimes
        if started.tzinfo is None:
            started = started.replace(tzinfo=timezone.utc)
        if finished.tzinfo is None:
            finished = finished.replace(tzinfo=timezone.utc)
        return (finished - started).total_seconds()

    def _record_usage(self, engine_id, audio_seconds, wall_seconds):
        if not engine_id:
            return
        try:
            self.registry.record_usage(engine_id, float(audio_seconds), wall_seconds)
        except InvalidEngineError:
            logger.warning(f"Engine {engine_id} no longer registered; stats not recorded.")
