# File: scribe/features/transcription/service/local_worker.py
import logging
from typing import List, Optional
from uuid import UUID

from scribe.core.common.enums import TranscriptStatus, EngineKind, JobState
from scribe.core.common.errors import ScribeError, TranscriptNotFoundError, InvalidEngineError
from scribe.core.database.connection import SessionLocal
from scribe.features.correction.data.repository import SqlDictionaryRepo
from scribe.features.correction.domain.interfaces import IDictionaryRepository
from scribe.features.engines.data.sql_models import SttEngineModel
from scribe.features.engines.domain.models import EngineJobStatus
from scribe.features.engines.service.registry import EngineRegistry
from ..data.sql_models import TranscriptModel
from ..domain.models import PollResult
from .poller import CompletionPoller

logger = logging.getLogger(__name__)


class LocalRecognitionWorker:
    """
    Out-of-band worker for local engines.
    Picks up transcripts dispatched to a local engine (still pending, no
    external job) and reports the outcome through CompletionPoller.complete().
    """

    def __init__(self,
                 registry: EngineRegistry,
                 poller: Optional[CompletionPoller] = None,
                 dictionary: Optional[IDictionaryRepository] = None):
        self.registry = registry
        self.poller = poller or CompletionPoller(registry)
        self.dictionary = dictionary or SqlDictionaryRepo()

    def pending_transcripts(self) -> List[UUID]:
        with SessionLocal() as db:
            rows = (
                db.query(TranscriptModel.id)
                .join(SttEngineModel, TranscriptModel.engine_id == SttEngineModel.id)
                .filter(
                    TranscriptModel.status == TranscriptStatus.PENDING,
                    TranscriptModel.external_job_id.is_(None),
                    SttEngineModel.kind == EngineKind.LOCAL
                )
                .order_by(TranscriptModel.dispatched_at)
                .all()
            )
            return [r.id for r in rows]

    def process(self, transcript_id: UUID) -> PollResult:
        with SessionLocal() as db:
            transcript = db.get(TranscriptModel, transcript_id)
            if not transcript:
                raise TranscriptNotFoundError(transcript_id)
            if not transcript.engine_id:
                raise InvalidEngineError("<none>", f"transcript {transcript_id} was never dispatched")
            engine_id = transcript.engine_id
            audio_reference = transcript.audio_reference

        boost_terms = self.dictionary.boost_terms()

        logger.info(f"Worker: recognizing transcript {transcript_id} with {engine_id}")
        try:
            recognizer = self.registry.client_for(engine_id, require_active=False)
            job_status = recognizer.recognize(audio_reference, boost_terms)
        except Exception as e:
            logger.exception(f"Worker: recognition failed for {transcript_id}: {e}")
            job_status = EngineJobStatus(state=JobState.ERROR, error=str(e), raw_status="error")

        return self.poller.complete(transcript_id, job_status)

    def run_pending(self) -> int:
        """Processes every queued local transcript. Returns how many were handled."""
        handled = 0
        for transcript_id in self.pending_transcripts():
            try:
                self.process(transcript_id)
            except ScribeError as e:
                logger.error(f"Worker: skipping transcript {transcript_id}: {e}")
                continue
            handled += 1
        return handled
