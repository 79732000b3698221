# File: scribe/features/transcription/service/dispatch.py
import logging
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from scribe.core.common.enums import TranscriptStatus
from scribe.core.common.errors import TranscriptNotFoundError, InvalidTransitionError
from scribe.core.database.connection import SessionLocal
from scribe.features.correction.data.repository import SqlDictionaryRepo
from scribe.features.correction.domain.interfaces import IDictionaryRepository
from scribe.features.engines.service.registry import EngineRegistry
from ..data.sql_models import TranscriptModel
from ..domain.models import DispatchResult
from ..domain.state_machine import can_transition, transition

logger = logging.getLogger(__name__)


class DispatchController:
    """
    Hands a transcript's audio to the chosen engine.
    Cloud engines get the job immediately (pending -> processing);
    local engines only get recorded and the out-of-band worker picks them up.
    """

    def __init__(self, registry: EngineRegistry, dictionary: Optional[IDictionaryRepository] = None):
        self.registry = registry
        self.dictionary = dictionary or SqlDictionaryRepo()

    def dispatch(self, transcript_id: UUID, audio_reference: str, engine_id: str) -> DispatchResult:
        # Fails with InvalidEngineError before anything is touched
        engine = self.registry.require_active(engine_id)

        with SessionLocal() as db:
            transcript = db.get(TranscriptModel, transcript_id)
            if not transcript:
                raise TranscriptNotFoundError(transcript_id)

            target = TranscriptStatus.PROCESSING if engine.is_cloud else TranscriptStatus.PENDING
            if transcript.status != TranscriptStatus.PENDING or not can_transition(transcript.status, target):
                # A processing transcript already has a job in flight.
                raise InvalidTransitionError(TranscriptStatus(transcript.status).value, target.value)

            # 1. Boost vocabulary from the shared dictionary
            boost_terms = self.dictionary.boost_terms()

            # 2. Every engine kind needs an adapter; one without is rejected before any write
            client = self.registry.client_for(engine_id)

            external_job_id = None
            if engine.is_cloud:
                # 3. Submit. SubmissionFailedError propagates; nothing has been written yet.
                external_job_id = client.submit(audio_reference, boost_terms)
                logger.info(f"Transcript {transcript_id} submitted to {engine_id} as job {external_job_id}")
            else:
                logger.info(f"Transcript {transcript_id} queued for local engine {engine_id}")

            # 4. Record the dispatch and make the single status transition
            transcript.audio_reference = audio_reference
            transcript.engine_id = engine.id
            transcript.external_job_id = external_job_id
            transcript.dispatched_at = datetime.now(timezone.utc)
            transition(transcript, target)
            db.commit()

            return DispatchResult(
                transcript_id=transcript.id,
                engine_id=engine.id,
                status=target,
                external_job_id=external_job_id,
                boost_term_count=len(boost_terms)
            )
