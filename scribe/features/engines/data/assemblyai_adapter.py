# File: scribe/features/engines/data/assemblyai_adapter.py
import logging
from typing import Optional, Sequence, Dict, Any

import httpx

from scribe.core.common.enums import JobState
from scribe.core.common.errors import SubmissionFailedError, EngineUnavailableError
from scribe.core.config.settings import settings
from ..domain.interfaces import ISpeechEngine
from ..domain.models import EngineJobStatus, Utterance

logger = logging.getLogger(__name__)

_RUNNING_STATES = {"queued", "processing"}


class AssemblyAIAdapter(ISpeechEngine):
    """
    Cloud recognition via the AssemblyAI v2 REST API.
    Diarization is always requested; boost vocabulary goes into word_boost.
    """

    def __init__(self,
                 config: Optional[Dict[str, Any]] = None,
                 api_key: Optional[str] = None,
                 base_url: Optional[str] = None,
                 client: Optional[httpx.Client] = None):
        self.config = config or {}
        self.api_key = api_key if api_key is not None else settings.ASSEMBLYAI_API_KEY
        self.base_url = (base_url or settings.ASSEMBLYAI_BASE_URL).rstrip("/")
        self.client = client or httpx.Client(timeout=settings.HTTP_TIMEOUT_SECONDS)

    def _headers(self) -> dict:
        return {"Authorization": self.api_key, "Content-Type": "application/json"}

    def submit(self, audio_reference: str, boost_terms: Sequence[str]) -> str:
        payload = {
            "audio_url": audio_reference,
            "speech_model": self.config.get("speech_model", "best"),
            "language_code": self.config.get("language_code", settings.TRANSCRIPT_LANGUAGE),
            "speaker_labels": self.config.get("speaker_labels", True),
        }
        # AssemblyAI rejects an empty word_boost list
        if boost_terms:
            payload["word_boost"] = list(boost_terms)

        logger.info(f"AssemblyAI: submitting {audio_reference} ({len(boost_terms)} boost terms)")

        try:
            response = self.client.post(f"{self.base_url}/transcript", json=payload, headers=self._headers())
            response.raise_for_status()
            job_id = response.json().get("id")
        except httpx.HTTPStatusError as e:
            raise SubmissionFailedError(
                f"AssemblyAI error: {e.response.status_code} - {e.response.text}"
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            raise SubmissionFailedError(f"AssemblyAI submission failed: {e}") from e

        if not job_id:
            raise SubmissionFailedError("AssemblyAI response did not include a job id.")
        return job_id

    def get_status(self, external_job_id: str) -> EngineJobStatus:
        try:
            response = self.client.get(f"{self.base_url}/transcript/{external_job_id}", headers=self._headers())
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise EngineUnavailableError(f"Failed to fetch AssemblyAI status for {external_job_id}: {e}") from e

        return self._parse_status(data)

    @staticmethod
    def _parse_status(data: dict) -> EngineJobStatus:
        raw = data.get("status")

        if raw == "completed":
            utterances = [
                Utterance(
                    speaker=u.get("speaker") or "Unknown",
                    text=u.get("text") or "",
                    start_ms=int(u.get("start", 0)),
                    end_ms=int(u.get("end", 0)),
                    confidence=u.get("confidence")
                )
                for u in (data.get("utterances") or [])
            ]
            return EngineJobStatus(
                state=JobState.COMPLETED,
                utterances=utterances,
                duration_seconds=data.get("audio_duration") or 0,
                raw_status=raw
            )

        if raw == "error":
            return EngineJobStatus(state=JobState.ERROR, error=data.get("error"), raw_status=raw)

        if raw not in _RUNNING_STATES:
            logger.warning(f"AssemblyAI returned unexpected status '{raw}', treating as running.")
        return EngineJobStatus(state=JobState.RUNNING, raw_status=raw)
