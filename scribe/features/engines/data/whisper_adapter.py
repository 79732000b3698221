# File: scribe/features/engines/data/whisper_adapter.py
import math
import logging
from typing import Optional, Sequence, Dict, Any

from scribe.core.common.enums import JobState
from scribe.core.config.settings import settings
from scribe.core.model_lifecycle.orchestrator import ModelOrchestrator
from scribe.core.model_lifecycle.types import ModelType
from ..domain.interfaces import ILocalRecognizer
from ..domain.models import EngineJobStatus, Utterance

logger = logging.getLogger(__name__)


class WhisperAdapter(ILocalRecognizer):
    """
    In-process recognition with openai-whisper.
    Whisper does not diarize, so every utterance is attributed to one speaker label.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        self.config = config or {}
        self.orchestrator = ModelOrchestrator()
        self.model_size = self.config.get("model", settings.WHISPER_MODEL_NAME)
        self.device = self.config.get("device", settings.WHISPER_DEVICE)
        self.language = self.config.get("language", settings.TRANSCRIPT_LANGUAGE)
        self.speaker_label = self.config.get("speaker_label", "A")

    def recognize(self, audio_reference: str, boost_terms: Sequence[str]) -> EngineJobStatus:
        logger.info(f"Requesting Whisper ({self.model_size}) for {audio_reference}...")

        def loader():
            import whisper
            logger.debug(f"Loading Whisper {self.model_size} on {self.device}...")
            settings.ensure_dirs()
            return whisper.load_model(self.model_size, device=self.device, download_root=str(settings.MODELS_DIR))

        model = self.orchestrator.request_model(ModelType.WHISPER, self.model_size, loader)

        # Whisper has no word_boost; the closest lever is biasing the decoder prompt.
        initial_prompt = "、".join(boost_terms) if boost_terms else None

        result_raw = model.transcribe(
            audio_reference,
            language=self.language,
            fp16=(self.device == "cuda"),
            initial_prompt=initial_prompt
        )

        utterances = []
        duration = 0.0
        for seg in result_raw.get("segments", []):
            text = seg.get("text", "").strip()
            end = float(seg["end"])
            duration = max(duration, end)
            if not text:
                continue
            utterances.append(Utterance(
                speaker=self.speaker_label,
                text=text,
                start_ms=int(round(float(seg["start"]) * 1000)),
                end_ms=int(round(end * 1000)),
                confidence=self._confidence(seg.get("avg_logprob"))
            ))

        return EngineJobStatus(
            state=JobState.COMPLETED,
            utterances=utterances,
            duration_seconds=duration,
            raw_status="completed"
        )

    @staticmethod
    def _confidence(avg_logprob) -> Optional[float]:
        if avg_logprob is None:
            return None
        return min(1.0, math.exp(float(avg_logprob)))
