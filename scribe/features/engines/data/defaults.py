# File: scribe/features/engines/data/defaults.py
from scribe.core.common.enums import EngineKind, EngineStatus
from scribe.core.config.settings import settings
from ..domain.models import EngineDescriptor, EngineProfile

LOCAL_WHISPER_ID = "local-whisper"
ASSEMBLYAI_ID = "assemblyai"

BUILTIN_ENGINES = (
    EngineDescriptor(
        id=LOCAL_WHISPER_ID,
        display_name="Local Whisper",
        kind=EngineKind.LOCAL,
        status=EngineStatus.ACTIVE,
        config={
            "provider": LOCAL_WHISPER_ID,
            "model": settings.WHISPER_MODEL_NAME,
            "language": settings.TRANSCRIPT_LANGUAGE,
            "device": settings.WHISPER_DEVICE,
        },
        profile=EngineProfile(
            cost_per_hour_usd=0.0,
            accuracy="85-90%",
            supported_formats=["MP3", "M4A", "WAV", "FLAC"],
            processing_time="40-60% of audio length"
        ),
        is_builtin=True
    ),
    EngineDescriptor(
        id=ASSEMBLYAI_ID,
        display_name="AssemblyAI",
        kind=EngineKind.CLOUD,
        status=EngineStatus.ACTIVE,
        config={
            "provider": ASSEMBLYAI_ID,
            "speech_model": "best",
            "language_code": settings.TRANSCRIPT_LANGUAGE,
            "speaker_labels": True,
        },
        profile=EngineProfile(
            cost_per_hour_usd=0.15,
            accuracy="92-96%",
            supported_formats=["MP3", "M4A", "WAV", "MP4"],
            processing_time="20-30% of audio length"
        ),
        is_builtin=True
    ),
)

BUILTIN_ENGINE_IDS = frozenset(e.id for e in BUILTIN_ENGINES)
