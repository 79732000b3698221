# File: scribe/features/engines/domain/models.py
from dataclasses import dataclass, field
from typing import List, Optional, Dict, Any

from scribe.core.common.enums import EngineKind, EngineStatus, JobState


@dataclass(frozen=True)
class EngineProfile:
    """
    Capability profile shown to the operator when picking an engine.
    """
    cost_per_hour_usd: float = 0.0
    accuracy: str = ""
    supported_formats: List[str] = field(default_factory=list)
    processing_time: str = ""

    def supports(self, extension: str) -> bool:
        return extension.lstrip(".").upper() in {f.upper() for f in self.supported_formats}


@dataclass(frozen=True)
class EngineStats:
    total_minutes: float = 0.0
    avg_speed: float = 0.0      # audio seconds recognised per wall-clock second
    jobs_processed: int = 0

    def with_job(self, audio_seconds: float, wall_seconds: Optional[float]) -> "EngineStats":
        """Stats after one more finished job. Speed is a running mean over jobs with a known wall time."""
        jobs = self.jobs_processed + 1
        avg_speed = self.avg_speed
        if wall_seconds and wall_seconds > 0:
            avg_speed += (audio_seconds / wall_seconds - self.avg_speed) / jobs
        return EngineStats(
            total_minutes=self.total_minutes + audio_seconds / 60.0,
            avg_speed=avg_speed,
            jobs_processed=jobs
        )


@dataclass(frozen=True)
class EngineDescriptor:
    id: str
    display_name: str
    kind: EngineKind
    status: EngineStatus = EngineStatus.INACTIVE
    config: Dict[str, Any] = field(default_factory=dict)
    profile: EngineProfile = field(default_factory=EngineProfile)
    stats: EngineStats = field(default_factory=EngineStats)
    is_builtin: bool = False

    @property
    def is_active(self) -> bool:
        return self.status == EngineStatus.ACTIVE

    @property
    def is_cloud(self) -> bool:
        return self.kind == EngineKind.CLOUD


@dataclass(frozen=True)
class Utterance:
    """
    One diarized utterance exactly as the engine reported it.
    """
    speaker: str
    text: str
    start_ms: int
    end_ms: int
    confidence: Optional[float] = None


@dataclass(frozen=True)
class EngineJobStatus:
    """
    Normalized answer to 'how is job X doing?'.
    utterances/duration are only meaningful when state is COMPLETED.
    """
    state: JobState
    utterances: List[Utterance] = field(default_factory=list)
    duration_seconds: Optional[float] = None
    error: Optional[str] = None
    raw_status: Optional[str] = None
