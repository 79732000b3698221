# File: scribe/features/polishing/domain/models.py
from dataclasses import dataclass
from typing import Any, Dict, Union

from scribe.core.config.settings import settings


@dataclass
class PolishConfig:
    """
    Throttle settings for the rewriting model.
    Defaults come from Settings; tests pass zero delays.
    """
    batch_size: int = settings.POLISH_BATCH_SIZE
    rate_limit_cooldown: float = settings.POLISH_RATE_LIMIT_COOLDOWN
    inter_batch_delay: float = settings.POLISH_INTER_BATCH_DELAY

    def __post_init__(self):
        if self.batch_size < 1:
            raise ValueError("batch_size must be at least 1.")
        if self.rate_limit_cooldown < 0 or self.inter_batch_delay < 0:
            raise ValueError("Delays cannot be negative.")


@dataclass(frozen=True)
class ProgressEvent:
    progress: int       # 0-100
    completed: int      # batches finished
    total: int          # batches overall
    polished: int       # segments rewritten so far

    type = "progress"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "progress": self.progress,
            "completed": self.completed,
            "total": self.total,
            "polished": self.polished,
        }


@dataclass(frozen=True)
class WaitingEvent:
    message: str

    type = "waiting"

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "message": self.message}


@dataclass(frozen=True)
class DoneEvent:
    processed_count: int
    polished_count: int

    type = "done"

    @property
    def is_partial(self) -> bool:
        return self.polished_count < self.processed_count

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "processedCount": self.processed_count,
            "polishedCount": self.polished_count,
        }


PolishEvent = Union[ProgressEvent, WaitingEvent, DoneEvent]
