# File: scribe/core/common/enums.py

from enum import Enum, unique


@unique
class TranscriptStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    READY = "ready"
    ERROR = "error"


@unique
class EngineKind(str, Enum):
    LOCAL = "local"
    CLOUD = "cloud"


@unique
class EngineStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


@unique
class JobState(str, Enum):
    """Normalized state of a recognition job as reported by an engine."""
    RUNNING = "running"
    COMPLETED = "completed"
    ERROR = "error"
