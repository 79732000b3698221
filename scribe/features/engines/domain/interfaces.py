# File: scribe/features/engines/domain/interfaces.py
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from .models import EngineDescriptor, EngineJobStatus


class ISpeechEngine(ABC):
    """
    Contract for an asynchronous (job-based) speech-to-text provider.
    """

    @abstractmethod
    def submit(self, audio_reference: str, boost_terms: Sequence[str]) -> str:
        """
        Starts recognition and returns the engine's own job handle.
        Raises SubmissionFailedError if the provider rejects the job.
        """
        pass

    @abstractmethod
    def get_status(self, external_job_id: str) -> EngineJobStatus:
        """
        Raises EngineUnavailableError if the provider cannot be queried.
        """
        pass


class ILocalRecognizer(ABC):
    """
    Contract for an in-process engine, driven by the out-of-band worker.
    """

    @abstractmethod
    def recognize(self, audio_reference: str, boost_terms: Sequence[str]) -> EngineJobStatus:
        pass


class IEngineRepository(ABC):

    @abstractmethod
    def get(self, engine_id: str) -> Optional[EngineDescriptor]:
        pass

    @abstractmethod
    def list_all(self) -> List[EngineDescriptor]:
        pass

    @abstractmethod
    def add(self, descriptor: EngineDescriptor) -> EngineDescriptor:
        pass

    @abstractmethod
    def save(self, descriptor: EngineDescriptor) -> EngineDescriptor:
        """Overwrites mutable fields (name, status, config, stats)."""
        pass

    @abstractmethod
    def apply_usage(self, engine_id: str, audio_seconds: float, wall_seconds: Optional[float]) -> Optional[EngineDescriptor]:
        """
        Adds one finished job to the stored stats as a single locked read-modify-write.
        Returns None for an unknown engine.
        """
        pass

    @abstractmethod
    def delete(self, engine_id: str) -> bool:
        pass
