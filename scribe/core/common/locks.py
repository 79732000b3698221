# File: scribe/core/common/locks.py

import logging
from contextlib import contextmanager
from threading import Lock
from typing import FrozenSet
from uuid import UUID

from .errors import TranscriptBusyError

logger = logging.getLogger(__name__)


class TranscriptLockRegistry:
    """
    Singleton advisory lock table, one entry per transcript currently being mutated.
    The dictionary pass, manual replace and the polishing pipeline all read
    edited_text as their base, so only one of them may run per transcript.
    Acquisition never blocks: a held transcript raises TranscriptBusyError.
    Entries exist only while held, so the table stays as small as the work in flight.
    """
    _instance = None
    _guard = Lock()

    def __new__(cls):
        with cls._guard:
            if cls._instance is None:
                cls._instance = super(TranscriptLockRegistry, cls).__new__(cls)
                cls._instance._held = set()
        return cls._instance

    @contextmanager
    def hold(self, transcript_id: UUID):
        with self._guard:
            busy = transcript_id in self._held
            if not busy:
                self._held.add(transcript_id)
        if busy:
            logger.warning(f"Transcript {transcript_id} is busy; refusing concurrent pass.")
            raise TranscriptBusyError(transcript_id)
        try:
            yield
        finally:
            with self._guard:
                self._held.discard(transcript_id)

    def is_held(self, transcript_id: UUID) -> bool:
        with self._guard:
            return transcript_id in self._held

    def held_ids(self) -> FrozenSet[UUID]:
        with self._guard:
            return frozenset(self._held)


transcript_locks = TranscriptLockRegistry()
