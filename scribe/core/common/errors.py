# File: scribe/core/common/errors.py
"""
Exception hierarchy for the transcript pipeline.

Dispatch and polling raise these to the caller. The polishing pipeline
catches RewriteError per batch and never lets it escape the stream.
"""


class ScribeError(Exception):
    """Base exception for all pipeline errors."""
    pass


class InvalidEngineError(ScribeError):
    """Engine id is unknown or the engine is not active."""

    def __init__(self, engine_id: str, reason: str = "unknown"):
        self.engine_id = engine_id
        self.reason = reason
        super().__init__(f"Invalid engine '{engine_id}': {reason}")


class EngineRegistryError(ScribeError):
    """Rejected registry mutation (duplicate id, bad kind/status, built-in deletion)."""
    pass


class TranscriptNotFoundError(ScribeError):
    def __init__(self, transcript_id):
        self.transcript_id = transcript_id
        super().__init__(f"Transcript {transcript_id} not found.")


class InvalidTransitionError(ScribeError):
    """Attempted a status change the transcript state machine does not allow."""

    def __init__(self, current, requested):
        self.current = current
        self.requested = requested
        super().__init__(f"Cannot move transcript from '{current}' to '{requested}'.")


class SubmissionFailedError(ScribeError):
    """Cloud engine rejected the job or could not be reached. Transcript stays pending."""
    pass


class EngineUnavailableError(ScribeError):
    """Engine status query failed while polling."""
    pass


class TranscriptBusyError(ScribeError):
    """Another pass is already mutating this transcript's segments."""

    def __init__(self, transcript_id):
        self.transcript_id = transcript_id
        super().__init__(f"Transcript {transcript_id} is locked by another correction pass.")


class RewriteError(ScribeError):
    """Text-rewriting model call failed."""
    pass


class RateLimitedError(RewriteError):
    """Rewriting model signalled rate limiting (HTTP 429 / RESOURCE_EXHAUSTED)."""
    pass


class FetchFailedError(RewriteError):
    """Network or service failure other than rate limiting."""
    pass
