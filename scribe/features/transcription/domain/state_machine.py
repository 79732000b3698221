# File: scribe/features/transcription/domain/state_machine.py
from scribe.core.common.enums import TranscriptStatus
from scribe.core.common.errors import InvalidTransitionError

TERMINAL_STATES = frozenset({TranscriptStatus.READY, TranscriptStatus.ERROR})

# pending -> pending is the local-engine dispatch (engine recorded, worker runs later).
ALLOWED_TRANSITIONS = {
    TranscriptStatus.PENDING: frozenset({
        TranscriptStatus.PENDING,
        TranscriptStatus.PROCESSING,
        TranscriptStatus.READY,
        TranscriptStatus.ERROR,
    }),
    TranscriptStatus.PROCESSING: frozenset({TranscriptStatus.READY, TranscriptStatus.ERROR}),
    TranscriptStatus.READY: frozenset(),
    TranscriptStatus.ERROR: frozenset(),
}


def is_terminal(status: TranscriptStatus) -> bool:
    return TranscriptStatus(status) in TERMINAL_STATES


def can_transition(current: TranscriptStatus, requested: TranscriptStatus) -> bool:
    return TranscriptStatus(requested) in ALLOWED_TRANSITIONS[TranscriptStatus(current)]


def transition(transcript, requested: TranscriptStatus) -> None:
    """
    Moves an ORM transcript to 'requested' or raises InvalidTransitionError.
    The only sanctioned way to write transcript.status.
    """
    current = TranscriptStatus(transcript.status)
    requested = TranscriptStatus(requested)
    if not can_transition(current, requested):
        raise InvalidTransitionError(current.value, requested.value)
    transcript.status = requested
