# File: tests/features/transcription/test_state_machine.py
import pytest
from types import SimpleNamespace

from scribe.core.common.enums import TranscriptStatus as S
from scribe.core.common.errors import InvalidTransitionError
from scribe.features.transcription.domain.state_machine import can_transition, transition, is_terminal

FORWARD = [
    (S.PENDING, S.PROCESSING),
    (S.PENDING, S.READY),
    (S.PENDING, S.ERROR),
    (S.PROCESSING, S.READY),
    (S.PROCESSING, S.ERROR),
]

BACKWARD_OR_TERMINAL = [
    (S.PROCESSING, S.PENDING),
    (S.READY, S.PENDING),
    (S.READY, S.PROCESSING),
    (S.READY, S.ERROR),
    (S.ERROR, S.READY),
    (S.ERROR, S.PENDING),
]


@pytest.mark.parametrize("current,requested", FORWARD)
def test_forward_transitions_allowed(current, requested):
    transcript = SimpleNamespace(status=current)
    transition(transcript, requested)
    assert transcript.status == requested


@pytest.mark.parametrize("current,requested", BACKWARD_OR_TERMINAL)
def test_no_way_back_and_no_way_out_of_terminal(current, requested):
    transcript = SimpleNamespace(status=current)
    with pytest.raises(InvalidTransitionError):
        transition(transcript, requested)
    assert transcript.status == current


def test_terminal_states():
    assert is_terminal(S.READY) and is_terminal(S.ERROR)
    assert not is_terminal(S.PENDING) and not is_terminal(S.PROCESSING)
    assert can_transition(S.PENDING, S.PENDING)
