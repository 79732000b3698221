# File: tests/features/transcription/test_dispatch.py
import uuid
import pytest

from scribe.core.common.enums import TranscriptStatus
from scribe.core.common.errors import (
    InvalidEngineError, SubmissionFailedError, TranscriptNotFoundError, InvalidTransitionError
)
from scribe.features.correction.service.api import add_dictionary_entry
from scribe.features.transcription.service.api import create_transcript, get_transcript, submit_for_transcription

AUDIO = "https://storage.example.com/audio/board-meeting.m4a"


def test_cloud_dispatch_submits_with_boost_terms(registry, cloud_engine):
    add_dictionary_entry("台積店", "台積電")
    add_dictionary_entry("聯發客", "聯發科")
    transcript = create_transcript(AUDIO, "Board meeting")

    result = submit_for_transcription(registry, transcript.id, AUDIO, "assemblyai")

    assert result.status == TranscriptStatus.PROCESSING
    assert result.external_job_id == "job-1"
    assert result.boost_term_count == 2
    assert cloud_engine.submissions == [(AUDIO, ["台積電", "聯發科"])]

    stored = get_transcript(transcript.id)
    assert stored.status == TranscriptStatus.PROCESSING
    assert stored.engine_id == "assemblyai"
    assert stored.external_job_id == "job-1"
    assert stored.dispatched_at is not None


def test_local_dispatch_stays_pending_without_job(registry, cloud_engine):
    transcript = create_transcript(AUDIO)

    result = submit_for_transcription(registry, transcript.id, AUDIO, "local-whisper")

    assert result.status == TranscriptStatus.PENDING
    assert result.external_job_id is None
    assert cloud_engine.submissions == []
    stored = get_transcript(transcript.id)
    assert stored.engine_id == "local-whisper"
    assert stored.external_job_id is None


def test_unknown_engine_leaves_transcript_untouched(registry, cloud_engine):
    transcript = create_transcript(AUDIO)

    with pytest.raises(InvalidEngineError):
        submit_for_transcription(registry, transcript.id, AUDIO, "unknown-engine")

    stored = get_transcript(transcript.id)
    assert stored.status == TranscriptStatus.PENDING
    assert stored.engine_id is None


def test_inactive_engine_is_invalid(registry, cloud_engine):
    registry.update("assemblyai", status="inactive")
    transcript = create_transcript(AUDIO)

    with pytest.raises(InvalidEngineError):
        submit_for_transcription(registry, transcript.id, AUDIO, "assemblyai")
    assert cloud_engine.submissions == []


def test_submission_failure_keeps_pending_and_allows_retry(registry, cloud_engine):
    transcript = create_transcript(AUDIO)
    cloud_engine.fail_submit = True

    with pytest.raises(SubmissionFailedError):
        submit_for_transcription(registry, transcript.id, AUDIO, "assemblyai")

    stored = get_transcript(transcript.id)
    assert stored.status == TranscriptStatus.PENDING
    assert stored.external_job_id is None

    cloud_engine.fail_submit = False
    result = submit_for_transcription(registry, transcript.id, AUDIO, "assemblyai")
    assert result.status == TranscriptStatus.PROCESSING


def test_redispatch_of_processing_transcript_is_refused(registry, cloud_engine):
    transcript = create_transcript(AUDIO)
    submit_for_transcription(registry, transcript.id, AUDIO, "assemblyai")

    with pytest.raises(InvalidTransitionError):
        submit_for_transcription(registry, transcript.id, AUDIO, "assemblyai")
    assert len(cloud_engine.submissions) == 1


def test_missing_transcript(registry, cloud_engine):
    with pytest.raises(TranscriptNotFoundError):
        submit_for_transcription(registry, uuid.uuid4(), AUDIO, "assemblyai")


def test_local_engine_without_adapter_is_rejected(registry):
    registry.register("edge-box", "Edge Box", "local", status="active")
    transcript = create_transcript(AUDIO)

    with pytest.raises(InvalidEngineError):
        submit_for_transcription(registry, transcript.id, AUDIO, "edge-box")

    stored = get_transcript(transcript.id)
    assert stored.status == TranscriptStatus.PENDING
    assert stored.engine_id is None
