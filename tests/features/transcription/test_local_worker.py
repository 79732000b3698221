# File: tests/features/transcription/test_local_worker.py
import pytest

from conftest import FakeRecognizer, make_utterances
from scribe.core.common.enums import JobState, TranscriptStatus
from scribe.core.common.errors import TranscriptNotFoundError
from scribe.features.correction.service.api import add_dictionary_entry
from scribe.features.engines.domain.models import EngineJobStatus
from scribe.features.transcription.service.api import (
    create_transcript, get_transcript, list_segments, submit_for_transcription
)
from scribe.features.transcription.service.local_worker import LocalRecognitionWorker

AUDIO = "/srv/uploads/interview.wav"


@pytest.fixture
def recognizer(registry):
    fake = FakeRecognizer(result=EngineJobStatus(
        state=JobState.COMPLETED,
        utterances=make_utterances(5, speakers=("A",)),
        duration_seconds=42.4,
        raw_status="completed"
    ))
    registry.bind_client("local-whisper", fake)
    return fake


def test_worker_completes_pending_local_transcript(registry, cloud_engine, recognizer):
    add_dictionary_entry("雲段", "雲端")
    transcript = create_transcript(AUDIO)
    submit_for_transcription(registry, transcript.id, AUDIO, "local-whisper")

    worker = LocalRecognitionWorker(registry)
    assert worker.pending_transcripts() == [transcript.id]

    result = worker.process(transcript.id)

    assert result.status == TranscriptStatus.READY
    assert result.segments_created == 5
    assert recognizer.calls == [(AUDIO, ["雲端"])]
    assert get_transcript(transcript.id).duration_seconds == 42
    assert worker.pending_transcripts() == []


def test_worker_ignores_cloud_and_undispatched(registry, cloud_engine, recognizer):
    create_transcript(AUDIO)
    cloud = create_transcript(AUDIO)
    submit_for_transcription(registry, cloud.id, AUDIO, "assemblyai")

    assert LocalRecognitionWorker(registry).run_pending() == 0
    assert recognizer.calls == []


def test_recognition_crash_marks_error(registry, cloud_engine):
    registry.bind_client("local-whisper", FakeRecognizer(error=RuntimeError("CUDA out of memory")))
    transcript = create_transcript(AUDIO)
    submit_for_transcription(registry, transcript.id, AUDIO, "local-whisper")

    result = LocalRecognitionWorker(registry).process(transcript.id)

    assert result.status == TranscriptStatus.ERROR
    stored = get_transcript(transcript.id)
    assert stored.status == TranscriptStatus.ERROR
    assert "CUDA out of memory" in stored.error_message
    assert list_segments(transcript.id) == []


def test_run_pending_processes_queue(registry, cloud_engine, recognizer):
    ids = []
    for _ in range(2):
        t = create_transcript(AUDIO)
        submit_for_transcription(registry, t.id, AUDIO, "local-whisper")
        ids.append(t.id)

    assert LocalRecognitionWorker(registry).run_pending() == 2
    assert all(get_transcript(i).status == TranscriptStatus.READY for i in ids)


def test_unwired_engine_does_not_block_the_queue(registry, recognizer):
    # Dispatched while wired, adapter gone by the time the worker runs
    registry.register("edge-box", "Edge Box", "local", status="active", config={"provider": "local-whisper"})
    registry.bind_client("edge-box", FakeRecognizer())
    stuck = create_transcript(AUDIO)
    submit_for_transcription(registry, stuck.id, AUDIO, "edge-box")
    registry.update("edge-box", config={"provider": "edge-box"})

    queued = create_transcript(AUDIO)
    submit_for_transcription(registry, queued.id, AUDIO, "local-whisper")

    worker = LocalRecognitionWorker(registry)
    assert worker.run_pending() == 2

    failed = get_transcript(stuck.id)
    assert failed.status == TranscriptStatus.ERROR
    assert "no adapter" in failed.error_message
    assert get_transcript(queued.id).status == TranscriptStatus.READY
    assert worker.run_pending() == 0


def test_run_pending_continues_past_unprocessable_transcript(registry, recognizer, monkeypatch):
    first = create_transcript(AUDIO)
    second = create_transcript(AUDIO)
    for t in (first, second):
        submit_for_transcription(registry, t.id, AUDIO, "local-whisper")

    worker = LocalRecognitionWorker(registry)
    original = worker.process

    def flaky(transcript_id):
        if transcript_id == first.id:
            raise TranscriptNotFoundError(transcript_id)
        return original(transcript_id)
    monkeypatch.setattr(worker, "process", flaky)

    assert worker.run_pending() == 1
    assert get_transcript(second.id).status == TranscriptStatus.READY
