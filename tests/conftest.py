# File: tests/conftest.py

import os
import re
import sys
import pytest
import sqlalchemy
from sqlalchemy import text
from sqlalchemy_utils import database_exists, create_database

# 1. Tests always run against SQLite unless told otherwise
os.environ.setdefault("USE_SQLITE", "true")

# 2. Add project root to path
sys.path.append(os.getcwd())

from scribe.core.common.enums import JobState, TranscriptStatus
from scribe.core.common.errors import SubmissionFailedError
from scribe.core.database.base import Base
from scribe.core.database.connection import engine as TEST_ENGINE, SessionLocal
from scribe.features.engines.domain.interfaces import ISpeechEngine, ILocalRecognizer
from scribe.features.engines.domain.models import EngineJobStatus, Utterance
from scribe.features.polishing.domain.interfaces import ITextRewriter


# --- Fakes for the external collaborators ---

class FakeSpeechEngine(ISpeechEngine):
    """Cloud engine double. Set .status to control what polling sees."""

    def __init__(self, job_id="job-1"):
        self.job_id = job_id
        self.submissions = []
        self.status_calls = 0
        self.fail_submit = False
        self.status = EngineJobStatus(state=JobState.RUNNING, raw_status="processing")

    def submit(self, audio_reference, boost_terms):
        if self.fail_submit:
            raise SubmissionFailedError("AssemblyAI error: 503 - unavailable")
        self.submissions.append((audio_reference, list(boost_terms)))
        return self.job_id

    def get_status(self, external_job_id):
        self.status_calls += 1
        return self.status


class FakeRecognizer(ILocalRecognizer):

    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error
        self.calls = []

    def recognize(self, audio_reference, boost_terms):
        self.calls.append((audio_reference, list(boost_terms)))
        if self.error:
            raise self.error
        return self.result


_PROMPT_LINE_RE = re.compile(r"^(\d+)\|(.*)$")


def echo_polish(prompt: str) -> str:
    """Answers like a well-behaved model: every input line back with a full stop."""
    lines = []
    for line in prompt.splitlines():
        match = _PROMPT_LINE_RE.match(line)
        if match:
            lines.append(f"{match.group(1)}|{match.group(2)}。")
    return "\n".join(lines)


class ScriptedRewriter(ITextRewriter):
    """
    Each call pops the next scripted step: an exception instance is raised,
    a string is returned, None means "echo the batch politely".
    """

    def __init__(self, script=None):
        self.script = list(script or [])
        self.prompts = []

    async def rewrite(self, prompt):
        self.prompts.append(prompt)
        step = self.script.pop(0) if self.script else None
        if isinstance(step, Exception):
            raise step
        if step is None:
            return echo_polish(prompt)
        return step


def make_utterances(count, speakers=("A", "B")):
    return [
        Utterance(
            speaker=speakers[i % len(speakers)],
            text=f"第{i}句",
            start_ms=i * 1000,
            end_ms=i * 1000 + 900,
            confidence=0.9
        )
        for i in range(count)
    ]


# --- Database lifecycle ---

@pytest.fixture(scope="session", autouse=True)
def global_setup():
    """
    Runs once per test session.
    Ensures DB exists and all feature tables are registered.
    """
    if not database_exists(TEST_ENGINE.url):
        create_database(TEST_ENGINE.url)

    import scribe.features.engines.data.sql_models  # noqa: F401
    import scribe.features.transcription.data.sql_models  # noqa: F401
    import scribe.features.correction.data.sql_models  # noqa: F401

    Base.metadata.create_all(bind=TEST_ENGINE)
    yield


@pytest.fixture(scope="function", autouse=True)
def clean_db(global_setup):
    """
    Runs before EVERY test.
    Detects DB type and cleans tables appropriately.
    """
    Base.metadata.create_all(bind=TEST_ENGINE)

    with TEST_ENGINE.connect() as conn:
        trans = conn.begin()
        is_sqlite = "sqlite" in str(TEST_ENGINE.url)
        table_names = sqlalchemy.inspect(TEST_ENGINE).get_table_names()

        if table_names:
            if is_sqlite:
                conn.execute(text("PRAGMA foreign_keys = OFF;"))
                for table in table_names:
                    conn.execute(text(f'DELETE FROM "{table}";'))
                conn.execute(text("PRAGMA foreign_keys = ON;"))
            else:
                conn.execute(text("SET session_replication_role = 'replica';"))
                for table in table_names:
                    conn.execute(text(f'TRUNCATE TABLE "{table}" CASCADE;'))
                conn.execute(text("SET session_replication_role = 'origin';"))

        trans.commit()

    yield


@pytest.fixture
def db_session():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


# --- Domain fixtures ---

@pytest.fixture
def registry():
    from scribe.features.engines.service.api import create_registry
    return create_registry()


@pytest.fixture
def cloud_engine(registry):
    fake = FakeSpeechEngine()
    registry.bind_client("assemblyai", fake)
    return fake


@pytest.fixture
def transcript_factory():
    """Creates a transcript, optionally already READY with segments."""
    from scribe.features.transcription.data.sql_models import TranscriptModel, TranscriptSegmentModel

    def _make(texts=None, status=TranscriptStatus.PENDING, edited=None):
        with SessionLocal() as db:
            transcript = TranscriptModel(
                audio_reference="https://storage.example.com/audio/meeting.m4a",
                title="Weekly sync",
                status=status if texts is None else TranscriptStatus.READY
            )
            db.add(transcript)
            db.flush()
            for i, t in enumerate(texts or []):
                db.add(TranscriptSegmentModel(
                    transcript_id=transcript.id,
                    speaker="A",
                    text=t,
                    edited_text=(edited or {}).get(i),
                    start_ms=i * 1000,
                    end_ms=i * 1000 + 900
                ))
            db.commit()
            return transcript.id

    return _make
