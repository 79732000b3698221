# File: scribe/features/correction/service/dictionary_pass.py
import logging
from typing import Iterable, Optional, Tuple
from uuid import UUID

from scribe.core.common.errors import TranscriptNotFoundError
from scribe.core.common.locks import transcript_locks
from scribe.core.database.connection import SessionLocal
from scribe.features.transcription.data.sql_models import TranscriptModel, TranscriptSegmentModel
from ..data.repository import SqlDictionaryRepo
from ..domain.interfaces import IDictionaryRepository
from ..domain.models import DictionaryEntry, CorrectionResult

logger = logging.getLogger(__name__)


def apply_dictionary(text: str, entries: Iterable[DictionaryEntry]) -> Tuple[str, bool]:
    """
    Runs every wrong -> correct substitution over text, in entry order.
    Case-sensitive, all occurrences. A later rule sees the output of earlier ones.
    """
    changed = False
    for entry in entries:
        if entry.wrong_text and entry.wrong_text in text:
            text = text.replace(entry.wrong_text, entry.correct_text)
            changed = True
    return text, changed


class DictionaryCorrector:
    """
    Deterministic find-and-replace of known mis-transcriptions.
    Always starts from the segment's current text (edited_text or text)
    and only ever writes edited_text.
    """

    def __init__(self, dictionary: Optional[IDictionaryRepository] = None):
        self.dictionary = dictionary or SqlDictionaryRepo()

    def run(self, transcript_id: UUID) -> CorrectionResult:
        with transcript_locks.hold(transcript_id):
            entries = self.dictionary.list_entries()

            with SessionLocal() as db:
                if db.get(TranscriptModel, transcript_id) is None:
                    raise TranscriptNotFoundError(transcript_id)

                if not entries:
                    return CorrectionResult(transcript_id=transcript_id, corrected_count=0, rules_applied=0)

                segments = (
                    db.query(TranscriptSegmentModel)
                    .filter(TranscriptSegmentModel.transcript_id == transcript_id)
                    .order_by(TranscriptSegmentModel.start_ms)
                    .all()
                )

                corrected = 0
                for seg in segments:
                    base = seg.current_text
                    new_text, changed = apply_dictionary(base, entries)
                    # A rule whose correct_text equals wrong_text "matches" but changes nothing
                    if changed and new_text != base:
                        seg.edited_text = new_text
                        corrected += 1

                db.commit()

        logger.info(f"Dictionary pass on {transcript_id}: {corrected}/{len(segments)} segments corrected with {len(entries)} rules")
        return CorrectionResult(transcript_id=transcript_id, corrected_count=corrected, rules_applied=len(entries))
