# File: scribe/features/correction/service/replace.py
import logging
from typing import Optional
from uuid import UUID

from scribe.core.common.errors import TranscriptNotFoundError
from scribe.core.common.locks import transcript_locks
from scribe.core.database.connection import SessionLocal
from scribe.features.transcription.data.sql_models import TranscriptModel, TranscriptSegmentModel
from ..data.repository import SqlDictionaryRepo
from ..domain.interfaces import IDictionaryRepository
from ..domain.models import ReplaceResult

logger = logging.getLogger(__name__)


class ManualReplacer:
    """
    Editor-driven find/replace across one transcript, optionally remembered
    as a dictionary rule for future transcripts.
    """

    def __init__(self, dictionary: Optional[IDictionaryRepository] = None):
        self.dictionary = dictionary or SqlDictionaryRepo()

    def replace(self,
                transcript_id: UUID,
                search: str,
                replacement: str,
                add_to_dictionary: bool = False) -> ReplaceResult:
        if not search:
            raise ValueError("Search string must not be empty.")
        replacement = replacement or ""

        with transcript_locks.hold(transcript_id):
            with SessionLocal() as db:
                if db.get(TranscriptModel, transcript_id) is None:
                    raise TranscriptNotFoundError(transcript_id)

                segments = (
                    db.query(TranscriptSegmentModel)
                    .filter(TranscriptSegmentModel.transcript_id == transcript_id)
                    .all()
                )

                replaced = 0
                for seg in segments:
                    base = seg.current_text
                    new_text = base.replace(search, replacement)
                    if new_text != base:
                        seg.edited_text = new_text
                        replaced += 1
                db.commit()

        added = False
        # An empty replacement is a deletion, never worth remembering
        if add_to_dictionary and replacement:
            added = self.dictionary.add_entry(search, replacement)
            if not added:
                logger.info(f"Dictionary already has a rule for '{search}'; left unchanged.")

        logger.info(f"Replace on {transcript_id}: '{search}' -> '{replacement}' in {replaced} segments")
        return ReplaceResult(transcript_id=transcript_id, replaced_count=replaced, added_to_dictionary=added)
