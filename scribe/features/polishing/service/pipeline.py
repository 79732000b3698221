# File: scribe/features/polishing/service/pipeline.py
import math
import asyncio
import logging
from typing import AsyncIterator, Awaitable, Callable, Dict, List, Optional, Sequence
from uuid import UUID

from scribe.core.common.errors import TranscriptNotFoundError, RateLimitedError, RewriteError
from scribe.core.common.locks import transcript_locks
from scribe.core.database.connection import SessionLocal
from scribe.features.transcription.data.repository import segment_to_domain
from scribe.features.transcription.data.sql_models import TranscriptModel, TranscriptSegmentModel
from scribe.features.transcription.domain.models import SegmentRecord
from ..domain.interfaces import ITextRewriter
from ..domain.models import PolishConfig, PolishEvent, ProgressEvent, WaitingEvent, DoneEvent
from .parsing import parse_rewrite_response
from .prompts import build_polish_prompt
from .text_cleaning import strip_cjk_spaces

logger = logging.getLogger(__name__)

RATE_LIMIT_MESSAGE = "Rewriting model is rate limited, waiting before retry..."


def _percent(completed: int, total: int) -> int:
    # Half-up rounding
    return int(math.floor(completed * 100 / total + 0.5))


class PolishingPipeline:
    """
    Batched AI rewrite of a transcript's segments, streamed as events.

    Batches run strictly one after another. Every batch is committed before its
    progress event is yielded, so a caller that stops iterating loses nothing
    already reported. Batch failures never abort the run; the final DoneEvent's
    counts are the only record of what was skipped.
    """

    def __init__(self,
                 rewriter: ITextRewriter,
                 config: Optional[PolishConfig] = None,
                 sleep: Callable[[float], Awaitable[None]] = asyncio.sleep):
        self.rewriter = rewriter
        self.config = config or PolishConfig()
        self._sleep = sleep

    async def run(self, transcript_id: UUID) -> AsyncIterator[PolishEvent]:
        with transcript_locks.hold(transcript_id):
            segments = await asyncio.to_thread(self._load_segments, transcript_id)
            batch_size = self.config.batch_size
            batches = [segments[i:i + batch_size] for i in range(0, len(segments), batch_size)]
            total = len(batches)

            logger.info(f"Polishing {transcript_id}: {len(segments)} segments in {total} batches")

            completed = 0
            polished_total = 0

            for number, batch in enumerate(batches, start=1):
                updates = None
                try:
                    updates = await self._polish_batch(batch)
                except RateLimitedError:
                    yield WaitingEvent(message=RATE_LIMIT_MESSAGE)
                    await self._sleep(self.config.rate_limit_cooldown)
                    try:
                        updates = await self._polish_batch(batch)
                    except RewriteError as e:
                        logger.warning(f"Batch {number}/{total} of {transcript_id} failed after retry, skipping: {e}")
                except RewriteError as e:
                    logger.warning(f"Batch {number}/{total} of {transcript_id} failed, skipping: {e}")

                if updates:
                    await asyncio.to_thread(self._persist, updates)
                    polished_total += len(updates)

                completed += 1
                yield ProgressEvent(
                    progress=_percent(completed, total),
                    completed=completed,
                    total=total,
                    polished=polished_total
                )

                if completed < total:
                    await self._sleep(self.config.inter_batch_delay)

            logger.info(f"Polishing {transcript_id} done: {polished_total}/{len(segments)} segments polished")
            yield DoneEvent(processed_count=len(segments), polished_count=polished_total)

    async def _polish_batch(self, batch: Sequence[SegmentRecord]) -> Dict[UUID, str]:
        """One rewrite round-trip. Returns segment id -> polished text for parsed lines only."""
        cleaned = [strip_cjk_spaces(seg.current_text) for seg in batch]
        prompt = build_polish_prompt(cleaned, structured=self.rewriter.supports_structured_output)

        response = await self.rewriter.rewrite(prompt)
        parsed = parse_rewrite_response(response, len(batch))

        if len(parsed) < len(batch):
            logger.debug(f"Rewrite returned {len(parsed)}/{len(batch)} usable lines.")
        return {batch[idx].id: text for idx, text in parsed.items()}

    @staticmethod
    def _load_segments(transcript_id: UUID) -> List[SegmentRecord]:
        with SessionLocal() as db:
            if db.get(TranscriptModel, transcript_id) is None:
                raise TranscriptNotFoundError(transcript_id)
            rows = (
                db.query(TranscriptSegmentModel)
                .filter(TranscriptSegmentModel.transcript_id == transcript_id)
                .order_by(TranscriptSegmentModel.start_ms, TranscriptSegmentModel.end_ms)
                .all()
            )
            return [segment_to_domain(r) for r in rows]

    @staticmethod
    def _persist(updates: Dict[UUID, str]) -> None:
        with SessionLocal() as db:
            for segment_id, text in updates.items():
                (
                    db.query(TranscriptSegmentModel)
                    .filter(TranscriptSegmentModel.id == segment_id)
                    .update({TranscriptSegmentModel.edited_text: text}, synchronize_session=False)
                )
            db.commit()
