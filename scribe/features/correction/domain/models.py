# File: scribe/features/correction/domain/models.py
from dataclasses import dataclass
from typing import Optional
from uuid import UUID


@dataclass(frozen=True)
class DictionaryEntry:
    wrong_text: str
    correct_text: str
    id: Optional[UUID] = None


@dataclass(frozen=True)
class CorrectionResult:
    transcript_id: UUID
    corrected_count: int
    rules_applied: int


@dataclass(frozen=True)
class ReplaceResult:
    transcript_id: UUID
    replaced_count: int
    added_to_dictionary: bool
