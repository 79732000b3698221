# File: scribe/features/correction/service/api.py
from typing import List
from uuid import UUID

from ..data.repository import SqlDictionaryRepo
from ..domain.models import CorrectionResult, ReplaceResult, DictionaryEntry
from .dictionary_pass import DictionaryCorrector
from .replace import ManualReplacer

_dictionary = SqlDictionaryRepo()


def run_dictionary_correction(transcript_id: UUID) -> CorrectionResult:
    return DictionaryCorrector(_dictionary).run(transcript_id)


def replace_text(transcript_id: UUID, search: str, replacement: str, add_to_dictionary: bool = False) -> ReplaceResult:
    return ManualReplacer(_dictionary).replace(transcript_id, search, replacement, add_to_dictionary)


def add_dictionary_entry(wrong_text: str, correct_text: str) -> bool:
    if not wrong_text or not correct_text:
        raise ValueError("Both wrong_text and correct_text are required.")
    return _dictionary.add_entry(wrong_text, correct_text)


def list_dictionary() -> List[DictionaryEntry]:
    return _dictionary.list_entries()


def remove_dictionary_entry(wrong_text: str) -> bool:
    return _dictionary.remove_entry(wrong_text)
