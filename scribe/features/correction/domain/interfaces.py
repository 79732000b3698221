# File: scribe/features/correction/domain/interfaces.py
from abc import ABC, abstractmethod
from typing import List

from .models import DictionaryEntry


class IDictionaryRepository(ABC):
    """
    Contract for the shared term dictionary.
    list_entries() order is the substitution order, so it must be stable.
    """

    @abstractmethod
    def list_entries(self) -> List[DictionaryEntry]:
        pass

    @abstractmethod
    def add_entry(self, wrong_text: str, correct_text: str) -> bool:
        """Inserts a rule. Returns False (and changes nothing) if wrong_text already exists."""
        pass

    @abstractmethod
    def remove_entry(self, wrong_text: str) -> bool:
        pass

    @abstractmethod
    def boost_terms(self) -> List[str]:
        """All non-empty correct_text values, used to bias recognition."""
        pass
