# File: scribe/features/polishing/domain/interfaces.py
from abc import ABC, abstractmethod


class ITextRewriter(ABC):
    """
    Contract for the text-rewriting model used to polish transcripts.
    Implementations raise RateLimitedError when throttled and
    FetchFailedError for any other transport or service failure.
    """

    # When True the model is asked for a JSON array instead of index|text lines.
    supports_structured_output: bool = False

    @abstractmethod
    async def rewrite(self, prompt: str) -> str:
        pass
