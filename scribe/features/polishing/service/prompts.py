# File: scribe/features/polishing/service/prompts.py
from typing import Sequence

_INSTRUCTIONS = """You are a professional transcript proofreader. The lines below come from a meeting transcript.
For every line:
1. Add correct punctuation (full stops, commas, question marks, enumeration commas).
2. Smooth the phrasing so it reads naturally as written text.
3. Keep the original meaning; do not add or remove content.
4. Do not translate; keep the original language."""

_LINE_FORMAT = """Return exactly one line per input line in the format: index|corrected text
Do not use markdown. Do not add explanations."""

_JSON_FORMAT = """Return a JSON array with one object per input line: {"index": <index>, "text": "<corrected text>"}
Do not add explanations."""


def build_polish_prompt(texts: Sequence[str], structured: bool = False) -> str:
    """
    Builds one rewrite request for a batch. Each line is prefixed with its
    batch-local index, which is how results are matched back to segments.
    """
    numbered = "\n".join(f"{idx}|{text}" for idx, text in enumerate(texts))
    output_format = _JSON_FORMAT if structured else _LINE_FORMAT
    return f"{_INSTRUCTIONS}\n\n{output_format}\n\n{numbered}"
