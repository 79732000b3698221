# File: scribe/features/polishing/service/text_cleaning.py
import re

# CJK Unified Ideographs, Extension A, Compatibility Ideographs
_CJK = "\u4e00-\u9fff\u3400-\u4dbf\uf900-\ufaff"

# Lookarounds so "台 積 電" collapses in a single pass
_CJK_GAP_RE = re.compile(rf"(?<=[{_CJK}])\s+(?=[{_CJK}])")
_MULTI_SPACE_RE = re.compile(r"\s{2,}")


def has_cjk_spacing(text: str) -> bool:
    return bool(_CJK_GAP_RE.search(text or ""))


def strip_cjk_spaces(text: str) -> str:
    """
    Removes the whitespace some engines insert between logographic characters.
    Spaces next to Latin words and numbers are kept. Lossy; only used for the
    text sent to the rewriting model.
    """
    if not text or not has_cjk_spacing(text):
        return text
    cleaned = _CJK_GAP_RE.sub("", text)
    return _MULTI_SPACE_RE.sub(" ", cleaned).strip()
