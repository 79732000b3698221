# File: scribe/features/polishing/service/parsing.py
"""
Turns a rewriting-model response back into {batch_index: text}.

Two accepted shapes:
  * a JSON array of {"index": int, "text": str} (structured output)
  * plain lines "index|text", optionally wrapped in backticks

Anything that does not fit is dropped. Parsing never raises.
"""
import re
import json
import logging
from typing import Dict, Optional

logger = logging.getLogger(__name__)

_LINE_RE = re.compile(r"^`?(\d+)\|(.+?)`?$")
_FENCE_RE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)


def parse_rewrite_response(response: str, batch_size: int) -> Dict[int, str]:
    if not response or not response.strip():
        return {}

    structured = _parse_json(response, batch_size)
    if structured is not None:
        return structured
    return _parse_lines(response, batch_size)


def _valid(idx: int, text: str, batch_size: int) -> bool:
    return 0 <= idx < batch_size and bool(text)


def _parse_json(response: str, batch_size: int) -> Optional[Dict[int, str]]:
    body = response.strip()
    fenced = _FENCE_RE.match(body)
    if fenced:
        body = fenced.group(1)
    if not body.startswith(("[", "{")):
        return None

    try:
        data = json.loads(body)
    except ValueError:
        return None

    if isinstance(data, dict):
        data = data.get("segments") or data.get("items")
    if not isinstance(data, list):
        return None

    result = {}
    for item in data:
        if not isinstance(item, dict):
            continue
        try:
            idx = int(item.get("index"))
        except (TypeError, ValueError):
            continue
        text = item.get("text")
        if not isinstance(text, str):
            continue
        text = text.strip()
        if _valid(idx, text, batch_size):
            result[idx] = text
    return result


def _parse_lines(response: str, batch_size: int) -> Dict[int, str]:
    result = {}
    dropped = 0
    for line in response.splitlines():
        line = line.strip()
        if not line:
            continue
        match = _LINE_RE.match(line)
        if not match:
            dropped += 1
            continue
        idx = int(match.group(1))
        text = match.group(2).strip()
        if _valid(idx, text, batch_size):
            result[idx] = text
        else:
            dropped += 1
    if dropped:
        logger.debug(f"Dropped {dropped} unparseable lines from rewrite response.")
    return result
