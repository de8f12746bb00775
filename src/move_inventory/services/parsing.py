"""Tolerant JSON extraction from free-form model output."""

import json
import re
from collections.abc import Iterator

_FENCE_RE = re.compile(r"```[a-zA-Z]*")


def strip_code_fences(text: str) -> str:
    """Remove markdown code fences, keeping their contents."""
    return _FENCE_RE.sub("", text).strip()


def extract_json_array(text: str) -> list[object] | None:
    """Return the first JSON array found in text, or None.

    An object with an ``items`` array is accepted in place of a bare array.
    """
    cleaned = strip_code_fences(text)
    direct = _loads(cleaned)
    if isinstance(direct, list):
        return direct
    if isinstance(direct, dict) and isinstance(direct.get("items"), list):
        return direct["items"]
    for candidate in _balanced_spans(cleaned, "[", "]"):
        parsed = _loads(candidate)
        if isinstance(parsed, list):
            return parsed
    for candidate in _balanced_spans(cleaned, "{", "}"):
        parsed = _loads(candidate)
        if isinstance(parsed, dict) and isinstance(parsed.get("items"), list):
            return parsed["items"]
    return None


def extract_json_object(text: str) -> dict[str, object] | None:
    """Return the first JSON object found in text, or None."""
    cleaned = strip_code_fences(text)
    direct = _loads(cleaned)
    if isinstance(direct, dict):
        return direct
    for candidate in _balanced_spans(cleaned, "{", "}"):
        parsed = _loads(candidate)
        if isinstance(parsed, dict):
            return parsed
    return None


def _loads(text: str) -> object | None:
    try:
        return json.loads(text)
    except ValueError:
        return None


def _balanced_spans(text: str, opener: str, closer: str) -> Iterator[str]:
    """Yield substrings that open and close with balanced brackets.

    Brackets inside JSON string literals are ignored.
    """
    start = text.find(opener)
    while start != -1:
        end = _matching_close(text, start, opener, closer)
        if end is not None:
            yield text[start : end + 1]
        start = text.find(opener, start + 1)


def _matching_close(text: str, start: int, opener: str, closer: str) -> int | None:
    depth = 0
    in_string = False
    escaped = False
    for position in range(start, len(text)):
        char = text[position]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
        elif char == opener:
            depth += 1
        elif char == closer:
            depth -= 1
            if depth == 0:
                return position
    return None
