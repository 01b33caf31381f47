"""Best-effort extraction of JSON values embedded in model responses.

Model output is free text: the JSON we asked for may be wrapped in a
markdown code fence, preceded by a sentence of explanation, or truncated.
These helpers decode the value that starts at the first opening bracket of
the wanted kind and report success or failure explicitly instead of raising.
A malformed outer value fails the whole extraction; a nested value is never
returned in its place.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Optional

_DECODER = json.JSONDecoder()


@dataclass(frozen=True)
class ParseResult:
    """Outcome of a structured extraction: a value, or the reason there is none."""
    value: Any = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def strip_code_fence(text: str) -> str:
    """Remove a surrounding ```json ... ``` fence, if any."""
    text = text.strip()
    if text.startswith("```"):
        text = text.split("```")[1]
        if text.startswith("json"):
            text = text[4:]
        text = text.strip()
    return text


def _extract(text: Optional[str], opener: str, kind: type, label: str) -> ParseResult:
    if not text or not text.strip():
        return ParseResult(error="empty response")

    candidates = [text]
    unfenced = strip_code_fence(text)
    if unfenced != text.strip():
        candidates.insert(0, unfenced)

    saw_opener = False
    for candidate in candidates:
        pos = candidate.find(opener)
        if pos == -1:
            continue
        saw_opener = True
        try:
            value, _ = _DECODER.raw_decode(candidate, pos)
        except json.JSONDecodeError:
            continue
        if isinstance(value, kind):
            return ParseResult(value=value)

    if not saw_opener:
        return ParseResult(error=f"no JSON {label} found")
    return ParseResult(error=f"malformed JSON {label}")


def extract_json_array(text: Optional[str]) -> ParseResult:
    """Return the JSON array starting at the first ``[`` in ``text``."""
    return _extract(text, "[", list, "array")


def extract_json_object(text: Optional[str]) -> ParseResult:
    """Return the JSON object starting at the first ``{`` in ``text``."""
    return _extract(text, "{", dict, "object")
