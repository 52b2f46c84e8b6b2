from __future__ import annotations

import json
import re
from typing import Any, Dict

RAW_PREVIEW_CHARS = 800

_LEADING_FENCE_RE = re.compile(r"^\s*```(?:json)?[ \t]*\r?\n?", re.IGNORECASE)
_TRAILING_FENCE_RE = re.compile(r"\r?\n?[ \t]*```\s*$")
# A backslash plus whatever follows it; \uXXXX is consumed whole
_ESCAPE_RE = re.compile(r"\\(u[0-9a-fA-F]{4}|.?)", re.DOTALL)
_VALID_ESCAPES = frozenset('"\\/bfnrt')


def strip_code_fences(text: str) -> str:
    """Remove a leading ```json (or bare ```) fence and a trailing ``` fence."""
    text = _LEADING_FENCE_RE.sub("", text.strip(), count=1)
    text = _TRAILING_FENCE_RE.sub("", text, count=1)
    return text.strip()


def extract_json_object(text: str) -> str:
    """Return the first-`{`-to-last-`}` span when the text is not already an object.

    Tolerates commentary the model puts before or after the JSON. Text
    without braces is returned unchanged and left for the parser to reject.
    """
    text = text.strip()
    if text.startswith("{") and text.endswith("}"):
        return text
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end <= start:
        return text
    return text[start : end + 1]


def parse_json_object(text: str, *, strict: bool = True) -> Dict[str, Any]:
    """Parse text as a JSON object. Raises ValueError for anything else."""
    data = json.loads(text, strict=strict)
    if not isinstance(data, dict):
        raise ValueError(f"expected a JSON object, got {type(data).__name__}")
    return data


def repair_invalid_escapes(text: str) -> str:
    r"""Escape every backslash that does not start a valid JSON escape.

    Models regularly emit a lone backslash inside the flowchart string
    (``"A\\ B"`` written as ``"A\ B"``), which strict parsers reject.
    """

    def _fix(match: re.Match) -> str:
        tok = match.group(1)
        if len(tok) == 5 or (tok and tok in _VALID_ESCAPES):
            return match.group(0)
        return "\\\\" + tok

    return _ESCAPE_RE.sub(_fix, text)


def raw_preview(text: str, limit: int = RAW_PREVIEW_CHARS) -> str:
    return text[:limit]
