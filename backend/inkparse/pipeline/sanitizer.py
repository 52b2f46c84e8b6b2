"""Turn a raw model completion into a defaulted, render-safe record.

Steps:
1) Strip Markdown code fences.
2) Extract the outermost JSON object from surrounding prose.
3) Strict parse; on failure repair invalid backslash escapes and retry once.
4) Fill defaults for missing or mistyped fields.
5) Normalize flowchart line breaks; strip unsafe characters from node labels.
6) Drop stray backslashes from Markdown notes.

Only EmptyUpstreamResponseError and UnparsableUpstreamResponseError leave
this module.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from ..exceptions import EmptyUpstreamResponseError, UnparsableUpstreamResponseError
from .markdown import strip_stray_backslashes
from .mermaid import normalize_line_breaks, sanitize_node_labels
from .response_parsing import (
    extract_json_object,
    parse_json_object,
    raw_preview,
    repair_invalid_escapes,
    strip_code_fences,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SanitizePolicy:
    """Per-flow sanitization rules."""

    name: str
    string_defaults: Dict[str, str]
    list_fields: Tuple[str, ...] = ()
    mermaid_fields: Tuple[str, ...] = ()
    markdown_fields: Tuple[str, ...] = ()
    sanitize_labels: bool = False
    optional_strings: Tuple[str, ...] = ()


NOTES_POLICY = SanitizePolicy(
    name="notes",
    string_defaults={
        "title": "Handwritten Notes",
        "subject": "General",
        "notes": "",
        "mermaidCode": "",
    },
    mermaid_fields=("mermaidCode",),
    markdown_fields=("notes",),
    sanitize_labels=True,
)

DOCUMENT_POLICY = SanitizePolicy(
    name="document",
    string_defaults={
        "title": "AI Agent Documentation",
        "subtitle": "",
        "callFlowMermaid": "",
    },
    list_fields=("tags", "keyHighlights", "sections"),
    mermaid_fields=("callFlowMermaid",),
    optional_strings=("agentName", "company", "primaryGoal"),
)


def load_json_record(raw: str) -> Dict[str, Any]:
    """Fence-strip, extract and parse, with one escape-repair retry."""
    if raw is None or not raw.strip():
        raise EmptyUpstreamResponseError("Empty response from model")
    candidate = extract_json_object(strip_code_fences(raw))
    try:
        return parse_json_object(candidate)
    except ValueError as first_exc:
        logger.debug("Strict JSON parse failed (%s); retrying after escape repair", first_exc)
    try:
        return parse_json_object(repair_invalid_escapes(candidate), strict=False)
    except ValueError as exc:
        raise UnparsableUpstreamResponseError(
            f"Model returned non-JSON: {exc}", raw_preview=raw_preview(raw)
        ) from exc


def _coerce_text(value: Any) -> Optional[str]:
    """Flatten a section value to text; lists become one item per line, dicts are dropped."""
    if value is None or isinstance(value, dict):
        return None
    if isinstance(value, list):
        return "\n".join(str(item) for item in value if item is not None and not isinstance(item, dict))
    return value if isinstance(value, str) else str(value)


def _coerce_section(item: Dict[str, Any]) -> Dict[str, str]:
    out = {}
    for key, value in item.items():
        text = _coerce_text(value)
        if text is not None:
            out[key] = text
    return out


def _coerce_list(name: str, value: Any) -> list:
    if not isinstance(value, list):
        return []
    if name == "sections":
        return [_coerce_section(item) for item in value if isinstance(item, dict)]
    return [str(item) for item in value if item is not None]


def apply_defaults(record: Dict[str, Any], policy: SanitizePolicy) -> Dict[str, Any]:
    """Fill every field the policy knows about; wrong types count as missing."""
    out = dict(record)
    for key, default in policy.string_defaults.items():
        value = out.get(key)
        if not isinstance(value, str) or (default and not value.strip()):
            out[key] = default
    for key in policy.list_fields:
        out[key] = _coerce_list(key, out.get(key))
    for key in policy.optional_strings:
        value = out.get(key)
        if value is not None and not isinstance(value, str):
            out[key] = str(value)
    return out


def sanitize_record(record: Dict[str, Any], policy: SanitizePolicy) -> Dict[str, Any]:
    out = apply_defaults(record, policy)
    for key in policy.mermaid_fields:
        code = normalize_line_breaks(out[key])
        out[key] = sanitize_node_labels(code) if policy.sanitize_labels else code
    for key in policy.markdown_fields:
        out[key] = strip_stray_backslashes(out[key])
    return out


def sanitize_response(raw: str, policy: SanitizePolicy) -> Dict[str, Any]:
    """Full pipeline: raw completion text -> sanitized record for ``policy``."""
    record = load_json_record(raw)
    try:
        return sanitize_record(record, policy)
    except Exception as exc:  # noqa: BLE001 normalized to the parse failure kind
        raise UnparsableUpstreamResponseError(
            f"Could not normalize model output: {exc}", raw_preview=raw_preview(raw)
        ) from exc
