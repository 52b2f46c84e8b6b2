"""Clean-up helpers for Mermaid flowchart text produced by the model.

The renderer on the frontend fails hard on quotes, colons and equals signs
inside node labels, so those are stripped from every bracketed label body,
at any nesting depth. Only characters between a matched ``[``/``]`` or
``{``/``}`` pair are touched: shapes like ``([Start])`` or ``{{Hex}}`` keep
all their brackets and nothing outside a label body (arrows,
``|edge labels|``) changes.
"""
from __future__ import annotations

from typing import List

_CLOSERS = {"[": "]", "{": "}"}
_LABEL_JUNK = frozenset("\"':=")


def normalize_line_breaks(code: str) -> str:
    """Use ``\\n`` for every line break, including double-escaped ones."""
    return code.replace("\r\n", "\n").replace("\r", "\n").replace("\\n", "\n")


def _inside_labels(line: str) -> List[bool]:
    """Flag every position that sits between a matched pair of label brackets."""
    inside = [False] * len(line)
    stack = []
    for i, ch in enumerate(line):
        if ch in _CLOSERS:
            stack.append(i)
        elif ch in ("]", "}"):
            # Unmatched closers (e.g. the ``>asym]`` shape) are plain text
            if stack and _CLOSERS[line[stack[-1]]] == ch:
                start = stack.pop()
                for j in range(start + 1, i):
                    inside[j] = True
    return inside


def sanitize_label_line(line: str) -> str:
    # %% lines are comments or init directives whose JSON must stay intact
    if line.lstrip().startswith("%%"):
        return line
    inside = _inside_labels(line)
    return "".join(ch for ch, flag in zip(line, inside) if not (flag and ch in _LABEL_JUNK))


def sanitize_node_labels(code: str) -> str:
    """Strip ``" ' : =`` from the body of every ``[...]`` and ``{...}`` label."""
    return "\n".join(sanitize_label_line(line) for line in code.split("\n"))
