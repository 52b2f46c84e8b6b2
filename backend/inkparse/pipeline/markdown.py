from __future__ import annotations

import re

# Keep escapes Markdown actually needs: \* \_ \` \# \> \- \[ \]
_STRAY_BACKSLASH_RE = re.compile(r"\\(?![*_`#>\-\[\]])")


def strip_stray_backslashes(text: str) -> str:
    """Drop backslashes that do not escape a Markdown-significant character.

    Undoes over-escaping from the JSON repair step without touching
    intentional escapes such as ``\\*not bold\\*``.
    """
    return _STRAY_BACKSLASH_RE.sub("", text)
