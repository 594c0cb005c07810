"""Label sanitization for diagram text."""

from __future__ import annotations

import re

_NEWLINES = re.compile(r"\r\n|\r|\n")

DOT_PLACEHOLDER = "(untitled)"
ELLIPSIS = "..."


def mermaid_text(text: str | None) -> str:
    """Make text safe inside a double-quoted Mermaid label."""
    text = text or ""
    return _NEWLINES.sub(" ", text).replace('"', "#quot;")


def dot_label(
    text: str | None,
    max_length: int = 30,
    placeholder: str = DOT_PLACEHOLDER,
) -> str:
    """Truncate and escape text for a double-quoted DOT label.

    Empty or blank text renders as ``placeholder``. Text longer than
    ``max_length`` characters is cut and suffixed with an ellipsis before
    escaping, so escapes never count towards the limit.
    """
    text = text or ""
    if not text.strip():
        text = placeholder
    elif len(text) > max_length:
        text = text[:max_length] + ELLIPSIS

    text = text.replace("\\", "\\\\").replace('"', '\\"')
    return _NEWLINES.sub(r"\\n", text)
