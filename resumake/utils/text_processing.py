"""Text processing utilities shared across contexts."""

import re
from typing import Any

_UNSAFE_NAME_CHARS = re.compile(r"[^a-zA-Z0-9_-]")


def sanitize_file_name(name: str, fallback: str = "resume") -> str:
    """
    Reduce a caller-supplied name to a filesystem-safe stem.

    Every character outside [a-zA-Z0-9_-] becomes an underscore. Leading dashes are
    dropped so the stem can never be read as a command-line option.

    Example:
        >>> sanitize_file_name("Jane Doe's CV (v2)")
        'Jane_Doe_s_CV__v2_'
    """
    sanitized = _UNSAFE_NAME_CHARS.sub("_", name or "").lstrip("-")
    return sanitized or fallback


def set_max_consecutive_blank_lines(text: str, max_consecutive: int = 1) -> str:
    """
    Collapse runs of blank lines so that at most `max_consecutive` remain.

    Args:
        text: Input text
        max_consecutive: Maximum number of consecutive blank lines to keep

    Returns:
        Text with long blank-line runs collapsed
    """
    lines = text.split("\n")
    result = []
    blank_run = 0

    for line in lines:
        if line.strip() == "":
            blank_run += 1
            if blank_run > max_consecutive:
                continue
        else:
            blank_run = 0
        result.append(line)

    return "\n".join(result)


def truncate(text: str, limit: int) -> str:
    """Return at most `limit` characters of text (no ellipsis; callers rely on the bound)."""
    if limit <= 0:
        return ""
    return text[:limit]


def as_text(value: Any) -> str:
    """Coerce a loosely-typed scalar to a string; None and containers become ''."""
    if value is None or isinstance(value, (dict, list, tuple, set)):
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
