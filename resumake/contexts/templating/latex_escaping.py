"""
LaTeX escaping for free text.

User-supplied text is escaped character by character in a single pass, so the
sequences introduced by one replacement are never revisited by another.
"""

from typing import Dict, Optional

# Characters with special meaning to TeX and the sequences that typeset them literally
LATEX_REPLACEMENTS: Dict[str, str] = {
    "\\": r"\textbackslash{}",
    "%": r"\%",
    "$": r"\$",
    "_": r"\_",
    "{": r"\{",
    "}": r"\}",
    "&": r"\&",
    "#": r"\#",
    "^": r"\^{}",
    "~": r"\~{}",
}

RESERVED_CHARACTERS = frozenset(LATEX_REPLACEMENTS)


def escape_latex(text: Optional[str]) -> str:
    r"""
    Escape TeX reserved characters so the text typesets literally.

    Not idempotent: escaping an already-escaped string escapes the backslashes
    introduced by the first pass.

    Args:
        text: Arbitrary user text (None is treated as empty)

    Returns:
        Escaped text, safe to place inside LaTeX markup

    Example:
        >>> escape_latex("R&D: 100%")
        'R\\&D: 100\\%'
    """
    if not text:
        return ""
    return "".join(LATEX_REPLACEMENTS.get(char, char) for char in text)


# Inside \href{...} hyperref reads ~ and _ literally; only these need care
URL_REPLACEMENTS: Dict[str, str] = {
    "%": r"\%",
    "#": r"\#",
    "\\": r"\%5C",
    "{": r"\%7B",
    "}": r"\%7D",
    " ": r"\%20",
}


def escape_url(url: Optional[str]) -> str:
    r"""
    Prepare a URL for the first argument of \href.

    Example:
        >>> escape_url("https://github.com/~jane/my_repo#readme")
        'https://github.com/~jane/my_repo\\#readme'
    """
    if not url:
        return ""
    return "".join(URL_REPLACEMENTS.get(char, char) for char in url.strip())
