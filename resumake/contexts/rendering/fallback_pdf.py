"""
Minimal PDF writer.

Produces a single-page, text-only PDF without any typesetting engine. Used when
LaTeX compilation fails so the user still receives a readable document.

The file is built from a fixed table of five objects:

    1 Catalog, 2 Pages, 3 Page (US Letter), 4 Helvetica font, 5 content stream

followed by an xref table whose offsets are computed from the bytes actually
written. Text that does not fit the page is clipped.
"""

from typing import List

PAGE_WIDTH = 612
PAGE_HEIGHT = 792
FONT_SIZE = 12
TEXT_X = 50
TEXT_Y = 750
LINE_HEIGHT = 15

PDF_HEADER = b"%PDF-1.4\n%\xe2\xe3\xcf\xd3\n"


def _escape_pdf_string(line: str) -> str:
    """Escape a line for use inside a PDF literal string."""
    return line.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")


def _to_latin1(line: str) -> str:
    """
    Map a line onto the printable WinAnsi/Latin-1 range.

    Tabs become spaces, other control characters are dropped and anything
    outside Latin-1 becomes '?'.
    """
    chars = []
    for char in line:
        code = ord(char)
        if char == "\t":
            chars.append(" ")
        elif code < 32 or 127 <= code < 160:
            continue
        elif code > 255:
            chars.append("?")
        else:
            chars.append(char)
    return "".join(chars)


def _split_lines(text: str) -> List[str]:
    return text.replace("\r\n", "\n").replace("\r", "\n").split("\n")


def build_content_stream(text: str) -> bytes:
    """
    Content stream drawing each line of text with its own Td/Tj pair.

    The first Td positions the cursor at the top-left margin; each following Td
    moves down one line.
    """
    ops = ["BT", f"/F1 {FONT_SIZE} Tf"]
    for index, line in enumerate(_split_lines(text or "")):
        if index == 0:
            ops.append(f"{TEXT_X} {TEXT_Y} Td")
        else:
            ops.append(f"0 -{LINE_HEIGHT} Td")
        ops.append(f"({_escape_pdf_string(_to_latin1(line))}) Tj")
    ops.append("ET")
    return "\n".join(ops).encode("latin-1")


def encode_minimal_pdf(text: str) -> bytes:
    """
    Encode text as a valid single-page PDF.

    Args:
        text: Plain text; newlines (\\n, \\r\\n, \\r) separate lines

    Returns:
        Complete PDF file bytes
    """
    stream = build_content_stream(text)

    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        (
            f"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 {PAGE_WIDTH} {PAGE_HEIGHT}] "
            f"/Resources << /Font << /F1 4 0 R >> >> /Contents 5 0 R >>"
        ).encode("ascii"),
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica /Encoding /WinAnsiEncoding >>",
        f"<< /Length {len(stream)} >>\nstream\n".encode("ascii") + stream + b"\nendstream",
    ]

    out = bytearray(PDF_HEADER)
    offsets = []
    for number, body in enumerate(objects, 1):
        offsets.append(len(out))
        out += f"{number} 0 obj\n".encode("ascii") + body + b"\nendobj\n"

    xref_offset = len(out)
    out += f"xref\n0 {len(objects) + 1}\n".encode("ascii")
    out += b"0000000000 65535 f \n"
    for offset in offsets:
        out += f"{offset:010d} 00000 n \n".encode("ascii")
    out += (
        f"trailer\n<< /Size {len(objects) + 1} /Root 1 0 R >>\n"
        f"startxref\n{xref_offset}\n%%EOF\n"
    ).encode("ascii")
    return bytes(out)
