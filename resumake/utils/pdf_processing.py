"""
PDF inspection helpers.

Thin wrappers over PyPDF2 used to report page counts for compiled artifacts and
to read text back out of generated PDFs.
"""

from io import BytesIO
from pathlib import Path
from typing import Optional, Union

from PyPDF2 import PdfReader



def _reader(source: Union[Path, bytes]) -> PdfReader:
    if isinstance(source, (bytes, bytearray)):
        return PdfReader(BytesIO(bytes(source)))
    return PdfReader(str(source))


def page_count(source: Union[Path, bytes]) -> Optional[int]:
    """Get page count from a PDF path or PDF bytes, or None if unreadable."""
    try:
        return len(_reader(source).pages)
    except Exception:
        return None


def extract_text(source: Union[Path, bytes]) -> str:
    """Concatenate the extracted text of every page, one page per line block."""
    reader = _reader(source)
    return "\n".join(page.extract_text() or "" for page in reader.pages)
