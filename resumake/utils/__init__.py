"""
Shared utilities for RESUMAKE.

Common functionality used across contexts:
- Logger setup
- Text processing
- PDF inspection
"""

from resumake.utils.pdf_processing import page_count
from resumake.utils.text_processing import sanitize_file_name, truncate

__all__ = ["page_count", "sanitize_file_name", "truncate"]
