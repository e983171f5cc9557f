"""Timestamp formatting utilities."""

from datetime import datetime


def now() -> str:
    """Current local time as a sortable directory suffix, e.g. '20251114_123456'."""
    return datetime.now().strftime("%Y%m%d_%H%M%S")


def format_epoch(epoch_seconds: int) -> str:
    """
    Format a Unix timestamp as a readable local time.

    Example:
        format_epoch(signed_url_expiry)
        # "2025-11-14 13:34:56"
    """
    return datetime.fromtimestamp(epoch_seconds).strftime("%Y-%m-%d %H:%M:%S")
