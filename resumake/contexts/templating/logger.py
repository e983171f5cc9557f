"""
Templating context logger.

Provides logging interface for templating context with automatic [template] prefix.
All templating modules should import from this module, not from loguru directly.
"""

from pathlib import Path
from typing import Optional

from loguru import logger

from resumake.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[template]"


def setup_templating_logger(log_dir: Path, templates_dir: Optional[str] = None) -> Path:
    """
    Setup logger for templating context.

    Args:
        log_dir: Directory for this session
        templates_dir: Document template directory, or None for the bundled templates

    Returns:
        Path to log file
    """
    return _setup_logger(
        context_name="template",
        log_dir=log_dir,
        extra_provenance={"Templates": templates_dir or "bundled"},
    )


def _log_warning(message: str) -> None:
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    logger.debug(f"{CONTEXT_PREFIX} {message}")
