"""
Publishing context logger.

Provides logging interface for publishing context with automatic [publish] prefix.
All publishing modules should import from this module, not from loguru directly.
"""

from pathlib import Path

from loguru import logger

from resumake.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[publish]"


def setup_publishing_logger(log_dir: Path, store_root: str) -> Path:
    """
    Setup logger for publishing context.

    Args:
        log_dir: Directory for this session
        store_root: Artifact store location, recorded in the provenance header

    Returns:
        Path to log file
    """
    return _setup_logger(
        context_name="publish",
        log_dir=log_dir,
        extra_provenance={"Artifact store": store_root},
    )


def _log_info(message: str) -> None:
    """Log info message with [publish] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [publish] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [publish] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [publish] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [publish] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")
