"""
Rendering context logger.

Provides logging interface for rendering context with automatic [render] prefix.
All rendering modules should import from this module, not from loguru directly.
"""

from pathlib import Path

from loguru import logger

from resumake.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[render]"


def setup_rendering_logger(log_dir: Path, compiler: str) -> Path:
    """
    Setup logger for rendering context.

    Args:
        log_dir: Directory for this rendering session
        compiler: Typesetting engine, recorded in the provenance header

    Returns:
        Path to log file
    """
    return _setup_logger(
        context_name="render",
        log_dir=log_dir,
        extra_provenance={"LaTeX compiler": compiler},
    )


# Wrapper functions with automatic [render] prefix


def _log_info(message: str) -> None:
    """Log info message with [render] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [render] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [render] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [render] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [render] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


def log_compilation_start(name: str, workspace: Path, num_passes: int) -> None:
    _log_info(f"Starting compilation: {name} ({num_passes} passes)")
    _log_debug(f"  Workspace: {workspace}")


def _log_limited(log, label: str, items, limit: int) -> None:
    for i, item in enumerate(items[:limit], 1):
        log(f"  {label} {i}: {item}")
    if len(items) > limit:
        log(f"  ... {len(items) - limit} more")


def log_compilation_result(name: str, result, verbose: bool = False) -> None:
    """
    Log a CompilationResult: outcome line, first errors and warnings, engine output.

    Engine stdout/stderr go to the DEBUG sink on failure (always) or when verbose.
    """
    elapsed = f"{result.elapsed_s:.2f}s"
    if result.success:
        pages = f", {result.page_count} pages" if result.page_count else ""
        _log_success(f"{name}: compiled in {elapsed}{pages}")
    else:
        _log_error(f"{name}: compilation failed after {elapsed}")
        _log_limited(_log_error, "Error", result.errors, 10 if verbose else 5)

    _log_limited(_log_debug, "Warning", result.warnings, 10 if verbose else 3)

    if result.success and not verbose:
        return
    for stream, text in (("STDOUT", result.stdout), ("STDERR", result.stderr)):
        if text:
            # raw=True keeps multi-line engine output unprefixed
            logger.opt(raw=True).debug(f"\n{'=' * 80}\nENGINE {stream}:\n{'=' * 80}\n{text}\n")
