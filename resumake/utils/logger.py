"""
Loguru sink setup shared by every context.

Library modules only emit records through contexts/{context}/logger.py; the CLI
decides where they go by calling setup_logger() once per invocation:

    outs/logs/<command>_<timestamp>/<context>.log   everything (DEBUG)
    stdout                                          INFO and above, colourised

Each log file opens with a provenance block (argv, cwd, Python, plus whatever the
context adds) so a stored log can be traced back to the run that wrote it.
"""

import sys
from pathlib import Path
from typing import Dict, Optional

from loguru import logger

from resumake.utils.timestamp import now

FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <7} | {message}"
CONSOLE_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss} | <level>{level: <7}</level> | <level>{message}</level>"
)

LEVEL_COLORS = {
    "WARNING": "<yellow>",
    "ERROR": "<red>",
    "CRITICAL": "<bold><red>",
}


def session_log_dir(logs_root: Path, command: str) -> Path:
    """Per-invocation directory: <logs_root>/<command>_<YYYYmmdd_HHMMSS>."""
    return Path(logs_root) / f"{command}_{now()}"


def setup_logger(
    context_name: str,
    log_dir: Path,
    extra_provenance: Optional[Dict[str, str]] = None,
    level_colors: Optional[Dict[str, str]] = None,
    console_level: str = "INFO",
) -> Path:
    """
    Replace all loguru sinks with a DEBUG file sink and a console sink.

    Args:
        context_name: Context identifier, used as the log file stem ("render", "publish")
        log_dir: Directory for this logging session (created if missing)
        extra_provenance: Context-specific lines for the provenance block
        level_colors: Console colour overrides, e.g. {"INFO": "<cyan>"}
        console_level: Minimum level shown on the console

    Returns:
        Path to the log file

    Example:
        log_file = setup_logger(
            "render",
            session_log_dir(Path("outs/logs"), "source"),
            extra_provenance={"LaTeX compiler": "pdflatex"},
        )
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(exist_ok=True, parents=True)
    log_file = log_dir / f"{context_name}.log"

    logger.remove()
    for level_name, color in {**LEVEL_COLORS, **(level_colors or {})}.items():
        logger.level(level_name, color=color)

    logger.add(log_file, format=FILE_FORMAT, level="DEBUG")
    logger.add(sys.stdout, format=CONSOLE_FORMAT, level=console_level, colorize=True)

    log_provenance(context_name, extra_provenance)
    return log_file


def log_provenance(context_name: str, extra_context: Optional[Dict[str, str]] = None) -> None:
    """Write the provenance block that heads every session log."""
    lines = {
        "Context": context_name,
        "Command": " ".join(sys.argv),
        "Working directory": str(Path.cwd()),
        "Python": sys.version.split()[0],
        **(extra_context or {}),
    }
    logger.info("=" * 80)
    for key, value in lines.items():
        logger.info(f"{key}: {value}")
    logger.info("=" * 80)
