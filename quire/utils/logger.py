"""
Session logging (Tier 1).

Each CLI export runs in its own log directory: a DEBUG-level file named
after the context plus an INFO-level colorized console stream. The file
opens with a provenance block so a log can be traced back to the command
and environment that produced it. Context prefixes live in
contexts/{context}/logger.py.
"""

import platform
import sys
from importlib import metadata
from pathlib import Path
from typing import Dict, List, Tuple

from loguru import logger

FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {message}"
CONSOLE_FORMAT = "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <level>{message}</level>"

RULE = "-" * 72


def _package_version(name: str) -> str:
    try:
        return metadata.version(name)
    except metadata.PackageNotFoundError:
        return "not installed"


def provenance(extra: Dict[str, object] = None) -> List[Tuple[str, str]]:
    """Key/value pairs describing the current invocation."""
    pairs = [
        ("Command", " ".join(sys.argv)),
        ("Working directory", str(Path.cwd())),
        ("Python", platform.python_version()),
        ("quire", _package_version("quire")),
        ("playwright", _package_version("playwright")),
    ]
    pairs.extend((key, str(value)) for key, value in (extra or {}).items())
    return pairs


def setup_logger(
    context_name: str,
    log_dir: Path,
    extra_provenance: Dict[str, object] = None,
    console_level: str = "INFO",
) -> Path:
    """
    Route loguru output to `{log_dir}/{context_name}.log` and stdout.

    Replaces any handlers configured earlier in the process, so calling it
    again starts a new session.

    Args:
        context_name: Log file stem, also shown in the provenance block
        log_dir: Session directory (created if missing)
        extra_provenance: Additional pairs for the provenance block
        console_level: Minimum level echoed to stdout

    Returns:
        Path to the log file
    """
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / f"{context_name}.log"

    logger.configure(
        handlers=[
            {"sink": log_file, "format": FILE_FORMAT, "level": "DEBUG"},
            {"sink": sys.stdout, "format": CONSOLE_FORMAT, "level": console_level, "colorize": True},
        ]
    )

    logger.debug(RULE)
    logger.debug(f"Session: {context_name}")
    for key, value in provenance(extra_provenance):
        logger.debug(f"{key}: {value}")
    logger.debug(RULE)

    return log_file
