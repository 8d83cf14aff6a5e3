"""
Logging configuration

Console output is kept short for interactive use; the optional log file
gets timestamps for later inspection of batch runs.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Union

CONSOLE_FORMAT = "[%(levelname)s] %(name)s: %(message)s"
FILE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def resolve_level(level: Union[int, str]) -> int:
    """Numeric logging level for a number or a name like "debug" (unknown names give INFO)"""
    if isinstance(level, int):
        return level
    value = logging.getLevelName(str(level).upper())
    return value if isinstance(value, int) else logging.INFO


def setup_logging(level: Union[int, str] = logging.INFO,
                  log_file: Optional[str] = None,
                  log_format: Optional[str] = None):
    """
    Configure the root logger for the viewer

    Args:
        level: Logging level, number or name
        log_file: Optional path to log file, parent directories are created
        log_format: Optional format string used for both console and file
    """
    level = resolve_level(level)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    # stderr keeps --json output on stdout machine-readable
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(log_format or CONSOLE_FORMAT))
    root_logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(
            logging.Formatter(log_format or FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        root_logger.addHandler(file_handler)

    logging.getLogger(__name__).debug(
        f"Logging configured: level={logging.getLevelName(level)}, file={log_file or '-'}")
