"""Environment and logging helpers."""

import logging
import os
import sys

from ..config import DEFAULT_LOG_FILE, LOG_DATE_FORMAT, LOG_FORMAT

LOG_LEVEL_ENV = "IMAGE_TRANSLATOR_LOG_LEVEL"


def setup_logging(level: int = logging.INFO, log_file: str | None = DEFAULT_LOG_FILE) -> None:
    """Set up logging configuration.
    
    Logs are written to both console (stderr) and a file.
    
    Args:
        level: Logging level
        log_file: Path to log file (None to disable file logging)
    """
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    
    if log_file:
        try:
            file_handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
            file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
            handlers.append(file_handler)
        except OSError as e:
            # Console-only when the log file cannot be opened
            print(f"Warning: Could not open log file '{log_file}': {e}", file=sys.stderr)
    
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        handlers=handlers,
        force=True  # Replace any existing handlers
    )


def resolve_log_level(verbose: bool = False) -> int:
    """Pick the log level from ``--verbose`` or the environment.
    
    ``IMAGE_TRANSLATOR_LOG_LEVEL`` accepts standard level names and is
    ignored when unknown.
    """
    if verbose:
        return logging.DEBUG
    name = os.getenv(LOG_LEVEL_ENV, "").strip().upper()
    level = logging.getLevelName(name) if name else None
    return level if isinstance(level, int) else logging.INFO
