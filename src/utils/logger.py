"""
Logging setup for the confirmation tracker - console and rotating file
handlers, every record tagged with the current trace_id.
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Dict, Optional

from ..analytics.trace_context import get_trace_id

LOG_DIR = Path("logs")
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(trace_id)s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

MAX_LOG_SIZE_MB = 10
BACKUP_COUNT = 5

_loggers: Dict[str, logging.Logger] = {}
_file_handler_added = False


class TraceIdFilter(logging.Filter):
    """Filter that adds trace_id to log records."""
    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, 'trace_id'):
            record.trace_id = get_trace_id() or '-'
        return True


_trace_filter = TraceIdFilter()


def get_logger(name: str, level: Optional[int] = None) -> logging.Logger:
    """Get or create a logger."""
    if name in _loggers:
        return _loggers[name]
    logger = logging.getLogger(name)
    if level is not None:
        logger.setLevel(level)
    logger.addFilter(_trace_filter)
    _loggers[name] = logger
    return logger


def setup_file_logging(
    filename: str = "tx_tracker.log",
    level: int = logging.INFO,
    use_rotation: bool = True,
    log_dir: Optional[Path] = None,
) -> Path:
    """Set up file logging once; later calls are ignored."""
    global _file_handler_added

    directory = Path(log_dir) if log_dir is not None else LOG_DIR
    log_path = directory / Path(filename).name
    if _file_handler_added:
        return log_path

    directory.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    if use_rotation:
        file_handler = logging.handlers.RotatingFileHandler(
            str(log_path),
            maxBytes=MAX_LOG_SIZE_MB * 1024 * 1024,
            backupCount=BACKUP_COUNT,
            encoding='utf-8'
        )
    else:
        file_handler = logging.FileHandler(str(log_path), encoding='utf-8')

    file_handler.setLevel(level)
    file_handler.setFormatter(formatter)
    file_handler.addFilter(_trace_filter)
    root_logger.addHandler(file_handler)

    _file_handler_added = True
    return log_path


def setup_console_logging(level: int = logging.INFO) -> None:
    """Set up console logging."""
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers:
        if isinstance(handler, logging.StreamHandler) and getattr(handler, "stream", None) is sys.stdout:
            return

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    console_handler.addFilter(_trace_filter)
    root_logger.addHandler(console_handler)


def setup_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    """Console logging plus an optional rotating log file."""
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    setup_console_logging(numeric_level)
    if log_file:
        setup_file_logging(log_file, level=numeric_level)
