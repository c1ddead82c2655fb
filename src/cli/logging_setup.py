"""
Logging configuration for the indicator store CLI.

Interactive terminals get a Rich handler; pipes and CI get a plain stream
handler. An optional log file receives either text or one JSON object per
record.
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
import sys

from rich.console import Console
from rich.logging import RichHandler


TEXT_FORMAT = "[%(asctime)s] %(levelname)s - %(name)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class JSONFormatter(logging.Formatter):
    """
    Format log records as single-line JSON objects.

    Each object carries timestamp, level, logger name and message, plus the
    formatted traceback when the record has exception info.
    """

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload)


def _console_handler(level: int) -> logging.Handler:
    if sys.stderr.isatty():
        handler: logging.Handler = RichHandler(
            console=Console(stderr=True),
            show_time=True,
            show_path=False,
            rich_tracebacks=True,
        )
        handler.setFormatter(logging.Formatter("%(message)s", datefmt=f"[{DATE_FORMAT}]"))
    else:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(TEXT_FORMAT, datefmt=DATE_FORMAT))
    handler.setLevel(level)
    return handler


def _file_handler(log_file: Path, level: int, use_json: bool) -> logging.Handler:
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
    handler.setLevel(level)
    if use_json:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT, datefmt=DATE_FORMAT))
    return handler


def setup_logging(
    level: str = "INFO",
    log_file: Path | None = None,
    use_json: bool = False,
) -> None:
    """
    Configure the root logger.

    Args:
        level: Logging level name ("DEBUG", "INFO", "WARNING", "ERROR").
        log_file: Optional file that also receives every record.
        use_json: Write the log file as JSON lines instead of text.

    Examples:
        >>> setup_logging(level="DEBUG")
        >>> logging.getLogger("src.store").debug("Store ready")
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()

    root_logger.addHandler(_console_handler(numeric_level))
    if log_file:
        root_logger.addHandler(_file_handler(log_file, numeric_level, use_json))

    root_logger.debug(
        "Logging configured: level=%s, file=%s, json=%s",
        level,
        log_file if log_file else "None",
        use_json,
    )
