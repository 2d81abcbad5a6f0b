"""
Logging setup for the admin console

One call at startup wires three sinks onto the root logger:
    - console (colorama colored, short timestamps)
    - admin_YYYYMMDD.log, rotating plain text for every enabled level
    - errors_YYYYMMDD.json, rotating, one JSON object per ERROR+ record

    AppLogger.setup(settings.log_dir, level=settings.log_level)
    logger = get_logger(__name__)
"""

import json
import logging
import logging.handlers
import sys
import traceback
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional

from colorama import Fore, Style, init as colorama_init

CONSOLE_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
CONSOLE_DATEFMT = "%H:%M:%S"
FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s"
FILE_DATEFMT = "%Y-%m-%d %H:%M:%S"

LOG_FILE_MAX_BYTES = 5 * 1024 * 1024
LOG_FILE_BACKUPS = 3

# Chatty third-party loggers kept at WARNING
QUIET_LOGGERS = ("urllib3", "keyring", "PyQt6")


class ColoredFormatter(logging.Formatter):
    """Console formatter that tints the level name"""

    LEVEL_COLORS = {
        logging.DEBUG: Style.DIM,
        logging.INFO: Fore.GREEN,
        logging.WARNING: Fore.YELLOW,
        logging.ERROR: Fore.RED,
        logging.CRITICAL: Fore.MAGENTA + Style.BRIGHT,
    }

    def __init__(self, fmt: Optional[str] = None, datefmt: Optional[str] = None):
        super().__init__(fmt or CONSOLE_FORMAT, datefmt or CONSOLE_DATEFMT)

    def format(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelno)
        if not color:
            return super().format(record)

        # The record is shared with the file handlers, so put the name back
        plain = record.levelname
        record.levelname = f"{color}{plain}{Style.RESET_ALL}"
        try:
            return super().format(record)
        finally:
            record.levelname = plain


class JSONFormatter(logging.Formatter):
    """One JSON document per record, for the error log"""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "time": datetime.fromtimestamp(record.created).isoformat(timespec="seconds"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "where": f"{record.module}.{record.funcName}:{record.lineno}",
            "thread": record.threadName,
        }
        if record.exc_info and record.exc_info[0] is not None:
            exc_type, exc_value, exc_tb = record.exc_info
            entry["exception"] = {
                "type": exc_type.__name__,
                "message": str(exc_value),
                "traceback": "".join(traceback.format_exception(exc_type, exc_value, exc_tb)),
            }
        return json.dumps(entry, ensure_ascii=False)


def _level(name: str) -> int:
    return logging.getLevelName(name.upper()) if isinstance(name, str) else int(name)


def _rotating(path: Path, level: int, formatter: logging.Formatter) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        path, maxBytes=LOG_FILE_MAX_BYTES, backupCount=LOG_FILE_BACKUPS, encoding="utf-8"
    )
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


class AppLogger:
    """Process-wide logging setup. setup() only acts on its first call."""

    _initialized = False
    _loggers: Dict[str, logging.Logger] = {}

    @classmethod
    def setup(
        cls,
        log_dir: Path,
        level: str = "INFO",
        console_level: Optional[str] = None,
        json_errors: bool = True,
    ) -> logging.Logger:
        """
        Attach the console, text file and JSON error handlers to the root logger.

        Args:
            log_dir: Directory for the log files, created if missing
            level: Level for the text log, and for the console unless console_level is given
            console_level: Separate console threshold
            json_errors: Also write ERROR and above to the JSON log

        Returns:
            The root logger
        """
        root = logging.getLogger()
        if cls._initialized:
            return root

        colorama_init()
        if hasattr(sys.stdout, "reconfigure"):
            # Korean messages on a cp949 Windows console
            sys.stdout.reconfigure(encoding="utf-8", errors="replace")

        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        stamp = datetime.now().strftime("%Y%m%d")

        root.setLevel(logging.DEBUG)
        root.handlers.clear()

        console = logging.StreamHandler(sys.stdout)
        console.setLevel(_level(console_level or level))
        console.setFormatter(ColoredFormatter())
        root.addHandler(console)

        root.addHandler(_rotating(
            log_dir / f"admin_{stamp}.log",
            _level(level),
            logging.Formatter(FILE_FORMAT, FILE_DATEFMT),
        ))
        if json_errors:
            root.addHandler(_rotating(log_dir / f"errors_{stamp}.json", logging.ERROR, JSONFormatter()))

        for name in QUIET_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

        cls._initialized = True
        cls.get_logger(__name__).info("Logging ready (level=%s, dir=%s)", level, log_dir)
        return root

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        logger = cls._loggers.get(name)
        if logger is None:
            logger = cls._loggers[name] = logging.getLogger(name)
        return logger

    @classmethod
    def reset(cls):
        """Close and detach the root handlers so setup() can run again."""
        root = logging.getLogger()
        for handler in list(root.handlers):
            root.removeHandler(handler)
            handler.close()
        cls._initialized = False


def get_logger(name: str) -> logging.Logger:
    return AppLogger.get_logger(name)


def mask_token(token: Optional[str]) -> str:
    """
    Hide a bearer token in log output, keeping the last 4 characters.

    >>> mask_token("eyJhbGciOiJIUzI1NiJ9.abcd")
    '****abcd'
    """
    if not token:
        return "<none>"
    if len(token) <= 8:
        return "****"
    return f"****{token[-4:]}"
