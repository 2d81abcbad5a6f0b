"""
Exception types and error reporting helpers

Every error the console shows in a banner is an ``AppException``: it carries
the Korean text for the banner, an optional hint and a short code for the logs.

    try:
        client.get("/users")
    except SessionExpiredError:
        page.show_login_required()
    except ApiError as e:
        page.show_error(describe_error(e))
"""

import logging
import os
import re
import sys
import traceback
from typing import Optional

# user directories are masked before anything lands in a log file
_USER_DIR_PATTERNS = (
    (re.compile(r"[A-Za-z]:\\Users\\[^\\]+", re.IGNORECASE), r"C:\\Users\\***"),
    (re.compile(r"/home/[^/\s]+"), "/home/***"),
    (re.compile(r"/Users/[^/\s]+"), "/Users/***"),
)

DEFAULT_BANNER_TEXT = "예상치 못한 오류가 발생했습니다."

_unhandled_logger = logging.getLogger("unhandled")


def _production() -> bool:
    return os.environ.get("ENVIRONMENT", "").lower() in ("production", "prod")


def scrub_paths(text: str) -> str:
    """Mask the home directory and other per-user paths in ``text``."""
    if not text:
        return text
    home = os.path.expanduser("~")
    if home and home != "~" and not home.startswith(("/home/", "/Users/")):
        text = text.replace(home, "~")
    for pattern, replacement in _USER_DIR_PATTERNS:
        text = pattern.sub(replacement, text)
    return text


class AppException(Exception):
    """
    Base class for errors shown to the operator.

    ``str(exc)`` is the log form (``[CODE] message``); ``user_message`` and
    ``recovery_hint`` are what the banner shows.
    """

    def __init__(
        self,
        message: str,
        recovery_hint: str = "",
        original_error: Optional[BaseException] = None,
        error_code: Optional[str] = None,
    ):
        self.user_message = message
        self.recovery_hint = recovery_hint
        self.original_error = original_error
        self.error_code = error_code
        super().__init__(f"[{error_code}] {message}" if error_code else message)

    @property
    def banner_text(self) -> str:
        if self.recovery_hint:
            return f"{self.user_message}\n\n{self.recovery_hint}"
        return self.user_message

    def details(self) -> str:
        """Log form including the wrapped error. Production builds omit its message."""
        parts = [str(self)]
        cause = self.original_error
        if cause is not None:
            name = type(cause).__name__
            parts.append(f"caused by {name}" if _production() else f"caused by {name}: {cause}")
        return scrub_paths(" | ".join(parts))


class ApiError(AppException):
    """
    A backend call failed.

    ``status_code`` is None when no usable response arrived (timeout, refused
    connection, body that is not JSON).
    """

    def __init__(
        self,
        message: str = "API request failed",
        status_code: Optional[int] = None,
        recovery_hint: str = "",
        original_error: Optional[BaseException] = None,
    ):
        self.status_code = status_code
        super().__init__(
            message,
            recovery_hint=recovery_hint,
            original_error=original_error,
            error_code=f"API_{status_code or '000'}",
        )


class SessionExpiredError(ApiError):
    """No access token, or the backend answered 401/403."""

    def __init__(
        self,
        message: str = "로그인이 필요합니다.",
        status_code: Optional[int] = 401,
        original_error: Optional[BaseException] = None,
    ):
        super().__init__(
            message,
            status_code=status_code,
            recovery_hint="다시 로그인해 주세요.",
            original_error=original_error,
        )


class TransitionError(AppException):
    def __init__(self, entity: str, current: object, target: object):
        self.entity = entity
        self.current = current
        self.target = target
        super().__init__(f"{entity}: {current} -> {target} transition is not allowed", error_code="STATE_001")


class ActionInFlightError(AppException):
    """A row already has an approve/reject/status change waiting on the server."""

    def __init__(self, row_key: object):
        self.row_key = row_key
        super().__init__(
            f"An action for '{row_key}' is already in progress",
            recovery_hint="Wait for the current action to finish",
            error_code="STATE_002",
        )


class ConfigurationError(AppException):
    def __init__(
        self,
        message: str = "Configuration error",
        recovery_hint: str = "Check environment variables or the .env file",
        original_error: Optional[BaseException] = None,
    ):
        super().__init__(message, recovery_hint=recovery_hint, original_error=original_error, error_code="CONFIG_001")


class ErrorContext:
    """
    Log any exception leaving the block under ``operation_name``.

        with ErrorContext("Persist session tokens"):
            path.write_text(payload)

    The exception propagates unless ``reraise=False``.
    """

    def __init__(self, operation_name: str, reraise: bool = True):
        self.operation_name = operation_name
        self.reraise = reraise
        self.logger = logging.getLogger("error_context")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            return False
        self.logger.error(
            "%s failed: %s", self.operation_name, format_exception(exc_val, include_traceback=False),
            exc_info=(exc_type, exc_val, exc_tb),
        )
        return not self.reraise


def describe_error(exc: BaseException, fallback: str = DEFAULT_BANNER_TEXT) -> str:
    """One-line banner text for ``exc``."""
    if isinstance(exc, AppException):
        return exc.user_message or fallback
    return str(exc).strip() or fallback


def format_exception(exc: BaseException, include_traceback: Optional[bool] = None) -> str:
    """
    Log text for ``exc`` with user paths masked.

    The traceback is appended outside production unless ``include_traceback``
    says otherwise.
    """
    if include_traceback is None:
        include_traceback = not _production()

    if isinstance(exc, AppException):
        text = exc.details()
    else:
        text = scrub_paths(f"{type(exc).__name__}: {exc}")

    if include_traceback and exc.__traceback__ is not None:
        frames = "".join(traceback.format_tb(exc.__traceback__))
        text += "\n" + scrub_paths(frames)
    return text


def global_exception_handler(exc_type, exc_value, exc_tb) -> None:
    """``sys.excepthook`` for the GUI process. Ctrl+C keeps the default behaviour."""
    if issubclass(exc_type, KeyboardInterrupt):
        sys.__excepthook__(exc_type, exc_value, exc_tb)
        return
    _unhandled_logger.critical(
        "Uncaught exception: %s", format_exception(exc_value, include_traceback=False),
        exc_info=(exc_type, exc_value, exc_tb),
    )


def thread_exception_handler(args) -> None:
    """``threading.excepthook`` for plain Python threads."""
    if args.exc_type is SystemExit:
        return
    name = args.thread.name if args.thread is not None else "unknown"
    _unhandled_logger.critical(
        "Uncaught exception in thread %s: %s: %s", name, args.exc_type.__name__, args.exc_value,
        exc_info=(args.exc_type, args.exc_value, args.exc_traceback),
    )
