"""
Unit Tests for Error Handlers

Tests custom exceptions, banner messages and the error context manager.
"""

import logging
import sys
from types import SimpleNamespace

import pytest

from studio_admin.utils.error_handlers import (
    ActionInFlightError,
    ApiError,
    AppException,
    ConfigurationError,
    ErrorContext,
    SessionExpiredError,
    TransitionError,
    describe_error,
    format_exception,
    global_exception_handler,
    thread_exception_handler,
)


class TestAppException:
    """Test base AppException class"""

    def test_app_exception_creation(self):
        """Test AppException can be created with message and hint"""
        exc = AppException(message="Test error", recovery_hint="Try this fix", error_code="TEST_001")

        assert exc.user_message == "Test error"
        assert exc.recovery_hint == "Try this fix"
        assert exc.error_code == "TEST_001"
        assert str(exc).startswith("[TEST_001] Test error")

    def test_banner_text_includes_hint(self):
        exc = AppException(message="Test error", recovery_hint="Try this fix")
        assert exc.banner_text == "Test error\n\nTry this fix"

    def test_details_include_wrapped_error(self):
        exc = AppException(message="Wrapped", original_error=ValueError("inner"))
        assert "caused by ValueError: inner" in exc.details()


class TestApiErrors:
    """Test REST error types"""

    def test_api_error_code_from_status(self):
        assert ApiError("Not found", status_code=404).error_code == "API_404"
        assert ApiError("Offline").error_code == "API_000"

    def test_session_expired_defaults(self):
        exc = SessionExpiredError()
        assert exc.status_code == 401
        assert exc.user_message == "로그인이 필요합니다."
        assert exc.recovery_hint == "다시 로그인해 주세요."
        assert isinstance(exc, ApiError)


class TestWorkflowErrors:

    def test_transition_error(self):
        exc = TransitionError("workshop", "OPEN", "COMPLETED")
        assert exc.error_code == "STATE_001"
        assert exc.user_message == "workshop: OPEN -> COMPLETED transition is not allowed"
        assert (exc.entity, exc.current, exc.target) == ("workshop", "OPEN", "COMPLETED")

    def test_action_in_flight(self):
        exc = ActionInFlightError("r1")
        assert exc.error_code == "STATE_002"
        assert exc.row_key == "r1"

    def test_configuration_error(self):
        assert ConfigurationError().error_code == "CONFIG_001"


class TestDescribeError:

    def test_app_exception_uses_user_message(self):
        assert describe_error(ApiError("서버 오류", status_code=500)) == "서버 오류"

    def test_plain_exception_text(self):
        assert describe_error(RuntimeError("boom")) == "boom"

    def test_fallback_for_empty(self):
        assert describe_error(RuntimeError(), fallback="실패") == "실패"


class TestErrorContext:
    """Test ErrorContext context manager"""

    def test_reraise(self):
        with pytest.raises(ValueError):
            with ErrorContext("Persist tokens"):
                raise ValueError("disk full")

    def test_suppress_when_asked(self):
        with ErrorContext("Optional cleanup", reraise=False):
            raise ValueError("ignored")

    def test_no_error(self):
        with ErrorContext("Noop") as ctx:
            pass
        assert ctx.operation_name == "Noop"


class TestFormatException:

    def test_home_path_sanitized(self):
        exc = RuntimeError("failed reading /home/alice/.studio_admin/tokens.json")
        text = format_exception(exc, include_traceback=False)
        assert "alice" not in text
        assert "/home/***" in text


class TestExceptionHooks:
    """Test process-wide uncaught exception logging"""

    def test_global_handler_logs_critical(self, caplog):
        try:
            raise RuntimeError("window crashed")
        except RuntimeError as e:
            exc = e
        with caplog.at_level(logging.CRITICAL, logger="unhandled"):
            global_exception_handler(RuntimeError, exc, exc.__traceback__)
        assert "window crashed" in caplog.text

    def test_keyboard_interrupt_passed_through(self, monkeypatch):
        seen = []
        monkeypatch.setattr(sys, "__excepthook__", lambda *args: seen.append(args[0]))
        global_exception_handler(KeyboardInterrupt, KeyboardInterrupt(), None)
        assert seen == [KeyboardInterrupt]

    def test_thread_handler_logs(self, caplog):
        args = SimpleNamespace(
            exc_type=ValueError, exc_value=ValueError("bad row"), exc_traceback=None,
            thread=SimpleNamespace(name="ApiWorker-1"),
        )
        with caplog.at_level(logging.CRITICAL, logger="unhandled"):
            thread_exception_handler(args)
        assert "ApiWorker-1" in caplog.text
        assert "bad row" in caplog.text
