"""
Utility modules
- logging_config: 로깅 설정
- error_handlers: 에러 처리
- validators: 입력 검증
- formatting: 날짜/상태 표시
"""
from studio_admin.utils.logging_config import get_logger, AppLogger
from studio_admin.utils.error_handlers import (
    AppException,
    ApiError,
    SessionExpiredError,
    TransitionError,
    ActionInFlightError,
    ConfigurationError,
    describe_error,
    format_exception,
)

__all__ = [
    'get_logger',
    'AppLogger',
    'AppException',
    'ApiError',
    'SessionExpiredError',
    'TransitionError',
    'ActionInFlightError',
    'ConfigurationError',
    'describe_error',
    'format_exception',
]
