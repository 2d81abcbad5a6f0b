"""
Application Constants

Centralizes the numbers and fixed names used across the admin console.

Usage:
    from studio_admin.config.constants import ApiSettings, ListSettings

    timeout = ApiSettings.TIMEOUT
    page_size = ListSettings.PAGE_SIZE
"""

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class ApiSettings:
    """REST client defaults"""

    DEFAULT_BASE_URL: str = "http://localhost:4000/api"
    TIMEOUT: Tuple[int, int] = (10, 30)  # (connect, read) seconds
    MAX_RETRIES: int = 3
    BACKOFF_FACTOR: float = 1.0
    RETRY_STATUS: Tuple[int, ...] = (429, 500, 502, 503, 504)
    # POST/PATCH are not idempotent here (approve, create)
    RETRY_METHODS: Tuple[str, ...] = ("GET", "PUT", "DELETE")
    POOL_CONNECTIONS: int = 10
    POOL_MAXSIZE: int = 20


@dataclass(frozen=True)
class ListSettings:
    """List-view pipeline defaults"""

    PAGE_SIZE: int = 10
    FETCH_LIMIT: int = 500  # rows per request when pulling a whole list
    MAX_FETCH_PAGES: int = 200
    DEBOUNCE_MS: int = 400


@dataclass(frozen=True)
class SessionSettings:
    """Token persistence"""

    ACCESS_KEY: str = "ef_access_token"
    REFRESH_KEY: str = "ef_refresh_token"
    KEYRING_SERVICE: str = "StudioAdmin"
    TOKEN_FILE_NAME: str = "session_tokens.json"
    TOKEN_KEY_ENV: str = "STUDIO_ADMIN_TOKEN_KEY"
    APP_DIR_NAME: str = ".studio_admin"


@dataclass(frozen=True)
class UiSettings:
    """Main window geometry and refresh cadence"""

    WINDOW_WIDTH: int = 1480
    WINDOW_HEIGHT: int = 900
    SIDEBAR_WIDTH: int = 200
    ROW_HEIGHT: int = 44
    REFRESH_INTERVAL_MS: int = 60000


# Navigation surface, in sidebar order
PAGE_DASHBOARD = "dashboard"
PAGE_MEMBERS = "members"
PAGE_INSTRUCTORS = "instructors"
PAGE_WORKSHOPS = "workshops"
PAGE_SCHEDULES = "schedules"
PAGE_STUDIOS = "studios"
PAGE_EVENTS = "events"
PAGE_INQUIRIES = "inquiries"
PAGE_PARTNERSHIPS = "partnerships"
PAGE_REQUESTS = "requests"

NAVIGATION = (
    (PAGE_DASHBOARD, "대시보드"),
    (PAGE_MEMBERS, "회원관리"),
    (PAGE_INSTRUCTORS, "강사관리"),
    (PAGE_WORKSHOPS, "워크샵"),
    (PAGE_SCHEDULES, "스케줄"),
    (PAGE_STUDIOS, "스튜디오"),
    (PAGE_EVENTS, "Trip&Event"),
    (PAGE_INQUIRIES, "제휴문의"),
    (PAGE_PARTNERSHIPS, "파트너십"),
    (PAGE_REQUESTS, "신청 관리"),
)

DEFAULT_PAGE = PAGE_DASHBOARD
