"""
Backend REST client

Thin wrapper over ``requests.Session`` that adds the bearer token, retries
transient failures on idempotent methods and turns non-2xx responses into
``ApiError``.

Usage:
    from studio_admin.caller.client import ApiClient

    client = ApiClient(base_url="https://api.example.com/api",
                       token_provider=lambda: session.access_token)
    members = client.get("/users", params={"page": 1, "pageSize": 10})
"""

from typing import Any, Callable, Dict, Optional, Tuple

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from studio_admin.config.constants import ApiSettings
from studio_admin.utils.error_handlers import ApiError, SessionExpiredError
from studio_admin.utils.logging_config import get_logger

logger = get_logger(__name__)

# Generic messages for failures without a server-provided message
_ERROR_MESSAGES = {
    "timeout": "요청 시간이 초과되었습니다. 다시 시도해 주세요.",
    "connection": "서버 연결에 실패했습니다. 네트워크를 확인해 주세요.",
    "network": "네트워크 오류가 발생했습니다.",
    "parse": "서버 응답을 처리할 수 없습니다.",
}

TokenProvider = Callable[[], Optional[str]]


def _create_session(max_retries: int) -> requests.Session:
    """
    Create a requests session with connection pooling and a retry strategy.
    """
    session = requests.Session()
    session.verify = True

    retry_strategy = Retry(
        total=max_retries,
        backoff_factor=ApiSettings.BACKOFF_FACTOR,
        status_forcelist=list(ApiSettings.RETRY_STATUS),
        allowed_methods=list(ApiSettings.RETRY_METHODS),
        raise_on_status=False,
        respect_retry_after_header=True,
    )
    adapter = HTTPAdapter(
        pool_connections=ApiSettings.POOL_CONNECTIONS,
        pool_maxsize=ApiSettings.POOL_MAXSIZE,
        max_retries=retry_strategy,
    )
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


class ApiClient:
    """
    REST API client for the studio backend.

    Authenticated calls read the token from ``token_provider`` on every request,
    so the session store stays the single source of truth.
    """

    def __init__(
        self,
        base_url: str = ApiSettings.DEFAULT_BASE_URL,
        token_provider: Optional[TokenProvider] = None,
        timeout: Tuple[int, int] = ApiSettings.TIMEOUT,
        max_retries: int = ApiSettings.MAX_RETRIES,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.token_provider = token_provider
        self.timeout = timeout
        self.session = session or _create_session(max_retries)

    def _url(self, path: str) -> str:
        if not path.startswith("/"):
            path = "/" + path
        return f"{self.base_url}{path}"

    def _headers(self, token: Optional[str]) -> Dict[str, str]:
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def request(
        self,
        method: str,
        path: str,
        json_data: Any = None,
        params: Optional[Dict[str, Any]] = None,
        auth: bool = True,
        token: Optional[str] = None,
    ) -> Any:
        """
        Make an API request and return the decoded JSON body.

        Args:
            method: HTTP method
            path: Path relative to the base URL
            json_data: JSON body
            params: Query parameters; ``None`` and ``""`` values are dropped
            auth: Require a bearer token (raises SessionExpiredError when absent)
            token: Explicit token overriding the provider

        Raises:
            SessionExpiredError: no token, or the backend answered 401
            ApiError: any other failure
        """
        if token is None and auth and self.token_provider is not None:
            token = self.token_provider()
        if auth and not token:
            logger.warning("[Admin API] %s %s skipped - no access token", method, path)
            raise SessionExpiredError()

        clean_params = None
        if params:
            clean_params = {k: v for k, v in params.items() if v is not None and v != ""}

        url = self._url(path)
        logger.info("[Admin API] %s %s", method, path)

        try:
            response = self.session.request(
                method=method,
                url=url,
                headers=self._headers(token),
                json=json_data,
                params=clean_params,
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout as e:
            logger.error(f"[Admin API] Timeout: {url}")
            raise ApiError(_ERROR_MESSAGES["timeout"], original_error=e) from e
        except requests.exceptions.ConnectionError as e:
            logger.error(f"[Admin API] Connection failed: {url}")
            raise ApiError(_ERROR_MESSAGES["connection"], original_error=e) from e
        except requests.exceptions.RequestException as e:
            logger.error(f"[Admin API] Request error: {e}")
            raise ApiError(_ERROR_MESSAGES["network"], original_error=e) from e

        return self._handle_response(method, path, response)

    def _handle_response(self, method: str, path: str, response: requests.Response) -> Any:
        status = response.status_code
        logger.debug("[Admin API] Response %s: %s", status, response.text[:400])

        if 200 <= status < 300:
            if status == 204 or not response.content:
                return {"success": True}
            try:
                return response.json()
            except ValueError as e:
                logger.error(f"[Admin API] Invalid JSON response from {path}")
                raise ApiError(_ERROR_MESSAGES["parse"], status_code=status, original_error=e) from e

        message = self._error_message(response)
        logger.warning(f"[Admin API] {method} {path} -> {status}: {message}")
        if status == 401:
            raise SessionExpiredError(message=message)
        raise ApiError(message, status_code=status)

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        """Server ``message`` field, else the HTTP reason phrase."""
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            message = body.get("message")
            if isinstance(message, list):
                message = ", ".join(str(m) for m in message)
            if message:
                return str(message)
        return response.reason or f"HTTP {response.status_code}"

    def get(self, path: str, params: Optional[Dict[str, Any]] = None, **kwargs) -> Any:
        return self.request("GET", path, params=params, **kwargs)

    def post(self, path: str, body: Any = None, **kwargs) -> Any:
        return self.request("POST", path, json_data=body, **kwargs)

    def put(self, path: str, body: Any = None, **kwargs) -> Any:
        return self.request("PUT", path, json_data=body, **kwargs)

    def patch(self, path: str, body: Any = None, **kwargs) -> Any:
        return self.request("PATCH", path, json_data=body, **kwargs)

    def delete(self, path: str, **kwargs) -> Any:
        return self.request("DELETE", path, **kwargs)

    def close(self):
        self.session.close()
