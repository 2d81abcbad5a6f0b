"""
인증 세션 관리 모듈 (authenticated admin session)

``AuthSession`` is the single owner of the current user and tokens. Pages never
copy the token: the ``ApiClient`` reads it through ``session.get_access_token``
on every request, and widgets re-render through ``subscribe``.

Lifecycle:
    restore()  - on launch, resolve the user from the stored token
    sign_in()  - login, persist tokens
    sign_out() - best-effort backend logout, always clears tokens
"""

import threading
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

import jwt

from studio_admin.caller.auth import AuthApi
from studio_admin.config.constants import SessionSettings
from studio_admin.managers.token_storage import TokenStorage
from studio_admin.utils.error_handlers import ApiError, SessionExpiredError
from studio_admin.utils.logging_config import get_logger, mask_token

logger = get_logger(__name__)

SessionListener = Callable[["AuthSession"], None]


def token_expired(token: str, leeway_seconds: int = 30) -> bool:
    """
    Check if a JWT is expired without verifying its signature.
    검증 없이 JWT 토큰 만료 여부 확인.

    Tokens that can not be decoded are treated as not expired; the backend
    has the final word through ``/users/me``.
    """
    try:
        payload = jwt.decode(token, options={"verify_signature": False})
    except jwt.exceptions.DecodeError as e:
        logger.debug(f"[Session] token is not a decodable JWT: {e}")
        return False
    exp = payload.get("exp")
    if not exp:
        return False
    expires_at = datetime.fromtimestamp(exp, tz=timezone.utc)
    return expires_at.timestamp() - leeway_seconds <= datetime.now(tz=timezone.utc).timestamp()


class AuthSession:
    """
    Process-wide admin session.

    Example:
        >>> session = AuthSession(AuthApi(client), storage)
        >>> unsubscribe = session.subscribe(lambda s: print(s.user))
        >>> session.restore()
        >>> session.sign_in("admin@example.com", "secret")
    """

    def __init__(self, auth_api: AuthApi, storage: TokenStorage):
        self.auth_api = auth_api
        self.storage = storage
        self._lock = threading.RLock()
        self._access_token: Optional[str] = None
        self._refresh_token: Optional[str] = None
        self._user: Optional[Dict[str, Any]] = None
        self._loading = False
        self._listeners: List[SessionListener] = []

    # =========================================================================
    # State
    # =========================================================================

    @property
    def access_token(self) -> Optional[str]:
        with self._lock:
            return self._access_token

    def get_access_token(self) -> Optional[str]:
        """Token provider for ``ApiClient``."""
        return self.access_token

    @property
    def user(self) -> Optional[Dict[str, Any]]:
        with self._lock:
            return dict(self._user) if self._user else None

    @property
    def is_authenticated(self) -> bool:
        with self._lock:
            return bool(self._access_token and self._user)

    @property
    def is_admin(self) -> bool:
        user = self.user
        return bool(user) and str(user.get("role", "")).upper() == "ADMIN"

    @property
    def is_loading(self) -> bool:
        with self._lock:
            return self._loading

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """
        Register a change listener.

        Returns:
            Callable that removes the listener again
        """
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            self.unsubscribe(listener)

        return unsubscribe

    def unsubscribe(self, listener: SessionListener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    def _notify(self) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            listener(self)

    def _set_state(
        self,
        access_token: Optional[str],
        refresh_token: Optional[str],
        user: Optional[Dict[str, Any]],
    ) -> None:
        with self._lock:
            self._access_token = access_token
            self._refresh_token = refresh_token
            self._user = user

    def _set_loading(self, loading: bool) -> None:
        with self._lock:
            self._loading = loading
        self._notify()

    def _clear(self) -> None:
        self._set_state(None, None, None)
        self.storage.clear()

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def restore(self) -> Optional[Dict[str, Any]]:
        """
        Resolve the current user from the stored tokens.

        An expired access token, or a 401 from ``/users/me``, triggers one
        refresh attempt. Any other failure clears the stored tokens.

        Returns:
            The user, or ``None`` when signed out
        """
        self._set_loading(True)
        try:
            stored = self.storage.load()
            access = stored.get(SessionSettings.ACCESS_KEY)
            refresh = stored.get(SessionSettings.REFRESH_KEY)

            if not access and not refresh:
                logger.info("[Session] no stored session")
                self._set_state(None, None, None)
                return None

            if not access or token_expired(access):
                logger.info("[Session] access token missing or expired, refreshing")
                access, refresh = self._refresh_tokens(refresh)
                if not access:
                    self._clear()
                    return None

            try:
                user = self.auth_api.me(access)
            except SessionExpiredError:
                access, refresh = self._refresh_tokens(refresh)
                if not access:
                    self._clear()
                    return None
                try:
                    user = self.auth_api.me(access)
                except ApiError as e:
                    logger.warning(f"[Session] restore failed after refresh: {e}")
                    self._clear()
                    return None
            except ApiError as e:
                logger.warning(f"[Session] restore failed: {e}")
                self._clear()
                return None

            self._set_state(access, refresh, user)
            logger.info(f"[Session] restored session (token {mask_token(access)})")
            return self.user
        finally:
            self._set_loading(False)

    def _refresh_tokens(self, refresh_token: Optional[str]):
        """
        Exchange the refresh token once.

        Returns:
            ``(access, refresh)``, or ``(None, None)`` on failure
        """
        if not refresh_token:
            return None, None
        try:
            response = self.auth_api.refresh(refresh_token)
        except ApiError as e:
            logger.warning(f"[Session] token refresh failed: {e}")
            return None, None
        access = response.get("accessToken")
        refresh = response.get("refreshToken") or refresh_token
        if not access:
            return None, None
        self.storage.save(access, refresh)
        return access, refresh

    def refresh(self) -> bool:
        """
        Refresh the access token of the current session.

        Returns:
            True when a new access token is in place
        """
        with self._lock:
            refresh_token = self._refresh_token
            user = self._user
        access, refresh = self._refresh_tokens(refresh_token)
        if not access:
            return False
        self._set_state(access, refresh, user)
        self._notify()
        return True

    def sign_in(self, email: str, password: str) -> Dict[str, Any]:
        """
        Log in and persist the tokens.

        Raises:
            ApiError: wrong credentials or backend unavailable
        """
        self._set_loading(True)
        try:
            response = self.auth_api.login(email, password)
            access = response.get("accessToken")
            refresh = response.get("refreshToken")
            if not access:
                raise ApiError("로그인 응답에 토큰이 없습니다.")
            user = response.get("user") or self.auth_api.me(access)
            self.storage.save(access, refresh)
            self._set_state(access, refresh, user)
            logger.info(f"[Session] signed in (token {mask_token(access)})")
            return self.user
        finally:
            self._set_loading(False)

    def sign_up(self, email: str, password: str, **profile) -> Dict[str, Any]:
        """
        Register a new account, then load its full profile.
        """
        self._set_loading(True)
        try:
            response = self.auth_api.register(email, password, **profile)
            access = response.get("accessToken")
            refresh = response.get("refreshToken")
            if not access:
                raise ApiError("회원가입 응답에 토큰이 없습니다.")
            user = self.auth_api.me(access)
            self.storage.save(access, refresh)
            self._set_state(access, refresh, user)
            logger.info("[Session] signed up and signed in")
            return self.user
        finally:
            self._set_loading(False)

    def sign_out(self) -> None:
        """
        Log out. The backend call is best effort; local tokens are always
        cleared.
        """
        with self._lock:
            access = self._access_token
            refresh = self._refresh_token
        if access:
            try:
                self.auth_api.logout(access, refresh)
            except ApiError as e:
                logger.warning(f"[Session] backend logout failed, clearing locally: {e}")
        self._clear()
        logger.info("[Session] signed out")
        self._notify()
