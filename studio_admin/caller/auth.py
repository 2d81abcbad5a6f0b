"""
Authentication endpoints (login / register / logout / refresh / profile)
"""

from typing import Any, Dict, Optional

from studio_admin.caller.client import ApiClient
from studio_admin.utils.logging_config import get_logger

logger = get_logger(__name__)


class AuthApi:
    """
    ``/auth`` and ``/users/me`` calls.

    Login, register and refresh run without a bearer token; ``me`` and
    ``logout`` take the token explicitly so they can be used while a session
    is still being restored.
    """

    def __init__(self, client: ApiClient):
        self.client = client

    def login(self, email: str, password: str) -> Dict[str, Any]:
        """
        Returns:
            ``{"accessToken", "refreshToken", "user"}``
        """
        logger.info("[Auth] login request")
        return self.client.post("/auth/login", {"email": email, "password": password}, auth=False)

    def register(self, email: str, password: str, **profile) -> Dict[str, Any]:
        body = {"email": email, "password": password}
        body.update({k: v for k, v in profile.items() if v is not None})
        logger.info("[Auth] register request")
        return self.client.post("/auth/register", body, auth=False)

    def logout(self, access_token: str, refresh_token: Optional[str] = None) -> Dict[str, Any]:
        return self.client.post("/auth/logout", {"refreshToken": refresh_token}, token=access_token)

    def refresh(self, refresh_token: str) -> Dict[str, Any]:
        """
        Returns:
            ``{"accessToken", "refreshToken"}``
        """
        return self.client.post("/auth/refresh", {"refreshToken": refresh_token}, auth=False)

    def me(self, access_token: str) -> Dict[str, Any]:
        return self.client.get("/users/me", token=access_token)
