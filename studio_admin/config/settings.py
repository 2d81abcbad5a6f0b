"""
Runtime settings resolved from environment variables.

``.env`` files are honoured through python-dotenv; call ``load_settings()`` once
at startup and pass the result down.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional, Tuple

from dotenv import load_dotenv

from studio_admin.config.constants import ApiSettings, SessionSettings
from studio_admin.utils.error_handlers import ConfigurationError
from studio_admin.utils.logging_config import get_logger

logger = get_logger(__name__)

TOKEN_STORES = ("keyring", "file")


@dataclass
class Settings:
    api_base_url: str = ApiSettings.DEFAULT_BASE_URL
    timeout: Tuple[int, int] = ApiSettings.TIMEOUT
    max_retries: int = ApiSettings.MAX_RETRIES
    token_store: str = "keyring"
    log_level: str = "INFO"
    data_dir: Path = field(default_factory=lambda: Path.home() / SessionSettings.APP_DIR_NAME)
    is_production: bool = False

    @property
    def log_dir(self) -> Path:
        return self.data_dir / "logs"


def _int_env(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationError(
            message=f"{name} must be an integer (got {raw!r})",
            original_error=e,
        ) from e


def _check_https(base_url: str, is_production: bool) -> None:
    """
    Refuse plain HTTP in production, warn for non-localhost HTTP otherwise.
    """
    if not base_url.startswith("http://"):
        return
    if is_production:
        raise ConfigurationError(
            message="Using HTTP in production environment is not allowed",
            recovery_hint="Set STUDIO_ADMIN_API_URL to an https:// origin",
        )
    if "localhost" not in base_url and "127.0.0.1" not in base_url:
        logger.warning(
            "SECURITY WARNING: Using HTTP for non-localhost server. "
            "Consider using HTTPS for secure communication."
        )


def load_settings(env: Optional[Mapping[str, str]] = None, dotenv: bool = True) -> Settings:
    """
    Build Settings from the environment.

    Backend origin: STUDIO_ADMIN_API_URL, then API_SERVER_URL, then the
    hard-coded development fallback.
    """
    if env is None:
        if dotenv:
            load_dotenv()
        env = os.environ

    is_production = env.get("ENVIRONMENT", "development").lower() == "production"

    base_url = (
        env.get("STUDIO_ADMIN_API_URL")
        or env.get("API_SERVER_URL")
        or ApiSettings.DEFAULT_BASE_URL
    ).strip().rstrip("/")
    _check_https(base_url, is_production)

    connect_timeout = _int_env(env, "STUDIO_ADMIN_CONNECT_TIMEOUT", ApiSettings.TIMEOUT[0])
    read_timeout = _int_env(env, "STUDIO_ADMIN_READ_TIMEOUT", ApiSettings.TIMEOUT[1])
    max_retries = _int_env(env, "STUDIO_ADMIN_MAX_RETRIES", ApiSettings.MAX_RETRIES)

    token_store = env.get("STUDIO_ADMIN_TOKEN_STORE", "keyring").strip().lower()
    if token_store not in TOKEN_STORES:
        raise ConfigurationError(
            message=f"Unknown token store {token_store!r}",
            recovery_hint=f"Use one of: {', '.join(TOKEN_STORES)}",
        )

    data_dir_raw = env.get("STUDIO_ADMIN_DATA_DIR")
    data_dir = Path(data_dir_raw).expanduser() if data_dir_raw else Path.home() / SessionSettings.APP_DIR_NAME

    settings = Settings(
        api_base_url=base_url,
        timeout=(connect_timeout, read_timeout),
        max_retries=max_retries,
        token_store=token_store,
        log_level=env.get("STUDIO_ADMIN_LOG_LEVEL", "INFO").upper(),
        data_dir=data_dir,
        is_production=is_production,
    )
    logger.debug("[Config] api_base=%s token_store=%s", settings.api_base_url, settings.token_store)
    return settings
