"""
토큰 저장소 (access/refresh token persistence)

Tokens are stored under the fixed keys ``ef_access_token`` and
``ef_refresh_token``, either in the system keyring (Windows Credential Manager,
macOS Keychain, Secret Service) or in a Fernet-encrypted file readable by the
owner only.
"""

import base64
import hashlib
import json
import os
import stat
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional

import keyring
from cryptography.fernet import Fernet, InvalidToken
from keyring.errors import KeyringError, PasswordDeleteError

from studio_admin.config.constants import SessionSettings
from studio_admin.utils.error_handlers import ErrorContext
from studio_admin.utils.logging_config import get_logger

logger = get_logger(__name__)

TOKEN_KEYS = (SessionSettings.ACCESS_KEY, SessionSettings.REFRESH_KEY)

# Encrypted payloads are prefixed so a plaintext or foreign file is never decrypted
FERNET_PREFIX = "fernet:"


class TokenStorage(ABC):
    """Key/value store for session tokens"""

    @abstractmethod
    def load(self) -> Dict[str, Optional[str]]:
        """
        Returns:
            ``{ACCESS_KEY: token|None, REFRESH_KEY: token|None}``
        """

    @abstractmethod
    def save(self, access_token: str, refresh_token: Optional[str]) -> None:
        ...

    @abstractmethod
    def clear(self) -> None:
        ...


class KeyringTokenStorage(TokenStorage):
    """Tokens in the OS keyring under ``SessionSettings.KEYRING_SERVICE``"""

    def __init__(self, service_name: str = SessionSettings.KEYRING_SERVICE):
        self.service_name = service_name

    def load(self) -> Dict[str, Optional[str]]:
        return {key: keyring.get_password(self.service_name, key) for key in TOKEN_KEYS}

    def save(self, access_token: str, refresh_token: Optional[str]) -> None:
        keyring.set_password(self.service_name, SessionSettings.ACCESS_KEY, access_token)
        if refresh_token:
            keyring.set_password(self.service_name, SessionSettings.REFRESH_KEY, refresh_token)
        else:
            self._delete(SessionSettings.REFRESH_KEY)

    def clear(self) -> None:
        for key in TOKEN_KEYS:
            self._delete(key)

    def _delete(self, key: str) -> None:
        try:
            keyring.delete_password(self.service_name, key)
        except PasswordDeleteError:
            # Nothing stored under this key
            pass


def _set_owner_only(path: Path) -> None:
    if os.name != 'nt':
        os.chmod(path, stat.S_IRUSR | stat.S_IWUSR)  # 0o600


class FileTokenStorage(TokenStorage):
    """
    Tokens in a Fernet-encrypted file with 0o600 permissions.

    Used when no keyring backend is available (headless Linux) or when
    ``STUDIO_ADMIN_TOKEN_STORE=file`` is set. The key comes from
    ``STUDIO_ADMIN_TOKEN_KEY`` when set, otherwise from a random key persisted
    next to the token file (``<name>.key``, also 0o600).
    """

    def __init__(self, path: Path, key_path: Optional[Path] = None):
        self.path = Path(path)
        self.key_path = Path(key_path) if key_path else self.path.with_suffix(".key")
        self._lock = threading.Lock()
        self._fernet: Optional[Fernet] = None

    def _cipher(self) -> Fernet:
        if self._fernet is not None:
            return self._fernet

        env_key = os.environ.get(SessionSettings.TOKEN_KEY_ENV, "").strip()
        if env_key:
            key = base64.urlsafe_b64encode(hashlib.sha256(env_key.encode()).digest())
        elif self.key_path.exists():
            key = self.key_path.read_bytes().strip()
        else:
            key = Fernet.generate_key()
            self.key_path.parent.mkdir(parents=True, exist_ok=True)
            self.key_path.write_bytes(key)
            _set_owner_only(self.key_path)
            logger.debug(f"[Session] generated token encryption key at {self.key_path}")

        self._fernet = Fernet(key)
        return self._fernet

    def load(self) -> Dict[str, Optional[str]]:
        empty = {key: None for key in TOKEN_KEYS}
        with self._lock:
            if not self.path.exists():
                return empty
            try:
                raw = self.path.read_text(encoding='utf-8').strip()
                if not raw.startswith(FERNET_PREFIX):
                    logger.warning("[Session] token file is not encrypted, ignoring it")
                    return empty
                plain = self._cipher().decrypt(raw[len(FERNET_PREFIX):].encode('utf-8'))
                data = json.loads(plain.decode('utf-8'))
            except InvalidToken:
                logger.warning("[Session] token file cannot be decrypted with the current key, ignoring it")
                return empty
            except (OSError, ValueError) as e:
                logger.warning(f"[Session] token file unreadable, ignoring: {e}")
                return empty
        if not isinstance(data, dict):
            return empty
        return {key: data.get(key) or None for key in TOKEN_KEYS}

    def save(self, access_token: str, refresh_token: Optional[str]) -> None:
        data = {
            SessionSettings.ACCESS_KEY: access_token,
            SessionSettings.REFRESH_KEY: refresh_token,
        }
        with self._lock, ErrorContext("Persist session tokens"):
            token = self._cipher().encrypt(json.dumps(data).encode('utf-8'))
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self.path.with_suffix(".tmp")
            tmp_path.write_text(FERNET_PREFIX + token.decode('utf-8'), encoding='utf-8')
            _set_owner_only(tmp_path)
            os.replace(tmp_path, self.path)

    def clear(self) -> None:
        with self._lock:
            try:
                self.path.unlink()
            except FileNotFoundError:
                pass


def keyring_available() -> bool:
    """True when a usable keyring backend is configured."""
    try:
        backend = keyring.get_keyring()
        # The fail backend raises on every call
        if backend.priority < 1:
            return False
        keyring.get_password(SessionSettings.KEYRING_SERVICE, "__availability_check__")
        return True
    except KeyringError as e:
        logger.debug(f"[Session] keyring check failed: {e}")
        return False


def create_token_storage(kind: str, data_dir: Path) -> TokenStorage:
    """
    Token storage for the configured backend.

    ``keyring`` falls back to the JSON file when no keyring backend works.
    """
    file_storage = FileTokenStorage(Path(data_dir) / SessionSettings.TOKEN_FILE_NAME)
    if kind == "file":
        return file_storage
    if keyring_available():
        return KeyringTokenStorage()
    logger.warning("[Session] keyring unavailable, storing tokens in %s", file_storage.path)
    return file_storage
