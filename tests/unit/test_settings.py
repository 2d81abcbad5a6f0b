"""
Unit Tests for Runtime Settings
"""

from pathlib import Path

import pytest

from studio_admin.config.constants import ApiSettings
from studio_admin.config.settings import load_settings
from studio_admin.utils.error_handlers import ConfigurationError


class TestLoadSettings:

    def test_defaults(self):
        settings = load_settings(env={})
        assert settings.api_base_url == ApiSettings.DEFAULT_BASE_URL
        assert settings.token_store == "keyring"
        assert settings.timeout == ApiSettings.TIMEOUT
        assert not settings.is_production

    def test_primary_url_wins(self):
        settings = load_settings(env={
            "STUDIO_ADMIN_API_URL": "https://api.studio.test/api/",
            "API_SERVER_URL": "https://other.test",
        })
        assert settings.api_base_url == "https://api.studio.test/api"

    def test_legacy_url(self):
        assert load_settings(env={"API_SERVER_URL": "https://other.test"}).api_base_url == "https://other.test"

    def test_http_refused_in_production(self):
        with pytest.raises(ConfigurationError):
            load_settings(env={"ENVIRONMENT": "production", "STUDIO_ADMIN_API_URL": "http://api.test"})

    def test_https_in_production(self):
        settings = load_settings(env={"ENVIRONMENT": "production", "STUDIO_ADMIN_API_URL": "https://api.test"})
        assert settings.is_production

    def test_unknown_token_store(self):
        with pytest.raises(ConfigurationError):
            load_settings(env={"STUDIO_ADMIN_TOKEN_STORE": "cookie"})

    def test_file_token_store_and_data_dir(self, tmp_path):
        settings = load_settings(env={
            "STUDIO_ADMIN_TOKEN_STORE": "FILE",
            "STUDIO_ADMIN_DATA_DIR": str(tmp_path),
        })
        assert settings.token_store == "file"
        assert settings.data_dir == Path(tmp_path)
        assert settings.log_dir == Path(tmp_path) / "logs"

    def test_timeouts(self):
        settings = load_settings(env={
            "STUDIO_ADMIN_CONNECT_TIMEOUT": "3",
            "STUDIO_ADMIN_READ_TIMEOUT": "15",
            "STUDIO_ADMIN_MAX_RETRIES": "0",
        })
        assert settings.timeout == (3, 15)
        assert settings.max_retries == 0

    def test_bad_integer(self):
        with pytest.raises(ConfigurationError):
            load_settings(env={"STUDIO_ADMIN_READ_TIMEOUT": "soon"})

    def test_log_level_uppercased(self):
        assert load_settings(env={"STUDIO_ADMIN_LOG_LEVEL": "debug"}).log_level == "DEBUG"
