"""
설정 모듈 (constants and environment-driven settings)
"""

from studio_admin.config.constants import ApiSettings, ListSettings, SessionSettings, UiSettings
from studio_admin.config.settings import Settings, load_settings

__all__ = [
    "ApiSettings",
    "ListSettings",
    "SessionSettings",
    "UiSettings",
    "Settings",
    "load_settings",
]
