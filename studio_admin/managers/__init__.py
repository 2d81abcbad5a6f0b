"""
매니저 모듈

세션, 목록 상태, 상태 변경을 담당하는 매니저 클래스들을 포함합니다.

This module contains manager classes for the session, list state and status changes.
"""

from studio_admin.managers.list_controller import ListController, ListSnapshot, ViewState
from studio_admin.managers.session_manager import AuthSession
from studio_admin.managers.status_manager import StatusUpdater
from studio_admin.managers.token_storage import (
    FileTokenStorage,
    KeyringTokenStorage,
    TokenStorage,
    create_token_storage,
)

__all__ = [
    'ListController',
    'ListSnapshot',
    'ViewState',
    'AuthSession',
    'StatusUpdater',
    'TokenStorage',
    'FileTokenStorage',
    'KeyringTokenStorage',
    'create_token_storage',
]
