# -*- coding: utf-8 -*-
"""
Studio Admin Launcher
관리자 콘솔 실행 스크립트

=== 동기화 설명 ===
관리자 콘솔은 다음과 같이 서버와 동기화됩니다:
1. 각 페이지는 처음 열 때와 '새로고침' 버튼으로 목록을 가져옴
2. 대시보드는 1분마다 자동 새로고침
3. 상태 변경, 승인/거절은 화면에 먼저 반영되고 실패하면 원래 값으로 복원됨

Pull 기반 동기화이며 실시간 Push는 지원되지 않습니다.
"""

import sys
import threading

from PyQt6.QtGui import QFont
from PyQt6.QtWidgets import QApplication

from studio_admin.caller.approvals import RequestsApi
from studio_admin.caller.auth import AuthApi
from studio_admin.caller.client import ApiClient
from studio_admin.caller.resources import AdminApi
from studio_admin.config.settings import Settings, load_settings
from studio_admin.managers.session_manager import AuthSession
from studio_admin.managers.token_storage import create_token_storage
from studio_admin.ui.theme import FONT_FAMILY
from studio_admin.utils.error_handlers import global_exception_handler, thread_exception_handler
from studio_admin.utils.logging_config import AppLogger, get_logger


def build_services(settings: Settings):
    """
    API client, session and resource clients wired together.

    The client reads the bearer token from the session on every call.
    """
    client = ApiClient(
        base_url=settings.api_base_url,
        timeout=settings.timeout,
        max_retries=settings.max_retries,
    )
    storage = create_token_storage(settings.token_store, settings.data_dir)
    session = AuthSession(AuthApi(client), storage)
    client.token_provider = session.get_access_token
    return client, session, AdminApi(client), RequestsApi(client)


def main():
    sys.excepthook = global_exception_handler
    threading.excepthook = thread_exception_handler
    settings = load_settings()
    AppLogger.setup(settings.log_dir, level=settings.log_level)
    logger = get_logger(__name__)
    logger.info(f"[Launcher] backend {settings.api_base_url}")

    app = QApplication(sys.argv)

    # 폰트 설정
    font = QFont(FONT_FAMILY, 10)
    app.setFont(font)

    client, session, api, requests_api = build_services(settings)

    # Lazy import - reduces initial startup time
    from studio_admin.ui.admin_window import AdminWindow

    window = AdminWindow(session, api, requests_api)
    window.show()
    window.start()

    code = app.exec()
    client.close()
    sys.exit(code)


if __name__ == "__main__":
    main()
