# -*- coding: utf-8 -*-
"""
관리자 메인 윈도우 - 사이드바, 헤더, 페이지 스택

=== 동작 방식 ===
1. 시작 시 저장된 토큰으로 세션 복원 (AuthSession.restore)
2. 복원 실패 또는 관리자가 아니면 로그인 다이얼로그 표시
3. 페이지는 처음 열 때 생성되고 데이터를 불러옴
4. 어느 페이지든 401을 받으면 로그인 다이얼로그로 돌아감
"""

from typing import Dict, Optional

from PyQt6.QtCore import pyqtSignal
from PyQt6.QtWidgets import QHBoxLayout, QMainWindow, QStackedWidget, QVBoxLayout, QWidget

from studio_admin.caller.approvals import RequestsApi
from studio_admin.caller.resources import AdminApi
from studio_admin.config import constants
from studio_admin.config.constants import UiSettings
from studio_admin.managers.session_manager import AuthSession
from studio_admin.managers.status_manager import StatusUpdater
from studio_admin.ui.dashboard_page import DashboardPage
from studio_admin.ui.list_page import ListPage
from studio_admin.ui.login_dialog import LoginDialog
from studio_admin.ui.page_specs import LIST_PAGES
from studio_admin.ui.requests_page import RequestsPage
from studio_admin.ui.theme import DARK, styled_question_box
from studio_admin.ui.widgets import Header, Sidebar
from studio_admin.ui.workers import WorkerPool
from studio_admin.utils.logging_config import get_logger

logger = get_logger(__name__)

PAGE_TITLES = dict(constants.NAVIGATION)


class AdminWindow(QMainWindow):
    """관리자 콘솔"""

    # AuthSession listeners may fire on worker threads
    sessionChanged = pyqtSignal()

    def __init__(self, session: AuthSession, api: AdminApi, requests_api: RequestsApi):
        super().__init__()
        self.session = session
        self.api = api
        self.requests_api = requests_api
        self.updater = StatusUpdater(api)
        self.pool = WorkerPool(self)
        self.pages: Dict[str, QWidget] = {}
        self.current_page: Optional[str] = None
        self._login_open = False

        self.sessionChanged.connect(self._on_session_changed)
        self._unsubscribe = session.subscribe(lambda _session: self.sessionChanged.emit())

        self.setWindowTitle("Studio Admin")
        self.resize(UiSettings.WINDOW_WIDTH, UiSettings.WINDOW_HEIGHT)
        self.setStyleSheet(f"QMainWindow {{ background-color: {DARK['bg']}; }}")
        self._build_ui()

    def _build_ui(self):
        central = QWidget()
        root = QHBoxLayout(central)
        root.setContentsMargins(0, 0, 0, 0)
        root.setSpacing(0)

        self.sidebar = Sidebar(constants.NAVIGATION, UiSettings.SIDEBAR_WIDTH)
        self.sidebar.pageSelected.connect(self.show_page)
        root.addWidget(self.sidebar)

        right = QVBoxLayout()
        right.setContentsMargins(0, 0, 0, 0)
        right.setSpacing(0)
        self.header = Header()
        self.header.logoutRequested.connect(self.logout)
        right.addWidget(self.header)

        self.stack = QStackedWidget()
        self.stack.setStyleSheet(f"background-color: {DARK['bg']};")
        right.addWidget(self.stack, 1)
        root.addLayout(right, 1)

        self.setCentralWidget(central)

    # =========================================================================
    # Session
    # =========================================================================

    def start(self):
        """저장된 세션 복원 후 첫 페이지 표시"""
        self.header.set_title("세션 확인 중...")
        self.pool.run(self.session.restore, self._on_restored, self._on_restore_failed)

    def _on_restored(self, _user):
        if self.session.is_authenticated and self.session.is_admin:
            self.show_page(constants.DEFAULT_PAGE)
        else:
            self.require_login()

    def _on_restore_failed(self, error: BaseException):
        logger.warning(f"[Session] restore failed: {error}")
        self.require_login()

    def _on_session_changed(self):
        self.header.set_user(self.session.user)

    def require_login(self, message: str = ""):
        """로그인 다이얼로그 - 취소하면 앱 종료"""
        if self._login_open:
            return
        self._login_open = True
        try:
            dialog = LoginDialog(self.session, self, message)
            if not dialog.exec():
                logger.info("[Admin UI] login cancelled, closing")
                self.close()
                return
        finally:
            self._login_open = False

        self.header.set_user(self.session.user)
        if self.current_page is None:
            self.show_page(constants.DEFAULT_PAGE)
        else:
            self._refresh_page(self.current_page)

    def _on_auth_required(self):
        self.require_login("세션이 만료되었습니다. 다시 로그인해 주세요.")

    def logout(self):
        if not styled_question_box(self, "로그아웃", "로그아웃 하시겠습니까?"):
            return
        self.pool.run(self.session.sign_out, lambda _r: self.require_login(), lambda _e: self.require_login())

    # =========================================================================
    # Pages
    # =========================================================================

    def _create_page(self, key: str) -> QWidget:
        if key == constants.PAGE_DASHBOARD:
            page = DashboardPage(self.api, self.requests_api)
        elif key == constants.PAGE_REQUESTS:
            page = RequestsPage(self.requests_api)
        else:
            page = ListPage(LIST_PAGES[key], self.api, self.updater)
        page.authRequired.connect(self._on_auth_required)
        self.stack.addWidget(page)
        self.pages[key] = page
        return page

    def show_page(self, key: str):
        first_open = key not in self.pages
        page = self.pages[key] if not first_open else self._create_page(key)
        self.current_page = key
        self.stack.setCurrentWidget(page)
        self.sidebar.set_current(key)
        self.header.set_title(PAGE_TITLES.get(key, key))
        if first_open:
            self._refresh_page(key)

    def _refresh_page(self, key: str):
        page = self.pages.get(key)
        if page is not None:
            page.refresh()

    def closeEvent(self, event):
        """창 닫기 - 진행 중 요청 무시, 구독 해제"""
        for page in self.pages.values():
            page.close_page()
        self._unsubscribe()
        self.pool.wait_all()
        super().closeEvent(event)
