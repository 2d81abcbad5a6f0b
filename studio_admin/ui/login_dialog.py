# -*- coding: utf-8 -*-
"""
관리자 로그인 다이얼로그
"""

from PyQt6.QtCore import Qt
from PyQt6.QtGui import QFont
from PyQt6.QtWidgets import QDialog, QLabel, QLineEdit, QPushButton, QVBoxLayout

from studio_admin.managers.session_manager import AuthSession
from studio_admin.ui.theme import DARK, FONT_FAMILY, INPUT_STYLE, PRIMARY_BUTTON_STYLE
from studio_admin.ui.widgets import ErrorBanner
from studio_admin.ui.workers import WorkerPool
from studio_admin.utils.error_handlers import ApiError, describe_error
from studio_admin.utils.logging_config import get_logger

logger = get_logger(__name__)

ADMIN_ONLY_MESSAGE = "관리자 계정으로만 로그인할 수 있습니다."


class LoginDialog(QDialog):
    """
    Signs in through the shared ``AuthSession``. Non-admin accounts are
    signed out again and the dialog stays open.
    """

    def __init__(self, session: AuthSession, parent=None, message: str = ""):
        super().__init__(parent)
        self.session = session
        self.pool = WorkerPool(self)
        self.setWindowTitle("Studio Admin 로그인")
        self.setFixedSize(400, 360)
        self.setStyleSheet(f"QDialog {{ background-color: {DARK['bg']}; }}" + INPUT_STYLE)
        self._build_ui()
        if message:
            self.banner.show_error(message)

    def _build_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(32, 28, 32, 28)
        layout.setSpacing(12)

        title = QLabel("STUDIO ADMIN")
        title.setFont(QFont(FONT_FAMILY, 18, QFont.Weight.Bold))
        title.setAlignment(Qt.AlignmentFlag.AlignCenter)
        title.setStyleSheet(f"color: {DARK['brand']};")
        layout.addWidget(title)

        subtitle = QLabel("관리자 계정으로 로그인하세요")
        subtitle.setAlignment(Qt.AlignmentFlag.AlignCenter)
        subtitle.setStyleSheet(f"color: {DARK['text_dim']};")
        layout.addWidget(subtitle)

        self.banner = ErrorBanner()
        layout.addWidget(self.banner)

        self.email_input = QLineEdit()
        self.email_input.setPlaceholderText("이메일")
        layout.addWidget(self.email_input)

        self.password_input = QLineEdit()
        self.password_input.setPlaceholderText("비밀번호")
        self.password_input.setEchoMode(QLineEdit.EchoMode.Password)
        self.password_input.returnPressed.connect(self._on_login)
        layout.addWidget(self.password_input)

        self.login_btn = QPushButton("로그인")
        self.login_btn.setStyleSheet(PRIMARY_BUTTON_STYLE)
        self.login_btn.setCursor(Qt.CursorShape.PointingHandCursor)
        self.login_btn.clicked.connect(self._on_login)
        layout.addWidget(self.login_btn)
        layout.addStretch()

    def _set_busy(self, busy: bool):
        self.login_btn.setEnabled(not busy)
        self.login_btn.setText("로그인 중..." if busy else "로그인")

    def _on_login(self):
        email = self.email_input.text().strip()
        password = self.password_input.text()
        if not email or not password:
            self.banner.show_error("이메일과 비밀번호를 입력하세요.")
            return

        self.banner.clear_error()
        self._set_busy(True)
        self.pool.run(lambda: self._sign_in(email, password), self._on_signed_in, self._on_failed)

    def _sign_in(self, email: str, password: str):
        self.session.sign_in(email, password)
        if not self.session.is_admin:
            logger.warning("[Session] non-admin account rejected")
            self.session.sign_out()
            raise ApiError(ADMIN_ONLY_MESSAGE, status_code=403)
        return self.session.user

    def _on_signed_in(self, _user):
        self._set_busy(False)
        self.accept()

    def _on_failed(self, error: BaseException):
        self._set_busy(False)
        self.password_input.clear()
        self.banner.show_error(describe_error(error, fallback="로그인에 실패했습니다."))
