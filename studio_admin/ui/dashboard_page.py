# -*- coding: utf-8 -*-
"""
대시보드 - 회원 통계와 대기 중인 신청 건수
"""

from datetime import datetime

from PyQt6.QtCore import QTimer, pyqtSignal
from PyQt6.QtGui import QFont
from PyQt6.QtWidgets import QGridLayout, QHBoxLayout, QLabel, QPushButton, QVBoxLayout, QWidget

from studio_admin.caller.approvals import RequestsApi
from studio_admin.caller.resources import AdminApi
from studio_admin.config.constants import UiSettings
from studio_admin.managers.dashboard_manager import DashboardSummary, collect_summary
from studio_admin.models.request import RequestKind
from studio_admin.ui.theme import BUTTON_STYLE, DARK, FONT_FAMILY
from studio_admin.ui.widgets import ErrorBanner
from studio_admin.ui.workers import WorkerPool
from studio_admin.utils.error_handlers import SessionExpiredError, describe_error
from studio_admin.utils.logging_config import get_logger

logger = get_logger(__name__)


class DashboardPage(QWidget):
    """대시보드"""

    authRequired = pyqtSignal()

    def __init__(self, api: AdminApi, requests_api: RequestsApi, parent=None):
        super().__init__(parent)
        self.api = api
        self.requests_api = requests_api
        self.pool = WorkerPool(self)
        self.value_labels = {}
        self.closed = False
        self._build_ui()

        # 자동 새로고침
        self.refresh_timer = QTimer(self)
        self.refresh_timer.timeout.connect(self.refresh)
        self.refresh_timer.start(UiSettings.REFRESH_INTERVAL_MS)

    def _build_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(20, 16, 20, 16)
        layout.setSpacing(16)

        top = QHBoxLayout()
        title = QLabel("대시보드")
        title.setFont(QFont(FONT_FAMILY, 16, QFont.Weight.Bold))
        title.setStyleSheet(f"color: {DARK['text']};")
        top.addWidget(title)
        top.addStretch()
        self.updated_label = QLabel("")
        self.updated_label.setStyleSheet(f"color: {DARK['text_dim']};")
        top.addWidget(self.updated_label)
        refresh_btn = QPushButton("새로고침")
        refresh_btn.setStyleSheet(BUTTON_STYLE)
        refresh_btn.clicked.connect(self.refresh)
        top.addWidget(refresh_btn)
        layout.addLayout(top)

        self.banner = ErrorBanner()
        layout.addWidget(self.banner)

        items = [
            ("전체 회원", DARK["primary"], "total_members"),
            ("활성 회원", DARK["success"], "active_members"),
            ("정지 회원", DARK["danger"], "suspended_members"),
            ("프리미엄 회원", DARK["brand"], "premium_members"),
            ("등록 강사", DARK["info"], "instructors"),
            ("모집중 워크샵", DARK["warning"], "open_workshops"),
            ("강사 신청 대기", DARK["warning"], RequestKind.TEACHER.value),
            ("워크샵 신청 대기", DARK["warning"], RequestKind.WORKSHOP.value),
            ("스케줄 신청 대기", DARK["warning"], RequestKind.SCHEDULE.value),
        ]
        grid = QGridLayout()
        grid.setSpacing(16)
        for i, (title_text, color, key) in enumerate(items):
            grid.addWidget(self._create_card(title_text, color, key), i // 3, i % 3)
        layout.addLayout(grid)
        layout.addStretch()

    def _create_card(self, title: str, color: str, key: str) -> QWidget:
        """카드 생성"""
        card = QWidget()
        card.setFixedHeight(96)
        card.setStyleSheet(f"""
            background-color: {DARK["card"]};
            border-radius: 10px;
            border-left: 4px solid {color};
        """)
        inner = QVBoxLayout(card)
        inner.setContentsMargins(15, 10, 15, 10)

        title_lbl = QLabel(title)
        title_lbl.setFont(QFont(FONT_FAMILY, 10))
        title_lbl.setStyleSheet(f"color: {DARK['text_dim']}; background: transparent; border: none;")
        inner.addWidget(title_lbl)

        value_lbl = QLabel("-")
        value_lbl.setFont(QFont(FONT_FAMILY, 24, QFont.Weight.Bold))
        value_lbl.setStyleSheet(f"color: {DARK['text']}; background: transparent; border: none;")
        inner.addWidget(value_lbl)
        self.value_labels[key] = value_lbl
        return card

    def refresh(self):
        if self.closed:
            return
        self.pool.run(
            lambda: collect_summary(self.api, self.requests_api),
            self._on_loaded,
            self._on_failed,
        )

    def _on_loaded(self, summary: DashboardSummary):
        if self.closed:
            return
        self.banner.clear_error()
        stats = summary.members
        values = {
            "total_members": stats.total_members,
            "active_members": stats.active_members,
            "suspended_members": stats.suspended_members,
            "premium_members": stats.premium_members,
            "instructors": summary.instructors,
            "open_workshops": summary.open_workshops,
        }
        for kind, count in summary.pending_requests.items():
            values[kind.value] = count
        for key, value in values.items():
            self.value_labels[key].setText(f"{value:,}")

        self.updated_label.setText(f"마지막 갱신: {datetime.now().strftime('%H:%M:%S')}")

    def _on_failed(self, error: BaseException):
        if self.closed:
            return
        logger.warning(f"[Dashboard] refresh failed: {error}")
        if isinstance(error, SessionExpiredError):
            self.authRequired.emit()
        self.banner.show_error(describe_error(error, fallback="대시보드 정보를 불러오지 못했습니다."))

    def close_page(self):
        self.closed = True
        self.refresh_timer.stop()
        self.pool.wait_all()
