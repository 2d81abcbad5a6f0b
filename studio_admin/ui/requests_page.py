# -*- coding: utf-8 -*-
"""
신청 관리 페이지 - 강사/워크샵/스케줄 신청 승인 및 거절
"""

from typing import Dict, List

from PyQt6.QtCore import Qt, QTimer, pyqtSignal
from PyQt6.QtGui import QFont
from PyQt6.QtWidgets import (
    QComboBox, QHBoxLayout, QLabel, QLineEdit, QPushButton, QTableWidget, QVBoxLayout,
    QWidget,
)

from studio_admin.caller.approvals import RequestsApi
from studio_admin.config.constants import ListSettings
from studio_admin.core.workflow import (
    ACTION_APPROVE, ACTION_REJECT, REQUEST_HANDLERS, ActionOutcome, RequestInbox,
)
from studio_admin.managers.list_controller import ViewState
from studio_admin.models.request import Request, RequestKind, RequestStatus
from studio_admin.ui.theme import (
    BUTTON_STYLE, DARK, FONT_FAMILY, INPUT_STYLE, style_table, styled_msg_box,
    styled_question_box,
)
from studio_admin.ui.widgets import ErrorBanner, StateLabel, badge_cell, set_cell
from studio_admin.ui.workers import WorkerPool
from studio_admin.utils.error_handlers import SessionExpiredError, describe_error
from studio_admin.utils.formatting import format_date
from studio_admin.utils.logging_config import get_logger

logger = get_logger(__name__)

STATUS_FILTERS = (
    (None, "전체"),
    (RequestStatus.PENDING.value, "대기중"),
    (RequestStatus.APPROVED.value, "승인됨"),
    (RequestStatus.REJECTED.value, "거절됨"),
)

CREATED_LABELS = {
    "workshop": "워크샵이 생성되었습니다.",
    "schedule": "스케줄이 생성되었습니다.",
}


class RequestsPage(QWidget):
    """신청 관리"""

    authRequired = pyqtSignal()
    # Emitted from worker threads by the inbox; delivered on the GUI thread
    inboxChanged = pyqtSignal(object)

    def __init__(self, api: RequestsApi, parent=None):
        super().__init__(parent)
        self.inbox = RequestInbox(api, on_change=self.inboxChanged.emit)
        self.inboxChanged.connect(lambda _kind: self._render())
        self.pool = WorkerPool(self)
        self.current_kind = RequestKind.TEACHER
        self.tab_buttons: Dict[RequestKind, QPushButton] = {}
        self.loading = False
        self.closed = False

        self.search_timer = QTimer(self)
        self.search_timer.setSingleShot(True)
        self.search_timer.setInterval(ListSettings.DEBOUNCE_MS)
        self.search_timer.timeout.connect(self._render)

        self._build_ui()

    def _build_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(20, 16, 20, 16)
        layout.setSpacing(12)

        title = QLabel("신청 관리")
        title.setFont(QFont(FONT_FAMILY, 16, QFont.Weight.Bold))
        title.setStyleSheet(f"color: {DARK['text']};")
        layout.addWidget(title)

        # 탭 버튼
        tabs = QHBoxLayout()
        tabs.setSpacing(6)
        for kind, handler in REQUEST_HANDLERS.items():
            btn = QPushButton(handler.label)
            btn.setCheckable(True)
            btn.setCursor(Qt.CursorShape.PointingHandCursor)
            btn.setStyleSheet(f"""
                QPushButton {{
                    background-color: {DARK["card"]};
                    color: {DARK["text_dim"]};
                    border: 1px solid {DARK["border"]};
                    border-radius: 6px;
                    padding: 8px 18px;
                }}
                QPushButton:checked {{
                    background-color: {DARK["primary"]};
                    color: white;
                    font-weight: bold;
                    border: none;
                }}
            """)
            btn.clicked.connect(lambda _checked=False, k=kind: self.switch_kind(k))
            tabs.addWidget(btn)
            self.tab_buttons[kind] = btn
        tabs.addStretch()
        layout.addLayout(tabs)

        toolbar = QHBoxLayout()
        self.search_input = QLineEdit()
        self.search_input.setPlaceholderText("제목, 이름, 이메일 검색")
        self.search_input.setFixedWidth(280)
        self.search_input.setStyleSheet(INPUT_STYLE)
        self.search_input.textChanged.connect(lambda _text: self.search_timer.start())
        toolbar.addWidget(self.search_input)

        self.status_combo = QComboBox()
        self.status_combo.setStyleSheet(INPUT_STYLE)
        for value, label in STATUS_FILTERS:
            self.status_combo.addItem(label, value)
        self.status_combo.setCurrentIndex(1)
        self.status_combo.currentIndexChanged.connect(lambda _idx: self._render())
        toolbar.addWidget(self.status_combo)
        toolbar.addStretch()

        refresh_btn = QPushButton("새로고침")
        refresh_btn.setStyleSheet(BUTTON_STYLE)
        refresh_btn.clicked.connect(self.refresh)
        toolbar.addWidget(refresh_btn)
        layout.addLayout(toolbar)

        self.banner = ErrorBanner()
        layout.addWidget(self.banner)

        self.state_label = StateLabel("신청 내역이 없습니다.")
        layout.addWidget(self.state_label)

        self.table = QTableWidget(0, 5)
        self.table.setHorizontalHeaderLabels(["신청 내용", "신청자", "상태", "신청일", "관리"])
        style_table(self.table, [300, 220, 100, 120, 180])
        self.table.horizontalHeader().setStretchLastSection(True)
        layout.addWidget(self.table, 1)

        self.tab_buttons[self.current_kind].setChecked(True)

    # =========================================================================
    # Loading
    # =========================================================================

    def switch_kind(self, kind: RequestKind):
        self.current_kind = kind
        for k, btn in self.tab_buttons.items():
            btn.setChecked(k == kind)
        self.refresh()

    def refresh(self):
        kind = self.current_kind
        token = self.inbox.start_load(kind)
        self.loading = True
        self.banner.clear_error()
        self.state_label.show_state(ViewState.LOADING)
        self.pool.run(
            lambda: self.inbox.list_requests(kind, load_token=token),
            lambda _rows: self._on_loaded(kind, token),
            lambda error: self._on_load_failed(kind, token, error),
        )

    def _is_current(self, kind: RequestKind, token: int) -> bool:
        """False once the page closed, the tab changed or a newer load started."""
        return not self.closed and kind == self.current_kind and self.inbox.is_current_load(kind, token)

    def _on_loaded(self, kind: RequestKind, token: int):
        if not self._is_current(kind, token):
            return
        self.loading = False
        self._render()

    def _on_load_failed(self, kind: RequestKind, token: int, error: BaseException):
        if not self._is_current(kind, token):
            logger.debug(f"[Inbox] ignored failure of superseded {kind.value} load: {error}")
            return
        self.loading = False
        self.table.setRowCount(0)
        if isinstance(error, SessionExpiredError):
            self.state_label.show_state(ViewState.AUTH_REQUIRED)
            self.authRequired.emit()
            return
        self.state_label.show_state(ViewState.ERROR)
        self.banner.show_error(describe_error(error, fallback="신청 목록을 불러오지 못했습니다."))

    # =========================================================================
    # Rendering
    # =========================================================================

    def visible_rows(self) -> List[Request]:
        return self.inbox.filter_requests(
            self.current_kind,
            status_filter=self.status_combo.currentData(),
            search_text=self.search_input.text(),
        )

    def _render(self):
        if self.closed or self.loading:
            return
        rows = self.visible_rows()
        filtered = bool(self.search_input.text().strip()) or self.status_combo.currentData() is not None
        self.state_label.show_state(ViewState.READY if rows else ViewState.EMPTY, filtered)
        if self.inbox.action_error:
            self.banner.show_error(self.inbox.action_error)

        self.table.setRowCount(len(rows))
        for r, request in enumerate(rows):
            set_cell(self.table, r, 0, request.display_title, bold=True)
            applicant = request.user.email
            if request.user.name:
                applicant = f"{request.user.name} ({request.user.email})"
            set_cell(self.table, r, 1, applicant)
            self.table.setCellWidget(r, 2, badge_cell(request.status))
            set_cell(self.table, r, 3, format_date(request.created_at))
            self.table.setCellWidget(r, 4, self._action_buttons(request))

    def _action_buttons(self, request: Request) -> QWidget:
        container = QWidget()
        row = QHBoxLayout(container)
        row.setContentsMargins(4, 2, 4, 2)
        row.setSpacing(6)

        actions = self.inbox.available_actions(request)
        if not actions:
            text = "처리 중..." if self.inbox.is_in_flight(request.kind, request.id) else "-"
            label = QLabel(text)
            label.setStyleSheet(f"color: {DARK['text_dim']};")
            row.addWidget(label)
            return container

        for action, text, color in (
            (ACTION_APPROVE, "승인", DARK["success"]),
            (ACTION_REJECT, "거절", DARK["danger"]),
        ):
            if action not in actions:
                continue
            btn = QPushButton(text)
            btn.setStyleSheet(f"""
                QPushButton {{
                    background-color: {color};
                    color: white;
                    border: none;
                    border-radius: 4px;
                    padding: 4px 12px;
                    font-weight: bold;
                }}
            """)
            btn.clicked.connect(lambda _checked=False, a=action, req=request: self.decide(req, a))
            row.addWidget(btn)
        row.addStretch()
        return container

    # =========================================================================
    # Decisions
    # =========================================================================

    def decide(self, request: Request, action: str):
        if action == ACTION_REJECT and not styled_question_box(
            self, "거절 확인", f"'{request.display_title}' 신청을 거절하시겠습니까?"
        ):
            return
        logger.info(f"[Admin UI] {action} {request.kind.value} request {request.id}")
        call = self.inbox.approve if action == ACTION_APPROVE else self.inbox.reject
        self.banner.clear_error()
        self.pool.run(
            lambda: call(request.kind, request.id),
            self._on_decided,
            self._on_decide_failed,
        )

    def _on_decided(self, outcome: ActionOutcome):
        if self.closed:
            return
        if not outcome.success:
            self.banner.show_error(outcome.message)
        elif outcome.created_entity:
            handler = self.inbox.handler(outcome.kind)
            message = CREATED_LABELS.get(handler.created_entity_key, "처리되었습니다.")
            styled_msg_box(self, "승인 완료", message, "info").exec()
        self._render()

    def _on_decide_failed(self, error: BaseException):
        if self.closed:
            return
        if isinstance(error, SessionExpiredError):
            self.authRequired.emit()
        self.banner.show_error(describe_error(error, fallback="요청을 처리하지 못했습니다."))
        self._render()

    def close_page(self):
        self.closed = True
        self.search_timer.stop()
        self.pool.wait_all()
