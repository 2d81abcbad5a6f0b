# -*- coding: utf-8 -*-
"""
공용 화면 컴포넌트 - 상태 배지, 액션 메뉴, 에러 배너, 페이지네이션, 사이드바, 헤더
"""

from typing import Any, Callable, Optional, Sequence, Tuple

from PyQt6.QtCore import Qt, QTimer, pyqtSignal
from PyQt6.QtGui import QAction, QColor, QFont
from PyQt6.QtWidgets import (
    QFrame, QHBoxLayout, QLabel, QMenu, QPushButton, QTableWidget,
    QTableWidgetItem, QToolButton, QVBoxLayout, QWidget,
)

from studio_admin.managers.list_controller import ViewState
from studio_admin.ui.theme import BUTTON_STYLE, DARK, FONT_FAMILY
from studio_admin.utils.formatting import status_badge


def set_cell(table: QTableWidget, row: int, col: int, text: Any,
             color: Optional[str] = None, bold: bool = False):
    """셀 설정 (교차 행 배경색 포함)"""
    item = QTableWidgetItem("" if text is None else str(text))
    item.setTextAlignment(Qt.AlignmentFlag.AlignCenter)
    if color:
        item.setForeground(QColor(color))
    if bold:
        font = item.font()
        font.setBold(True)
        item.setFont(font)
    bg = DARK["table_alt"] if row % 2 == 1 else DARK["table_bg"]
    item.setBackground(QColor(bg))
    table.setItem(row, col, item)


class StatusBadge(QLabel):
    """상태 배지"""

    def __init__(self, status: Any = None, parent=None):
        super().__init__(parent)
        self.setAlignment(Qt.AlignmentFlag.AlignCenter)
        if status is not None:
            self.set_status(status)

    def set_status(self, status: Any):
        label, fg, bg = status_badge(status)
        self.setText(label)
        self.setStyleSheet(f"""
            QLabel {{
                color: {fg};
                background-color: {bg};
                border-radius: 10px;
                padding: 2px 10px;
                font-size: 11px;
                font-weight: bold;
            }}
        """)


def badge_cell(status: Any) -> QWidget:
    """테이블 셀용 배지 컨테이너"""
    container = QWidget()
    layout = QHBoxLayout(container)
    layout.setContentsMargins(4, 4, 4, 4)
    layout.setAlignment(Qt.AlignmentFlag.AlignCenter)
    layout.addWidget(StatusBadge(status))
    return container


class ActionMenuButton(QToolButton):
    """
    행 단위 액션 메뉴 (⋯)

    actions: [(label, callback)], an empty list disables the button.
    """

    def __init__(self, actions: Sequence[Tuple[str, Callable[[], None]]], parent=None):
        super().__init__(parent)
        self.setText("⋯")
        self.setPopupMode(QToolButton.ToolButtonPopupMode.InstantPopup)
        self.setCursor(Qt.CursorShape.PointingHandCursor)
        self.setStyleSheet(f"""
            QToolButton {{
                background-color: {DARK["card"]};
                color: {DARK["text"]};
                border: 1px solid {DARK["border"]};
                border-radius: 4px;
                padding: 2px 10px;
                font-weight: bold;
            }}
            QToolButton::menu-indicator {{ image: none; }}
            QToolButton:disabled {{ color: {DARK["text_dim"]}; }}
        """)

        menu = QMenu(self)
        menu.setStyleSheet(f"""
            QMenu {{
                background-color: {DARK["card"]};
                color: {DARK["text"]};
                border: 1px solid {DARK["border"]};
            }}
            QMenu::item:selected {{ background-color: {DARK["primary"]}; }}
        """)
        for label, callback in actions:
            action = QAction(label, menu)
            action.triggered.connect(lambda _checked=False, cb=callback: cb())
            menu.addAction(action)
        self.setMenu(menu)
        self.setEnabled(bool(actions))


class ErrorBanner(QLabel):
    """페이지 상단 빨간 에러 배너"""

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setWordWrap(True)
        self.setStyleSheet(f"""
            QLabel {{
                background-color: rgba(239, 68, 68, 0.15);
                color: {DARK["danger"]};
                border: 1px solid {DARK["danger"]};
                border-radius: 6px;
                padding: 10px 14px;
                font-size: 12px;
            }}
        """)
        self.hide()

    def show_error(self, message: str):
        if not message:
            self.clear_error()
            return
        self.setText(f"⚠ {message}")
        self.show()

    def clear_error(self):
        self.setText("")
        self.hide()


class StateLabel(QLabel):
    """
    목록 상태 안내 - 로딩 스피너 / 빈 목록 / 로그인 필요

    Loading, empty and login-required states use distinct copy.
    """

    SPINNER_FRAMES = "⠋⠙⠹⠸⠼⠴⠦⠧⠇⠏"

    def __init__(self, empty_text: str = "표시할 항목이 없습니다.", parent=None):
        super().__init__(parent)
        self.empty_text = empty_text
        self.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.setStyleSheet(f"color: {DARK['text_dim']}; font-size: 13px; padding: 30px;")
        self._frame = 0
        self._timer = QTimer(self)
        self._timer.setInterval(100)
        self._timer.timeout.connect(self._tick)
        self.hide()

    def _tick(self):
        self._frame = (self._frame + 1) % len(self.SPINNER_FRAMES)
        self.setText(f"{self.SPINNER_FRAMES[self._frame]}  불러오는 중...")

    def show_state(self, state: ViewState, filtered: bool = False):
        self._timer.stop()
        if state == ViewState.LOADING:
            self._tick()
            self._timer.start()
            self.show()
        elif state == ViewState.EMPTY:
            text = "검색 조건에 맞는 항목이 없습니다." if filtered else self.empty_text
            self.setText(text)
            self.show()
        elif state == ViewState.AUTH_REQUIRED:
            self.setText("🔒 로그인이 필요합니다. 다시 로그인해 주세요.")
            self.show()
        else:
            self.hide()


class PaginationBar(QWidget):
    """이전/다음 페이지 버튼과 현재 페이지 표시"""

    pageRequested = pyqtSignal(int)

    def __init__(self, parent=None):
        super().__init__(parent)
        self.page = 1
        self.pages = 1

        layout = QHBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addStretch()

        self.prev_btn = QPushButton("◀ 이전")
        self.prev_btn.setStyleSheet(BUTTON_STYLE)
        self.prev_btn.clicked.connect(lambda: self.pageRequested.emit(self.page - 1))
        layout.addWidget(self.prev_btn)

        self.page_label = QLabel()
        self.page_label.setStyleSheet(f"color: {DARK['text_dim']}; padding: 0 12px;")
        layout.addWidget(self.page_label)

        self.next_btn = QPushButton("다음 ▶")
        self.next_btn.setStyleSheet(BUTTON_STYLE)
        self.next_btn.clicked.connect(lambda: self.pageRequested.emit(self.page + 1))
        layout.addWidget(self.next_btn)

        layout.addStretch()
        self.update_pages(1, 1, 0)

    def update_pages(self, page: int, pages: int, total: int):
        self.page = page
        self.pages = max(pages, 1)
        self.page_label.setText(f"{page} / {self.pages}  (총 {total}건)")
        self.prev_btn.setEnabled(page > 1)
        self.next_btn.setEnabled(page < self.pages)


class Sidebar(QFrame):
    """좌측 내비게이션"""

    pageSelected = pyqtSignal(str)

    def __init__(self, items: Sequence[Tuple[str, str]], width: int = 200, parent=None):
        super().__init__(parent)
        self.setFixedWidth(width)
        self.setStyleSheet(f"QFrame {{ background-color: {DARK['card']}; border: none; }}")
        self.buttons = {}

        layout = QVBoxLayout(self)
        layout.setContentsMargins(10, 20, 10, 20)
        layout.setSpacing(4)

        brand = QLabel("STUDIO ADMIN")
        brand.setFont(QFont(FONT_FAMILY, 14, QFont.Weight.Bold))
        brand.setStyleSheet(f"color: {DARK['brand']}; padding: 0 8px 16px 8px;")
        layout.addWidget(brand)

        for key, label in items:
            btn = QPushButton(label)
            btn.setCheckable(True)
            btn.setCursor(Qt.CursorShape.PointingHandCursor)
            btn.clicked.connect(lambda _checked=False, k=key: self.pageSelected.emit(k))
            btn.setStyleSheet(f"""
                QPushButton {{
                    background-color: transparent;
                    color: {DARK["text_dim"]};
                    border: none;
                    border-radius: 6px;
                    padding: 10px 12px;
                    text-align: left;
                    font-size: 13px;
                }}
                QPushButton:hover {{ background-color: {DARK["border"]}; color: {DARK["text"]}; }}
                QPushButton:checked {{
                    background-color: {DARK["primary"]};
                    color: white;
                    font-weight: bold;
                }}
            """)
            layout.addWidget(btn)
            self.buttons[key] = btn
        layout.addStretch()

    def set_current(self, key: str):
        for name, btn in self.buttons.items():
            btn.setChecked(name == key)


class Header(QFrame):
    """상단 헤더 - 페이지 제목, 로그인 사용자, 로그아웃"""

    logoutRequested = pyqtSignal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setFixedHeight(56)
        self.setStyleSheet(f"""
            QFrame {{
                background-color: {DARK["bg"]};
                border-bottom: 1px solid {DARK["border"]};
            }}
        """)
        layout = QHBoxLayout(self)
        layout.setContentsMargins(20, 0, 20, 0)

        self.title_label = QLabel()
        self.title_label.setFont(QFont(FONT_FAMILY, 15, QFont.Weight.Bold))
        self.title_label.setStyleSheet(f"color: {DARK['text']}; border: none;")
        layout.addWidget(self.title_label)
        layout.addStretch()

        self.user_label = QLabel()
        self.user_label.setStyleSheet(f"color: {DARK['text_dim']}; border: none;")
        layout.addWidget(self.user_label)

        self.logout_btn = QPushButton("로그아웃")
        self.logout_btn.setStyleSheet(BUTTON_STYLE)
        self.logout_btn.clicked.connect(self.logoutRequested.emit)
        layout.addWidget(self.logout_btn)

    def set_title(self, title: str):
        self.title_label.setText(title)

    def set_user(self, user: Optional[dict]):
        if not user:
            self.user_label.setText("")
            return
        name = user.get("name") or user.get("email") or ""
        role = user.get("role") or ""
        self.user_label.setText(f"{name} ({role})" if role else name)
