# -*- coding: utf-8 -*-
"""
다크모드 테마 - 색상, 폰트, 공용 스타일시트와 메시지 박스
"""

from PyQt6.QtWidgets import QMessageBox, QTableWidget, QAbstractItemView

from studio_admin.config.constants import UiSettings

FONT_FAMILY = "맑은 고딕"

# Professional Slate Theme
DARK = {
    "bg": "#0f172a",          # slate-950
    "card": "#1e293b",        # slate-800
    "primary": "#3b82f6",     # blue-500
    "primary_hover": "#2563eb", # blue-600
    "brand": "#e11d48",       # rose-600
    "success": "#10b981",     # emerald-500
    "warning": "#f59e0b",     # amber-500
    "danger": "#ef4444",      # red-500
    "info": "#0ea5e9",        # sky-500
    "text": "#f1f5f9",        # slate-100
    "text_dim": "#94a3b8",    # slate-400
    "border": "#334155",      # slate-700
    "table_bg": "#1e293b",    # slate-800
    "table_alt": "#334155",   # slate-700
    "table_header": "#0f172a", # slate-950
}

BUTTON_STYLE = f"""
    QPushButton {{
        background-color: {DARK["card"]};
        color: {DARK["text"]};
        border: 1px solid {DARK["border"]};
        border-radius: 6px;
        padding: 6px 14px;
    }}
    QPushButton:hover {{
        background-color: {DARK["border"]};
        border: 1px solid {DARK["text_dim"]};
    }}
    QPushButton:disabled {{
        color: {DARK["text_dim"]};
    }}
"""

PRIMARY_BUTTON_STYLE = f"""
    QPushButton {{
        background-color: {DARK["primary"]};
        color: white;
        border: none;
        border-radius: 6px;
        padding: 8px 20px;
        font-weight: bold;
    }}
    QPushButton:hover {{
        background-color: {DARK["primary_hover"]};
    }}
    QPushButton:disabled {{
        background-color: {DARK["border"]};
        color: {DARK["text_dim"]};
    }}
"""

INPUT_STYLE = f"""
    QLineEdit, QTextEdit, QPlainTextEdit, QSpinBox {{
        background-color: {DARK["card"]};
        color: {DARK["text"]};
        border: 1px solid {DARK["border"]};
        border-radius: 6px;
        padding: 5px 10px;
    }}
    QComboBox {{
        background-color: {DARK["card"]};
        color: {DARK["text"]};
        border: 1px solid {DARK["border"]};
        border-radius: 6px;
        padding: 5px 15px;
    }}
    QComboBox::drop-down {{
        border: none;
    }}
    QComboBox QAbstractItemView {{
        background-color: {DARK["card"]};
        color: {DARK["text"]};
        selection-background-color: {DARK["primary"]};
    }}
    QCheckBox {{
        color: {DARK["text"]};
    }}
"""

TABLE_STYLE = f"""
    QTableWidget {{
        background-color: {DARK["table_bg"]};
        color: {DARK["text"]};
        border: 1px solid {DARK["border"]};
        border-radius: 4px;
        gridline-color: {DARK["border"]};
        selection-background-color: {DARK["primary"]};
        selection-color: {DARK["text"]};
    }}
    QTableWidget::item {{
        padding: 4px 8px;
        border-bottom: 1px solid {DARK["border"]};
    }}
    QHeaderView::section {{
        background-color: {DARK["table_header"]};
        color: {DARK["text_dim"]};
        font-weight: bold;
        padding: 8px;
        border: none;
        border-bottom: 1px solid {DARK["border"]};
    }}
    QScrollBar:vertical {{
        background-color: {DARK["bg"]};
        width: 10px;
        margin: 0px;
    }}
    QScrollBar::handle:vertical {{
        background-color: {DARK["border"]};
        min-height: 20px;
        border-radius: 5px;
    }}
    QScrollBar::add-line:vertical, QScrollBar::sub-line:vertical {{
        height: 0px;
    }}
"""


def style_table(table: QTableWidget, widths: list, row_height: int = UiSettings.ROW_HEIGHT):
    """테이블 스타일"""
    table.setStyleSheet(TABLE_STYLE)
    # 기본 교차 색상 비활성화 (직접 행 배경색 설정)
    table.setAlternatingRowColors(False)
    table.setSelectionBehavior(QAbstractItemView.SelectionBehavior.SelectRows)
    table.setEditTriggers(QAbstractItemView.EditTrigger.NoEditTriggers)
    table.verticalHeader().setVisible(False)
    table.verticalHeader().setDefaultSectionSize(row_height)
    for i, w in enumerate(widths):
        table.setColumnWidth(i, w)


def styled_msg_box(parent, title: str, message: str, icon_type: str = "info") -> QMessageBox:
    """
    다크모드에 맞춘 스타일 메시지 박스
    icon_type: 'info', 'warning', 'error', 'question'
    """
    msg = QMessageBox(parent)
    msg.setWindowTitle(title)
    msg.setText(message)

    icons = {
        "info": QMessageBox.Icon.Information,
        "warning": QMessageBox.Icon.Warning,
        "error": QMessageBox.Icon.Critical,
        "question": QMessageBox.Icon.Question,
    }
    msg.setIcon(icons.get(icon_type, QMessageBox.Icon.Information))

    msg.setStyleSheet(f"""
        QMessageBox {{
            background-color: {DARK["card"]};
            color: {DARK["text"]};
        }}
        QMessageBox QLabel {{
            color: {DARK["text"]};
            font-size: 13px;
        }}
    """ + PRIMARY_BUTTON_STYLE)
    return msg


def styled_question_box(parent, title: str, message: str) -> bool:
    """다크모드 확인 다이얼로그 - Yes/No 반환"""
    msg = styled_msg_box(parent, title, message, "question")
    msg.setStandardButtons(QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No)
    msg.setDefaultButton(QMessageBox.StandardButton.No)
    return msg.exec() == QMessageBox.StandardButton.Yes
