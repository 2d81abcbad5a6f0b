# -*- coding: utf-8 -*-
"""
등록/수정 폼 다이얼로그

Fields are declared with ``FieldSpec``; the dialog collects raw values, runs the
matching ``FormValidator`` payload builder and only then submits. A
``ValidationError`` is shown inline and nothing is sent.
"""

import dataclasses
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence

from PyQt6.QtCore import Qt
from PyQt6.QtGui import QFont
from PyQt6.QtWidgets import (
    QCheckBox, QComboBox, QDialog, QFormLayout, QHBoxLayout, QLabel, QLineEdit,
    QPlainTextEdit, QPushButton, QScrollArea, QSpinBox, QVBoxLayout, QWidget,
)

from studio_admin.models.instructor import COUNTRIES, GRADES, LEVELS, SNS_PLATFORMS
from studio_admin.models.member import GENDERS, MEMBER_STATUSES
from studio_admin.models.offering import (
    CLASS_TYPES, SCHEDULE_STATUSES, WEEKDAYS, WORKSHOP_CATEGORIES, WORKSHOP_LEVELS,
    WORKSHOP_STATUSES,
)
from studio_admin.ui.theme import (
    BUTTON_STYLE, DARK, FONT_FAMILY, INPUT_STYLE, PRIMARY_BUTTON_STYLE,
)
from studio_admin.ui.widgets import ErrorBanner
from studio_admin.ui.workers import WorkerPool
from studio_admin.utils.error_handlers import describe_error
from studio_admin.utils.logging_config import get_logger
from studio_admin.utils.validators import FormValidator, ValidationError, toggle_day

logger = get_logger(__name__)

TEXT = "text"
MULTILINE = "multiline"
LINES = "lines"
TAGS = "tags"
INT = "int"
CHOICE = "choice"
BOOL = "bool"
DAYS = "days"
DATE = "date"


@dataclass(frozen=True)
class FieldSpec:
    name: str
    label: str
    kind: str = TEXT
    choices: Sequence[str] = ()
    default: Any = None
    readonly_on_edit: bool = False
    maximum: int = 100_000_000


@dataclass(frozen=True)
class FormSpec:
    title: str
    fields: Sequence[FieldSpec]
    build_payload: Callable[[Dict[str, Any]], Dict[str, Any]]


INSTRUCTOR_FORM = FormSpec(
    title="강사",
    build_payload=FormValidator.instructor_payload,
    fields=(
        FieldSpec("code", "강사 코드", readonly_on_edit=True),
        FieldSpec("name", "이름"),
        FieldSpec("tagline", "한줄 소개"),
        FieldSpec("country", "국가", CHOICE, COUNTRIES, "KR"),
        FieldSpec("grade", "등급", CHOICE, GRADES, "EARTH"),
        FieldSpec("level", "레벨", CHOICE, LEVELS, "LEVEL_1"),
        FieldSpec("career", "경력 (한 줄에 하나)", LINES),
        FieldSpec("sns", "SNS", CHOICE, SNS_PLATFORMS, "instagram"),
        FieldSpec("image_url", "프로필 이미지 URL"),
        FieldSpec("detail_image_url", "상세 이미지 URL"),
        FieldSpec("light_text", "흰색 글씨 사용", BOOL, default=False),
        FieldSpec("sort_order", "정렬 순서", INT, default=0, maximum=9999),
        FieldSpec("is_active", "노출", BOOL, default=True),
    ),
)

WORKSHOP_FORM = FormSpec(
    title="워크샵",
    build_payload=FormValidator.workshop_payload,
    fields=(
        FieldSpec("title", "워크샵명"),
        FieldSpec("instructor_name", "강사명"),
        FieldSpec("level", "난이도", CHOICE, WORKSHOP_LEVELS, "ALL"),
        FieldSpec("category", "카테고리", CHOICE, WORKSHOP_CATEGORIES, "OTHER"),
        FieldSpec("start_date", "시작일", DATE),
        FieldSpec("end_date", "종료일", DATE),
        FieldSpec("time_info", "시간"),
        FieldSpec("location_info", "장소"),
        FieldSpec("capacity", "정원", INT, default=0, maximum=10000),
        FieldSpec("price", "가격", INT, default=0),
        FieldSpec("description", "소개", MULTILINE),
        FieldSpec("notes", "유의사항 (한 줄에 하나)", LINES),
        FieldSpec("refund_policy", "환불 규정", MULTILINE),
        FieldSpec("status", "상태", CHOICE, WORKSHOP_STATUSES, "OPEN"),
        FieldSpec("is_active", "노출", BOOL, default=True),
        FieldSpec("image_url", "이미지 URL"),
    ),
)

SCHEDULE_FORM = FormSpec(
    title="스케줄",
    build_payload=FormValidator.schedule_payload,
    fields=(
        FieldSpec("class_type", "수업 유형", CHOICE, CLASS_TYPES, "REGULAR"),
        FieldSpec("class_name", "수업명"),
        FieldSpec("instructor_name", "강사명"),
        FieldSpec("start_date", "시작일", DATE),
        FieldSpec("end_date", "종료일", DATE),
        FieldSpec("time_info", "시간"),
        FieldSpec("days", "요일", DAYS),
        FieldSpec("capacity", "정원", INT, default=0, maximum=10000),
        FieldSpec("price", "가격", INT, default=0),
        FieldSpec("location_info", "장소"),
        FieldSpec("class_desc", "수업 설명", MULTILINE),
        FieldSpec("image_url", "이미지 URL"),
        FieldSpec("status", "상태", CHOICE, SCHEDULE_STATUSES, "OPEN"),
        FieldSpec("is_active", "노출", BOOL, default=True),
    ),
)

MEMBER_FORM = FormSpec(
    title="회원",
    build_payload=FormValidator.member_payload,
    fields=(
        FieldSpec("name", "이름"),
        FieldSpec("email", "이메일"),
        FieldSpec("phone", "연락처"),
        FieldSpec("birth_date", "생년월일", DATE),
        FieldSpec("gender", "성별", CHOICE, ("",) + tuple(GENDERS), ""),
        FieldSpec("interests", "관심사 (쉼표로 구분)", TAGS),
        FieldSpec("marketing_consent", "마케팅 수신 동의", BOOL, default=False),
        FieldSpec("status", "상태", CHOICE, MEMBER_STATUSES, "active"),
    ),
)


def initial_values(row: Any) -> Dict[str, Any]:
    """수정 폼 초기값 (dataclass or dict)"""
    if row is None:
        return {}
    if dataclasses.is_dataclass(row):
        return dataclasses.asdict(row)
    return dict(row)


class FormDialog(QDialog):
    """
    Example:
        >>> dialog = FormDialog(self, WORKSHOP_FORM, submit=api.workshops.create)
        >>> if dialog.exec():
        ...     controller.reload()
    """

    def __init__(self, parent, spec: FormSpec, submit: Callable[[Dict[str, Any]], Any],
                 row: Any = None):
        super().__init__(parent)
        self.spec = spec
        self.submit = submit
        self.editing = row is not None
        self.values = initial_values(row)
        self.payload: Optional[Dict[str, Any]] = None
        self.result_data: Any = None
        self.widgets: Dict[str, Any] = {}
        self.days: List[str] = list(self.values.get("days") or [])
        self.pool = WorkerPool(self)

        mode = "수정" if self.editing else "등록"
        self.setWindowTitle(f"{spec.title} {mode}")
        self.setMinimumSize(520, 640)
        self.setStyleSheet(f"QDialog {{ background-color: {DARK['bg']}; }}"
                           f"QLabel {{ color: {DARK['text']}; }}" + INPUT_STYLE)
        self._build_ui(mode)

    def _build_ui(self, mode: str):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(20, 20, 20, 20)
        layout.setSpacing(12)

        title = QLabel(f"{self.spec.title} {mode}")
        title.setFont(QFont(FONT_FAMILY, 15, QFont.Weight.Bold))
        layout.addWidget(title)

        self.banner = ErrorBanner()
        layout.addWidget(self.banner)

        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        scroll.setStyleSheet("QScrollArea { border: none; background: transparent; }")
        body = QWidget()
        form = QFormLayout(body)
        form.setLabelAlignment(Qt.AlignmentFlag.AlignRight)
        for spec in self.spec.fields:
            widget = self._create_field(spec)
            form.addRow(spec.label, widget)
        scroll.setWidget(body)
        layout.addWidget(scroll, 1)

        buttons = QHBoxLayout()
        buttons.addStretch()
        cancel_btn = QPushButton("취소")
        cancel_btn.setStyleSheet(BUTTON_STYLE)
        cancel_btn.clicked.connect(self.reject)
        buttons.addWidget(cancel_btn)
        self.save_btn = QPushButton("저장")
        self.save_btn.setStyleSheet(PRIMARY_BUTTON_STYLE)
        self.save_btn.clicked.connect(self._on_save)
        buttons.addWidget(self.save_btn)
        layout.addLayout(buttons)

    # =========================================================================
    # Field widgets
    # =========================================================================

    def _create_field(self, spec: FieldSpec) -> QWidget:
        value = self.values.get(spec.name, spec.default)

        if spec.kind == CHOICE:
            widget = QComboBox()
            widget.addItems([str(c) for c in spec.choices])
            if value is not None and str(value) in spec.choices:
                widget.setCurrentText(str(value))
        elif spec.kind == BOOL:
            widget = QCheckBox()
            widget.setChecked(bool(value))
        elif spec.kind == INT:
            widget = QSpinBox()
            widget.setRange(0, spec.maximum)
            widget.setValue(int(value or 0))
        elif spec.kind in (MULTILINE, LINES):
            widget = QPlainTextEdit()
            widget.setFixedHeight(90)
            if isinstance(value, (list, tuple)):
                value = "\n".join(value)
            widget.setPlainText(value or "")
        elif spec.kind == DAYS:
            widget = QWidget()
            row = QHBoxLayout(widget)
            row.setContentsMargins(0, 0, 0, 0)
            for day in WEEKDAYS:
                box = QCheckBox(day)
                box.setChecked(day in self.days)
                box.toggled.connect(lambda _checked, d=day: self._on_day_toggled(d))
                row.addWidget(box)
        else:
            widget = QLineEdit()
            if isinstance(value, (list, tuple)):
                value = ", ".join(value)
            widget.setText("" if value is None else str(value))
            if spec.kind == DATE:
                widget.setPlaceholderText("YYYY-MM-DD")
            if spec.readonly_on_edit and self.editing:
                widget.setReadOnly(True)

        self.widgets[spec.name] = widget
        return widget

    def _on_day_toggled(self, day: str):
        self.days = toggle_day(self.days, day)

    def collect_values(self) -> Dict[str, Any]:
        values: Dict[str, Any] = {}
        for spec in self.spec.fields:
            widget = self.widgets[spec.name]
            if spec.kind == CHOICE:
                values[spec.name] = widget.currentText()
            elif spec.kind == BOOL:
                values[spec.name] = widget.isChecked()
            elif spec.kind == INT:
                values[spec.name] = widget.value()
            elif spec.kind == LINES:
                values[spec.name] = widget.toPlainText().splitlines()
            elif spec.kind == MULTILINE:
                values[spec.name] = widget.toPlainText()
            elif spec.kind == DAYS:
                values[spec.name] = list(self.days)
            else:
                values[spec.name] = widget.text()
        return values

    # =========================================================================
    # Submit
    # =========================================================================

    def _on_save(self):
        try:
            payload = self.spec.build_payload(self.collect_values())
        except ValidationError as e:
            self.banner.show_error(e.message)
            return

        self.banner.clear_error()
        self.payload = payload
        self.save_btn.setEnabled(False)
        self.save_btn.setText("저장 중...")
        self.pool.run(lambda: self.submit(payload), self._on_saved, self._on_failed)

    def _on_saved(self, result: Any):
        self.result_data = result
        logger.info(f"[Form] {self.spec.title} saved")
        self.accept()

    def _on_failed(self, error: BaseException):
        self.save_btn.setEnabled(True)
        self.save_btn.setText("저장")
        self.banner.show_error(describe_error(error, fallback="저장하지 못했습니다."))
