# -*- coding: utf-8 -*-
"""
공용 목록 페이지 - 검색/필터/정렬/페이지네이션 + 행 액션

Every list screen (members, instructors, workshops, ...) is one ``ListPage``
configured by a ``PageSpec``. Query state lives in ``ListController``; status
changes go through ``StatusUpdater``.
"""

import dataclasses
from typing import Any, List, Optional, Tuple

from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtGui import QFont
from PyQt6.QtWidgets import (
    QComboBox, QDialog, QFormLayout, QHBoxLayout, QLabel, QLineEdit, QPushButton,
    QTableWidget, QVBoxLayout, QWidget,
)

from studio_admin.caller.resources import AdminApi
from studio_admin.core.pipeline import SORT_ASC, resolve_field, total_pages
from studio_admin.managers.list_controller import ListController, ListSnapshot, ViewState
from studio_admin.managers.status_manager import PendingStatusChange, StatusUpdater
from studio_admin.ui import page_specs
from studio_admin.ui.form_dialog import FormDialog
from studio_admin.ui.page_specs import PageSpec
from studio_admin.ui.theme import (
    BUTTON_STYLE, DARK, FONT_FAMILY, INPUT_STYLE, PRIMARY_BUTTON_STYLE, style_table,
    styled_question_box,
)
from studio_admin.ui.widgets import (
    ActionMenuButton, ErrorBanner, PaginationBar, StateLabel, badge_cell, set_cell,
)
from studio_admin.ui.workers import QtScheduler, WorkerPool
from studio_admin.utils.error_handlers import AppException, SessionExpiredError, describe_error
from studio_admin.utils.formatting import format_date, format_price, status_badge
from studio_admin.utils.logging_config import get_logger

logger = get_logger(__name__)

ALL_OPTION = "전체"


class DetailDialog(QDialog):
    """행 상세 보기 (문의 내용 등)"""

    def __init__(self, parent, title: str, row: Any):
        super().__init__(parent)
        self.setWindowTitle(title)
        self.setMinimumWidth(480)
        self.setStyleSheet(f"QDialog {{ background-color: {DARK['card']}; }}"
                           f"QLabel {{ color: {DARK['text']}; font-size: 12px; }}")

        layout = QFormLayout(self)
        values = dataclasses.asdict(row) if dataclasses.is_dataclass(row) else dict(row)
        for name, value in values.items():
            if name == "status":
                value = status_badge(value)[0]
            elif name.endswith("_at") or name.endswith("_date"):
                value = format_date(value)
            label = QLabel("-" if value in (None, "") else str(value))
            label.setWordWrap(True)
            label.setTextInteractionFlags(Qt.TextInteractionFlag.TextSelectableByMouse)
            layout.addRow(f"{name}:", label)

        close_btn = QPushButton("닫기")
        close_btn.setStyleSheet(BUTTON_STYLE)
        close_btn.clicked.connect(self.accept)
        layout.addRow(close_btn)


class ListPage(QWidget):
    """목록 화면"""

    authRequired = pyqtSignal()

    def __init__(self, spec: PageSpec, api: AdminApi, updater: StatusUpdater, parent=None):
        super().__init__(parent)
        self.spec = spec
        self.api = api
        self.updater = updater
        self.pool = WorkerPool(self)
        self.filter_combos: List[Tuple[str, QComboBox]] = []

        self.controller = ListController(
            fetch=spec.fetch(api),
            config=spec.config,
            on_update=self.render,
            scheduler=QtScheduler(self),
            runner=self.pool.run,
            name=spec.key,
        )
        self._build_ui()

    # =========================================================================
    # Layout
    # =========================================================================

    def _build_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(20, 16, 20, 16)
        layout.setSpacing(12)

        title = QLabel(self.spec.title)
        title.setFont(QFont(FONT_FAMILY, 16, QFont.Weight.Bold))
        title.setStyleSheet(f"color: {DARK['text']};")
        layout.addWidget(title)

        toolbar = QHBoxLayout()
        toolbar.setSpacing(8)
        self.search_input = QLineEdit()
        self.search_input.setPlaceholderText(self.spec.search_placeholder)
        self.search_input.setFixedWidth(280)
        self.search_input.setStyleSheet(INPUT_STYLE)
        self.search_input.textChanged.connect(self.controller.set_search)
        toolbar.addWidget(self.search_input)

        for filter_spec in self.spec.filters:
            combo = QComboBox()
            combo.setStyleSheet(INPUT_STYLE)
            combo.addItem(f"{filter_spec.label}: {ALL_OPTION}", None)
            for value, label in filter_spec.options:
                combo.addItem(label, value)
            combo.currentIndexChanged.connect(
                lambda _idx, f=filter_spec.field, c=combo: self.controller.set_filter(f, c.currentData())
            )
            toolbar.addWidget(combo)
            self.filter_combos.append((filter_spec.field, combo))

        reset_btn = QPushButton("초기화")
        reset_btn.setStyleSheet(BUTTON_STYLE)
        reset_btn.clicked.connect(self.reset_query)
        toolbar.addWidget(reset_btn)
        toolbar.addStretch()

        refresh_btn = QPushButton("새로고침")
        refresh_btn.setStyleSheet(BUTTON_STYLE)
        refresh_btn.clicked.connect(self.refresh)
        toolbar.addWidget(refresh_btn)

        if self.spec.form is not None and self.spec.create is not None:
            create_btn = QPushButton(f"+ {self.spec.form.title} 등록")
            create_btn.setStyleSheet(PRIMARY_BUTTON_STYLE)
            create_btn.clicked.connect(self.open_create)
            toolbar.addWidget(create_btn)
        layout.addLayout(toolbar)

        self.banner = ErrorBanner()
        layout.addWidget(self.banner)

        self.state_label = StateLabel(self.spec.empty_text)
        layout.addWidget(self.state_label)

        columns = list(self.spec.columns)
        self.table = QTableWidget(0, len(columns) + 1)
        self.table.setHorizontalHeaderLabels([c.label for c in columns] + ["관리"])
        style_table(self.table, [c.width for c in columns] + [70])
        self.table.horizontalHeader().setStretchLastSection(True)
        self.table.horizontalHeader().sectionClicked.connect(self._on_header_clicked)
        self.table.cellDoubleClicked.connect(self._on_row_double_clicked)
        layout.addWidget(self.table, 1)

        self.pagination = PaginationBar()
        self.pagination.pageRequested.connect(self.controller.set_page)
        layout.addWidget(self.pagination)

    # =========================================================================
    # Query
    # =========================================================================

    def refresh(self):
        self.controller.reload()

    def reset_query(self):
        for _field, combo in self.filter_combos:
            combo.blockSignals(True)
            combo.setCurrentIndex(0)
            combo.blockSignals(False)
        self.search_input.blockSignals(True)
        self.search_input.clear()
        self.search_input.blockSignals(False)
        query = self.controller.query
        query.search = ""
        query.sort_key = None
        query.sort_direction = None
        self.controller.clear_filters()

    def _on_header_clicked(self, index: int):
        if index >= len(self.spec.columns):
            return
        column = self.spec.columns[index]
        if column.sortable:
            self.controller.set_sort(column.field)

    def _on_row_double_clicked(self, row_index: int, _col: int):
        rows = self.controller.result.rows
        if row_index >= len(rows):
            return
        row = rows[row_index]
        if self.spec.detail:
            self.open_detail(row)
        elif self.spec.form is not None and self.spec.update is not None:
            self.open_edit(row)

    # =========================================================================
    # Rendering
    # =========================================================================

    def render(self, snapshot: ListSnapshot):
        if snapshot.state == ViewState.ERROR:
            self.banner.show_error(snapshot.error_message)
        elif snapshot.state != ViewState.AUTH_REQUIRED:
            if self.banner.text() and snapshot.state == ViewState.LOADING:
                self.banner.clear_error()

        filtered = bool(snapshot.query.search.strip()) or any(
            v not in (None, "") for v in snapshot.query.filters.values()
        )
        self.state_label.show_state(snapshot.state, filtered)
        if snapshot.state == ViewState.AUTH_REQUIRED:
            self.authRequired.emit()

        self._render_rows(snapshot.rows)
        self._render_sort_indicator(snapshot)

        result = snapshot.result
        self.pagination.update_pages(
            result.page, total_pages(result.total, result.page_size), result.total
        )

    def _render_sort_indicator(self, snapshot: ListSnapshot):
        header = self.table.horizontalHeader()
        key = snapshot.query.sort_key or self.spec.config.default_sort_key
        direction = snapshot.query.sort_direction or self.spec.config.default_sort_direction
        fields = [c.field for c in self.spec.columns]
        if key in fields:
            order = (Qt.SortOrder.AscendingOrder if direction == SORT_ASC
                     else Qt.SortOrder.DescendingOrder)
            header.setSortIndicatorShown(True)
            header.setSortIndicator(fields.index(key), order)
        else:
            header.setSortIndicatorShown(False)

    def _render_rows(self, rows: List[Any]):
        self.table.setRowCount(len(rows))
        action_col = len(self.spec.columns)
        for r, row in enumerate(rows):
            for c, column in enumerate(self.spec.columns):
                value = resolve_field(row, column.field)
                if column.kind == page_specs.BADGE:
                    self.table.setCellWidget(r, c, badge_cell(value))
                    continue
                if column.kind == page_specs.DATE:
                    text = format_date(value)
                elif column.kind == page_specs.PRICE:
                    text = format_price(value)
                elif column.kind == page_specs.COUNT:
                    text = f"{value or 0} / {resolve_field(row, 'capacity') or 0}"
                elif column.formatter is not None:
                    text = column.formatter(value)
                else:
                    text = "-" if value in (None, "") else value
                set_cell(self.table, r, c, text)
            self.table.setCellWidget(r, action_col, ActionMenuButton(self._row_actions(row)))

    def _row_actions(self, row: Any):
        actions = []
        key = resolve_field(row, self.spec.config.key_field)
        if self.spec.status_entity:
            for status in self.updater.offered(self.spec.status_entity, row):
                label = status_badge(status)[0]
                actions.append((f"{label}(으)로 변경",
                                lambda k=key, s=status: self.change_status(k, s)))
        if self.spec.detail:
            actions.append(("상세 보기", lambda r=row: self.open_detail(r)))
        if self.spec.form is not None and self.spec.update is not None:
            actions.append(("수정", lambda r=row: self.open_edit(r)))
        if self.spec.delete is not None:
            actions.append(("삭제", lambda k=key: self.confirm_delete(k)))
        return actions

    # =========================================================================
    # Row actions
    # =========================================================================

    def change_status(self, key: Any, status: Any):
        self.banner.clear_error()
        try:
            change = self.updater.begin(self.spec.status_entity, self.controller.items, key, status)
        except AppException as e:
            self.banner.show_error(describe_error(e))
            return
        except KeyError:
            logger.warning(f"[Admin UI] {self.spec.key} row {key} is no longer listed")
            return
        # New status and hidden menu show while the call is running
        self.controller.recompute()
        self.pool.run(
            lambda: self.updater.send(change),
            lambda _response: self._on_status_sent(change),
            lambda error: self._on_status_sent(change, error),
        )

    def _on_status_sent(self, change: PendingStatusChange, error: Optional[BaseException] = None):
        outcome = self.updater.finish(change, error, rows=self.controller.items)
        if isinstance(error, SessionExpiredError):
            self.authRequired.emit()
        if not outcome.success:
            self.banner.show_error(outcome.message)
        self.controller.recompute()

    def _on_action_failed(self, error: BaseException):
        if isinstance(error, SessionExpiredError):
            self.authRequired.emit()
        self.banner.show_error(describe_error(error, fallback="요청을 처리하지 못했습니다."))
        self.controller.recompute()

    def open_create(self):
        create = self.spec.create(self.api)
        dialog = FormDialog(self, self.spec.form, submit=create)
        if dialog.exec():
            self.refresh()

    def open_edit(self, row: Any):
        update = self.spec.update(self.api)
        key = resolve_field(row, self.spec.config.key_field)
        dialog = FormDialog(self, self.spec.form, submit=lambda payload: update(key, payload), row=row)
        if dialog.exec():
            self.refresh()

    def open_detail(self, row: Any):
        DetailDialog(self, f"{self.spec.title} 상세", row).exec()

    def confirm_delete(self, key: Any):
        if not styled_question_box(self, "삭제 확인", "선택한 항목을 삭제하시겠습니까?"):
            return
        delete = self.spec.delete(self.api)
        logger.info(f"[Admin UI] delete {self.spec.key} {key}")
        self.pool.run(lambda: delete(key), lambda _result: self.refresh(), self._on_action_failed)

    def close_page(self):
        """페이지 종료 - 진행 중 응답은 무시"""
        self.controller.close()
        self.pool.wait_all()
