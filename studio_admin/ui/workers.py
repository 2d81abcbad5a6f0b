# -*- coding: utf-8 -*-
"""
백그라운드 API 호출 - QThread 워커와 QTimer 기반 스케줄러
"""

from typing import Any, Callable, List

from PyQt6.QtCore import QObject, QThread, QTimer, pyqtSignal

from studio_admin.managers.list_controller import Cancellable
from studio_admin.utils.logging_config import get_logger

logger = get_logger(__name__)


class ApiWorker(QThread):
    """백그라운드 API 호출"""

    finished = pyqtSignal(object)
    error = pyqtSignal(object)

    def __init__(self, task: Callable[[], Any], parent=None):
        super().__init__(parent)
        self.task = task

    def run(self):
        try:
            result = self.task()
        except Exception as e:
            # Delivered to the GUI thread, which decides how to show it
            logger.debug("[Admin UI] worker task raised %s", type(e).__name__)
            self.error.emit(e)
            return
        self.finished.emit(result)


class WorkerPool(QObject):
    """
    Keeps references to running workers until they finish.

    ``run`` has the runner signature expected by ``ListController``.
    """

    def __init__(self, parent=None):
        super().__init__(parent)
        self.workers: List[ApiWorker] = []

    def run(
        self,
        task: Callable[[], Any],
        on_success: Callable[[Any], None],
        on_error: Callable[[BaseException], None],
    ) -> ApiWorker:
        worker = ApiWorker(task)
        worker.finished.connect(on_success)
        worker.error.connect(on_error)
        worker.finished.connect(lambda _: self._cleanup_worker(worker))
        worker.error.connect(lambda _: self._cleanup_worker(worker))
        self.workers.append(worker)
        worker.start()
        return worker

    def _cleanup_worker(self, worker: ApiWorker):
        """작업 완료된 워커 정리"""
        if worker in self.workers:
            self.workers.remove(worker)
        worker.deleteLater()

    def wait_all(self, timeout_ms: int = 3000):
        for worker in list(self.workers):
            worker.wait(timeout_ms)


class _TimerHandle(Cancellable):
    def __init__(self, timer: QTimer):
        self.timer = timer

    def cancel(self) -> None:
        self.timer.stop()
        self.timer.deleteLater()


class QtScheduler:
    """Debounce scheduler backed by single-shot QTimers."""

    def __init__(self, parent: QObject):
        self.parent = parent

    def schedule(self, delay_ms: int, callback: Callable[[], None]) -> Cancellable:
        timer = QTimer(self.parent)
        timer.setSingleShot(True)
        handle = _TimerHandle(timer)

        def fire():
            timer.deleteLater()
            callback()

        timer.timeout.connect(fire)
        timer.start(delay_ms)
        return handle
