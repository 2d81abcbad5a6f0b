"""
목록 화면 상태 관리 (list page controller)

Owns the query state of one list page and drives the pipeline:

- search changes are debounced, filter/sort/page changes apply at once
- search/filter/sort changes reset the page to 1
- every fetch carries a generation number; a response from a superseded
  fetch, or arriving after ``close()``, is dropped
- failures end in ERROR or AUTH_REQUIRED, never in an empty list

The controller is Qt-free. Time and threads come in through two seams: a
``scheduler`` for the debounce timer and a ``runner`` that executes the fetch
(synchronously by default, on an ``ApiWorker`` thread in the UI).
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, List, Optional, Sequence

from studio_admin.config.constants import ListSettings
from studio_admin.core.pipeline import (
    SORT_ASC,
    SORT_DESC,
    ListQuery,
    ListViewConfig,
    PageResult,
    run_pipeline,
    total_pages,
)
from studio_admin.utils.error_handlers import AppException, SessionExpiredError, describe_error
from studio_admin.utils.logging_config import get_logger

logger = get_logger(__name__)


class ViewState(str, Enum):
    LOADING = 'loading'
    READY = 'ready'
    EMPTY = 'empty'
    ERROR = 'error'
    AUTH_REQUIRED = 'auth_required'


class Cancellable(ABC):
    @abstractmethod
    def cancel(self) -> None:
        ...


class _Done(Cancellable):
    def cancel(self) -> None:
        pass


class ImmediateScheduler:
    """Runs callbacks right away; used in tests and non-interactive code."""

    def schedule(self, delay_ms: int, callback: Callable[[], None]) -> Cancellable:
        callback()
        return _Done()


class ManualScheduler:
    """
    Holds callbacks until ``flush()``; lets tests observe debouncing.
    """

    class _Handle(Cancellable):
        def __init__(self, callback):
            self.callback = callback
            self.cancelled = False

        def cancel(self) -> None:
            self.cancelled = True

    def __init__(self):
        self.pending: List["ManualScheduler._Handle"] = []

    def schedule(self, delay_ms: int, callback: Callable[[], None]) -> Cancellable:
        handle = self._Handle(callback)
        self.pending.append(handle)
        return handle

    def flush(self) -> None:
        pending, self.pending = self.pending, []
        for handle in pending:
            if not handle.cancelled:
                handle.callback()


def run_inline(
    task: Callable[[], Any],
    on_success: Callable[[Any], None],
    on_error: Callable[[BaseException], None],
) -> None:
    """Default runner: execute the fetch on the calling thread."""
    try:
        result = task()
    except Exception as e:
        on_error(e)
        return
    on_success(result)


@dataclass
class ListSnapshot:
    """What the view renders"""

    state: ViewState
    result: PageResult
    query: ListQuery
    error_message: str = ""
    search_pending: bool = False

    @property
    def rows(self) -> List[Any]:
        return self.result.rows


class ListController:
    """
    Example:
        >>> controller = ListController(api.members.list, MEMBERS_CONFIG, on_update=render)
        >>> controller.reload()
        >>> controller.set_filter("status", "active")
        >>> controller.set_search("kim")       # applied after DEBOUNCE_MS
    """

    def __init__(
        self,
        fetch: Callable[[], Sequence[Any]],
        config: ListViewConfig,
        on_update: Optional[Callable[[ListSnapshot], None]] = None,
        scheduler: Any = None,
        runner: Callable = run_inline,
        debounce_ms: int = ListSettings.DEBOUNCE_MS,
        name: str = "list",
    ):
        self.fetch = fetch
        self.config = config
        self.on_update = on_update
        self.scheduler = scheduler or ImmediateScheduler()
        self.runner = runner
        self.debounce_ms = debounce_ms
        self.name = name

        self.query = ListQuery(page_size=config.page_size)
        self.items: List[Any] = []
        self.state = ViewState.LOADING
        self.error_message = ""
        self.result = PageResult(rows=[], total=0, page=1, page_size=config.page_size)

        self._generation = 0
        self._closed = False
        self._pending_search: Optional[Cancellable] = None
        self._pending_search_text: Optional[str] = None

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def closed(self) -> bool:
        return self._closed

    def snapshot(self) -> ListSnapshot:
        return ListSnapshot(
            state=self.state,
            result=self.result,
            query=ListQuery(
                search=self.query.search,
                filters=dict(self.query.filters),
                sort_key=self.query.sort_key,
                sort_direction=self.query.sort_direction,
                page=self.query.page,
                page_size=self.query.page_size,
            ),
            error_message=self.error_message,
            search_pending=self._pending_search is not None,
        )

    def _emit(self) -> None:
        if self.on_update is not None and not self._closed:
            self.on_update(self.snapshot())

    # =========================================================================
    # Fetching
    # =========================================================================

    def reload(self) -> int:
        """
        Start a fetch. Returns its generation number.
        """
        if self._closed:
            return self._generation
        self._generation += 1
        generation = self._generation
        self.state = ViewState.LOADING
        self.error_message = ""
        self._emit()
        logger.debug(f"[List:{self.name}] fetch #{generation}")
        self.runner(
            self.fetch,
            lambda items: self._on_loaded(generation, items),
            lambda error: self._on_failed(generation, error),
        )
        return generation

    def _is_current(self, generation: int) -> bool:
        return not self._closed and generation == self._generation

    def _on_loaded(self, generation: int, items: Sequence[Any]) -> None:
        if not self._is_current(generation):
            logger.debug(f"[List:{self.name}] dropped stale response #{generation}")
            return
        self.items = list(items)
        self.error_message = ""
        self.state = ViewState.READY
        self.recompute()

    def _on_failed(self, generation: int, error: BaseException) -> None:
        if not self._is_current(generation):
            logger.debug(f"[List:{self.name}] dropped stale error #{generation}")
            return
        self.items = []
        self.result = PageResult(rows=[], total=0, page=1, page_size=self.result.page_size)
        if isinstance(error, SessionExpiredError):
            self.state = ViewState.AUTH_REQUIRED
            self.error_message = describe_error(error)
        else:
            self.state = ViewState.ERROR
            self.error_message = describe_error(error, fallback="목록을 불러오지 못했습니다.")
            if isinstance(error, AppException):
                logger.warning(f"[List:{self.name}] fetch failed: {error}")
            else:
                logger.error(f"[List:{self.name}] fetch failed", exc_info=error)
        self._emit()

    # =========================================================================
    # Query changes
    # =========================================================================

    def set_search(self, text: str) -> None:
        """Debounced; the page resets to 1 once the search is applied."""
        if self._pending_search is not None:
            self._pending_search.cancel()
        self._pending_search_text = text
        handle = self.scheduler.schedule(self.debounce_ms, self._apply_search)
        # A synchronous scheduler has already applied the search
        self._pending_search = handle if self._pending_search_text is not None else None

    def _apply_search(self) -> None:
        self._pending_search = None
        text = self._pending_search_text or ""
        self._pending_search_text = None
        if self._closed:
            return
        self.query.search = text
        self.query.page = 1
        self.recompute()

    def set_filter(self, name: str, value: Any) -> None:
        self.query.filters[name] = value
        self.query.page = 1
        self.recompute()

    def clear_filters(self) -> None:
        self.query.filters.clear()
        self.query.page = 1
        self.recompute()

    def set_sort(self, key: Optional[str], direction: Optional[str] = None) -> None:
        """
        Sort by ``key``. Without ``direction``, choosing the current key again
        flips the direction.
        """
        if direction is None:
            current_key = self.query.sort_key or self.config.default_sort_key
            current_dir = self.query.sort_direction or (
                self.config.default_sort_direction if not self.query.sort_key else SORT_ASC
            )
            if key == current_key:
                direction = SORT_DESC if current_dir == SORT_ASC else SORT_ASC
            else:
                direction = SORT_ASC
        self.query.sort_key = key
        self.query.sort_direction = direction
        self.query.page = 1
        self.recompute()

    def set_page(self, page: int) -> None:
        last = max(total_pages(self.result.total, self.result.page_size), 1)
        self.query.page = min(max(int(page), 1), last)
        self.recompute()

    def recompute(self) -> None:
        """Re-run the pipeline over the fetched items."""
        if self._closed:
            return
        if self.state in (ViewState.LOADING, ViewState.ERROR, ViewState.AUTH_REQUIRED):
            self._emit()
            return
        self.result = run_pipeline(self.items, self.query, self.config)
        self.state = ViewState.EMPTY if self.result.total == 0 else ViewState.READY
        self._emit()

    def close(self) -> None:
        """Drop pending timers and ignore responses still in flight."""
        if self._pending_search is not None:
            self._pending_search.cancel()
            self._pending_search = None
        self._closed = True
        self._generation += 1
