"""
신청 승인 워크플로우 (request approval inbox)

pending -> approved | rejected. Approved and rejected are terminal.

Each request kind has one ``RequestKindHandler`` (endpoints, search fields,
created-entity key) and ``RequestInbox`` dispatches through the registry, so
call sites never branch on the kind.

Thread safety:
    Approve/reject calls run on worker threads. The in-flight set and the
    cached rows are guarded by one ``threading.Lock``; the network call itself
    runs outside the lock so different rows can be decided concurrently.
"""

import threading
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Set, Tuple

from studio_admin.caller.approvals import RequestsApi
from studio_admin.core.optimistic import OptimisticUpdate
from studio_admin.core.pipeline import SORT_DESC, apply_filters, apply_search, sort_items
from studio_admin.models.request import Request, RequestKind, RequestStatus
from studio_admin.utils.error_handlers import (
    ActionInFlightError,
    AppException,
    TransitionError,
    describe_error,
)
from studio_admin.utils.logging_config import get_logger

logger = get_logger(__name__)

ACTION_APPROVE = "approve"
ACTION_REJECT = "reject"

_ACTION_TARGET = {
    ACTION_APPROVE: RequestStatus.APPROVED,
    ACTION_REJECT: RequestStatus.REJECTED,
}


@dataclass(frozen=True)
class RequestKindHandler:
    """
    Per-kind behaviour of the inbox.

    Attributes:
        kind: request kind served
        label: tab label
        search_fields: fields matched by the inbox search box
        created_entity_key: key of the entity the backend creates on approval
            (``workshop``/``schedule``), ``None`` when nothing is created
    """

    kind: RequestKind
    label: str
    search_fields: Tuple[str, ...]
    created_entity_key: Optional[str] = None

    def list(self, api: RequestsApi) -> List[Request]:
        return api.list(self.kind)

    def approve(self, api: RequestsApi, request_id: str) -> Dict[str, Any]:
        return api.approve(self.kind, request_id)

    def reject(self, api: RequestsApi, request_id: str) -> Dict[str, Any]:
        return api.reject(self.kind, request_id)


REQUEST_HANDLERS: Dict[RequestKind, RequestKindHandler] = {
    RequestKind.TEACHER: RequestKindHandler(
        kind=RequestKind.TEACHER,
        label="강사 신청",
        search_fields=("name", "user.email", "user.name"),
    ),
    RequestKind.WORKSHOP: RequestKindHandler(
        kind=RequestKind.WORKSHOP,
        label="워크샵 신청",
        search_fields=("title", "instructor_name", "user.email"),
        created_entity_key="workshop",
    ),
    RequestKind.SCHEDULE: RequestKindHandler(
        kind=RequestKind.SCHEDULE,
        label="스케줄 신청",
        search_fields=("class_name", "instructor_name", "user.email"),
        created_entity_key="schedule",
    ),
}


@dataclass
class ActionOutcome:
    """Result of one approve/reject call, handed back to the page."""

    kind: RequestKind
    request_id: str
    action: str
    success: bool
    request: Optional[Request] = None
    created_entity: Optional[Dict[str, Any]] = None
    error: Optional[AppException] = None

    @property
    def message(self) -> str:
        if self.error is not None:
            return describe_error(self.error)
        return ""


def available_actions(request: Request) -> Tuple[str, ...]:
    """Actions offered for a row: both for pending, none otherwise."""
    if request.status == RequestStatus.PENDING:
        return (ACTION_APPROVE, ACTION_REJECT)
    return ()


class RequestInbox:
    """
    Admin inbox of user-submitted requests.

    Example:
        >>> inbox = RequestInbox(RequestsApi(client))
        >>> rows = inbox.list_requests(RequestKind.WORKSHOP, status_filter="pending")
        >>> outcome = inbox.approve(RequestKind.WORKSHOP, rows[0].id)
        >>> outcome.success, outcome.created_entity
    """

    def __init__(
        self,
        api: RequestsApi,
        handlers: Optional[Dict[RequestKind, RequestKindHandler]] = None,
        on_change: Optional[Callable[[RequestKind], None]] = None,
    ):
        self.api = api
        self.handlers = handlers or REQUEST_HANDLERS
        self.on_change = on_change
        self.action_error: Optional[str] = None

        self._lock = threading.Lock()
        self._rows: Dict[RequestKind, List[Request]] = {}
        self._in_flight: Set[Tuple[RequestKind, str]] = set()
        # Monotonic counter shared by load tokens and decision stamps
        self._epoch = 0
        self._latest_load: Dict[RequestKind, int] = {}
        self._decided_at: Dict[Tuple[RequestKind, str], int] = {}

    def handler(self, kind: RequestKind) -> RequestKindHandler:
        try:
            return self.handlers[RequestKind(kind)]
        except (KeyError, ValueError):
            raise ValueError(f"Unsupported request kind: {kind!r}")

    # =========================================================================
    # Listing
    # =========================================================================

    def start_load(self, kind: RequestKind) -> int:
        """
        Reserve a load token for ``kind``. Only the newest token's rows are
        stored; responses of older loads are dropped.
        """
        kind = self.handler(kind).kind
        with self._lock:
            self._epoch += 1
            token = self._epoch
            self._latest_load[kind] = token
        return token

    def is_current_load(self, kind: RequestKind, token: int) -> bool:
        with self._lock:
            return self._latest_load.get(RequestKind(kind)) == token

    def list_requests(
        self,
        kind: RequestKind,
        status_filter: Optional[str] = None,
        search_text: str = "",
        load_token: Optional[int] = None,
    ) -> List[Request]:
        """
        Fetch all requests of ``kind`` and narrow them locally.

        Newest first. The fetched rows are cached for approve/reject unless a
        newer load of the same kind was started meanwhile. Rows with a decision
        in flight, or decided after this load started, keep their local status.
        """
        handler = self.handler(kind)
        if load_token is None:
            load_token = self.start_load(handler.kind)
        rows = handler.list(self.api)
        with self._lock:
            if self._latest_load.get(handler.kind) != load_token:
                logger.debug(f"[Inbox] dropped superseded {handler.kind.value} load #{load_token}")
            else:
                self._rows[handler.kind] = self._merge_loaded(handler.kind, rows, load_token)
                logger.info(f"[Inbox] loaded {len(rows)} {handler.kind.value} requests")
        return self.filter_requests(kind, status_filter, search_text)

    def _merge_loaded(self, kind: RequestKind, fetched: List[Request], started: int) -> List[Request]:
        # Caller holds the lock
        local = {r.id: r for r in self._rows.get(kind, [])}
        merged = []
        for row in fetched:
            slot = (kind, row.id)
            newer_locally = slot in self._in_flight or self._decided_at.get(slot, 0) > started
            merged.append(local[row.id] if newer_locally and row.id in local else row)
        # Decisions made before this load started are reflected by the backend
        for slot in [s for s, at in self._decided_at.items() if s[0] == kind and at < started]:
            del self._decided_at[slot]
        return merged

    def filter_requests(
        self,
        kind: RequestKind,
        status_filter: Optional[str] = None,
        search_text: str = "",
    ) -> List[Request]:
        """Narrow the cached rows of ``kind`` without a network call."""
        handler = self.handler(kind)
        rows = self.requests(kind)
        rows = apply_filters(rows, {"status": status_filter})
        rows = apply_search(rows, search_text, handler.search_fields)
        return sort_items(rows, "created_at", SORT_DESC)

    def requests(self, kind: RequestKind) -> List[Request]:
        with self._lock:
            return list(self._rows.get(RequestKind(kind), []))

    def pending_count(self, kind: RequestKind) -> int:
        return sum(1 for r in self.requests(kind) if r.status == RequestStatus.PENDING)

    def available_actions(self, request: Request) -> Tuple[str, ...]:
        if self.is_in_flight(request.kind, request.id):
            return ()
        return available_actions(request)

    def is_in_flight(self, kind: RequestKind, request_id: str) -> bool:
        with self._lock:
            return (RequestKind(kind), request_id) in self._in_flight

    # =========================================================================
    # Decisions
    # =========================================================================

    def approve(self, kind: RequestKind, request_id: str) -> ActionOutcome:
        return self._decide(kind, request_id, ACTION_APPROVE)

    def reject(self, kind: RequestKind, request_id: str) -> ActionOutcome:
        return self._decide(kind, request_id, ACTION_REJECT)

    def _decide(self, kind: RequestKind, request_id: str, action: str) -> ActionOutcome:
        """
        Run one approve/reject.

        Raises:
            KeyError: the request is not in the loaded list
            TransitionError: the request is not pending (no call is made)
            ActionInFlightError: an action for this request is still running

        Backend failures do not raise: the optimistic status is rolled back,
        ``action_error`` is set and the failed outcome is returned.
        """
        handler = self.handler(kind)
        kind = handler.kind
        target = _ACTION_TARGET[action]
        slot = (kind, request_id)

        with self._lock:
            rows = self._rows.get(kind, [])
            current = next((r for r in rows if r.id == request_id), None)
            if current is None:
                raise KeyError(f"{kind.value} request '{request_id}' is not loaded")
            # The row already carries the optimistic status while in flight
            if slot in self._in_flight:
                raise ActionInFlightError(request_id)
            if current.status != RequestStatus.PENDING:
                raise TransitionError(f"{kind.value} request", current.status.value, target.value)
            self._in_flight.add(slot)
            self.action_error = None
            update = OptimisticUpdate(rows, "id", request_id, {"status": target})
            updated = update.apply()

        self._notify(kind)
        call = handler.approve if action == ACTION_APPROVE else handler.reject
        logger.info(f"[Inbox] {action} {kind.value} request {request_id}")

        try:
            response = call(self.api, request_id)
        except AppException as e:
            with self._lock:
                self._rollback(kind, update)
                self._in_flight.discard(slot)
                self.action_error = describe_error(e)
            logger.warning(f"[Inbox] {action} {kind.value} request {request_id} failed: {e}")
            self._notify(kind)
            return ActionOutcome(kind, request_id, action, success=False, request=current, error=e)
        except Exception:
            with self._lock:
                self._rollback(kind, update)
                self._in_flight.discard(slot)
            self._notify(kind)
            raise

        with self._lock:
            self._in_flight.discard(slot)
            self._epoch += 1
            self._decided_at[slot] = self._epoch

        created = None
        if handler.created_entity_key and isinstance(response, dict):
            created = response.get(handler.created_entity_key)
        self._notify(kind)
        return ActionOutcome(
            kind, request_id, action, success=True, request=updated, created_entity=created
        )

    def _rollback(self, kind: RequestKind, update: OptimisticUpdate) -> None:
        # A reload may have replaced the list while the call was running
        update.rows = self._rows.get(kind, update.rows)
        update.rollback()

    def _notify(self, kind: RequestKind) -> None:
        if self.on_change is not None:
            self.on_change(kind)
