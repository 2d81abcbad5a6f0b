"""
상태 변경 관리 (status transitions on list rows)

``StatusUpdater`` checks the transition table, applies the new status to the
local row, sends one partial update for that field only, and restores the
previous row when the call fails.
"""

import threading
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Set, Tuple

from studio_admin.caller.resources import AdminApi
from studio_admin.core import transitions
from studio_admin.core.optimistic import OptimisticUpdate, find_index
from studio_admin.core.pipeline import resolve_field
from studio_admin.utils.error_handlers import ActionInFlightError, AppException, describe_error
from studio_admin.utils.logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class StatusTarget:
    """Where an entity keeps its status and how the change is sent"""

    field: str
    key_field: str
    send: Callable[[AdminApi, Any, Any], Any]


STATUS_TARGETS: Dict[str, StatusTarget] = {
    transitions.MEMBER: StatusTarget(
        "status", "id", lambda api, key, value: api.members.update_status(key, value)
    ),
    transitions.WORKSHOP: StatusTarget(
        "status", "id", lambda api, key, value: api.workshops.update_status(key, value)
    ),
    transitions.SCHEDULE: StatusTarget(
        "status", "id", lambda api, key, value: api.schedules.update_status(key, value)
    ),
    transitions.INSTRUCTOR_VISIBILITY: StatusTarget(
        "is_active", "code", lambda api, key, value: api.instructors.set_active(key, value)
    ),
    transitions.CONTACT: StatusTarget(
        "status", "id", lambda api, key, value: api.contacts.update_status(key, value)
    ),
    transitions.STUDIO: StatusTarget(
        "status", "id", lambda api, key, value: api.studios.update_status(key, value)
    ),
}


@dataclass
class StatusOutcome:
    entity: str
    key: Any
    success: bool
    row: Any = None
    error: Optional[BaseException] = None

    @property
    def message(self) -> str:
        return describe_error(self.error) if self.error is not None else ""


@dataclass
class PendingStatusChange:
    """A status change applied locally and not yet confirmed by the backend"""

    entity: str
    key: Any
    new_status: Any
    previous: Any
    row: Any
    update: OptimisticUpdate


class StatusUpdater:
    """
    Rows are only touched in ``begin`` and ``finish``; ``send`` is the network
    call alone, so a page can run it on a worker thread and keep every row
    mutation on the GUI thread:

        change = updater.begin("workshop", controller.items, "w1", "CLOSED")
        controller.recompute()                      # shows CLOSED, hides the menu
        pool.run(lambda: updater.send(change), ...)
        outcome = updater.finish(change, error)     # back on the GUI thread

    ``apply`` runs the three steps in a row.
    """

    def __init__(self, api: AdminApi):
        self.api = api
        self.last_error: Optional[str] = None
        self._lock = threading.Lock()
        self._in_flight: Set[Tuple[str, Any]] = set()

    def offered(self, entity: str, row: Any) -> Tuple[Any, ...]:
        """Statuses the action menu should offer for ``row``."""
        target = STATUS_TARGETS[entity]
        if self.is_in_flight(entity, resolve_field(row, target.key_field)):
            return ()
        return transitions.allowed_transitions(entity, resolve_field(row, target.field))

    def is_in_flight(self, entity: str, key: Any) -> bool:
        with self._lock:
            return (entity, key) in self._in_flight

    def begin(self, entity: str, rows: List[Any], key: Any, new_status: Any) -> PendingStatusChange:
        """
        Check the transition and apply it to the local row.

        Raises:
            TransitionError: ``new_status`` is not offered
            ActionInFlightError: a change for this row is still running
            KeyError: no row with this key
        """
        target = STATUS_TARGETS[entity]
        slot = (entity, key)

        with self._lock:
            current = rows[find_index(rows, target.key_field, key)]
            if slot in self._in_flight:
                raise ActionInFlightError(key)
            transitions.check_transition(entity, resolve_field(current, target.field), new_status)
            self._in_flight.add(slot)
            self.last_error = None
            update = OptimisticUpdate(rows, target.key_field, key, {target.field: new_status})
            updated = update.apply()

        logger.info(f"[Status] {entity} {key}: -> {new_status}")
        return PendingStatusChange(entity, key, new_status, current, updated, update)

    def send(self, change: PendingStatusChange) -> Any:
        return STATUS_TARGETS[change.entity].send(self.api, change.key, change.new_status)

    def finish(
        self,
        change: PendingStatusChange,
        error: Optional[BaseException] = None,
        rows: Optional[List[Any]] = None,
    ) -> StatusOutcome:
        """
        Commit, or restore the previous row when ``error`` is given.

        ``rows`` is the current list when it was reloaded after ``begin``.
        """
        slot = (change.entity, change.key)
        with self._lock:
            self._in_flight.discard(slot)
            if error is None:
                return StatusOutcome(change.entity, change.key, success=True, row=change.row)
            if rows is not None:
                change.update.rows = rows
            change.update.rollback()
            self.last_error = describe_error(error)

        logger.warning(f"[Status] {change.entity} {change.key} update failed, rolled back: {error}")
        return StatusOutcome(change.entity, change.key, success=False, row=change.previous, error=error)

    def apply(self, entity: str, rows: List[Any], key: Any, new_status: Any) -> StatusOutcome:
        """
        ``begin``, ``send`` and ``finish`` on the calling thread.

        Backend errors come back as a failed outcome; anything else is rolled
        back and re-raised.
        """
        change = self.begin(entity, rows, key, new_status)
        try:
            self.send(change)
        except AppException as e:
            return self.finish(change, e)
        except Exception as e:
            self.finish(change, e)
            raise
        return self.finish(change)
