"""
Optimistic row updates with rollback

apply -> call -> commit, or restore the snapshot when the call fails:

    with OptimisticUpdate(rows, key_field="id", key=row_id, changes={"status": "CLOSED"}):
        api.update_status(row_id, "CLOSED")

Rows are replaced (``dataclasses.replace`` or a dict copy), never mutated in
place, so views holding the old row keep a consistent value.
"""

import dataclasses
from typing import Any, Dict, List, Optional

from studio_admin.core.pipeline import resolve_field
from studio_admin.utils.logging_config import get_logger

logger = get_logger(__name__)


def find_index(rows: List[Any], key_field: str, key: Any) -> int:
    for index, row in enumerate(rows):
        if resolve_field(row, key_field) == key:
            return index
    raise KeyError(f"No row with {key_field}={key!r}")


def with_changes(row: Any, changes: Dict[str, Any]) -> Any:
    if dataclasses.is_dataclass(row):
        return dataclasses.replace(row, **changes)
    updated = dict(row)
    updated.update(changes)
    return updated


class OptimisticUpdate:
    """
    Context manager that applies ``changes`` to one row of ``rows`` on enter
    and restores the previous row if the block raises.

    The key field can not be part of ``changes``.
    """

    def __init__(self, rows: List[Any], key_field: str, key: Any, changes: Dict[str, Any]):
        if key_field in changes:
            raise ValueError(f"'{key_field}' is the row key and can not change")
        self.rows = rows
        self.key_field = key_field
        self.key = key
        self.changes = changes
        self._snapshot: Optional[Any] = None
        self._index: Optional[int] = None

    def apply(self) -> Any:
        self._index = find_index(self.rows, self.key_field, self.key)
        self._snapshot = self.rows[self._index]
        updated = with_changes(self._snapshot, self.changes)
        self.rows[self._index] = updated
        return updated

    def __enter__(self) -> Any:
        return self.apply()

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is not None:
            self.rollback()
        return False

    def rollback(self) -> None:
        if self._index is None:
            return
        # The list may have been reloaded meanwhile; restore by key, not index
        try:
            index = find_index(self.rows, self.key_field, self.key)
        except KeyError:
            return
        self.rows[index] = self._snapshot
        logger.info(f"[Optimistic] rolled back {self.key_field}={self.key}")
