"""
List-view pipeline (search -> filter -> sort -> paginate)

Every admin list page runs the same pure transformation over its fetched
collection, parameterised by a ``ListViewConfig``:

    rows = fetch()                                # wide fetch, see FETCH_LIMIT
    result = run_pipeline(rows, query, config)    # PageResult(rows, total, ...)

The pipeline never mutates the items or their key field; it only selects and
orders them.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from functools import cmp_to_key
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from studio_admin.config.constants import ListSettings

SORT_ASC = "asc"
SORT_DESC = "desc"
SORT_DIRECTIONS = (SORT_ASC, SORT_DESC)

FilterPredicate = Callable[[Any, Any], bool]


@dataclass
class ListQuery:
    """
    User-controlled query state of one list page.

    ``sort_key``/``sort_direction`` of ``None`` fall back to the page default;
    ``page`` is 1-based.
    """

    search: str = ""
    filters: Dict[str, Any] = field(default_factory=dict)
    sort_key: Optional[str] = None
    sort_direction: Optional[str] = None
    page: int = 1
    page_size: Optional[int] = None


@dataclass
class ListViewConfig:
    """
    Per-page parameters of the pipeline.

    Attributes:
        key_field: stable row key (``id``, or ``code`` for instructors)
        search_fields: field paths matched by the free-text search; dotted
            paths (``user.email``) reach into nested objects
        filter_fields: fields offered as discrete filters
        default_sort_key / default_sort_direction: used when the query has none
        page_size: rows per page
        base_filter: fixed predicate applied before search (e.g. events only)
        filter_predicates: custom ``(item, selection) -> bool`` per filter
            field; equality on the same-named field otherwise
    """

    key_field: str = "id"
    search_fields: Sequence[str] = ()
    filter_fields: Sequence[str] = ()
    default_sort_key: Optional[str] = None
    default_sort_direction: str = SORT_ASC
    page_size: int = ListSettings.PAGE_SIZE
    base_filter: Optional[Callable[[Any], bool]] = None
    filter_predicates: Dict[str, FilterPredicate] = field(default_factory=dict)


@dataclass
class PageResult:
    rows: List[Any]
    total: int
    page: int
    page_size: int

    @property
    def total_pages(self) -> int:
        return total_pages(self.total, self.page_size)

    @property
    def is_empty(self) -> bool:
        return self.total == 0


def total_pages(total: int, page_size: int) -> int:
    if page_size <= 0:
        raise ValueError("page_size must be positive")
    return math.ceil(total / page_size)


def resolve_field(item: Any, path: str) -> Any:
    """
    Value at a dotted field path, ``None`` when any step is missing.

    Works on mappings and on attribute objects (dataclasses).
    """
    value = item
    for part in path.split("."):
        if value is None:
            return None
        if isinstance(value, Mapping):
            value = value.get(part)
        else:
            value = getattr(value, part, None)
    if isinstance(value, Enum):
        return value.value
    return value


def _search_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, tuple, set)):
        return " ".join(str(v) for v in value).lower()
    return str(value).lower()


def _is_empty_selection(selection: Any) -> bool:
    if selection is None:
        return True
    if isinstance(selection, str):
        return selection == ""
    if isinstance(selection, (list, tuple, set, frozenset)):
        return len(selection) == 0
    return False


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def compare_values(a: Any, b: Any) -> int:
    """
    Three-way comparison of two non-None sort values.

    Numbers compare numerically; anything else (including a number against
    a string) compares as case-insensitive text.
    """
    if _is_number(a) and _is_number(b):
        return (a > b) - (a < b)
    left = str(a).lower()
    right = str(b).lower()
    return (left > right) - (left < right)


# =========================================================================
# Stages
# =========================================================================

def apply_search(items: Sequence[Any], search: str, search_fields: Sequence[str]) -> List[Any]:
    needle = (search or "").strip().lower()
    if not needle:
        return list(items)
    return [
        item for item in items
        if any(needle in _search_text(resolve_field(item, path)) for path in search_fields)
    ]


def apply_filters(
    items: Sequence[Any],
    filters: Mapping[str, Any],
    predicates: Optional[Mapping[str, FilterPredicate]] = None,
) -> List[Any]:
    """
    Keep items satisfying every non-empty filter selection (AND).

    A list/tuple/set selection matches any of its values.
    """
    predicates = predicates or {}
    active = [(name, sel) for name, sel in filters.items() if not _is_empty_selection(sel)]
    if not active:
        return list(items)

    def matches(item: Any) -> bool:
        for name, selection in active:
            predicate = predicates.get(name)
            if predicate is not None:
                if not predicate(item, selection):
                    return False
                continue
            value = resolve_field(item, name)
            if isinstance(selection, (list, tuple, set, frozenset)):
                if value not in selection:
                    return False
            elif value != selection:
                return False
        return True

    return [item for item in items if matches(item)]


def sort_items(items: Sequence[Any], sort_key: Optional[str], direction: str = SORT_ASC) -> List[Any]:
    """
    Stable sort by one field.

    ``None`` values go first when ascending and last when descending; equal
    keys keep their input order in both directions.
    """
    if direction not in SORT_DIRECTIONS:
        raise ValueError(f"sort direction must be one of {SORT_DIRECTIONS}, got {direction!r}")
    if not sort_key:
        return list(items)

    present = []
    missing = []
    for item in items:
        value = resolve_field(item, sort_key)
        if value is None:
            missing.append(item)
        else:
            present.append((value, item))

    key = cmp_to_key(compare_values)
    present.sort(key=lambda pair: key(pair[0]), reverse=(direction == SORT_DESC))
    ordered = [item for _, item in present]

    if direction == SORT_ASC:
        return missing + ordered
    return ordered + missing


def paginate(items: Sequence[Any], page: int, page_size: int) -> List[Any]:
    if page_size <= 0:
        raise ValueError("page_size must be positive")
    start = (max(page, 1) - 1) * page_size
    return list(items[start:start + page_size])


def run_pipeline(items: Sequence[Any], query: ListQuery, config: ListViewConfig) -> PageResult:
    """
    Apply base filter, search, filters, sort and pagination.

    Returns:
        PageResult with the rows of the requested page and the filtered total
    """
    rows = list(items)
    if config.base_filter is not None:
        rows = [item for item in rows if config.base_filter(item)]

    rows = apply_search(rows, query.search, config.search_fields)
    rows = apply_filters(rows, query.filters, config.filter_predicates)

    sort_key = query.sort_key or config.default_sort_key
    if query.sort_key:
        direction = query.sort_direction or SORT_ASC
    else:
        direction = query.sort_direction or config.default_sort_direction
    rows = sort_items(rows, sort_key, direction)

    page_size = query.page_size or config.page_size
    page = max(query.page, 1)
    return PageResult(
        rows=paginate(rows, page, page_size),
        total=len(rows),
        page=page,
        page_size=page_size,
    )
