"""
Pipeline parameters of every admin list page
"""

from typing import Any

from studio_admin.config import constants
from studio_admin.core.pipeline import SORT_ASC, SORT_DESC, ListViewConfig


def _has_day(item: Any, selection: Any) -> bool:
    days = getattr(item, "days", None) or []
    if isinstance(selection, (list, tuple, set, frozenset)):
        return any(day in days for day in selection)
    return selection in days


MEMBERS = ListViewConfig(
    key_field="id",
    search_fields=("name", "email", "phone"),
    filter_fields=("status", "membership_level"),
    default_sort_key="registration_date",
    default_sort_direction=SORT_DESC,
)

INSTRUCTORS = ListViewConfig(
    key_field="code",
    search_fields=("name", "tagline", "code"),
    filter_fields=("grade", "country", "is_active"),
    default_sort_key="sort_order",
    default_sort_direction=SORT_ASC,
)

WORKSHOPS = ListViewConfig(
    key_field="id",
    search_fields=("title", "instructor_name", "location_info"),
    filter_fields=("status", "level", "category"),
    default_sort_key="start_date",
    default_sort_direction=SORT_DESC,
)

SCHEDULES = ListViewConfig(
    key_field="id",
    search_fields=("class_name", "instructor_name", "location_info"),
    filter_fields=("status", "days"),
    default_sort_key="start_date",
    default_sort_direction=SORT_DESC,
    base_filter=lambda item: not item.is_event,
    filter_predicates={"days": _has_day},
)

EVENTS = ListViewConfig(
    key_field="id",
    search_fields=("class_name", "instructor_name", "location_info"),
    filter_fields=("class_type", "status"),
    default_sort_key="start_date",
    default_sort_direction=SORT_DESC,
    base_filter=lambda item: item.is_event,
)

STUDIOS = ListViewConfig(
    key_field="id",
    search_fields=("name", "location", "manager_name"),
    filter_fields=("status",),
    default_sort_key="created_at",
    default_sort_direction=SORT_DESC,
)

INQUIRIES = ListViewConfig(
    key_field="id",
    search_fields=("company", "name", "email", "message"),
    filter_fields=("contact_type", "status"),
    default_sort_key="created_at",
    default_sort_direction=SORT_DESC,
)

PARTNERSHIPS = ListViewConfig(
    key_field="id",
    search_fields=("company", "name", "email"),
    filter_fields=("status",),
    default_sort_key="created_at",
    default_sort_direction=SORT_DESC,
    base_filter=lambda item: item.contact_type == "partnership",
)

LIST_CONFIGS = {
    constants.PAGE_MEMBERS: MEMBERS,
    constants.PAGE_INSTRUCTORS: INSTRUCTORS,
    constants.PAGE_WORKSHOPS: WORKSHOPS,
    constants.PAGE_SCHEDULES: SCHEDULES,
    constants.PAGE_EVENTS: EVENTS,
    constants.PAGE_STUDIOS: STUDIOS,
    constants.PAGE_INQUIRIES: INQUIRIES,
    constants.PAGE_PARTNERSHIPS: PARTNERSHIPS,
}
