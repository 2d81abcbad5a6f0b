"""
Display helpers shared by every page: dates and status badges.
"""

from datetime import date, datetime
from typing import Any, Dict, Tuple, Union

# Badge tone -> (foreground, background)
BADGE_COLORS: Dict[str, Tuple[str, str]] = {
    "success": ("#22c55e", "rgba(34, 197, 94, 0.15)"),
    "warning": ("#f59e0b", "rgba(245, 158, 11, 0.15)"),
    "error": ("#ef4444", "rgba(239, 68, 68, 0.15)"),
    "info": ("#3b82f6", "rgba(59, 130, 246, 0.15)"),
    "default": ("#a1a1aa", "rgba(161, 161, 170, 0.15)"),
}

# status value -> (label, tone)
STATUS_BADGES: Dict[str, Tuple[str, str]] = {
    # members / studios
    "active": ("활성", "success"),
    "inactive": ("비활성", "default"),
    "suspended": ("정지", "error"),
    "maintenance": ("점검중", "warning"),
    # workshops / schedules
    "OPEN": ("모집중", "success"),
    "CLOSED": ("마감", "default"),
    "CANCELLED": ("취소", "error"),
    "COMPLETED": ("완료", "info"),
    "FULL": ("정원마감", "warning"),
    "WAITLIST": ("대기접수", "info"),
    # contacts
    "received": ("접수", "info"),
    "reviewing": ("검토중", "warning"),
    "completed": ("완료", "success"),
    # requests
    "pending": ("대기중", "warning"),
    "approved": ("승인됨", "success"),
    "rejected": ("거절됨", "error"),
}

VISIBILITY_BADGES = {
    True: ("노출", "success"),
    False: ("숨김", "default"),
}


def status_badge(status: Any) -> Tuple[str, str, str]:
    """
    Label and colors for a status value.

    Returns:
        (label, foreground color, background color); unknown values are shown
        verbatim with the neutral tone.
    """
    if isinstance(status, bool):
        label, tone = VISIBILITY_BADGES[status]
    else:
        key = getattr(status, "value", status)
        label, tone = STATUS_BADGES.get(str(key), (str(key), "default"))
    fg, bg = BADGE_COLORS[tone]
    return label, fg, bg


def format_date(value: Union[str, date, datetime, None]) -> str:
    """
    Format a date as ``YYYY. MM. DD``.

    >>> format_date("2025-03-07T09:30:00Z")
    '2025. 03. 07'
    >>> format_date(None)
    '-'
    >>> format_date("someday")
    'someday'
    """
    if value is None or value == "":
        return "-"
    if isinstance(value, (date, datetime)):
        parsed = value
    else:
        text = str(value).strip()
        try:
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            # fromisoformat on older interpreters rejects some backend timestamps
            try:
                parsed = datetime.strptime(text[:10], "%Y-%m-%d")
            except ValueError:
                return str(value)
    return f"{parsed.year}. {parsed.month:02d}. {parsed.day:02d}"


def format_price(value: Any) -> str:
    try:
        return f"{int(value):,}원"
    except (TypeError, ValueError):
        return "-"
