"""
Status transition tables

Which status changes the admin may offer, per entity. The tables are plain
data (status -> allowed next statuses) so menus and guards read from the same
source.
"""

from typing import Any, Dict, Hashable, Tuple

from studio_admin.models.venue import CONTACT_STATUSES, STUDIO_STATUSES
from studio_admin.utils.error_handlers import TransitionError

MEMBER = "member"
WORKSHOP = "workshop"
SCHEDULE = "schedule"
INSTRUCTOR_VISIBILITY = "instructor_visibility"
CONTACT = "contact"
STUDIO = "studio"


def _free_choice(statuses: Tuple[str, ...]) -> Dict[str, Tuple[str, ...]]:
    """Any status may move to any other."""
    return {s: tuple(t for t in statuses if t != s) for s in statuses}


TRANSITIONS: Dict[str, Dict[Hashable, Tuple[Any, ...]]] = {
    # suspension is one-way from the admin UI
    MEMBER: {
        "active": ("inactive", "suspended"),
        "inactive": ("active", "suspended"),
        "suspended": (),
    },
    # COMPLETED is set by the backend only
    WORKSHOP: {
        "OPEN": ("CLOSED", "CANCELLED"),
        "CLOSED": ("OPEN",),
        "CANCELLED": ("OPEN",),
        "COMPLETED": (),
    },
    SCHEDULE: {
        "OPEN": ("FULL", "WAITLIST", "CANCELLED"),
        "FULL": ("OPEN",),
        "WAITLIST": ("OPEN",),
        "CANCELLED": ("OPEN",),
    },
    INSTRUCTOR_VISIBILITY: {
        True: (False,),
        False: (True,),
    },
    CONTACT: _free_choice(CONTACT_STATUSES),
    STUDIO: _free_choice(STUDIO_STATUSES),
}


def allowed_transitions(entity: str, status: Any) -> Tuple[Any, ...]:
    """
    Next statuses offered from ``status``; empty for terminal or unknown ones.

    >>> allowed_transitions("workshop", "OPEN")
    ('CLOSED', 'CANCELLED')
    """
    try:
        table = TRANSITIONS[entity]
    except KeyError:
        raise ValueError(f"Unknown entity '{entity}'")
    return table.get(status, ())


def can_transition(entity: str, current: Any, target: Any) -> bool:
    return target in allowed_transitions(entity, current)


def check_transition(entity: str, current: Any, target: Any) -> None:
    """
    Raises:
        TransitionError: ``target`` is not offered from ``current``
    """
    if not can_transition(entity, current, target):
        raise TransitionError(entity, current, target)


def is_terminal(entity: str, status: Any) -> bool:
    return not allowed_transitions(entity, status)
