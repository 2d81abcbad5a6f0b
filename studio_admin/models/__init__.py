"""View models adapted from backend JSON"""

from studio_admin.models.instructor import Instructor
from studio_admin.models.member import ActivityLog, Member, MembershipStats
from studio_admin.models.offering import ScheduleContent, Workshop
from studio_admin.models.request import Request, RequestKind, RequestStatus, RequestUser
from studio_admin.models.venue import Contact, Studio

__all__ = [
    "ActivityLog",
    "Contact",
    "Instructor",
    "Member",
    "MembershipStats",
    "Request",
    "RequestKind",
    "RequestStatus",
    "RequestUser",
    "ScheduleContent",
    "Studio",
    "Workshop",
]
