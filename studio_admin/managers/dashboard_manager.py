"""
대시보드 요약 (dashboard summary)

Membership statistics plus pending request counts per kind. When the stats
endpoint is missing (404) the numbers are counted from the member list.
"""

from dataclasses import dataclass, field
from typing import Dict

from studio_admin.caller.approvals import RequestsApi
from studio_admin.caller.resources import AdminApi
from studio_admin.models.member import MembershipStats
from studio_admin.models.request import RequestKind, RequestStatus
from studio_admin.utils.error_handlers import ApiError, SessionExpiredError
from studio_admin.utils.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class DashboardSummary:
    members: MembershipStats
    instructors: int = 0
    open_workshops: int = 0
    pending_requests: Dict[RequestKind, int] = field(default_factory=dict)

    @property
    def total_pending(self) -> int:
        return sum(self.pending_requests.values())


def load_membership_stats(api: AdminApi) -> MembershipStats:
    try:
        return api.members.stats()
    except SessionExpiredError:
        raise
    except ApiError as e:
        if e.status_code != 404:
            raise
        logger.info("[Dashboard] stats endpoint unavailable, counting member list")
        return MembershipStats.from_members(api.members.list())


def collect_summary(api: AdminApi, requests_api: RequestsApi) -> DashboardSummary:
    """Runs on a worker thread; every call is blocking."""
    stats = load_membership_stats(api)
    instructors = api.instructors.list()
    workshops = api.workshops.list()

    pending = {}
    for kind in RequestKind:
        rows = requests_api.list(kind, status=RequestStatus.PENDING.value)
        pending[kind] = sum(1 for r in rows if r.status == RequestStatus.PENDING)

    summary = DashboardSummary(
        members=stats,
        instructors=len(instructors),
        open_workshops=sum(1 for w in workshops if w.status == "OPEN"),
        pending_requests=pending,
    )
    logger.info(
        f"[Dashboard] members={stats.total_members} pending={summary.total_pending}"
    )
    return summary
