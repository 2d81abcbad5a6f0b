"""
Admin resource clients

One small class per backend resource. Each wraps ``ApiClient`` calls and adapts
the response into view models (see ``studio_admin.models``).

Usage:
    from studio_admin.caller.resources import MembersApi

    members = MembersApi(client).list(status="active")
    MembersApi(client).update_status(members[0].id, "suspended")
"""

from typing import Any, Dict, List, Optional

from studio_admin.caller.client import ApiClient
from studio_admin.config.constants import ListSettings
from studio_admin.models import (
    ActivityLog,
    Contact,
    Instructor,
    Member,
    MembershipStats,
    ScheduleContent,
    Studio,
    Workshop,
)
from studio_admin.utils.error_handlers import ApiError
from studio_admin.utils.logging_config import get_logger

logger = get_logger(__name__)


def unwrap_list(response: Any) -> List[Dict[str, Any]]:
    """
    Rows of a list response.

    The backend answers ``{"data": [...], "total": n, ...}``; a bare JSON array
    is accepted as well.
    """
    if isinstance(response, list):
        return response
    if isinstance(response, dict):
        data = response.get("data")
        if isinstance(data, list):
            return data
    raise ApiError("목록 응답 형식이 올바르지 않습니다.")


def unwrap_item(response: Any) -> Dict[str, Any]:
    """Single object from ``{"data": {...}}`` or a bare object."""
    if isinstance(response, dict):
        data = response.get("data")
        if isinstance(data, dict):
            return data
        return response
    raise ApiError("응답 형식이 올바르지 않습니다.")


def list_total(response: Any) -> Optional[int]:
    """``total`` of a paged list response, or None when the backend sends none."""
    if isinstance(response, dict):
        total = response.get("total")
        if total is None and isinstance(response.get("meta"), dict):
            total = response["meta"].get("total")
        if isinstance(total, int) and not isinstance(total, bool):
            return total
    return None


def fetch_all_rows(
    client: ApiClient,
    path: str,
    params: Optional[Dict[str, Any]] = None,
    size_param: str = "limit",
    page_size: int = ListSettings.FETCH_LIMIT,
) -> List[Dict[str, Any]]:
    """
    Every row of a paged list endpoint.

    Pages are requested until the reported ``total`` is reached or a page comes
    back short. Without a ``total`` the short page alone ends the loop.
    """
    rows: List[Dict[str, Any]] = []
    page = 1
    while True:
        response = client.get(path, params={**(params or {}), "page": page, size_param: page_size})
        batch = unwrap_list(response)
        rows.extend(batch)

        total = list_total(response)
        if not batch or len(batch) < page_size:
            break
        if total is not None and len(rows) >= total:
            break
        if page >= ListSettings.MAX_FETCH_PAGES:
            logger.warning(f"[Admin API] {path}: stopped after {page} pages ({len(rows)} rows)")
            break
        page += 1
    return rows


class ResourceApi:
    """Base class holding the shared ``ApiClient``"""

    def __init__(self, client: ApiClient):
        self.client = client


# =========================================================================
# Members
# =========================================================================

class MembersApi(ResourceApi):

    def list(self, search: Optional[str] = None, status: Optional[str] = None) -> List[Member]:
        rows = fetch_all_rows(
            self.client, "/users", {"search": search, "status": status}, size_param="pageSize"
        )
        return [Member.from_api(row) for row in rows]

    def get(self, member_id: str) -> Member:
        return Member.from_api(unwrap_item(self.client.get(f"/users/{member_id}")))

    def update(self, member_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Partial update; ``payload`` holds only the changed fields."""
        return self.client.patch(f"/users/{member_id}", payload)

    def update_status(self, member_id: str, status: str) -> Dict[str, Any]:
        logger.info(f"[Members] status {member_id} -> {status}")
        return self.update(member_id, {"status": status})

    def activity(self, member_id: str, page: int = 1, page_size: int = 20) -> List[ActivityLog]:
        response = self.client.get(
            f"/users/{member_id}/activity",
            params={"page": page, "pageSize": page_size},
        )
        return [ActivityLog.from_api(row) for row in unwrap_list(response)]

    def stats(self) -> MembershipStats:
        return MembershipStats.from_api(unwrap_item(self.client.get("/api/admin/members/stats")))


# =========================================================================
# Instructors
# =========================================================================

class InstructorsApi(ResourceApi):

    def list(self) -> List[Instructor]:
        return [Instructor.from_api(row) for row in fetch_all_rows(self.client, "/teachers")]

    def get(self, code: str) -> Instructor:
        return Instructor.from_api(unwrap_item(self.client.get(f"/teachers/{code}")))

    def create(self, payload: Dict[str, Any]) -> Instructor:
        return Instructor.from_api(unwrap_item(self.client.post("/teachers", payload)))

    def update(self, code: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self.client.patch(f"/teachers/{code}", payload)

    def set_active(self, code: str, is_active: bool) -> Dict[str, Any]:
        return self.update(code, {"isActive": bool(is_active)})

    def delete(self, code: str) -> Dict[str, Any]:
        return self.client.delete(f"/teachers/{code}")


# =========================================================================
# Workshops
# =========================================================================

class WorkshopsApi(ResourceApi):

    def list(self) -> List[Workshop]:
        return [Workshop.from_api(row) for row in fetch_all_rows(self.client, "/workshops")]

    def get(self, workshop_id: str) -> Workshop:
        return Workshop.from_api(unwrap_item(self.client.get(f"/workshops/{workshop_id}")))

    def create(self, payload: Dict[str, Any]) -> Workshop:
        return Workshop.from_api(unwrap_item(self.client.post("/workshops", payload)))

    def update(self, workshop_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self.client.patch(f"/workshops/{workshop_id}", payload)

    def update_status(self, workshop_id: str, status: str) -> Dict[str, Any]:
        return self.update(workshop_id, {"status": status})

    def delete(self, workshop_id: str) -> Dict[str, Any]:
        return self.client.delete(f"/workshops/{workshop_id}")


# =========================================================================
# Schedules / Trip & Event
# =========================================================================

class SchedulesApi(ResourceApi):

    def list(self, month: Optional[str] = None) -> List[ScheduleContent]:
        rows = fetch_all_rows(self.client, "/schedules", {"month": month})
        return [ScheduleContent.from_api(row) for row in rows]

    def list_regular(self, **kwargs) -> List[ScheduleContent]:
        return [s for s in self.list(**kwargs) if not s.is_event]

    def list_events(self, **kwargs) -> List[ScheduleContent]:
        return [s for s in self.list(**kwargs) if s.is_event]

    def get(self, schedule_id: str) -> ScheduleContent:
        return ScheduleContent.from_api(unwrap_item(self.client.get(f"/schedules/{schedule_id}")))

    def create(self, payload: Dict[str, Any]) -> ScheduleContent:
        return ScheduleContent.from_api(unwrap_item(self.client.post("/schedules", payload)))

    def update(self, schedule_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self.client.patch(f"/schedules/{schedule_id}", payload)

    def update_status(self, schedule_id: str, status: str) -> Dict[str, Any]:
        return self.update(schedule_id, {"status": status})

    def delete(self, schedule_id: str) -> Dict[str, Any]:
        return self.client.delete(f"/schedules/{schedule_id}")


# =========================================================================
# Studios
# =========================================================================

class StudiosApi(ResourceApi):

    def list(self) -> List[Studio]:
        return [Studio.from_api(row) for row in fetch_all_rows(self.client, "/studios")]

    def update_status(self, studio_id: str, status: str) -> Dict[str, Any]:
        return self.client.patch(f"/studios/{studio_id}", {"status": status})


# =========================================================================
# Contacts (inquiries / partnerships)
# =========================================================================

class ContactsApi(ResourceApi):

    def list(self, contact_type: Optional[str] = None) -> List[Contact]:
        rows = fetch_all_rows(self.client, "/requests/contact", {"contactType": contact_type})
        contacts = [Contact.from_api(row) for row in rows]
        if contact_type:
            # Older backends ignore the contactType parameter
            contacts = [c for c in contacts if c.contact_type == contact_type]
        return contacts

    def list_partnerships(self, **kwargs) -> List[Contact]:
        return self.list(contact_type="partnership", **kwargs)

    def update_status(self, contact_id: str, status: str) -> Dict[str, Any]:
        return self.client.patch(f"/requests/contact/{contact_id}/status", {"status": status})


class AdminApi:
    """All resource clients bound to one ``ApiClient``"""

    def __init__(self, client: ApiClient):
        self.client = client
        self.members = MembersApi(client)
        self.instructors = InstructorsApi(client)
        self.workshops = WorkshopsApi(client)
        self.schedules = SchedulesApi(client)
        self.studios = StudiosApi(client)
        self.contacts = ContactsApi(client)
