"""
Approval request endpoints

``GET /requests/{kind}`` lists submissions of one kind;
``PATCH /requests/{kind}/{id}/approve|reject`` decides one.
"""

from typing import Any, Dict, List, Optional

from studio_admin.caller.client import ApiClient
from studio_admin.caller.resources import fetch_all_rows
from studio_admin.models import Request, RequestKind


class RequestsApi:

    def __init__(self, client: ApiClient):
        self.client = client

    def list(self, kind: RequestKind, status: Optional[str] = None) -> List[Request]:
        kind = RequestKind(kind)
        rows = fetch_all_rows(self.client, f"/requests/{kind.value}", {"status": status})
        return [Request.from_api(kind, row) for row in rows]

    def approve(self, kind: RequestKind, request_id: str) -> Dict[str, Any]:
        """
        Returns the backend body. For workshop and schedule requests it may
        carry the created entity under ``workshop`` / ``schedule``.
        """
        return self.client.patch(f"/requests/{RequestKind(kind).value}/{request_id}/approve")

    def reject(self, kind: RequestKind, request_id: str) -> Dict[str, Any]:
        return self.client.patch(f"/requests/{RequestKind(kind).value}/{request_id}/reject")
