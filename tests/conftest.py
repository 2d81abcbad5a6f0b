"""
Pytest Configuration and Shared Fixtures

Common test fixtures and setup for all tests.
"""

import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import pytest

from studio_admin.managers.list_controller import ManualScheduler
from studio_admin.models.instructor import Instructor
from studio_admin.models.member import Member


class FakeClient:
    """
    Stand-in for ApiClient.

    Responses are looked up by (METHOD, path); an exception instance is raised
    instead of returned. Every call is recorded in ``calls``.
    """

    def __init__(self, responses=None):
        self.responses = dict(responses or {})
        self.calls = []
        self.token_provider = None

    def request(self, method, path, json_data=None, params=None, **kwargs):
        self.calls.append({
            "method": method,
            "path": path,
            "body": json_data,
            "params": params,
            "kwargs": kwargs,
        })
        response = self.responses.get((method, path), {"success": True})
        if isinstance(response, BaseException):
            raise response
        if callable(response):
            return response()
        return response

    def get(self, path, params=None, **kwargs):
        return self.request("GET", path, params=params, **kwargs)

    def post(self, path, body=None, **kwargs):
        return self.request("POST", path, json_data=body, **kwargs)

    def patch(self, path, body=None, **kwargs):
        return self.request("PATCH", path, json_data=body, **kwargs)

    def put(self, path, body=None, **kwargs):
        return self.request("PUT", path, json_data=body, **kwargs)

    def delete(self, path, **kwargs):
        return self.request("DELETE", path, **kwargs)

    def paths(self, method=None):
        return [c["path"] for c in self.calls if method is None or c["method"] == method]


@pytest.fixture
def fake_client():
    return FakeClient()


@pytest.fixture
def scheduler():
    """Debounce scheduler flushed by hand"""
    return ManualScheduler()


@pytest.fixture
def instructors():
    """Kim / Lee / Park sample"""
    return [
        Instructor(code="T001", name="Kim", grade="I", country="KR", sort_order=2),
        Instructor(code="T002", name="Lee", grade="WE", country="KR", sort_order=1),
        Instructor(code="T003", name="Park", grade="I", country="CN", sort_order=3),
    ]


@pytest.fixture
def members():
    """23 members with registration dates 2024-01-01 .. 2024-01-23"""
    return [
        Member(
            id=f"m{i:02d}",
            name=f"Member {i:02d}",
            email=f"member{i:02d}@example.com",
            status="active" if i % 3 else "inactive",
            registration_date=f"2024-01-{i:02d}",
        )
        for i in range(1, 24)
    ]
