"""
Unit Tests for the Request Approval Inbox

Tests the pending -> approved | rejected workflow, optimistic rollback and
the per-kind handler registry against a fake REST client.
"""

import pytest

from conftest import FakeClient
from studio_admin.caller.approvals import RequestsApi
from studio_admin.core.workflow import (
    ACTION_APPROVE,
    ACTION_REJECT,
    REQUEST_HANDLERS,
    RequestInbox,
    available_actions,
)
from studio_admin.models.request import Request, RequestKind, RequestStatus
from studio_admin.utils.error_handlers import (
    ActionInFlightError,
    ApiError,
    TransitionError,
)

WORKSHOP_ROWS = {
    "data": [
        {"id": "r1", "status": "pending", "createdAt": "2024-03-01", "title": "Morning Flow",
         "instructorName": "Kim", "user": {"id": "u1", "email": "kim@example.com"}},
        {"id": "r2", "status": "approved", "createdAt": "2024-03-03", "title": "Yin Night",
         "instructorName": "Lee", "user": {"id": "u2", "email": "lee@example.com"}},
        {"id": "r3", "status": "pending", "createdAt": "2024-03-02", "title": "Ashtanga Basics",
         "instructorName": "Park", "user": {"id": "u3", "email": "park@example.com"}},
    ]
}


def make_inbox(responses=None, on_change=None):
    client = FakeClient({("GET", "/requests/workshop"): WORKSHOP_ROWS})
    client.responses.update(responses or {})
    inbox = RequestInbox(RequestsApi(client), on_change=on_change)
    return client, inbox


class TestListing:

    def test_newest_first(self):
        _, inbox = make_inbox()
        rows = inbox.list_requests(RequestKind.WORKSHOP)
        assert [r.id for r in rows] == ["r2", "r3", "r1"]

    def test_status_filter(self):
        _, inbox = make_inbox()
        rows = inbox.list_requests(RequestKind.WORKSHOP, status_filter="pending")
        assert [r.id for r in rows] == ["r3", "r1"]

    def test_search_uses_kind_fields(self):
        _, inbox = make_inbox()
        inbox.list_requests(RequestKind.WORKSHOP)
        assert [r.id for r in inbox.filter_requests(RequestKind.WORKSHOP, search_text="park@")] == ["r3"]
        assert [r.id for r in inbox.filter_requests(RequestKind.WORKSHOP, search_text="yin")] == ["r2"]

    def test_filter_requests_makes_no_call(self):
        client, inbox = make_inbox()
        inbox.list_requests(RequestKind.WORKSHOP)
        calls = len(client.calls)
        inbox.filter_requests(RequestKind.WORKSHOP, status_filter="approved")
        assert len(client.calls) == calls

    def test_pending_count(self):
        _, inbox = make_inbox()
        inbox.list_requests(RequestKind.WORKSHOP)
        assert inbox.pending_count(RequestKind.WORKSHOP) == 2

    def test_accepts_kind_string(self):
        _, inbox = make_inbox()
        assert len(inbox.list_requests("workshop")) == 3

    def test_unsupported_kind(self):
        _, inbox = make_inbox()
        with pytest.raises(ValueError):
            inbox.list_requests("studio")


class TestActions:

    def test_pending_offers_both(self):
        request = Request(kind=RequestKind.TEACHER, id="t1")
        assert available_actions(request) == (ACTION_APPROVE, ACTION_REJECT)

    def test_decided_offers_none(self):
        for status in (RequestStatus.APPROVED, RequestStatus.REJECTED):
            request = Request(kind=RequestKind.TEACHER, id="t1", status=status)
            assert available_actions(request) == ()


class TestDecisions:

    def test_approve_updates_status_and_returns_entity(self):
        created = {"id": "w100", "title": "Morning Flow"}
        client, inbox = make_inbox({
            ("PATCH", "/requests/workshop/r1/approve"): {"success": True, "workshop": created},
        })
        inbox.list_requests(RequestKind.WORKSHOP)

        outcome = inbox.approve(RequestKind.WORKSHOP, "r1")

        assert outcome.success
        assert outcome.created_entity == created
        assert outcome.request.status == RequestStatus.APPROVED
        row = next(r for r in inbox.requests(RequestKind.WORKSHOP) if r.id == "r1")
        assert row.status == RequestStatus.APPROVED
        assert "/requests/workshop/r1/approve" in client.paths("PATCH")

    def test_reject(self):
        client, inbox = make_inbox()
        inbox.list_requests(RequestKind.WORKSHOP)
        outcome = inbox.reject(RequestKind.WORKSHOP, "r3")
        assert outcome.success
        assert outcome.created_entity is None
        assert client.paths("PATCH") == ["/requests/workshop/r3/reject"]

    def test_decided_request_raises_without_call(self):
        client, inbox = make_inbox()
        inbox.list_requests(RequestKind.WORKSHOP)
        with pytest.raises(TransitionError):
            inbox.approve(RequestKind.WORKSHOP, "r2")
        assert client.paths("PATCH") == []

    def test_second_approve_after_success_raises(self):
        _, inbox = make_inbox()
        inbox.list_requests(RequestKind.WORKSHOP)
        inbox.approve(RequestKind.WORKSHOP, "r1")
        with pytest.raises(TransitionError):
            inbox.reject(RequestKind.WORKSHOP, "r1")

    def test_unknown_request(self):
        _, inbox = make_inbox()
        inbox.list_requests(RequestKind.WORKSHOP)
        with pytest.raises(KeyError):
            inbox.approve(RequestKind.WORKSHOP, "r404")

    def test_failure_rolls_back_and_sets_error(self):
        _, inbox = make_inbox({
            ("PATCH", "/requests/workshop/r1/approve"): ApiError("승인 실패", status_code=500),
        })
        inbox.list_requests(RequestKind.WORKSHOP)

        outcome = inbox.approve(RequestKind.WORKSHOP, "r1")

        assert not outcome.success
        assert outcome.message == "승인 실패"
        assert inbox.action_error == "승인 실패"
        row = next(r for r in inbox.requests(RequestKind.WORKSHOP) if r.id == "r1")
        assert row.status == RequestStatus.PENDING
        assert not inbox.is_in_flight(RequestKind.WORKSHOP, "r1")

    def test_in_flight_blocks_second_action(self):
        holder = {}

        def approve_while_running():
            # Re-enter while the first call is still on the wire
            with pytest.raises(ActionInFlightError):
                holder["inbox"]._decide(RequestKind.WORKSHOP, "r1", ACTION_REJECT)
            return {"success": True}

        _, inbox = make_inbox()
        holder["inbox"] = inbox
        inbox.list_requests(RequestKind.WORKSHOP)
        inbox.api.client.responses[("PATCH", "/requests/workshop/r1/approve")] = approve_while_running
        assert inbox.approve(RequestKind.WORKSHOP, "r1").success

    def test_actions_hidden_while_in_flight(self):
        seen = {}

        def capture():
            row = next(r for r in holder.requests(RequestKind.WORKSHOP) if r.id == "r3")
            seen["actions"] = holder.available_actions(row)
            seen["in_flight"] = holder.is_in_flight(RequestKind.WORKSHOP, "r3")
            return {}

        _, holder = make_inbox({("PATCH", "/requests/workshop/r3/approve"): capture})
        holder.list_requests(RequestKind.WORKSHOP)
        holder.approve(RequestKind.WORKSHOP, "r3")
        assert seen == {"actions": (), "in_flight": True}

    def test_unexpected_error_rolls_back_and_propagates(self):
        _, inbox = make_inbox({
            ("PATCH", "/requests/workshop/r1/approve"): RuntimeError("bug"),
        })
        inbox.list_requests(RequestKind.WORKSHOP)
        with pytest.raises(RuntimeError):
            inbox.approve(RequestKind.WORKSHOP, "r1")
        row = next(r for r in inbox.requests(RequestKind.WORKSHOP) if r.id == "r1")
        assert row.status == RequestStatus.PENDING
        assert not inbox.is_in_flight(RequestKind.WORKSHOP, "r1")

    def test_on_change_notified(self):
        changes = []
        _, inbox = make_inbox(on_change=changes.append)
        inbox.list_requests(RequestKind.WORKSHOP)
        inbox.approve(RequestKind.WORKSHOP, "r1")
        assert changes == [RequestKind.WORKSHOP, RequestKind.WORKSHOP]

def row_status(inbox, request_id):
    return next(r for r in inbox.requests(RequestKind.WORKSHOP) if r.id == request_id).status


class TestReloadRaces:
    """Listings that overlap approve/reject calls"""

    def test_reload_started_before_approve_keeps_decision(self):
        _, inbox = make_inbox()
        inbox.list_requests(RequestKind.WORKSHOP)
        token = inbox.start_load(RequestKind.WORKSHOP)
        inbox.approve(RequestKind.WORKSHOP, "r1")

        # The backend answered before the approval landed: r1 still pending
        inbox.list_requests(RequestKind.WORKSHOP, load_token=token)

        assert row_status(inbox, "r1") == RequestStatus.APPROVED
        row = next(r for r in inbox.requests(RequestKind.WORKSHOP) if r.id == "r1")
        assert inbox.available_actions(row) == ()

    def test_reload_during_approve_keeps_optimistic_row(self):
        seen = {}

        def reload_then_succeed():
            inbox.list_requests(RequestKind.WORKSHOP)
            seen["status"] = row_status(inbox, "r1")
            seen["in_flight"] = inbox.is_in_flight(RequestKind.WORKSHOP, "r1")
            return {"success": True}

        _, inbox = make_inbox({("PATCH", "/requests/workshop/r1/approve"): reload_then_succeed})
        inbox.list_requests(RequestKind.WORKSHOP)
        assert inbox.approve(RequestKind.WORKSHOP, "r1").success
        assert seen == {"status": RequestStatus.APPROVED, "in_flight": True}
        assert row_status(inbox, "r1") == RequestStatus.APPROVED

    def test_failure_after_reload_rolls_back_current_rows(self):
        def reload_then_fail():
            inbox.list_requests(RequestKind.WORKSHOP)
            raise ApiError("승인 실패", status_code=500)

        _, inbox = make_inbox({("PATCH", "/requests/workshop/r1/approve"): reload_then_fail})
        inbox.list_requests(RequestKind.WORKSHOP)

        outcome = inbox.approve(RequestKind.WORKSHOP, "r1")

        assert not outcome.success
        assert row_status(inbox, "r1") == RequestStatus.PENDING
        row = next(r for r in inbox.requests(RequestKind.WORKSHOP) if r.id == "r1")
        assert inbox.available_actions(row) == (ACTION_APPROVE, ACTION_REJECT)

    def test_superseded_load_is_dropped(self):
        client, inbox = make_inbox()
        inbox.list_requests(RequestKind.WORKSHOP)
        older = inbox.start_load(RequestKind.WORKSHOP)
        newer = inbox.start_load(RequestKind.WORKSHOP)
        client.responses[("GET", "/requests/workshop")] = {"data": []}

        inbox.list_requests(RequestKind.WORKSHOP, load_token=older)

        assert len(inbox.requests(RequestKind.WORKSHOP)) == 3
        assert not inbox.is_current_load(RequestKind.WORKSHOP, older)
        assert inbox.is_current_load(RequestKind.WORKSHOP, newer)

    def test_load_tokens_are_per_kind(self):
        _, inbox = make_inbox()
        token = inbox.start_load(RequestKind.WORKSHOP)
        inbox.start_load(RequestKind.TEACHER)
        assert inbox.is_current_load(RequestKind.WORKSHOP, token)

    def test_superseded_failure_is_not_current(self):
        client, inbox = make_inbox()
        older = inbox.start_load(RequestKind.WORKSHOP)
        inbox.start_load(RequestKind.WORKSHOP)
        client.responses[("GET", "/requests/workshop")] = ApiError("down", status_code=503)

        with pytest.raises(ApiError):
            inbox.list_requests(RequestKind.WORKSHOP, load_token=older)
        assert not inbox.is_current_load(RequestKind.WORKSHOP, older)

    def test_later_load_takes_backend_status(self):
        client, inbox = make_inbox()
        inbox.list_requests(RequestKind.WORKSHOP)
        inbox.approve(RequestKind.WORKSHOP, "r1")
        rows = [dict(row) for row in WORKSHOP_ROWS["data"]]
        rows[0]["status"] = "rejected"
        client.responses[("GET", "/requests/workshop")] = {"data": rows}

        inbox.list_requests(RequestKind.WORKSHOP)

        assert row_status(inbox, "r1") == RequestStatus.REJECTED



class TestRegistry:

    def test_every_kind_has_handler(self):
        assert set(REQUEST_HANDLERS) == set(RequestKind)

    def test_only_content_kinds_create_entities(self):
        assert REQUEST_HANDLERS[RequestKind.TEACHER].created_entity_key is None
        assert REQUEST_HANDLERS[RequestKind.WORKSHOP].created_entity_key == "workshop"
        assert REQUEST_HANDLERS[RequestKind.SCHEDULE].created_entity_key == "schedule"
