"""
Unit Tests for ListController

Debounce, page reset, stale response handling and failure states, driven
through the manual scheduler and an explicit runner.
"""

import pytest

from studio_admin.core.list_configs import INSTRUCTORS, MEMBERS
from studio_admin.core.pipeline import SORT_ASC, SORT_DESC
from studio_admin.managers.list_controller import Cancellable, ListController, ViewState
from studio_admin.utils.error_handlers import ApiError, SessionExpiredError


class DeferredRunner:
    """Holds fetches until resolved by hand, like a worker thread would."""

    def __init__(self):
        self.pending = []

    def __call__(self, task, on_success, on_error):
        self.pending.append((task, on_success, on_error))

    def resolve(self, index=0):
        task, on_success, _ = self.pending[index]
        on_success(task())

    def fail(self, index, error):
        _, _, on_error = self.pending[index]
        on_error(error)


def make_controller(items, config=MEMBERS, **kwargs):
    snapshots = []
    controller = ListController(lambda: list(items), config, on_update=snapshots.append, **kwargs)
    return controller, snapshots


class TestLoading:

    def test_reload_ready(self, members):
        controller, snapshots = make_controller(members)
        controller.reload()
        assert snapshots[0].state == ViewState.LOADING
        assert snapshots[-1].state == ViewState.READY
        assert snapshots[-1].result.total == 23
        assert len(snapshots[-1].rows) == 10

    def test_empty_fetch(self):
        controller, snapshots = make_controller([])
        controller.reload()
        assert snapshots[-1].state == ViewState.EMPTY

    def test_error_state_not_empty_list(self, members):
        def fetch():
            raise ApiError("서버 오류", status_code=500)

        snapshots = []
        controller = ListController(fetch, MEMBERS, on_update=snapshots.append)
        controller.reload()
        assert controller.state == ViewState.ERROR
        assert snapshots[-1].error_message == "서버 오류"

    def test_session_expired_state(self):
        def fetch():
            raise SessionExpiredError()

        controller = ListController(fetch, MEMBERS)
        controller.reload()
        assert controller.state == ViewState.AUTH_REQUIRED
        assert controller.error_message == "로그인이 필요합니다."

    def test_unexpected_error_uses_message(self):
        def fetch():
            raise RuntimeError("socket closed")

        controller = ListController(fetch, MEMBERS)
        controller.reload()
        assert controller.state == ViewState.ERROR
        assert controller.error_message == "socket closed"

    def test_stale_response_dropped(self, members):
        runner = DeferredRunner()
        controller, _ = make_controller(members, runner=runner)
        controller.reload()
        controller.reload()

        runner.resolve(1)
        assert controller.result.total == 23

        # The first fetch answers late with an error; the list stays
        runner.fail(0, ApiError("late"))
        assert controller.state == ViewState.READY
        assert controller.result.total == 23

    def test_response_after_close_dropped(self, members):
        runner = DeferredRunner()
        controller, snapshots = make_controller(members, runner=runner)
        controller.reload()
        count = len(snapshots)
        controller.close()
        runner.resolve(0)
        assert controller.items == []
        assert len(snapshots) == count
        assert controller.closed


class TestQuery:

    def test_search_debounced(self, members, scheduler):
        controller, snapshots = make_controller(members, scheduler=scheduler)
        controller.reload()
        controller.set_search("member0")
        assert controller.snapshot().search_pending
        assert controller.result.total == 23

        scheduler.flush()
        assert not controller.snapshot().search_pending
        assert controller.result.total == 9

    def test_only_last_search_applies(self, members, scheduler):
        controller, _ = make_controller(members, scheduler=scheduler)
        controller.reload()
        controller.set_search("member0")
        controller.set_search("member2")
        scheduler.flush()
        assert controller.query.search == "member2"
        assert controller.result.total == 4

    def test_immediate_scheduler_leaves_nothing_pending(self, members):
        controller, _ = make_controller(members)
        controller.reload()
        controller.set_search("member1")
        assert not controller.snapshot().search_pending
        assert controller.query.search == "member1"

    def test_search_resets_page(self, members, scheduler):
        controller, _ = make_controller(members, scheduler=scheduler)
        controller.reload()
        controller.set_page(3)
        controller.set_search("member")
        scheduler.flush()
        assert controller.query.page == 1

    def test_filter_resets_page(self, members):
        controller, _ = make_controller(members)
        controller.reload()
        controller.set_page(2)
        controller.set_filter("status", "inactive")
        assert controller.query.page == 1
        assert all(m.status == "inactive" for m in controller.result.rows)

    def test_filters_and_then_clear(self, instructors):
        controller, _ = make_controller(instructors, config=INSTRUCTORS)
        controller.reload()
        controller.set_filter("grade", "I")
        assert [i.name for i in controller.result.rows] == ["Kim", "Park"]
        controller.set_filter("country", "KR")
        assert [i.name for i in controller.result.rows] == ["Kim"]
        controller.clear_filters()
        assert controller.result.total == 3

    def test_no_match_is_empty(self, members):
        controller, snapshots = make_controller(members)
        controller.reload()
        controller.set_filter("status", "suspended")
        assert snapshots[-1].state == ViewState.EMPTY

    def test_set_page_clamped(self, members):
        controller, _ = make_controller(members)
        controller.reload()
        controller.set_page(99)
        assert controller.query.page == 3
        assert [m.id for m in controller.result.rows] == ["m03", "m02", "m01"]
        controller.set_page(0)
        assert controller.query.page == 1

    def test_sort_toggle_from_default(self, members):
        controller, _ = make_controller(members)
        controller.reload()
        # default is registration_date desc; clicking it flips to asc
        controller.set_sort("registration_date")
        assert controller.query.sort_direction == SORT_ASC
        assert controller.result.rows[0].id == "m01"
        controller.set_sort("registration_date")
        assert controller.query.sort_direction == SORT_DESC

    def test_new_sort_key_starts_ascending(self, members):
        controller, _ = make_controller(members)
        controller.reload()
        controller.set_page(2)
        controller.set_sort("name")
        assert controller.query.sort_direction == SORT_ASC
        assert controller.query.page == 1

    def test_query_change_during_loading_does_not_compute(self, members):
        runner = DeferredRunner()
        controller, _ = make_controller(members, runner=runner)
        controller.reload()
        controller.set_filter("status", "active")
        assert controller.state == ViewState.LOADING
        runner.resolve(0)
        assert controller.result.total == sum(1 for m in members if m.status == "active")


class TestClose:

    def test_close_cancels_pending_search(self, members, scheduler):
        controller, _ = make_controller(members, scheduler=scheduler)
        controller.reload()
        controller.set_search("member1")
        controller.close()
        scheduler.flush()
        assert controller.query.search == ""

    def test_reload_after_close_is_noop(self, members):
        calls = []
        controller = ListController(lambda: calls.append(1) or members, MEMBERS)
        controller.close()
        controller.reload()
        assert calls == []


@pytest.mark.parametrize("page_size", [5, 7])
def test_page_size_from_config(members, page_size):
    from dataclasses import replace

    controller, _ = make_controller(members, config=replace(MEMBERS, page_size=page_size))
    controller.reload()
    assert len(controller.result.rows) == page_size


def test_cancellable_requires_cancel():
    class NoCancel(Cancellable):
        pass

    with pytest.raises(TypeError):
        NoCancel()
