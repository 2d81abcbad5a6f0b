"""
Unit Tests for the Per-Page List Configurations
"""

from studio_admin.config import constants
from studio_admin.core.list_configs import EVENTS, LIST_CONFIGS, PARTNERSHIPS, SCHEDULES
from studio_admin.core.pipeline import ListQuery, run_pipeline
from studio_admin.models import Contact, ScheduleContent


def schedules():
    return [
        ScheduleContent(id="s1", class_type="REGULAR", class_name="Hatha", days=["월", "수"],
                        start_date="2024-06-01"),
        ScheduleContent(id="s2", class_type="REGULAR", class_name="Yin", days=["화"],
                        start_date="2024-06-02"),
        ScheduleContent(id="s3", class_type="SPECIAL", class_name="Bali Trip",
                        start_date="2024-07-01"),
    ]


class TestConfigs:

    def test_every_list_page_configured(self):
        pages = {key for key, _ in constants.NAVIGATION}
        assert set(LIST_CONFIGS) == pages - {constants.PAGE_DASHBOARD, constants.PAGE_REQUESTS}

    def test_schedules_exclude_events(self):
        result = run_pipeline(schedules(), ListQuery(), SCHEDULES)
        assert [s.id for s in result.rows] == ["s2", "s1"]

    def test_events_only(self):
        result = run_pipeline(schedules(), ListQuery(), EVENTS)
        assert [s.id for s in result.rows] == ["s3"]

    def test_day_filter(self):
        result = run_pipeline(schedules(), ListQuery(filters={"days": "수"}), SCHEDULES)
        assert [s.id for s in result.rows] == ["s1"]
        result = run_pipeline(schedules(), ListQuery(filters={"days": ["화", "수"]}), SCHEDULES)
        assert result.total == 2

    def test_partnerships_subset(self):
        rows = [
            Contact(id="1", contact_type="partnership", company="Acme"),
            Contact(id="2", contact_type="teacher", company="Acme"),
        ]
        result = run_pipeline(rows, ListQuery(search="acme"), PARTNERSHIPS)
        assert [c.id for c in result.rows] == ["1"]
