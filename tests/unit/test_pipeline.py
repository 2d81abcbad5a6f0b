"""
Unit Tests for the List-View Pipeline

Tests search, AND filters, stable sorting, pagination and the combined run.
"""

import pytest

from studio_admin.core.pipeline import (
    SORT_ASC,
    SORT_DESC,
    ListQuery,
    ListViewConfig,
    apply_filters,
    apply_search,
    compare_values,
    paginate,
    resolve_field,
    run_pipeline,
    sort_items,
    total_pages,
)
from studio_admin.core.list_configs import INSTRUCTORS, MEMBERS


class TestResolveField:
    """Test dotted field lookup"""

    def test_dict_and_nested(self):
        item = {"user": {"email": "a@b.com"}}
        assert resolve_field(item, "user.email") == "a@b.com"

    def test_missing_step_is_none(self):
        assert resolve_field({"user": None}, "user.email") is None
        assert resolve_field({}, "name") is None

    def test_dataclass_attribute(self, instructors):
        assert resolve_field(instructors[0], "name") == "Kim"

    def test_enum_value_unwrapped(self):
        from studio_admin.models.request import RequestStatus
        assert resolve_field({"status": RequestStatus.PENDING}, "status") == "pending"


class TestSearch:
    """Test free-text search"""

    def test_case_insensitive_substring(self, instructors):
        result = apply_search(instructors, "KI", ("name",))
        assert [i.name for i in result] == ["Kim"]

    def test_blank_search_keeps_everything(self, instructors):
        assert apply_search(instructors, "   ", ("name",)) == instructors

    def test_search_is_trimmed(self, instructors):
        assert [i.name for i in apply_search(instructors, "  park ", ("name",))] == ["Park"]

    def test_result_items_contain_needle(self, members):
        result = apply_search(members, "member1", ("name", "email"))
        assert result
        for m in result:
            assert "member1" in m.name.lower() or "member1" in m.email.lower()

    def test_any_search_field_matches(self):
        rows = [{"title": "Morning Flow", "teacher": "Kim"}, {"title": "Yin", "teacher": "Lee"}]
        assert apply_search(rows, "lee", ("title", "teacher")) == [rows[1]]

    def test_list_field_searched(self):
        rows = [{"tags": ["yoga", "pilates"]}, {"tags": ["meditation"]}]
        assert apply_search(rows, "pil", ("tags",)) == [rows[0]]


class TestFilters:
    """Test discrete filters (AND)"""

    def test_grade_then_country(self, instructors):
        by_grade = apply_filters(instructors, {"grade": "I"})
        assert [i.name for i in by_grade] == ["Kim", "Park"]

        both = apply_filters(instructors, {"grade": "I", "country": "KR"})
        assert [i.name for i in both] == ["Kim"]

    def test_empty_selection_ignored(self, instructors):
        assert apply_filters(instructors, {"grade": None, "country": ""}) == instructors

    def test_list_selection_means_any_of(self, instructors):
        result = apply_filters(instructors, {"grade": ["WE", "UNIVERSE"]})
        assert [i.name for i in result] == ["Lee"]

    def test_every_result_satisfies_every_filter(self, members):
        result = apply_filters(members, {"status": "active"})
        assert all(m.status == "active" for m in result)

    def test_custom_predicate(self):
        rows = [{"days": ["월", "수"]}, {"days": ["화"]}]
        result = apply_filters(rows, {"days": "수"}, {"days": lambda item, sel: sel in item["days"]})
        assert result == [rows[0]]

    def test_boolean_filter(self, instructors):
        instructors[1].is_active = False
        assert [i.name for i in apply_filters(instructors, {"is_active": False})] == ["Lee"]


class TestSort:
    """Test stable single-key sorting"""

    def test_numbers_numeric(self):
        rows = [{"n": 10}, {"n": 9}, {"n": 100}]
        assert [r["n"] for r in sort_items(rows, "n", SORT_ASC)] == [9, 10, 100]

    def test_text_case_insensitive(self):
        rows = [{"s": "banana"}, {"s": "Apple"}, {"s": "cherry"}]
        assert [r["s"] for r in sort_items(rows, "s")] == ["Apple", "banana", "cherry"]

    def test_idempotent(self, members):
        once = sort_items(members, "registration_date", SORT_DESC)
        twice = sort_items(once, "registration_date", SORT_DESC)
        assert once == twice

    def test_desc_is_reverse_of_asc_for_distinct_keys(self, members):
        asc = sort_items(members, "registration_date", SORT_ASC)
        desc = sort_items(members, "registration_date", SORT_DESC)
        assert desc == list(reversed(asc))

    def test_stable_for_equal_keys(self):
        rows = [{"k": 1, "i": 0}, {"k": 0, "i": 1}, {"k": 1, "i": 2}, {"k": 0, "i": 3}]
        assert [r["i"] for r in sort_items(rows, "k", SORT_ASC)] == [1, 3, 0, 2]
        assert [r["i"] for r in sort_items(rows, "k", SORT_DESC)] == [0, 2, 1, 3]

    def test_none_first_ascending_last_descending(self):
        rows = [{"d": "2024-02-01"}, {"d": None}, {"d": "2024-01-01"}]
        assert [r["d"] for r in sort_items(rows, "d", SORT_ASC)] == [None, "2024-01-01", "2024-02-01"]
        assert [r["d"] for r in sort_items(rows, "d", SORT_DESC)] == ["2024-02-01", "2024-01-01", None]

    def test_no_key_keeps_order(self, instructors):
        assert sort_items(instructors, None) == instructors

    def test_bad_direction(self, instructors):
        with pytest.raises(ValueError):
            sort_items(instructors, "name", "up")

    def test_mixed_number_and_text_compare_as_text(self):
        assert compare_values(10, "9") == -1
        assert compare_values(2, 10) == -1


class TestPagination:
    """Test paging"""

    def test_total_pages(self):
        assert total_pages(23, 10) == 3
        assert total_pages(20, 10) == 2
        assert total_pages(0, 10) == 0

    def test_invalid_page_size(self):
        with pytest.raises(ValueError):
            total_pages(5, 0)
        with pytest.raises(ValueError):
            paginate([1, 2], 1, 0)

    def test_last_partial_page(self, members):
        page = paginate(members, 3, 10)
        assert [m.id for m in page] == ["m21", "m22", "m23"]

    def test_page_past_end_is_empty(self, members):
        assert paginate(members, 4, 10) == []

    def test_pages_cover_list_exactly_once(self, members):
        pages = total_pages(len(members), 10)
        joined = []
        for page in range(1, pages + 1):
            joined.extend(paginate(members, page, 10))
        assert joined == members


class TestRunPipeline:
    """Test the combined pipeline with page configs"""

    def test_members_page_three(self, members):
        query = ListQuery(sort_key="registration_date", sort_direction=SORT_ASC, page=3)
        result = run_pipeline(members, query, MEMBERS)
        assert result.total == 23
        assert result.total_pages == 3
        assert [m.id for m in result.rows] == ["m21", "m22", "m23"]

    def test_members_default_sort_newest_first(self, members):
        result = run_pipeline(members, ListQuery(), MEMBERS)
        assert result.rows[0].id == "m23"
        assert len(result.rows) == 10

    def test_instructor_default_sort_order(self, instructors):
        result = run_pipeline(instructors, ListQuery(), INSTRUCTORS)
        assert [i.name for i in result.rows] == ["Lee", "Kim", "Park"]

    def test_instructor_filters(self, instructors):
        query = ListQuery(filters={"grade": "I", "country": "KR"})
        result = run_pipeline(instructors, query, INSTRUCTORS)
        assert [i.name for i in result.rows] == ["Kim"]
        assert result.total == 1

    def test_total_counts_filtered_not_page(self, members):
        query = ListQuery(filters={"status": "active"}, page=1)
        result = run_pipeline(members, query, MEMBERS)
        assert result.total == sum(1 for m in members if m.status == "active")
        assert len(result.rows) <= 10

    def test_base_filter_applied_first(self):
        config = ListViewConfig(search_fields=("name",), base_filter=lambda r: r["keep"])
        rows = [{"name": "a", "keep": True}, {"name": "ab", "keep": False}]
        result = run_pipeline(rows, ListQuery(search="a"), config)
        assert result.rows == [rows[0]]

    def test_empty_result(self, members):
        result = run_pipeline(members, ListQuery(search="nobody"), MEMBERS)
        assert result.is_empty
        assert result.rows == []

    def test_items_not_mutated(self, members):
        before = list(members)
        run_pipeline(members, ListQuery(sort_key="name", sort_direction=SORT_DESC), MEMBERS)
        assert members == before
