"""
Unit Tests for Input Validators

Tests the form payload builders and the list/tag/day helpers.
"""

import pytest

from studio_admin.utils.validators import (
    FormValidator,
    ValidationError,
    clean_lines,
    split_tags,
    toggle_day,
)


class TestHelpers:
    """Test list field helpers"""

    def test_clean_lines_drops_blank(self):
        """Test blank career entries are dropped before sending"""
        assert clean_lines(["10 years", "  ", "", " RYT-500 "]) == ["10 years", "RYT-500"]

    def test_split_tags(self):
        assert split_tags("yoga, pilates,,  meditation ") == ["yoga", "pilates", "meditation"]
        assert split_tags("") == []

    def test_toggle_day_keeps_weekday_order(self):
        """Test toggling keeps Monday-first order"""
        days = toggle_day(["금"], "월")
        assert days == ["월", "금"]
        assert toggle_day(days, "금") == ["월"]

    def test_toggle_unknown_day(self):
        with pytest.raises(ValidationError):
            toggle_day([], "Funday")


class TestValidationError:

    def test_str_with_field(self):
        exc = ValidationError("required", field="name")
        assert str(exc) == "Validation failed for 'name': required"
        assert exc.message == "required"

    def test_str_without_field(self):
        assert str(ValidationError("broken")) == "broken"


class TestInstructorPayload:
    """Test instructor form"""

    def test_minimal(self):
        payload = FormValidator.instructor_payload({"code": "T010", "name": "Choi"})
        assert payload["code"] == "T010"
        assert payload["grade"] == "EARTH"
        assert payload["career"] == []
        assert payload["isActive"] is True
        assert "userId" not in payload

    def test_required_name_blocks(self):
        with pytest.raises(ValidationError) as exc_info:
            FormValidator.instructor_payload({"code": "T010", "name": "  "})
        assert exc_info.value.field == "name"
        assert exc_info.value.message == "이름은(는) 필수 입력 항목입니다."

    def test_career_cleaned(self):
        payload = FormValidator.instructor_payload(
            {"code": "T010", "name": "Choi", "career": ["RYT-200", "", "  "]}
        )
        assert payload["career"] == ["RYT-200"]

    def test_unknown_grade(self):
        with pytest.raises(ValidationError, match="Must be one of"):
            FormValidator.instructor_payload({"code": "T010", "name": "Choi", "grade": "MOON"})

    def test_negative_sort_order(self):
        with pytest.raises(ValidationError):
            FormValidator.instructor_payload({"code": "T010", "name": "Choi", "sort_order": "-1"})


class TestWorkshopPayload:
    """Test workshop form"""

    def test_numbers_parsed(self):
        payload = FormValidator.workshop_payload({
            "title": "Flow", "instructor_name": "Kim", "capacity": "20", "price": "150000",
        })
        assert payload["capacity"] == 20
        assert payload["price"] == 150000
        assert payload["status"] == "OPEN"

    def test_non_numeric_price(self):
        with pytest.raises(ValidationError) as exc_info:
            FormValidator.workshop_payload({"title": "Flow", "instructor_name": "Kim", "price": "free"})
        assert exc_info.value.field == "price"

    def test_end_before_start(self):
        with pytest.raises(ValidationError) as exc_info:
            FormValidator.workshop_payload({
                "title": "Flow", "instructor_name": "Kim",
                "start_date": "2024-05-10", "end_date": "2024-05-01",
            })
        assert exc_info.value.field == "end_date"

    def test_notes_cleaned(self):
        payload = FormValidator.workshop_payload(
            {"title": "Flow", "instructor_name": "Kim", "notes": ["매트 지참", ""]}
        )
        assert payload["notes"] == ["매트 지참"]


class TestSchedulePayload:
    """Test schedule form"""

    def test_regular_needs_days(self):
        with pytest.raises(ValidationError) as exc_info:
            FormValidator.schedule_payload({"class_name": "Hatha", "instructor_name": "Lee"})
        assert exc_info.value.field == "days"

    def test_event_without_days(self):
        payload = FormValidator.schedule_payload(
            {"class_type": "SPECIAL", "class_name": "Bali Trip", "instructor_name": "Lee"}
        )
        assert payload["days"] == []

    def test_days_ordered(self):
        payload = FormValidator.schedule_payload(
            {"class_name": "Hatha", "instructor_name": "Lee", "days": ["목", "화"]}
        )
        assert payload["days"] == ["화", "목"]


class TestMemberPayload:
    """Test member form"""

    def test_interests_split(self):
        payload = FormValidator.member_payload(
            {"name": "Kim", "email": "kim@example.com", "interests": "yoga, pilates"}
        )
        assert payload["interests"] == ["yoga", "pilates"]
        assert "status" not in payload

    def test_bad_email(self):
        with pytest.raises(ValidationError) as exc_info:
            FormValidator.member_payload({"name": "Kim", "email": "kim.example.com"})
        assert exc_info.value.field == "email"

    def test_status_checked(self):
        with pytest.raises(ValidationError):
            FormValidator.member_payload({"name": "Kim", "email": "k@e.com", "status": "banned"})
