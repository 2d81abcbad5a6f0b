"""
Unit Tests for View Models

Backend JSON in, admin-side dataclasses out.
"""

from studio_admin.models import (
    Contact,
    Instructor,
    Member,
    MembershipStats,
    Request,
    RequestKind,
    RequestStatus,
    ScheduleContent,
    Studio,
    Workshop,
)


class TestMember:

    def test_role_maps_to_level(self):
        assert Member.from_api({"id": 1, "role": "ADMIN"}).membership_level == "premium"
        assert Member.from_api({"id": 1, "role": "INSTRUCTOR"}).membership_level == "instructor"
        assert Member.from_api({"id": 1, "role": "USER"}).membership_level == "general"

    def test_explicit_status_wins(self):
        member = Member.from_api({"id": "u1", "status": "suspended", "isActive": True})
        assert member.status == "suspended"

    def test_is_active_fallback(self):
        assert Member.from_api({"id": "u1", "isActive": False}).status == "inactive"
        assert Member.from_api({"id": "u1", "isActive": True}).status == "active"

    def test_registration_date_from_created_at(self):
        member = Member.from_api({"id": 7, "createdAt": "2024-02-01T00:00:00Z"})
        assert member.id == "7"
        assert member.registration_date == "2024-02-01T00:00:00Z"

    def test_partial_payload(self):
        member = Member(id="u1", name="Kim", status="inactive", marketing_consent=True)
        assert member.to_payload(["status", "marketing_consent"]) == {
            "status": "inactive",
            "marketingConsent": True,
        }


class TestMembershipStats:

    def test_from_members_counts(self, members):
        stats = MembershipStats.from_members(members)
        assert stats.total_members == 23
        assert stats.active_members + stats.inactive_members == 23
        assert stats.inactive_members == 7
        assert stats.general_members == 23

    def test_from_api(self):
        stats = MembershipStats.from_api({"totalMembers": 5, "activeMembers": 4})
        assert (stats.total_members, stats.active_members, stats.premium_members) == (5, 4, 0)


class TestInstructor:

    def test_round_trip_fields(self):
        instructor = Instructor.from_api({
            "code": "T001", "name": "Kim", "grade": "I", "sortOrder": "3",
            "pcSnsAndCareerColorIsWhite": True, "userId": "u9",
        })
        assert instructor.sort_order == 3
        assert instructor.light_text is True
        payload = instructor.to_payload()
        assert payload["userId"] == "u9"
        assert payload["pcSnsAndCareerColorIsWhite"] is True


class TestOfferings:

    def test_workshop_instructor_object(self):
        workshop = Workshop.from_api({"id": 3, "instructor": {"name": "Lee"}, "enrolled": 4})
        assert workshop.instructor_name == "Lee"
        assert workshop.current_applicants == 4

    def test_workshop_instructor_missing(self):
        assert Workshop.from_api({"id": 3}).instructor_name == "N/A"

    def test_schedule_date_split(self):
        schedule = ScheduleContent.from_api({
            "id": "s1", "date": "2024-06-01T09:00:00Z", "startTime": "09:00", "endTime": "10:00",
        })
        assert schedule.start_date == "2024-06-01"
        assert schedule.end_date == "2024-06-01"
        assert schedule.time_info == "09:00 - 10:00"

    def test_schedule_event_flag(self):
        assert not ScheduleContent.from_api({"id": "s1"}).is_event
        assert ScheduleContent.from_api({"id": "s2", "type": "special"}).is_event


class TestVenues:

    def test_studio_defaults(self):
        studio = Studio.from_api({"id": 1, "managerName": "Park"})
        assert studio.manager_name == "Park"
        assert studio.status == "active"

    def test_contact_type(self):
        contact = Contact.from_api({"id": 1, "contactType": "teacher", "company": "Yoga Co"})
        assert contact.contact_type == "teacher"
        assert contact.status == "received"


class TestRequest:

    def test_envelope_split(self):
        request = Request.from_api(RequestKind.TEACHER, {
            "id": 5, "status": "approved", "createdAt": "2024-01-01",
            "userId": "u1", "name": "Kim", "career": ["RYT"],
        })
        assert request.id == "5"
        assert request.status == RequestStatus.APPROVED
        assert request.user.id == "u1"
        assert request.fields == {"name": "Kim", "career": ["RYT"]}

    def test_missing_status_is_pending(self):
        assert Request.from_api("schedule", {"id": 1}).is_pending

    def test_display_title_fallbacks(self):
        assert Request.from_api("workshop", {"id": 1, "title": "Flow"}).display_title == "Flow"
        assert Request.from_api("schedule", {"id": 1, "className": "Yin"}).display_title == "Yin"
        request = Request.from_api("teacher", {"id": 1, "user": {"email": "a@b.com"}})
        assert request.display_title == "a@b.com"

    def test_with_status_copies(self):
        request = Request(kind=RequestKind.WORKSHOP, id="r1")
        approved = request.with_status("approved")
        assert approved.status == RequestStatus.APPROVED
        assert request.status == RequestStatus.PENDING
