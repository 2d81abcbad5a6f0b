# -*- coding: utf-8 -*-
"""
목록 페이지 정의 - 컬럼, 필터, 조회/수정 API 연결
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Sequence, Tuple

from studio_admin.caller.resources import AdminApi
from studio_admin.config import constants
from studio_admin.core import list_configs, transitions
from studio_admin.core.pipeline import ListViewConfig
from studio_admin.models.instructor import COUNTRIES, GRADES
from studio_admin.models.member import MEMBER_STATUSES, MEMBERSHIP_LEVELS
from studio_admin.models.offering import (
    CLASS_TYPES, SCHEDULE_STATUSES, WEEKDAYS, WORKSHOP_CATEGORIES, WORKSHOP_LEVELS,
    WORKSHOP_STATUSES,
)
from studio_admin.models.venue import CONTACT_STATUSES, CONTACT_TYPES, STUDIO_STATUSES
from studio_admin.ui.form_dialog import (
    FormSpec, INSTRUCTOR_FORM, MEMBER_FORM, SCHEDULE_FORM, WORKSHOP_FORM,
)
from studio_admin.utils.formatting import STATUS_BADGES

# column kinds
TEXT = "text"
BADGE = "badge"
DATE = "date"
PRICE = "price"
COUNT = "count"

MEMBERSHIP_LABELS = {"general": "일반", "instructor": "강사", "premium": "프리미엄"}
CONTACT_TYPE_LABELS = {"partnership": "파트너십", "teacher": "강사 문의", "workshop": "워크샵 문의"}


@dataclass(frozen=True)
class ColumnSpec:
    label: str
    field: str
    width: int = 120
    kind: str = TEXT
    sortable: bool = True
    formatter: Optional[Callable[[Any], str]] = None


@dataclass(frozen=True)
class FilterSpec:
    field: str
    label: str
    options: Sequence[Tuple[Any, str]]


@dataclass(frozen=True)
class PageSpec:
    key: str
    title: str
    config: ListViewConfig
    columns: Sequence[ColumnSpec]
    fetch: Callable[[AdminApi], Callable[[], Sequence[Any]]]
    filters: Sequence[FilterSpec] = ()
    search_placeholder: str = "검색"
    empty_text: str = "등록된 항목이 없습니다."
    status_entity: Optional[str] = None
    form: Optional[FormSpec] = None
    create: Optional[Callable[[AdminApi], Callable[[Dict[str, Any]], Any]]] = None
    update: Optional[Callable[[AdminApi], Callable[[Any, Dict[str, Any]], Any]]] = None
    delete: Optional[Callable[[AdminApi], Callable[[Any], Any]]] = None
    detail: bool = False


def _status_options(statuses) -> Tuple[Tuple[Any, str], ...]:
    return tuple((s, STATUS_BADGES.get(s, (s, ""))[0]) for s in statuses)


def _plain_options(values, labels: Optional[Dict[str, str]] = None) -> Tuple[Tuple[Any, str], ...]:
    labels = labels or {}
    return tuple((v, labels.get(v, v)) for v in values)


def _days(value: Any) -> str:
    return ", ".join(value) if value else "-"


# =============================================================================
# Pages
# =============================================================================

MEMBERS_PAGE = PageSpec(
    key=constants.PAGE_MEMBERS,
    title="회원관리",
    config=list_configs.MEMBERS,
    fetch=lambda api: api.members.list,
    search_placeholder="이름, 이메일, 연락처 검색",
    empty_text="등록된 회원이 없습니다.",
    status_entity=transitions.MEMBER,
    form=MEMBER_FORM,
    update=lambda api: api.members.update,
    filters=(
        FilterSpec("status", "상태", _status_options(MEMBER_STATUSES)),
        FilterSpec("membership_level", "등급", _plain_options(MEMBERSHIP_LEVELS, MEMBERSHIP_LABELS)),
    ),
    columns=(
        ColumnSpec("이름", "name", 120),
        ColumnSpec("이메일", "email", 220),
        ColumnSpec("연락처", "phone", 130),
        ColumnSpec("등급", "membership_level", 90,
                   formatter=lambda v: MEMBERSHIP_LABELS.get(v, v)),
        ColumnSpec("상태", "status", 90, BADGE),
        ColumnSpec("가입일", "registration_date", 120, DATE),
        ColumnSpec("최근 로그인", "last_login", 120, DATE),
    ),
)

INSTRUCTORS_PAGE = PageSpec(
    key=constants.PAGE_INSTRUCTORS,
    title="강사관리",
    config=list_configs.INSTRUCTORS,
    fetch=lambda api: api.instructors.list,
    search_placeholder="이름, 소개, 코드 검색",
    empty_text="등록된 강사가 없습니다.",
    status_entity=transitions.INSTRUCTOR_VISIBILITY,
    form=INSTRUCTOR_FORM,
    create=lambda api: api.instructors.create,
    update=lambda api: api.instructors.update,
    delete=lambda api: api.instructors.delete,
    filters=(
        FilterSpec("grade", "등급", _plain_options(GRADES)),
        FilterSpec("country", "국가", _plain_options(COUNTRIES)),
        FilterSpec("is_active", "노출", ((True, "노출"), (False, "숨김"))),
    ),
    columns=(
        ColumnSpec("순서", "sort_order", 60),
        ColumnSpec("코드", "code", 100),
        ColumnSpec("이름", "name", 120),
        ColumnSpec("소개", "tagline", 240),
        ColumnSpec("국가", "country", 70),
        ColumnSpec("등급", "grade", 90),
        ColumnSpec("레벨", "level", 90),
        ColumnSpec("노출", "is_active", 80, BADGE),
    ),
)

WORKSHOPS_PAGE = PageSpec(
    key=constants.PAGE_WORKSHOPS,
    title="워크샵",
    config=list_configs.WORKSHOPS,
    fetch=lambda api: api.workshops.list,
    search_placeholder="워크샵명, 강사, 장소 검색",
    empty_text="등록된 워크샵이 없습니다.",
    status_entity=transitions.WORKSHOP,
    form=WORKSHOP_FORM,
    create=lambda api: api.workshops.create,
    update=lambda api: api.workshops.update,
    delete=lambda api: api.workshops.delete,
    filters=(
        FilterSpec("status", "상태", _status_options(WORKSHOP_STATUSES)),
        FilterSpec("level", "난이도", _plain_options(WORKSHOP_LEVELS)),
        FilterSpec("category", "카테고리", _plain_options(WORKSHOP_CATEGORIES)),
    ),
    columns=(
        ColumnSpec("워크샵명", "title", 220),
        ColumnSpec("강사", "instructor_name", 110),
        ColumnSpec("시작일", "start_date", 110, DATE),
        ColumnSpec("종료일", "end_date", 110, DATE),
        ColumnSpec("장소", "location_info", 140),
        ColumnSpec("신청/정원", "current_applicants", 90, COUNT),
        ColumnSpec("가격", "price", 100, PRICE),
        ColumnSpec("상태", "status", 90, BADGE),
    ),
)

SCHEDULES_PAGE = PageSpec(
    key=constants.PAGE_SCHEDULES,
    title="스케줄",
    config=list_configs.SCHEDULES,
    fetch=lambda api: api.schedules.list,
    search_placeholder="수업명, 강사, 장소 검색",
    empty_text="등록된 스케줄이 없습니다.",
    status_entity=transitions.SCHEDULE,
    form=SCHEDULE_FORM,
    create=lambda api: api.schedules.create,
    update=lambda api: api.schedules.update,
    delete=lambda api: api.schedules.delete,
    filters=(
        FilterSpec("status", "상태", _status_options(SCHEDULE_STATUSES)),
        FilterSpec("days", "요일", _plain_options(WEEKDAYS)),
    ),
    columns=(
        ColumnSpec("수업명", "class_name", 200),
        ColumnSpec("강사", "instructor_name", 110),
        ColumnSpec("요일", "days", 140, sortable=False, formatter=_days),
        ColumnSpec("시간", "time_info", 120),
        ColumnSpec("시작일", "start_date", 110, DATE),
        ColumnSpec("신청/정원", "current_applicants", 90, COUNT),
        ColumnSpec("상태", "status", 90, BADGE),
    ),
)

EVENTS_PAGE = PageSpec(
    key=constants.PAGE_EVENTS,
    title="Trip&Event",
    config=list_configs.EVENTS,
    fetch=lambda api: api.schedules.list,
    search_placeholder="이벤트명, 강사, 장소 검색",
    empty_text="등록된 Trip&Event가 없습니다.",
    status_entity=transitions.SCHEDULE,
    form=SCHEDULE_FORM,
    create=lambda api: api.schedules.create,
    update=lambda api: api.schedules.update,
    delete=lambda api: api.schedules.delete,
    filters=(
        FilterSpec("class_type", "유형", _plain_options([t for t in CLASS_TYPES if t != "REGULAR"])),
        FilterSpec("status", "상태", _status_options(SCHEDULE_STATUSES)),
    ),
    columns=(
        ColumnSpec("유형", "class_type", 90),
        ColumnSpec("이벤트명", "class_name", 220),
        ColumnSpec("강사", "instructor_name", 110),
        ColumnSpec("시작일", "start_date", 110, DATE),
        ColumnSpec("종료일", "end_date", 110, DATE),
        ColumnSpec("장소", "location_info", 140),
        ColumnSpec("가격", "price", 100, PRICE),
        ColumnSpec("상태", "status", 90, BADGE),
    ),
)

STUDIOS_PAGE = PageSpec(
    key=constants.PAGE_STUDIOS,
    title="스튜디오",
    config=list_configs.STUDIOS,
    fetch=lambda api: api.studios.list,
    search_placeholder="스튜디오명, 위치, 담당자 검색",
    empty_text="등록된 스튜디오가 없습니다.",
    status_entity=transitions.STUDIO,
    filters=(FilterSpec("status", "상태", _status_options(STUDIO_STATUSES)),),
    columns=(
        ColumnSpec("스튜디오명", "name", 180),
        ColumnSpec("위치", "location", 200),
        ColumnSpec("담당자", "manager_name", 110),
        ColumnSpec("연락처", "contact", 130),
        ColumnSpec("수용 인원", "capacity", 90),
        ColumnSpec("상태", "status", 90, BADGE),
        ColumnSpec("등록일", "created_at", 110, DATE),
    ),
)

INQUIRIES_PAGE = PageSpec(
    key=constants.PAGE_INQUIRIES,
    title="제휴문의",
    config=list_configs.INQUIRIES,
    fetch=lambda api: api.contacts.list,
    search_placeholder="회사, 이름, 이메일, 내용 검색",
    empty_text="접수된 문의가 없습니다.",
    status_entity=transitions.CONTACT,
    detail=True,
    filters=(
        FilterSpec("contact_type", "유형", _plain_options(CONTACT_TYPES, CONTACT_TYPE_LABELS)),
        FilterSpec("status", "상태", _status_options(CONTACT_STATUSES)),
    ),
    columns=(
        ColumnSpec("유형", "contact_type", 90,
                   formatter=lambda v: CONTACT_TYPE_LABELS.get(v, v)),
        ColumnSpec("회사", "company", 150),
        ColumnSpec("이름", "name", 100),
        ColumnSpec("이메일", "email", 200),
        ColumnSpec("연락처", "phone", 130),
        ColumnSpec("상태", "status", 90, BADGE),
        ColumnSpec("접수일", "created_at", 110, DATE),
    ),
)

PARTNERSHIPS_PAGE = PageSpec(
    key=constants.PAGE_PARTNERSHIPS,
    title="파트너십",
    config=list_configs.PARTNERSHIPS,
    fetch=lambda api: api.contacts.list,
    search_placeholder="회사, 이름, 이메일 검색",
    empty_text="접수된 파트너십 문의가 없습니다.",
    status_entity=transitions.CONTACT,
    detail=True,
    filters=(FilterSpec("status", "상태", _status_options(CONTACT_STATUSES)),),
    columns=(
        ColumnSpec("회사", "company", 160),
        ColumnSpec("담당자", "name", 100),
        ColumnSpec("부서", "department", 110),
        ColumnSpec("직책", "position", 90),
        ColumnSpec("이메일", "email", 200),
        ColumnSpec("상태", "status", 90, BADGE),
        ColumnSpec("접수일", "created_at", 110, DATE),
    ),
)

LIST_PAGES: Dict[str, PageSpec] = {
    spec.key: spec
    for spec in (
        MEMBERS_PAGE, INSTRUCTORS_PAGE, WORKSHOPS_PAGE, SCHEDULES_PAGE, EVENTS_PAGE,
        STUDIOS_PAGE, INQUIRIES_PAGE, PARTNERSHIPS_PAGE,
    )
}
