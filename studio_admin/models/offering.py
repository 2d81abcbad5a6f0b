"""
Bookable offerings: workshops and schedule contents (classes, trips, events).

Both carry a booking lifecycle status, but the vocabularies differ and are
kept as separate tables (see ``core.transitions``).
"""

from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, List, Optional

WORKSHOP_LEVELS = ("ALL", "BEGINNER", "INTERMEDIATE", "ADVANCED")
WORKSHOP_CATEGORIES = ("VINYASA", "HATHA", "ASHTANGA", "THERAPY", "SPECIAL", "OTHER")
WORKSHOP_STATUSES = ("OPEN", "CLOSED", "CANCELLED", "COMPLETED")

CLASS_TYPES = ("REGULAR", "SPECIAL", "TTC", "WORKSHOP")
SCHEDULE_STATUSES = ("OPEN", "FULL", "WAITLIST", "CANCELLED")
WEEKDAYS = ("월", "화", "수", "목", "금", "토", "일")


def _instructor_name(data: Dict[str, Any]) -> str:
    instructor = data.get("instructor")
    if isinstance(instructor, dict) and instructor.get("name"):
        return instructor["name"]
    return data.get("instructorName") or "N/A"


def _date_part(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    return str(value).split("T")[0]


@dataclass
class Workshop:
    id: str
    title: str = ""
    instructor_name: str = "N/A"
    level: str = "ALL"
    category: str = "OTHER"
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    time_info: str = ""
    location_info: str = ""
    capacity: int = 0
    current_applicants: int = 0
    price: int = 0
    description: str = ""
    notes: List[str] = field(default_factory=list)
    refund_policy: str = ""
    status: str = "OPEN"
    is_active: bool = True
    image_url: Optional[str] = None

    key_field: ClassVar[str] = "id"

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Workshop":
        return cls(
            id=str(data.get("id", "")),
            title=data.get("title") or "",
            instructor_name=_instructor_name(data),
            level=data.get("level") or "ALL",
            category=data.get("category") or "OTHER",
            start_date=data.get("startDate"),
            end_date=data.get("endDate"),
            time_info=data.get("timeInfo") or "",
            location_info=data.get("locationInfo") or "",
            capacity=int(data.get("capacity") or 0),
            current_applicants=int(data.get("enrolled") or data.get("currentApplicants") or 0),
            price=int(data.get("price") or 0),
            description=data.get("description") or "",
            notes=list(data.get("notes") or []),
            refund_policy=data.get("refundPolicy") or "",
            status=data.get("status") or "OPEN",
            is_active=bool(data.get("isActive", True)),
            image_url=data.get("imageUrl"),
        )

    def to_payload(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "instructorName": self.instructor_name,
            "level": self.level,
            "category": self.category,
            "startDate": self.start_date,
            "endDate": self.end_date,
            "timeInfo": self.time_info,
            "locationInfo": self.location_info,
            "capacity": self.capacity,
            "price": self.price,
            "description": self.description,
            "notes": list(self.notes),
            "refundPolicy": self.refund_policy,
            "status": self.status,
            "isActive": self.is_active,
            "imageUrl": self.image_url,
        }


@dataclass
class ScheduleContent:
    """
    A class, trip or event on the timetable.

    ``REGULAR`` classes are listed under Schedules; every other class type is
    listed under Trip & Event.
    """

    id: str
    class_type: str = "REGULAR"
    class_name: str = ""
    instructor_name: str = "N/A"
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    time_info: str = ""
    days: List[str] = field(default_factory=list)
    capacity: int = 0
    current_applicants: int = 0
    price: int = 0
    location_info: str = ""
    class_desc: str = ""
    image_url: Optional[str] = None
    status: str = "OPEN"
    is_active: bool = True

    key_field: ClassVar[str] = "id"

    @property
    def is_event(self) -> bool:
        return self.class_type != "REGULAR"

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "ScheduleContent":
        date = data.get("date")
        start_date = _date_part(date) if date else data.get("startDate")
        end_date = data.get("endDate") or _date_part(date)

        time_info = data.get("timeInfo")
        if not time_info:
            time_info = f"{data.get('startTime') or ''} - {data.get('endTime') or ''}"

        return cls(
            id=str(data.get("id", "")),
            class_type=str(data.get("type") or data.get("classType") or "REGULAR").upper(),
            class_name=data.get("title") or data.get("className") or "",
            instructor_name=_instructor_name(data),
            start_date=start_date,
            end_date=end_date,
            time_info=time_info,
            days=list(data.get("days") or []),
            capacity=int(data.get("capacity") or 0),
            current_applicants=int(data.get("enrolled") or data.get("currentApplicants") or 0),
            price=int(data.get("price") or 0),
            location_info=data.get("locationInfo") or "",
            class_desc=data.get("classDesc") or data.get("description") or "",
            image_url=data.get("imageUrl"),
            status=data.get("status") or "OPEN",
            is_active=bool(data.get("isActive", True)),
        )

    def to_payload(self) -> Dict[str, Any]:
        return {
            "classType": self.class_type,
            "className": self.class_name,
            "instructorName": self.instructor_name,
            "startDate": self.start_date,
            "endDate": self.end_date,
            "timeInfo": self.time_info,
            "days": list(self.days),
            "capacity": self.capacity,
            "price": self.price,
            "locationInfo": self.location_info,
            "classDesc": self.class_desc,
            "imageUrl": self.image_url,
            "status": self.status,
            "isActive": self.is_active,
        }
