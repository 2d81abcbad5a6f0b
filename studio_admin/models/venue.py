"""Studios and inbound contact inquiries"""

from dataclasses import dataclass
from typing import Any, ClassVar, Dict, Optional

STUDIO_STATUSES = ("active", "inactive", "maintenance")

CONTACT_TYPES = ("partnership", "teacher", "workshop")
CONTACT_STATUSES = ("received", "reviewing", "completed")


@dataclass
class Studio:
    id: str
    name: str = ""
    location: str = ""
    manager_name: str = ""
    contact: str = ""
    capacity: int = 0
    status: str = "active"
    created_at: Optional[str] = None

    key_field: ClassVar[str] = "id"

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Studio":
        return cls(
            id=str(data.get("id", "")),
            name=data.get("name") or "",
            location=data.get("location") or "",
            manager_name=data.get("managerName") or "",
            contact=data.get("contact") or "",
            capacity=int(data.get("capacity") or 0),
            status=data.get("status") or "active",
            created_at=data.get("createdAt"),
        )


@dataclass
class Contact:
    """제휴/강사/워크샵 문의 (inquiry submitted from the public site)"""

    id: str
    contact_type: str = "partnership"
    company: str = ""
    name: str = ""
    phone: str = ""
    email: str = ""
    message: str = ""
    status: str = "received"
    created_at: Optional[str] = None
    department: Optional[str] = None
    position: Optional[str] = None

    key_field: ClassVar[str] = "id"

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Contact":
        return cls(
            id=str(data.get("id", "")),
            contact_type=data.get("contactType") or "partnership",
            company=data.get("company") or "",
            name=data.get("name") or "",
            phone=data.get("phone") or "",
            email=data.get("email") or "",
            message=data.get("message") or "",
            status=data.get("status") or "received",
            created_at=data.get("createdAt"),
            department=data.get("department"),
            position=data.get("position"),
        )
