"""
회원 뷰 모델 (Member view model)

Backend ``User`` records are adapted into ``Member`` rows: ``createdAt`` becomes
the registration date and the account ``role`` is mapped onto a membership level.
"""

from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, Iterable, List, Optional

MEMBER_STATUSES = ("active", "inactive", "suspended")
MEMBERSHIP_LEVELS = ("general", "instructor", "premium")
GENDERS = ("MALE", "FEMALE", "NONE")

_ROLE_TO_LEVEL = {
    "ADMIN": "premium",
    "INSTRUCTOR": "instructor",
}

# camelCase names accepted by PATCH /users/{id}
_PAYLOAD_FIELDS = {
    "name": "name",
    "email": "email",
    "phone": "phone",
    "birth_date": "birthDate",
    "gender": "gender",
    "interests": "interests",
    "marketing_consent": "marketingConsent",
    "status": "status",
}


def membership_level_for_role(role: Optional[str]) -> str:
    return _ROLE_TO_LEVEL.get((role or "").upper(), "general")


@dataclass
class Member:
    """Admin-side view of a registered member"""

    id: str
    name: str = ""
    email: str = ""
    phone: Optional[str] = None
    birth_date: Optional[str] = None
    gender: Optional[str] = None
    membership_level: str = "general"
    status: str = "active"
    registration_date: Optional[str] = None
    last_login: Optional[str] = None
    profile_completeness: Optional[int] = None
    interests: List[str] = field(default_factory=list)
    marketing_consent: Optional[bool] = None

    key_field: ClassVar[str] = "id"

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Member":
        role = data.get("role")
        if role:
            level = membership_level_for_role(role)
        else:
            level = data.get("membershipLevel") or "general"

        # An explicit status (suspended included) wins over the isActive flag
        status = data.get("status")
        if status not in MEMBER_STATUSES:
            status = "active" if data.get("isActive") else "inactive"

        return cls(
            id=str(data.get("id", "")),
            name=data.get("name") or "",
            email=data.get("email") or "",
            phone=data.get("phone"),
            birth_date=data.get("birthDate"),
            gender=data.get("gender"),
            membership_level=level,
            status=status,
            registration_date=data.get("createdAt") or data.get("registrationDate"),
            last_login=data.get("lastLogin"),
            profile_completeness=data.get("profileCompleteness"),
            interests=list(data.get("interests") or []),
            marketing_consent=data.get("marketingConsent"),
        )

    def to_payload(self, fields: Optional[Iterable[str]] = None) -> Dict[str, Any]:
        """
        Partial-update body for ``PATCH /users/{id}``.

        Args:
            fields: attribute names to include; all editable fields when omitted
        """
        names = list(fields) if fields is not None else list(_PAYLOAD_FIELDS)
        payload = {}
        for name in names:
            if name not in _PAYLOAD_FIELDS:
                raise KeyError(f"Member field '{name}' is not editable")
            payload[_PAYLOAD_FIELDS[name]] = getattr(self, name)
        return payload


@dataclass
class ActivityLog:
    id: str
    type: str = ""
    description: str = ""
    timestamp: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "ActivityLog":
        return cls(
            id=str(data.get("id", "")),
            type=data.get("type") or "",
            description=data.get("description") or "",
            timestamp=data.get("timestamp"),
            details=dict(data.get("details") or {}),
        )


@dataclass
class MembershipStats:
    total_members: int = 0
    active_members: int = 0
    inactive_members: int = 0
    suspended_members: int = 0
    general_members: int = 0
    instructor_members: int = 0
    premium_members: int = 0

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "MembershipStats":
        return cls(
            total_members=int(data.get("totalMembers") or 0),
            active_members=int(data.get("activeMembers") or 0),
            inactive_members=int(data.get("inactiveMembers") or 0),
            suspended_members=int(data.get("suspendedMembers") or 0),
            general_members=int(data.get("generalMembers") or 0),
            instructor_members=int(data.get("instructorMembers") or 0),
            premium_members=int(data.get("premiumMembers") or 0),
        )

    @classmethod
    def from_members(cls, members: Iterable[Member]) -> "MembershipStats":
        """Count a fetched member list when the stats endpoint is unavailable."""
        stats = cls()
        for member in members:
            stats.total_members += 1
            if member.status == "active":
                stats.active_members += 1
            elif member.status == "inactive":
                stats.inactive_members += 1
            elif member.status == "suspended":
                stats.suspended_members += 1
            if member.membership_level == "instructor":
                stats.instructor_members += 1
            elif member.membership_level == "premium":
                stats.premium_members += 1
            else:
                stats.general_members += 1
        return stats
