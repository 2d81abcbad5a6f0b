"""
신청 요청 모델 (approval requests)

A request is submitted by an end user on the public site and reviewed here.
The three kinds share one envelope (id, status, created_at, user) and keep
their kind-specific submitted fields in ``fields``.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, ClassVar, Dict, Optional


class RequestKind(str, Enum):
    """
    요청 종류

    Attributes:
        TEACHER: 강사 지원
        WORKSHOP: 워크샵 등록 요청
        SCHEDULE: 스케줄 등록 요청
    """
    TEACHER = 'teacher'
    WORKSHOP = 'workshop'
    SCHEDULE = 'schedule'


class RequestStatus(str, Enum):
    PENDING = 'pending'
    APPROVED = 'approved'
    REJECTED = 'rejected'


_ENVELOPE_KEYS = ("id", "status", "createdAt", "user", "userId")


@dataclass
class RequestUser:
    id: str = ""
    email: str = ""
    name: Optional[str] = None

    @classmethod
    def from_api(cls, data: Optional[Dict[str, Any]]) -> "RequestUser":
        data = data or {}
        return cls(
            id=str(data.get("id", "")),
            email=data.get("email") or "",
            name=data.get("name"),
        )


@dataclass
class Request:
    kind: RequestKind
    id: str
    status: RequestStatus = RequestStatus.PENDING
    created_at: Optional[str] = None
    user: RequestUser = field(default_factory=RequestUser)
    fields: Dict[str, Any] = field(default_factory=dict)

    key_field: ClassVar[str] = "id"

    @classmethod
    def from_api(cls, kind: RequestKind, data: Dict[str, Any]) -> "Request":
        user = RequestUser.from_api(data.get("user"))
        if not user.id and data.get("userId"):
            user.id = str(data["userId"])
        return cls(
            kind=RequestKind(kind),
            id=str(data.get("id", "")),
            status=RequestStatus(data.get("status") or RequestStatus.PENDING.value),
            created_at=data.get("createdAt"),
            user=user,
            fields={k: v for k, v in data.items() if k not in _ENVELOPE_KEYS},
        )

    def with_status(self, status: RequestStatus) -> "Request":
        return replace(self, status=RequestStatus(status))

    @property
    def is_pending(self) -> bool:
        return self.status == RequestStatus.PENDING

    # Display fields, empty when the kind does not carry them
    @property
    def name(self) -> str:
        return self.fields.get("name") or ""

    @property
    def title(self) -> str:
        return self.fields.get("title") or ""

    @property
    def class_name(self) -> str:
        return self.fields.get("className") or ""

    @property
    def instructor_name(self) -> str:
        return self.fields.get("instructorName") or ""

    @property
    def display_title(self) -> str:
        return self.name or self.title or self.class_name or self.user.email
