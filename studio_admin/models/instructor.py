"""Instructor (teacher) profile model"""

from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, List, Optional

COUNTRIES = ("KR", "CN")
# Display order, highest tier first
GRADES = ("UNIVERSE", "I", "WE", "EARTH")
LEVELS = ("LEVEL_1", "LEVEL_2", "LEVEL_3")
SNS_PLATFORMS = ("instagram", "wechat", "youtube")


@dataclass
class Instructor:
    """
    Instructor profile keyed by ``code``.

    ``code`` is the stable row key; it is not necessarily the user id of the
    account that owns the profile.
    """

    code: str
    name: str = ""
    tagline: str = ""
    country: str = "KR"
    grade: str = "EARTH"
    level: str = "LEVEL_1"
    career: List[str] = field(default_factory=list)
    sns: str = "instagram"
    user_id: Optional[str] = None
    image_url: Optional[str] = None
    detail_image_url: Optional[str] = None
    light_text: bool = False
    sort_order: int = 0
    is_active: bool = True

    key_field: ClassVar[str] = "code"

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Instructor":
        return cls(
            code=str(data.get("code", "")),
            name=data.get("name") or "",
            tagline=data.get("tagline") or "",
            country=data.get("country") or "KR",
            grade=data.get("grade") or "EARTH",
            level=data.get("level") or "LEVEL_1",
            career=list(data.get("career") or []),
            sns=data.get("sns") or "instagram",
            user_id=data.get("userId"),
            image_url=data.get("imageUrl"),
            detail_image_url=data.get("detailImageUrl"),
            light_text=bool(data.get("pcSnsAndCareerColorIsWhite", False)),
            sort_order=int(data.get("sortOrder") or 0),
            is_active=bool(data.get("isActive", True)),
        )

    def to_payload(self) -> Dict[str, Any]:
        payload = {
            "code": self.code,
            "name": self.name,
            "tagline": self.tagline,
            "country": self.country,
            "grade": self.grade,
            "level": self.level,
            "career": list(self.career),
            "sns": self.sns,
            "imageUrl": self.image_url,
            "detailImageUrl": self.detail_image_url,
            "pcSnsAndCareerColorIsWhite": self.light_text,
            "sortOrder": self.sort_order,
            "isActive": self.is_active,
        }
        if self.user_id:
            payload["userId"] = self.user_id
        return payload
