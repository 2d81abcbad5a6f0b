"""
Input Validation Module

Client-side checks for the admin edit forms. A form is validated before any
network call; the first failing field raises ``ValidationError`` and the
submission is blocked.

Usage:
    from studio_admin.utils.validators import FormValidator, ValidationError

    try:
        payload = FormValidator.workshop_payload(form_values)
    except ValidationError as e:
        banner.show_error(str(e))
"""

from typing import Any, Dict, Iterable, List, Optional

from studio_admin.models.instructor import COUNTRIES, GRADES, LEVELS, SNS_PLATFORMS
from studio_admin.models.member import GENDERS, MEMBER_STATUSES
from studio_admin.models.offering import (
    CLASS_TYPES,
    SCHEDULE_STATUSES,
    WEEKDAYS,
    WORKSHOP_CATEGORIES,
    WORKSHOP_LEVELS,
    WORKSHOP_STATUSES,
)


class ValidationError(Exception):
    """
    Exception raised when validation fails.

    This is the base exception for all validation errors in the application.
    """

    def __init__(self, message: str, field: Optional[str] = None, value: Any = None):
        """
        Initialize validation error.

        Args:
            message: Human-readable error message
            field: Field name that failed validation (optional)
            value: Value that failed validation (optional, for logging)
        """
        self.message = message
        self.field = field
        self.value = value
        super().__init__(message)

    def __str__(self) -> str:
        if self.field:
            return f"Validation failed for '{self.field}': {self.message}"
        return self.message


def clean_lines(lines: Iterable[str]) -> List[str]:
    """
    Drop blank entries from a multi-line list field (career, notes).

    >>> clean_lines(["10 years", "  ", "", "RYT-500"])
    ['10 years', 'RYT-500']
    """
    return [line.strip() for line in lines if line and line.strip()]


def split_tags(text: str) -> List[str]:
    """
    Parse a comma-separated tag string.

    >>> split_tags("yoga, pilates,,  meditation ")
    ['yoga', 'pilates', 'meditation']
    """
    if not text:
        return []
    return [tag.strip() for tag in text.split(",") if tag.strip()]


def toggle_day(days: List[str], day: str) -> List[str]:
    """
    Add or remove a weekday tag, keeping Monday-first order.
    """
    if day not in WEEKDAYS:
        raise ValidationError(f"Unknown weekday '{day}'", field="days", value=day)
    selected = set(days)
    if day in selected:
        selected.remove(day)
    else:
        selected.add(day)
    return [d for d in WEEKDAYS if d in selected]


class FormValidator:
    """
    Validators and payload builders for the admin edit forms.

    Each ``*_payload`` method takes the raw form values (strings from line
    edits, lists from list widgets) and returns the JSON body for the create or
    update call.
    """

    @staticmethod
    def require_text(values: Dict[str, Any], field: str, label: str) -> str:
        value = values.get(field)
        text = str(value).strip() if value is not None else ""
        if not text:
            raise ValidationError(f"{label}은(는) 필수 입력 항목입니다.", field=field)
        return text

    @staticmethod
    def non_negative_int(values: Dict[str, Any], field: str, label: str, default: int = 0) -> int:
        raw = values.get(field)
        if raw is None or str(raw).strip() == "":
            return default
        try:
            number = int(str(raw).strip())
        except ValueError:
            raise ValidationError(f"{label}은(는) 숫자여야 합니다.", field=field, value=raw)
        if number < 0:
            raise ValidationError(f"{label}은(는) 0 이상이어야 합니다.", field=field, value=raw)
        return number

    @staticmethod
    def choice(values: Dict[str, Any], field: str, allowed: Iterable[str], default: str) -> str:
        value = values.get(field) or default
        allowed = tuple(allowed)
        if value not in allowed:
            raise ValidationError(
                f"Must be one of: {', '.join(allowed)}", field=field, value=value
            )
        return value

    @staticmethod
    def optional_text(values: Dict[str, Any], field: str) -> Optional[str]:
        value = values.get(field)
        if value is None:
            return None
        text = str(value).strip()
        return text or None

    # =========================================================================
    # Instructor
    # =========================================================================

    @classmethod
    def instructor_payload(cls, values: Dict[str, Any]) -> Dict[str, Any]:
        payload = {
            "code": cls.require_text(values, "code", "강사 코드"),
            "name": cls.require_text(values, "name", "이름"),
            "tagline": (values.get("tagline") or "").strip(),
            "country": cls.choice(values, "country", COUNTRIES, "KR"),
            "grade": cls.choice(values, "grade", GRADES, "EARTH"),
            "level": cls.choice(values, "level", LEVELS, "LEVEL_1"),
            "career": clean_lines(values.get("career") or []),
            "sns": cls.choice(values, "sns", SNS_PLATFORMS, "instagram"),
            "imageUrl": cls.optional_text(values, "image_url"),
            "detailImageUrl": cls.optional_text(values, "detail_image_url"),
            "pcSnsAndCareerColorIsWhite": bool(values.get("light_text", False)),
            "sortOrder": cls.non_negative_int(values, "sort_order", "정렬 순서"),
            "isActive": bool(values.get("is_active", True)),
        }
        user_id = cls.optional_text(values, "user_id")
        if user_id:
            payload["userId"] = user_id
        return payload

    # =========================================================================
    # Workshop
    # =========================================================================

    @classmethod
    def workshop_payload(cls, values: Dict[str, Any]) -> Dict[str, Any]:
        start_date = cls.optional_text(values, "start_date")
        end_date = cls.optional_text(values, "end_date")
        if start_date and end_date and end_date < start_date:
            raise ValidationError("종료일은 시작일 이후여야 합니다.", field="end_date", value=end_date)

        return {
            "title": cls.require_text(values, "title", "워크샵명"),
            "instructorName": cls.require_text(values, "instructor_name", "강사명"),
            "level": cls.choice(values, "level", WORKSHOP_LEVELS, "ALL"),
            "category": cls.choice(values, "category", WORKSHOP_CATEGORIES, "OTHER"),
            "startDate": start_date,
            "endDate": end_date,
            "timeInfo": (values.get("time_info") or "").strip(),
            "locationInfo": (values.get("location_info") or "").strip(),
            "capacity": cls.non_negative_int(values, "capacity", "정원"),
            "price": cls.non_negative_int(values, "price", "가격"),
            "description": (values.get("description") or "").strip(),
            "notes": clean_lines(values.get("notes") or []),
            "refundPolicy": (values.get("refund_policy") or "").strip(),
            "status": cls.choice(values, "status", WORKSHOP_STATUSES, "OPEN"),
            "isActive": bool(values.get("is_active", True)),
            "imageUrl": cls.optional_text(values, "image_url"),
        }

    # =========================================================================
    # Schedule
    # =========================================================================

    @classmethod
    def schedule_payload(cls, values: Dict[str, Any]) -> Dict[str, Any]:
        class_type = cls.choice(values, "class_type", CLASS_TYPES, "REGULAR")
        days = list(values.get("days") or [])
        for day in days:
            if day not in WEEKDAYS:
                raise ValidationError(f"Unknown weekday '{day}'", field="days", value=day)
        if class_type == "REGULAR" and not days:
            raise ValidationError("정규 수업은 요일을 하나 이상 선택해야 합니다.", field="days")

        return {
            "classType": class_type,
            "className": cls.require_text(values, "class_name", "수업명"),
            "instructorName": cls.require_text(values, "instructor_name", "강사명"),
            "startDate": cls.optional_text(values, "start_date"),
            "endDate": cls.optional_text(values, "end_date"),
            "timeInfo": (values.get("time_info") or "").strip(),
            "days": [d for d in WEEKDAYS if d in days],
            "capacity": cls.non_negative_int(values, "capacity", "정원"),
            "price": cls.non_negative_int(values, "price", "가격"),
            "locationInfo": (values.get("location_info") or "").strip(),
            "classDesc": (values.get("class_desc") or "").strip(),
            "imageUrl": cls.optional_text(values, "image_url"),
            "status": cls.choice(values, "status", SCHEDULE_STATUSES, "OPEN"),
            "isActive": bool(values.get("is_active", True)),
        }

    # =========================================================================
    # Member
    # =========================================================================

    @classmethod
    def member_payload(cls, values: Dict[str, Any]) -> Dict[str, Any]:
        """
        Member edit form. Email is required and must contain ``@``; interests
        arrive as one comma-separated string.
        """
        email = cls.require_text(values, "email", "이메일")
        if "@" not in email:
            raise ValidationError("이메일 형식이 올바르지 않습니다.", field="email", value=email)

        payload = {
            "name": cls.require_text(values, "name", "이름"),
            "email": email,
            "phone": cls.optional_text(values, "phone"),
            "birthDate": cls.optional_text(values, "birth_date"),
            "interests": split_tags(values.get("interests") or ""),
            "marketingConsent": bool(values.get("marketing_consent", False)),
        }
        gender = values.get("gender")
        if gender:
            payload["gender"] = cls.choice(values, "gender", GENDERS, "NONE")
        status = values.get("status")
        if status:
            payload["status"] = cls.choice(values, "status", MEMBER_STATUSES, "active")
        return payload
