from datetime import date, datetime
from typing import Annotated, List, Optional
from uuid import UUID

from pydantic import AfterValidator, AnyUrl, BaseModel, BeforeValidator, ConfigDict, EmailStr, TypeAdapter
from pydantic.alias_generators import to_camel

from app.core.enums import PaymentStatus
from app.core.recurrence import as_utc


# Naive datetimes read back from sqlite are UTC wall time
UtcDatetime = Annotated[datetime, AfterValidator(as_utc)]


class CamelModel(BaseModel):
    """Base for every API schema: camelCase on the wire, snake_case accepted on input."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class LessonView(CamelModel):
    """Lesson joined with its student's display metadata."""

    id: UUID
    subject: str
    date_time: UtcDatetime
    student_id: UUID
    lesson_link: Optional[str] = None
    price_per_hour: float
    duration: int
    payment_status: PaymentStatus
    series_id: Optional[UUID] = None
    student_name: str
    student_color: str


class DateGroup(CamelModel):
    """One agenda day. is_first_of_month marks where a month header goes."""

    day: date
    date_key: str
    is_today: bool
    is_past: bool
    is_first_of_month: bool
    lessons: List[LessonView]


class StudentStats(CamelModel):
    student_id: UUID
    lesson_count: int
    last_lesson_date: Optional[UtcDatetime] = None


HEX_COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"

_url_adapter = TypeAdapter(AnyUrl)


def empty_to_none(value):
    """Form fields arrive as "" when left blank."""
    if isinstance(value, str) and value.strip() == "":
        return None
    return value


def check_url(value: Optional[str]) -> Optional[str]:
    """Validate a URL but keep the caller's exact spelling."""
    if value is None:
        return None
    _url_adapter.validate_python(value)
    return value


BlankableStr = Annotated[Optional[str], BeforeValidator(empty_to_none)]
BlankableEmail = Annotated[Optional[EmailStr], BeforeValidator(empty_to_none)]
BlankableUUID = Annotated[Optional[UUID], BeforeValidator(empty_to_none)]
UrlStr = Annotated[str, AfterValidator(check_url)]
BlankableUrlStr = Annotated[Optional[str], BeforeValidator(empty_to_none), AfterValidator(check_url)]
