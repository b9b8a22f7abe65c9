"""Lesson schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Annotated, Optional
from uuid import UUID

from pydantic import BeforeValidator, Field

from app.core.enums import PaymentStatus, RecurrenceFrequency
from app.core.schemas import BlankableUrlStr, CamelModel, UtcDatetime

# Lessons longer than a day are rejected; the overlap check only looks one day back
MAX_LESSON_MINUTES = 24 * 60


def _date_only_to_midnight(value):
    """End dates are usually picked as a bare yyyy-MM-dd."""
    if isinstance(value, str) and len(value) == 10:
        return f"{value}T00:00:00+00:00"
    return value


EndDate = Annotated[datetime, BeforeValidator(_date_only_to_midnight)]


class LessonCreate(CamelModel):
    subject: str = Field(..., min_length=1)
    date_time: datetime
    student_id: UUID
    lesson_link: BlankableUrlStr = None
    price_per_hour: Decimal = Field(..., ge=0)
    duration: int = Field(..., gt=0, le=MAX_LESSON_MINUTES)
    payment_status: PaymentStatus = PaymentStatus.pending


class LessonUpdate(CamelModel):
    subject: Optional[str] = Field(None, min_length=1)
    date_time: Optional[datetime] = None
    student_id: Optional[UUID] = None
    lesson_link: BlankableUrlStr = None
    price_per_hour: Optional[Decimal] = Field(None, ge=0)
    duration: Optional[int] = Field(None, gt=0, le=MAX_LESSON_MINUTES)
    payment_status: Optional[PaymentStatus] = None


class LessonResponse(CamelModel):
    id: UUID
    subject: str
    date_time: UtcDatetime
    student_id: UUID
    lesson_link: Optional[str] = None
    price_per_hour: Decimal
    duration: int
    payment_status: PaymentStatus
    series_id: Optional[UUID] = None


class RecurrenceSpec(CamelModel):
    frequency: RecurrenceFrequency = RecurrenceFrequency.weekly
    end_date: EndDate


class RecurringLessonCreate(CamelModel):
    template_lesson_id: UUID
    frequency: RecurrenceFrequency
    end_date: EndDate


class RecurringLessonUpdate(CamelModel):
    frequency: Optional[RecurrenceFrequency] = None
    end_date: Optional[EndDate] = None


class RecurringLessonResponse(CamelModel):
    id: UUID
    template_lesson_id: UUID
    frequency: RecurrenceFrequency
    end_date: Optional[UtcDatetime] = None


class LessonWithRecurrenceCreate(CamelModel):
    lesson: LessonCreate
    recurring: RecurrenceSpec


class LessonWithRecurrenceResponse(CamelModel):
    lesson: LessonResponse
    recurring_lesson: RecurringLessonResponse


class SeriesDeleteResponse(CamelModel):
    deleted: int
