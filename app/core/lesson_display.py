"""Lesson display transform: student join, rolling-window date grouping, month headers."""

from datetime import date, datetime, time, timedelta, timezone
from typing import Any, Dict, Iterable, List, Optional
from zoneinfo import ZoneInfo

from app.core.config import settings
from app.core.models.student import DEFAULT_STUDENT_COLOR
from app.core.recurrence import as_utc
from app.core.schemas import DateGroup, LessonView, StudentStats

UNKNOWN_STUDENT_NAME = "Unknown Student"
WINDOW_DAYS_BEFORE = 7


def transform_lesson_with_student(lesson: Any, student: Optional[Any]) -> LessonView:
    if student is not None:
        student_name = f"{student.first_name} {student.last_name or ''}"
        student_color = student.default_color or DEFAULT_STUDENT_COLOR
    else:
        student_name = UNKNOWN_STUDENT_NAME
        student_color = DEFAULT_STUDENT_COLOR
    return LessonView(
        id=lesson.id,
        subject=lesson.subject,
        date_time=as_utc(lesson.date_time),
        student_id=lesson.student_id,
        lesson_link=lesson.lesson_link,
        price_per_hour=float(lesson.price_per_hour),
        duration=lesson.duration,
        payment_status=lesson.payment_status,
        series_id=getattr(lesson, "series_id", None),
        student_name=student_name,
        student_color=student_color,
    )


def transform_lessons(lessons: Iterable[Any], students: Iterable[Any]) -> List[LessonView]:
    by_id = {s.id: s for s in students}
    return [transform_lesson_with_student(l, by_id.get(l.student_id)) for l in lessons]


def _zone(tz: Optional[str]) -> ZoneInfo:
    return ZoneInfo(tz or settings.display_timezone)


def _local_now(now: Optional[datetime], zone: ZoneInfo) -> datetime:
    return as_utc(now or datetime.now(timezone.utc)).astimezone(zone)


def date_key(value: datetime, zone: ZoneInfo) -> str:
    return as_utc(value).astimezone(zone).strftime("%Y-%m-%d")


def group_lessons_by_date(
    lessons: Iterable[LessonView],
    now: Optional[datetime] = None,
    tz: Optional[str] = None,
) -> Dict[str, List[LessonView]]:
    """
    Group lessons by local calendar day, from midnight a week ago onwards.

    Keys are yyyy-MM-dd in chronological order; today's key is always present.
    """
    zone = _zone(tz)
    local_now = _local_now(now, zone)
    window_start = datetime.combine(
        (local_now - timedelta(days=WINDOW_DAYS_BEFORE)).date(), time.min, tzinfo=zone
    )

    visible = sorted(
        (l for l in lessons if as_utc(l.date_time) >= window_start),
        key=lambda l: as_utc(l.date_time),
    )
    groups: Dict[str, List[LessonView]] = {}
    for lesson in visible:
        groups.setdefault(date_key(lesson.date_time, zone), []).append(lesson)
    groups.setdefault(local_now.strftime("%Y-%m-%d"), [])
    return dict(sorted(groups.items()))


def agenda_sections(
    groups: Dict[str, List[LessonView]],
    now: Optional[datetime] = None,
    tz: Optional[str] = None,
) -> List[DateGroup]:
    zone = _zone(tz)
    today = _local_now(now, zone).date()
    sections: List[DateGroup] = []
    previous_month: Optional[str] = None
    for key, day_lessons in groups.items():
        day = date.fromisoformat(key)
        month = key[:7]
        sections.append(
            DateGroup(
                day=day,
                date_key=key,
                is_today=day == today,
                is_past=day < today,
                is_first_of_month=month != previous_month,
                lessons=day_lessons,
            )
        )
        previous_month = month
    return sections


def student_stats(student: Any, lessons: Iterable[Any], now: Optional[datetime] = None) -> StudentStats:
    """Lesson count and most recent lesson that has already started."""
    now_utc = as_utc(now or datetime.now(timezone.utc))
    own = [l for l in lessons if l.student_id == student.id]
    past = [as_utc(l.date_time) for l in own if as_utc(l.date_time) <= now_utc]
    return StudentStats(
        student_id=student.id,
        lesson_count=len(own),
        last_lesson_date=max(past) if past else None,
    )
