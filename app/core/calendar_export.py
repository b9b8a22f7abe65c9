"""iCalendar (RFC 5545) export of upcoming lessons."""

from datetime import datetime, timedelta, timezone
from typing import Iterable, List, Optional

from app.core.lesson_display import UNKNOWN_STUDENT_NAME
from app.core.recurrence import as_utc

EXPORT_MONTHS = 2


def add_months(value: datetime, months: int) -> datetime:
    """Same day-of-month `months` later, clamped to the last day of the target month."""
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = value.day
    while True:
        try:
            return value.replace(year=year, month=month, day=day)
        except ValueError:
            day -= 1


def _ics_timestamp(value: datetime) -> str:
    return as_utc(value).strftime("%Y%m%dT%H%M%SZ")


def _escape_text(value: str) -> str:
    """RFC 5545 TEXT escaping; a raw newline would start a new content line."""
    return (
        str(value)
        .replace("\\", "\\\\")
        .replace(";", "\\;")
        .replace(",", "\\,")
        .replace("\r\n", "\\n")
        .replace("\n", "\\n")
        .replace("\r", "\\n")
    )


def build_calendar(lessons: Iterable, students: Iterable, now: Optional[datetime] = None) -> str:
    now = as_utc(now or datetime.now(timezone.utc))
    horizon = add_months(now, EXPORT_MONTHS)
    by_id = {s.id: s for s in students}
    stamp = _ics_timestamp(now)

    lines: List[str] = [
        "BEGIN:VCALENDAR",
        "VERSION:2.0",
        "PRODID:-//Lesson Scheduler//EN",
        "CALSCALE:GREGORIAN",
        "METHOD:PUBLISH",
        "X-WR-CALNAME:Lesson Schedule",
        "X-WR-TIMEZONE:UTC",
    ]
    for lesson in lessons:
        start = as_utc(lesson.date_time)
        if start < now or start > horizon:
            continue
        student = by_id.get(lesson.student_id)
        name = f"{student.first_name} {student.last_name or ''}".strip() if student else UNKNOWN_STUDENT_NAME
        end = start + timedelta(minutes=lesson.duration)
        status = getattr(lesson.payment_status, "value", lesson.payment_status)
        lines.extend(
            [
                "BEGIN:VEVENT",
                f"UID:{lesson.id}@lessonscheduler",
                f"DTSTAMP:{stamp}",
                f"DTSTART:{_ics_timestamp(start)}",
                f"DTEND:{_ics_timestamp(end)}",
                f"SUMMARY:{_escape_text(lesson.subject)} - {_escape_text(name)}",
                f"DESCRIPTION:Duration: {lesson.duration} minutes\\nPrice: £{lesson.price_per_hour}/hr\\nStatus: {status}",
            ]
        )
        if lesson.lesson_link:
            lines.append(f"URL:{lesson.lesson_link}")
        lines.append("END:VEVENT")
    lines.append("END:VCALENDAR")
    return "\r\n".join(lines)
