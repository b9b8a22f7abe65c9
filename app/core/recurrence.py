"""
Recurring lesson series.

A series is not stored as a list of instances. Membership is derived from the
lessons themselves: same student, same weekday, same time of day, at or after
a reference lesson. All comparisons happen on UTC-normalised datetimes; naive
datetimes are taken to already be UTC.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Awaitable, Callable, Iterable, List, Tuple, Union

import structlog

from app.core.enums import RecurrenceFrequency
from app.core.exceptions import SeriesDeleteError

logger = structlog.get_logger(__name__)

FREQUENCY_STEP = {
    RecurrenceFrequency.weekly: timedelta(days=7),
    RecurrenceFrequency.biweekly: timedelta(days=14),
}


def as_utc(value: Union[datetime, str]) -> datetime:
    """Parse ISO strings and normalise any datetime to an aware UTC datetime."""
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def slot_key(value: Union[datetime, str]) -> Tuple[int, str]:
    """(weekday, HH:MM:SS) of a lesson start in UTC."""
    utc = as_utc(value)
    return utc.weekday(), utc.strftime("%H:%M:%S")


def match_series(reference: Any, all_lessons: Iterable[Any]) -> List[Any]:
    """Every lesson in the same structural series as reference, reference included."""
    ref_start = as_utc(reference.date_time)
    ref_slot = slot_key(ref_start)
    matched = []
    for lesson in all_lessons:
        if lesson.student_id != reference.student_id:
            continue
        start = as_utc(lesson.date_time)
        if start < ref_start:
            continue
        if slot_key(start) != ref_slot:
            continue
        matched.append(lesson)
    return matched


async def delete_series(
    reference: Any,
    all_lessons: Iterable[Any],
    delete_one: Callable[[Any], Awaitable[Any]],
) -> int:
    """
    Delete every member of the reference's series, one awaited call at a time.

    The first failure stops the batch and is raised as SeriesDeleteError;
    members deleted before it stay deleted.
    """
    members = match_series(reference, all_lessons)
    deleted = 0
    for lesson in members:
        try:
            await delete_one(lesson.id)
        except Exception as exc:
            logger.warning("series_delete_failed", lesson_id=str(lesson.id), deleted=deleted)
            raise SeriesDeleteError(lesson.id, deleted) from exc
        deleted += 1
    logger.info("series_deleted", reference_id=str(reference.id), deleted=deleted)
    return deleted


def expand_series(
    start: datetime,
    frequency: Union[RecurrenceFrequency, str],
    end_date: datetime,
) -> List[datetime]:
    """Occurrence start times from start through end_date (inclusive, by UTC calendar day)."""
    step = FREQUENCY_STEP[RecurrenceFrequency(frequency)]
    current = as_utc(start)
    last_day = as_utc(end_date).date()
    occurrences = []
    while current.date() <= last_day:
        occurrences.append(current)
        current = current + step
    return occurrences
