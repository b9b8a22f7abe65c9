"""Lessons service: CRUD with overlap checks, recurring creation and series deletion."""

from datetime import datetime, timedelta
from typing import Iterable, List, Optional
from uuid import UUID

import structlog
from fastapi import status
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ServiceError
from app.core.models import Lesson, RecurringLesson, Student
from app.core.recurrence import as_utc, match_series

from .schemas import MAX_LESSON_MINUTES, LessonCreate, LessonUpdate, LessonWithRecurrenceCreate

logger = structlog.get_logger(__name__)

OVERLAP_MESSAGE = "This time slot overlaps with an existing lesson"
NULLABLE_FIELDS = {"lesson_link"}


async def get_lesson_or_404(db: AsyncSession, lesson_id: UUID) -> Lesson:
    lesson = await db.get(Lesson, lesson_id)
    if not lesson:
        raise ServiceError("Lesson not found", status.HTTP_404_NOT_FOUND)
    return lesson


async def _check_student(db: AsyncSession, student_id: UUID) -> None:
    if await db.get(Student, student_id) is None:
        raise ServiceError("Invalid student", status.HTTP_400_BAD_REQUEST)


async def check_overlap(
    db: AsyncSession,
    start: datetime,
    duration: int,
    exclude_ids: Iterable[UUID] = (),
) -> None:
    """Raise 409 when [start, start + duration) intersects any stored lesson."""
    start = as_utc(start)
    end = start + timedelta(minutes=duration)
    stmt = select(Lesson).where(
        Lesson.date_time < end,
        Lesson.date_time > start - timedelta(minutes=MAX_LESSON_MINUTES),
    )
    excluded = list(exclude_ids)
    if excluded:
        stmt = stmt.where(Lesson.id.notin_(excluded))
    result = await db.execute(stmt)
    for other in result.scalars().all():
        other_start = as_utc(other.date_time)
        if start < other_start + timedelta(minutes=other.duration) and other_start < end:
            raise ServiceError(OVERLAP_MESSAGE, status.HTTP_409_CONFLICT)


async def list_lessons(db: AsyncSession) -> List[Lesson]:
    result = await db.execute(select(Lesson).order_by(Lesson.date_time.desc()))
    return list(result.scalars().all())


async def _add_lesson(db: AsyncSession, payload: LessonCreate, series_id: Optional[UUID] = None) -> Lesson:
    """Validate and stage a lesson without committing."""
    await _check_student(db, payload.student_id)
    start = as_utc(payload.date_time)
    await check_overlap(db, start, payload.duration)
    data = payload.model_dump()
    data["date_time"] = start
    data["payment_status"] = payload.payment_status.value
    lesson = Lesson(series_id=series_id, **data)
    db.add(lesson)
    await db.flush()
    return lesson


async def create_lesson(db: AsyncSession, payload: LessonCreate) -> Lesson:
    lesson = await _add_lesson(db, payload)
    await db.commit()
    await db.refresh(lesson)
    logger.info("lesson_created", lesson_id=str(lesson.id), student_id=str(lesson.student_id))
    return lesson


async def update_lesson(db: AsyncSession, lesson_id: UUID, payload: LessonUpdate) -> Lesson:
    lesson = await get_lesson_or_404(db, lesson_id)
    changes = {
        field: value
        for field, value in payload.model_dump(exclude_unset=True).items()
        if value is not None or field in NULLABLE_FIELDS
    }
    if "student_id" in changes:
        await _check_student(db, changes["student_id"])
    if "date_time" in changes:
        changes["date_time"] = as_utc(changes["date_time"])
    if "payment_status" in changes:
        changes["payment_status"] = changes["payment_status"].value
    if "date_time" in changes or "duration" in changes:
        await check_overlap(
            db,
            changes.get("date_time", lesson.date_time),
            changes.get("duration", lesson.duration),
            exclude_ids=[lesson.id],
        )
    for field, value in changes.items():
        setattr(lesson, field, value)
    await db.commit()
    await db.refresh(lesson)
    return lesson


async def delete_lesson(db: AsyncSession, lesson_id: UUID) -> None:
    await db.execute(delete(Lesson).where(Lesson.id == lesson_id))
    await db.commit()


async def create_lesson_with_recurrence(db: AsyncSession, payload: LessonWithRecurrenceCreate):
    """
    Persist the template lesson and its recurrence marker in one transaction.

    Only the template is stored; further occurrences are created on demand by
    materialising the marker. The lesson is stamped with the marker id so the
    whole series can be found again without structural matching.
    """
    try:
        lesson = await _add_lesson(db, payload.lesson)
        recurring = RecurringLesson(
            template_lesson_id=lesson.id,
            frequency=payload.recurring.frequency.value,
            end_date=as_utc(payload.recurring.end_date),
        )
        db.add(recurring)
        await db.flush()
        lesson.series_id = recurring.id
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    await db.refresh(lesson)
    await db.refresh(recurring)
    logger.info("recurring_lesson_created", lesson_id=str(lesson.id), series_id=str(recurring.id))
    return lesson, recurring


async def series_members(db: AsyncSession, reference: Lesson) -> List[Lesson]:
    """Lessons sharing the reference's series id, or its student/weekday/time slot, from the reference on."""
    if reference.series_id is not None:
        result = await db.execute(
            select(Lesson)
            .where(
                Lesson.series_id == reference.series_id,
                Lesson.date_time >= reference.date_time,
            )
            .order_by(Lesson.date_time)
        )
        return list(result.scalars().all())
    result = await db.execute(
        select(Lesson).where(Lesson.student_id == reference.student_id).order_by(Lesson.date_time)
    )
    return match_series(reference, result.scalars().all())


async def delete_lesson_series(db: AsyncSession, lesson_id: UUID) -> int:
    """Delete the reference lesson and every later member of its series atomically."""
    reference = await get_lesson_or_404(db, lesson_id)
    member_ids = [lesson.id for lesson in await series_members(db, reference)]
    try:
        await db.execute(delete(Lesson).where(Lesson.id.in_(member_ids)))
        await db.commit()
    except Exception:
        await db.rollback()
        logger.exception("series_delete_failed", reference_id=str(lesson_id))
        raise ServiceError("Failed to delete lesson series", status.HTTP_500_INTERNAL_SERVER_ERROR)
    logger.info("series_deleted", reference_id=str(lesson_id), deleted=len(member_ids))
    return len(member_ids)
