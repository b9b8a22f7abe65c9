"""Recurring lesson markers and on-demand expansion into concrete lessons."""

from typing import List
from uuid import UUID

import structlog
from fastapi import status
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.lessons.schemas import RecurringLessonCreate, RecurringLessonUpdate
from app.api.lessons.service import check_overlap, get_lesson_or_404
from app.core.exceptions import ServiceError
from app.core.models import Lesson, RecurringLesson
from app.core.recurrence import as_utc, expand_series

logger = structlog.get_logger(__name__)


async def get_recurring_or_404(db: AsyncSession, recurring_id: UUID) -> RecurringLesson:
    recurring = await db.get(RecurringLesson, recurring_id)
    if not recurring:
        raise ServiceError("Recurring lesson not found", status.HTTP_404_NOT_FOUND)
    return recurring


async def list_recurring(db: AsyncSession) -> List[RecurringLesson]:
    result = await db.execute(select(RecurringLesson))
    return list(result.scalars().all())


async def create_recurring(db: AsyncSession, payload: RecurringLessonCreate) -> RecurringLesson:
    template = await db.get(Lesson, payload.template_lesson_id)
    if template is None:
        raise ServiceError("Invalid template lesson", status.HTTP_400_BAD_REQUEST)
    recurring = RecurringLesson(
        template_lesson_id=template.id,
        frequency=payload.frequency.value,
        end_date=as_utc(payload.end_date),
    )
    db.add(recurring)
    await db.flush()
    if template.series_id is None:
        template.series_id = recurring.id
    await db.commit()
    await db.refresh(recurring)
    return recurring


async def update_recurring(db: AsyncSession, recurring_id: UUID, payload: RecurringLessonUpdate) -> RecurringLesson:
    recurring = await get_recurring_or_404(db, recurring_id)
    changes = payload.model_dump(exclude_unset=True)
    if changes.get("frequency") is not None:
        recurring.frequency = changes["frequency"].value
    if changes.get("end_date") is not None:
        recurring.end_date = as_utc(changes["end_date"])
    await db.commit()
    await db.refresh(recurring)
    return recurring


async def delete_recurring(db: AsyncSession, recurring_id: UUID) -> None:
    """Removes the marker only; lessons already created keep their series id."""
    await db.execute(delete(RecurringLesson).where(RecurringLesson.id == recurring_id))
    await db.commit()


async def materialize(db: AsyncSession, recurring_id: UUID) -> List[Lesson]:
    """
    Create every occurrence between the template and the end date that does not exist yet.

    Occurrences already stored under this series are skipped, so calling this
    twice is harmless. Each occurrence is overlap-checked and flushed in turn;
    if any step fails (an overlap or a database error), the whole batch is
    rolled back and nothing is created.
    """
    recurring = await get_recurring_or_404(db, recurring_id)
    if recurring.end_date is None:
        raise ServiceError("Recurring lesson has no end date", status.HTTP_400_BAD_REQUEST)
    template = await get_lesson_or_404(db, recurring.template_lesson_id)
    if template.series_id is None:
        template.series_id = recurring.id

    result = await db.execute(select(Lesson.date_time).where(Lesson.series_id == recurring.id))
    existing = {as_utc(value) for value in result.scalars().all()}
    existing.add(as_utc(template.date_time))

    created = []
    try:
        for start in expand_series(template.date_time, recurring.frequency, recurring.end_date):
            if start in existing:
                continue
            await check_overlap(db, start, template.duration)
            lesson = Lesson(
                subject=template.subject,
                date_time=start,
                student_id=template.student_id,
                lesson_link=template.lesson_link,
                price_per_hour=template.price_per_hour,
                duration=template.duration,
                payment_status="pending",
                series_id=recurring.id,
            )
            db.add(lesson)
            await db.flush()
            created.append(lesson)
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    for lesson in created:
        await db.refresh(lesson)
    logger.info("series_materialized", series_id=str(recurring.id), created=len(created))
    return created
