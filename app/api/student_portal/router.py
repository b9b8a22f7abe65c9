"""Student portal: read-only, unauthenticated views keyed by a student's 6-digit public id."""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.comments import service as comments_service
from app.api.comments.schemas import CommentResponse
from app.api.lessons.schemas import LessonResponse
from app.api.students.schemas import StudentResponse
from app.api.students.service import get_student_by_public_id
from app.core.exceptions import ServiceError
from app.core.models import Lesson
from app.db.session import get_db

from .schemas import BlockedSlot, PortalLessons

router = APIRouter(prefix="/api/student", tags=["student-portal"])


@router.get("/{public_id}", response_model=StudentResponse)
async def get_portal_student(public_id: str, db: AsyncSession = Depends(get_db)) -> StudentResponse:
    try:
        return await get_student_by_public_id(db, public_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("/{public_id}/lessons", response_model=PortalLessons)
async def get_portal_lessons(public_id: str, db: AsyncSession = Depends(get_db)) -> PortalLessons:
    """The student's own lessons plus every other lesson as an anonymous busy slot."""
    try:
        student = await get_student_by_public_id(db, public_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    result = await db.execute(select(Lesson).order_by(Lesson.date_time))
    own, blocked = [], []
    for lesson in result.scalars().all():
        if lesson.student_id == student.id:
            own.append(lesson)
        else:
            blocked.append(BlockedSlot(date_time=lesson.date_time, duration=lesson.duration))
    return PortalLessons(lessons=[LessonResponse.model_validate(l) for l in own], blocked_slots=blocked)


@router.get("/{public_id}/lessons/{lesson_id}/comments", response_model=List[CommentResponse])
async def get_portal_comments(
    public_id: str,
    lesson_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> List[CommentResponse]:
    try:
        student = await get_student_by_public_id(db, public_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    lesson = await db.get(Lesson, lesson_id)
    if lesson is None or lesson.student_id != student.id:
        raise HTTPException(status_code=404, detail="Lesson not found")
    return await comments_service.list_comments(db, lesson_id, visible_only=True)
