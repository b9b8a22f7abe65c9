"""Lessons router: lesson CRUD, recurring creation and whole-series deletion."""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import require_auth
from app.core.exceptions import ServiceError
from app.db.session import get_db

from . import service
from .schemas import (
    LessonCreate,
    LessonResponse,
    LessonUpdate,
    LessonWithRecurrenceCreate,
    LessonWithRecurrenceResponse,
    RecurringLessonResponse,
    SeriesDeleteResponse,
)

router = APIRouter(prefix="/api/lessons", tags=["lessons"])


@router.get("", response_model=List[LessonResponse], dependencies=[Depends(require_auth)])
async def list_lessons(db: AsyncSession = Depends(get_db)) -> List[LessonResponse]:
    return await service.list_lessons(db)


@router.post(
    "",
    response_model=LessonResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_auth)],
)
async def create_lesson(payload: LessonCreate, db: AsyncSession = Depends(get_db)) -> LessonResponse:
    try:
        return await service.create_lesson(db, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.post(
    "/recurring",
    response_model=LessonWithRecurrenceResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_auth)],
)
async def create_recurring_lesson(
    payload: LessonWithRecurrenceCreate,
    db: AsyncSession = Depends(get_db),
) -> LessonWithRecurrenceResponse:
    try:
        lesson, recurring = await service.create_lesson_with_recurrence(db, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return LessonWithRecurrenceResponse(
        lesson=LessonResponse.model_validate(lesson),
        recurring_lesson=RecurringLessonResponse.model_validate(recurring),
    )


@router.get("/{lesson_id}", response_model=LessonResponse)
async def get_lesson(lesson_id: UUID, db: AsyncSession = Depends(get_db)) -> LessonResponse:
    try:
        return await service.get_lesson_or_404(db, lesson_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.put("/{lesson_id}", response_model=LessonResponse, dependencies=[Depends(require_auth)])
async def update_lesson(
    lesson_id: UUID,
    payload: LessonUpdate,
    db: AsyncSession = Depends(get_db),
) -> LessonResponse:
    try:
        return await service.update_lesson(db, lesson_id, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.delete(
    "/{lesson_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_auth)],
)
async def delete_lesson(lesson_id: UUID, db: AsyncSession = Depends(get_db)) -> Response:
    await service.delete_lesson(db, lesson_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete(
    "/{lesson_id}/series",
    response_model=SeriesDeleteResponse,
    dependencies=[Depends(require_auth)],
)
async def delete_lesson_series(lesson_id: UUID, db: AsyncSession = Depends(get_db)) -> SeriesDeleteResponse:
    try:
        deleted = await service.delete_lesson_series(db, lesson_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return SeriesDeleteResponse(deleted=deleted)
