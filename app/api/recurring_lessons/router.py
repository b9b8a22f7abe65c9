"""Recurring lessons router."""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.lessons.schemas import (
    LessonResponse,
    RecurringLessonCreate,
    RecurringLessonResponse,
    RecurringLessonUpdate,
)
from app.auth.dependencies import require_auth
from app.core.exceptions import ServiceError
from app.db.session import get_db

from . import service

router = APIRouter(
    prefix="/api/recurring-lessons",
    tags=["recurring-lessons"],
    dependencies=[Depends(require_auth)],
)


@router.get("", response_model=List[RecurringLessonResponse])
async def list_recurring(db: AsyncSession = Depends(get_db)) -> List[RecurringLessonResponse]:
    return await service.list_recurring(db)


@router.post("", response_model=RecurringLessonResponse, status_code=status.HTTP_201_CREATED)
async def create_recurring(
    payload: RecurringLessonCreate,
    db: AsyncSession = Depends(get_db),
) -> RecurringLessonResponse:
    try:
        return await service.create_recurring(db, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("/{recurring_id}", response_model=RecurringLessonResponse)
async def get_recurring(recurring_id: UUID, db: AsyncSession = Depends(get_db)) -> RecurringLessonResponse:
    try:
        return await service.get_recurring_or_404(db, recurring_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.put("/{recurring_id}", response_model=RecurringLessonResponse)
async def update_recurring(
    recurring_id: UUID,
    payload: RecurringLessonUpdate,
    db: AsyncSession = Depends(get_db),
) -> RecurringLessonResponse:
    try:
        return await service.update_recurring(db, recurring_id, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.delete("/{recurring_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_recurring(recurring_id: UUID, db: AsyncSession = Depends(get_db)) -> Response:
    await service.delete_recurring(db, recurring_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{recurring_id}/materialize", response_model=List[LessonResponse])
async def materialize(recurring_id: UUID, db: AsyncSession = Depends(get_db)) -> List[LessonResponse]:
    try:
        return await service.materialize(db, recurring_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
