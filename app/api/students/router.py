"""Students router: student CRUD, a student's lessons and stats, and per-student notes."""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.lessons.schemas import LessonResponse
from app.auth.dependencies import require_auth
from app.core.exceptions import ServiceError
from app.core.schemas import StudentStats
from app.db.session import get_db

from . import service
from .schemas import (
    NoteCreate,
    NoteResponse,
    NoteUpdate,
    StudentCreate,
    StudentResponse,
    StudentUpdate,
)

router = APIRouter(prefix="/api", tags=["students"])


@router.get(
    "/students",
    response_model=List[StudentResponse],
    dependencies=[Depends(require_auth)],
)
async def list_students(db: AsyncSession = Depends(get_db)) -> List[StudentResponse]:
    return await service.list_students(db)


@router.get("/students/{student_id}", response_model=StudentResponse)
async def get_student(student_id: UUID, db: AsyncSession = Depends(get_db)) -> StudentResponse:
    try:
        return await service.get_student_or_404(db, student_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.post(
    "/students",
    response_model=StudentResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_auth)],
)
async def create_student(payload: StudentCreate, db: AsyncSession = Depends(get_db)) -> StudentResponse:
    try:
        return await service.create_student(db, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.put(
    "/students/{student_id}",
    response_model=StudentResponse,
    dependencies=[Depends(require_auth)],
)
async def update_student(
    student_id: UUID,
    payload: StudentUpdate,
    db: AsyncSession = Depends(get_db),
) -> StudentResponse:
    try:
        return await service.update_student(db, student_id, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.delete(
    "/students/{student_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_auth)],
)
async def delete_student(student_id: UUID, db: AsyncSession = Depends(get_db)) -> Response:
    await service.delete_student(db, student_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/students/{student_id}/lessons", response_model=List[LessonResponse])
async def list_student_lessons(student_id: UUID, db: AsyncSession = Depends(get_db)) -> List[LessonResponse]:
    return await service.list_student_lessons(db, student_id)


@router.get(
    "/students/{student_id}/stats",
    response_model=StudentStats,
    dependencies=[Depends(require_auth)],
)
async def get_student_stats(student_id: UUID, db: AsyncSession = Depends(get_db)) -> StudentStats:
    try:
        return await service.get_student_stats(db, student_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


# --- Notes ---
@router.get(
    "/students/{student_id}/notes",
    response_model=List[NoteResponse],
    dependencies=[Depends(require_auth)],
)
async def list_notes(student_id: UUID, db: AsyncSession = Depends(get_db)) -> List[NoteResponse]:
    return await service.list_notes(db, student_id)


@router.post(
    "/students/{student_id}/notes",
    response_model=NoteResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_auth)],
)
async def create_note(
    student_id: UUID,
    payload: NoteCreate,
    db: AsyncSession = Depends(get_db),
) -> NoteResponse:
    try:
        return await service.create_note(db, student_id, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.put(
    "/notes/{note_id}",
    response_model=NoteResponse,
    dependencies=[Depends(require_auth)],
)
async def update_note(note_id: UUID, payload: NoteUpdate, db: AsyncSession = Depends(get_db)) -> NoteResponse:
    try:
        return await service.update_note(db, note_id, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.delete(
    "/notes/{note_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_auth)],
)
async def delete_note(note_id: UUID, db: AsyncSession = Depends(get_db)) -> Response:
    await service.delete_note(db, note_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
