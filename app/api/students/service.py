"""Students service: CRUD, public id generation, per-student notes and stats."""

import secrets
from typing import List, Optional
from uuid import UUID

import structlog
from fastapi import status
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ServiceError
from app.core.lesson_display import student_stats
from app.core.models import Lesson, Note, Parent, Student
from app.core.schemas import StudentStats

from .schemas import NoteCreate, NoteUpdate, StudentCreate, StudentUpdate

logger = structlog.get_logger(__name__)

STUDENT_ID_MAX_ATTEMPTS = 100
# Fields a partial update may clear; null for any other field means "leave unchanged"
NULLABLE_FIELDS = {"last_name", "email", "phone_number", "parent_id"}


async def generate_unique_student_id(db: AsyncSession) -> str:
    """Random 6-digit public id not yet used by another student."""
    for _ in range(STUDENT_ID_MAX_ATTEMPTS):
        candidate = str(100000 + secrets.randbelow(900000))
        result = await db.execute(select(Student.id).where(Student.student_id == candidate))
        if result.scalar_one_or_none() is None:
            return candidate
    raise ServiceError(
        "Failed to generate unique student ID after multiple attempts",
        status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


async def _check_parent(db: AsyncSession, parent_id: Optional[UUID]) -> None:
    if parent_id is not None and await db.get(Parent, parent_id) is None:
        raise ServiceError("Invalid parent", status.HTTP_400_BAD_REQUEST)


async def get_student_or_404(db: AsyncSession, student_id: UUID) -> Student:
    student = await db.get(Student, student_id)
    if not student:
        raise ServiceError("Student not found", status.HTTP_404_NOT_FOUND)
    return student


async def get_student_by_public_id(db: AsyncSession, public_id: str) -> Student:
    result = await db.execute(select(Student).where(Student.student_id == public_id))
    student = result.scalar_one_or_none()
    if not student:
        raise ServiceError("Student not found", status.HTTP_404_NOT_FOUND)
    return student


async def list_students(db: AsyncSession) -> List[Student]:
    result = await db.execute(select(Student).order_by(Student.first_name, Student.last_name))
    return list(result.scalars().all())


async def create_student(db: AsyncSession, payload: StudentCreate) -> Student:
    await _check_parent(db, payload.parent_id)
    try:
        student = Student(
            student_id=await generate_unique_student_id(db),
            **payload.model_dump(),
        )
        db.add(student)
        await db.commit()
        await db.refresh(student)
    except IntegrityError:
        await db.rollback()
        raise ServiceError("A student with this email already exists", status.HTTP_409_CONFLICT)
    logger.info("student_created", student_id=str(student.id), public_id=student.student_id)
    return student


async def update_student(db: AsyncSession, student_id: UUID, payload: StudentUpdate) -> Student:
    student = await get_student_or_404(db, student_id)
    changes = payload.model_dump(exclude_unset=True)
    if "parent_id" in changes:
        await _check_parent(db, changes["parent_id"])
    for field, value in changes.items():
        if value is None and field not in NULLABLE_FIELDS:
            continue
        setattr(student, field, value)
    try:
        await db.commit()
        await db.refresh(student)
    except IntegrityError:
        await db.rollback()
        raise ServiceError("A student with this email already exists", status.HTTP_409_CONFLICT)
    return student


async def delete_student(db: AsyncSession, student_id: UUID) -> None:
    """Lessons and notes go with the student through ON DELETE CASCADE."""
    await db.execute(delete(Student).where(Student.id == student_id))
    await db.commit()
    logger.info("student_deleted", student_id=str(student_id))


async def list_student_lessons(db: AsyncSession, student_id: UUID) -> List[Lesson]:
    result = await db.execute(
        select(Lesson).where(Lesson.student_id == student_id).order_by(Lesson.date_time.desc())
    )
    return list(result.scalars().all())


async def get_student_stats(db: AsyncSession, student_id: UUID) -> StudentStats:
    student = await get_student_or_404(db, student_id)
    return student_stats(student, await list_student_lessons(db, student_id))


# --- Notes ---
async def list_notes(db: AsyncSession, student_id: UUID) -> List[Note]:
    result = await db.execute(
        select(Note).where(Note.student_id == student_id).order_by(Note.created_at.desc())
    )
    return list(result.scalars().all())


async def create_note(db: AsyncSession, student_id: UUID, payload: NoteCreate) -> Note:
    await get_student_or_404(db, student_id)
    note = Note(student_id=student_id, title=payload.title, content=payload.content)
    db.add(note)
    await db.commit()
    await db.refresh(note)
    return note


async def update_note(db: AsyncSession, note_id: UUID, payload: NoteUpdate) -> Note:
    note = await db.get(Note, note_id)
    if not note:
        raise ServiceError("Note not found", status.HTTP_404_NOT_FOUND)
    for field, value in payload.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(note, field, value)
    await db.commit()
    await db.refresh(note)
    return note


async def delete_note(db: AsyncSession, note_id: UUID) -> None:
    await db.execute(delete(Note).where(Note.id == note_id))
    await db.commit()
