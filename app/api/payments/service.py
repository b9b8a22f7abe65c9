"""Payments service: CRUD with lesson links, candidate lessons and amount-driven auto-select."""

from typing import List, Sequence, Tuple
from uuid import UUID

import structlog
from fastapi import status
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.enums import PayerType
from app.core.exceptions import ServiceError
from app.core.models import Lesson, Parent, Payment, PaymentLesson, Student
from app.core.payment_allocation import (
    AMOUNT_TOLERANCE,
    auto_select_lessons_by_amount,
    candidate_lessons,
    format_amount,
    lesson_price,
    parse_amount,
)
from app.core.recurrence import as_utc

from .schemas import AutoSelectRequest, AutoSelectResponse, PaymentCreate, PaymentUpdate

logger = structlog.get_logger(__name__)


async def get_payment_or_404(db: AsyncSession, payment_id: UUID) -> Payment:
    payment = await db.get(Payment, payment_id)
    if not payment:
        raise ServiceError("Payment not found", status.HTTP_404_NOT_FOUND)
    return payment


async def _payer_lessons(db: AsyncSession, payer_type: PayerType, payer_id: UUID) -> Tuple[List[Student], List[Lesson]]:
    """The payer's student(s) and all of their lessons. 400 if the payer does not exist."""
    if payer_type == PayerType.student:
        student = await db.get(Student, payer_id)
        if student is None:
            raise ServiceError("Invalid payer", status.HTTP_400_BAD_REQUEST)
        students = [student]
    else:
        if await db.get(Parent, payer_id) is None:
            raise ServiceError("Invalid payer", status.HTTP_400_BAD_REQUEST)
        result = await db.execute(select(Student).where(Student.parent_id == payer_id))
        students = list(result.scalars().all())
    student_ids = [s.id for s in students]
    if not student_ids:
        return students, []
    result = await db.execute(
        select(Lesson).where(Lesson.student_id.in_(student_ids)).order_by(Lesson.date_time.desc())
    )
    return students, list(result.scalars().all())


async def list_candidates(
    db: AsyncSession,
    payer_type: PayerType,
    payer_id: UUID,
    include_paid: bool = False,
) -> List[Lesson]:
    students, lessons = await _payer_lessons(db, payer_type, payer_id)
    return candidate_lessons(payer_type, payer_id, students, lessons, include_paid=include_paid)


async def _check_lesson_ids(db: AsyncSession, payer_type: PayerType, payer_id: UUID, lesson_ids: Sequence[UUID]) -> None:
    allowed = {l.id for l in await list_candidates(db, payer_type, payer_id, include_paid=True)}
    if any(lesson_id not in allowed for lesson_id in lesson_ids):
        raise ServiceError("Lessons must belong to the payer", status.HTTP_400_BAD_REQUEST)


def _link_lessons(db: AsyncSession, payment_id: UUID, lesson_ids: Sequence[UUID]) -> None:
    for lesson_id in dict.fromkeys(lesson_ids):
        db.add(PaymentLesson(payment_id=payment_id, lesson_id=lesson_id))


async def list_payments(db: AsyncSession) -> List[Payment]:
    result = await db.execute(select(Payment).order_by(Payment.payment_date.desc()))
    return list(result.scalars().all())


async def create_payment(db: AsyncSession, payload: PaymentCreate) -> Payment:
    """Payment and its lesson links are written in one transaction."""
    await _check_lesson_ids(db, payload.payer_type, payload.payer_id, payload.lesson_ids)
    payment = Payment(
        payer_type=payload.payer_type.value,
        payer_id=payload.payer_id,
        amount=payload.amount,
        payment_date=as_utc(payload.payment_date),
        notes=payload.notes,
    )
    db.add(payment)
    await db.flush()
    _link_lessons(db, payment.id, payload.lesson_ids)
    await db.commit()
    await db.refresh(payment)
    logger.info("payment_created", payment_id=str(payment.id), lessons=len(payload.lesson_ids))
    return payment


async def update_payment(db: AsyncSession, payment_id: UUID, payload: PaymentUpdate) -> Payment:
    payment = await get_payment_or_404(db, payment_id)
    changes = payload.model_dump(exclude_unset=True)
    payer_type = PayerType(changes.get("payer_type") or payment.payer_type)
    payer_id = changes.get("payer_id") or payment.payer_id
    if payload.lesson_ids is not None:
        await _check_lesson_ids(db, payer_type, payer_id, payload.lesson_ids)
    elif "payer_type" in changes or "payer_id" in changes:
        # Kept links must belong to the new payer too
        await _check_lesson_ids(db, payer_type, payer_id, await get_payment_lesson_ids(db, payment.id))
    payment.payer_type = payer_type.value
    payment.payer_id = payer_id
    if changes.get("amount") is not None:
        payment.amount = changes["amount"]
    if changes.get("payment_date") is not None:
        payment.payment_date = as_utc(changes["payment_date"])
    if "notes" in changes:
        payment.notes = changes["notes"]
    if payload.lesson_ids is not None:
        await db.execute(delete(PaymentLesson).where(PaymentLesson.payment_id == payment.id))
        _link_lessons(db, payment.id, payload.lesson_ids)
    await db.commit()
    await db.refresh(payment)
    return payment


async def delete_payment(db: AsyncSession, payment_id: UUID) -> None:
    await db.execute(delete(Payment).where(Payment.id == payment_id))
    await db.commit()


async def get_payment_lesson_ids(db: AsyncSession, payment_id: UUID) -> List[UUID]:
    await get_payment_or_404(db, payment_id)
    result = await db.execute(select(PaymentLesson.lesson_id).where(PaymentLesson.payment_id == payment_id))
    return list(result.scalars().all())


async def auto_select(db: AsyncSession, payload: AutoSelectRequest) -> AutoSelectResponse:
    pool = await list_candidates(db, payload.payer_type, payload.payer_id)
    lesson_ids = auto_select_lessons_by_amount(payload.amount, pool)
    if lesson_ids is None:
        raise ServiceError("Amount must be a positive number", status.HTTP_400_BAD_REQUEST)
    prices = {l.id: lesson_price(l) for l in pool}
    total = sum(prices[lesson_id] for lesson_id in lesson_ids)
    return AutoSelectResponse(
        lesson_ids=lesson_ids,
        total=format_amount(total),
        exact=abs(total - parse_amount(payload.amount)) < AMOUNT_TOLERANCE,
    )
