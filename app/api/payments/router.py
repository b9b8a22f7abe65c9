"""Payments router."""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.lessons.schemas import LessonResponse
from app.auth.dependencies import require_auth
from app.core.enums import PayerType
from app.core.exceptions import ServiceError
from app.db.session import get_db

from . import service
from .schemas import (
    AutoSelectRequest,
    AutoSelectResponse,
    PaymentCreate,
    PaymentResponse,
    PaymentUpdate,
)

router = APIRouter(prefix="/api/payments", tags=["payments"], dependencies=[Depends(require_auth)])


@router.get("", response_model=List[PaymentResponse])
async def list_payments(db: AsyncSession = Depends(get_db)) -> List[PaymentResponse]:
    return await service.list_payments(db)


@router.post("", response_model=PaymentResponse, status_code=status.HTTP_201_CREATED)
async def create_payment(payload: PaymentCreate, db: AsyncSession = Depends(get_db)) -> PaymentResponse:
    try:
        return await service.create_payment(db, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("/candidates", response_model=List[LessonResponse])
async def list_candidates(
    payer_type: PayerType = Query(..., alias="payerType"),
    payer_id: UUID = Query(..., alias="payerId"),
    include_paid: bool = Query(False, alias="includePaid"),
    db: AsyncSession = Depends(get_db),
) -> List[LessonResponse]:
    try:
        return await service.list_candidates(db, payer_type, payer_id, include_paid=include_paid)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.post("/auto-select", response_model=AutoSelectResponse)
async def auto_select(payload: AutoSelectRequest, db: AsyncSession = Depends(get_db)) -> AutoSelectResponse:
    try:
        return await service.auto_select(db, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("/{payment_id}", response_model=PaymentResponse)
async def get_payment(payment_id: UUID, db: AsyncSession = Depends(get_db)) -> PaymentResponse:
    try:
        return await service.get_payment_or_404(db, payment_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.put("/{payment_id}", response_model=PaymentResponse)
async def update_payment(
    payment_id: UUID,
    payload: PaymentUpdate,
    db: AsyncSession = Depends(get_db),
) -> PaymentResponse:
    try:
        return await service.update_payment(db, payment_id, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.delete("/{payment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_payment(payment_id: UUID, db: AsyncSession = Depends(get_db)) -> Response:
    await service.delete_payment(db, payment_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{payment_id}/lessons", response_model=List[UUID])
async def get_payment_lessons(payment_id: UUID, db: AsyncSession = Depends(get_db)) -> List[UUID]:
    try:
        return await service.get_payment_lesson_ids(db, payment_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
