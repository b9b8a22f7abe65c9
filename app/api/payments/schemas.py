"""Payment schemas."""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import Field

from app.core.enums import PayerType
from app.core.schemas import BlankableStr, CamelModel, UtcDatetime


class PaymentCreate(CamelModel):
    payer_type: PayerType
    payer_id: UUID
    amount: Decimal = Field(..., ge=0, decimal_places=2)
    payment_date: datetime
    notes: BlankableStr = None
    lesson_ids: List[UUID] = Field(default_factory=list)


class PaymentUpdate(CamelModel):
    payer_type: Optional[PayerType] = None
    payer_id: Optional[UUID] = None
    amount: Optional[Decimal] = Field(None, ge=0, decimal_places=2)
    payment_date: Optional[datetime] = None
    notes: BlankableStr = None
    # None keeps the current links; a list replaces them
    lesson_ids: Optional[List[UUID]] = None


class PaymentResponse(CamelModel):
    id: UUID
    payer_type: PayerType
    payer_id: UUID
    amount: Decimal
    payment_date: UtcDatetime
    notes: Optional[str] = None
    created_at: datetime


class AutoSelectRequest(CamelModel):
    payer_type: PayerType
    payer_id: UUID
    # Kept as typed; anything that is not a positive number is rejected
    amount: str


class AutoSelectResponse(CamelModel):
    lesson_ids: List[UUID]
    total: str
    exact: bool
