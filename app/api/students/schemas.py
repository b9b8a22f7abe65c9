"""Student and note schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import Field

from app.core.models.student import DEFAULT_STUDENT_COLOR
from app.core.schemas import (
    HEX_COLOR_PATTERN,
    BlankableEmail,
    BlankableStr,
    BlankableUUID,
    CamelModel,
    UrlStr,
)


class StudentCreate(CamelModel):
    first_name: str = Field(..., min_length=1)
    last_name: BlankableStr = None
    email: BlankableEmail = None
    phone_number: BlankableStr = None
    default_subject: str = Field(..., min_length=1)
    default_rate: Decimal = Field(..., ge=0, decimal_places=2)
    default_link: UrlStr
    default_color: str = Field(DEFAULT_STUDENT_COLOR, pattern=HEX_COLOR_PATTERN)
    parent_id: BlankableUUID = None


class StudentUpdate(CamelModel):
    """Partial update; only fields present in the request are applied."""

    first_name: Optional[str] = Field(None, min_length=1)
    last_name: BlankableStr = None
    email: BlankableEmail = None
    phone_number: BlankableStr = None
    default_subject: Optional[str] = Field(None, min_length=1)
    default_rate: Optional[Decimal] = Field(None, ge=0, decimal_places=2)
    default_link: Optional[UrlStr] = None
    default_color: Optional[str] = Field(None, pattern=HEX_COLOR_PATTERN)
    parent_id: BlankableUUID = None


class StudentResponse(CamelModel):
    id: UUID
    student_id: str
    first_name: str
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone_number: Optional[str] = None
    default_subject: str
    default_rate: Decimal
    default_link: str
    default_color: str
    parent_id: Optional[UUID] = None


class NoteCreate(CamelModel):
    title: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)


class NoteUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1)
    content: Optional[str] = Field(None, min_length=1)


class NoteResponse(CamelModel):
    id: UUID
    student_id: UUID
    title: str
    content: str
    created_at: datetime
