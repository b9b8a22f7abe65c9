"""Parent schemas."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import Field

from app.core.schemas import BlankableEmail, BlankableStr, CamelModel


class ParentCreate(CamelModel):
    name: str = Field(..., min_length=1)
    email: BlankableEmail = None
    phone_number: BlankableStr = None


class ParentUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1)
    email: BlankableEmail = None
    phone_number: BlankableStr = None


class ParentResponse(CamelModel):
    id: UUID
    name: str
    email: Optional[str] = None
    phone_number: Optional[str] = None
    created_at: datetime
