"""Comment and tag schemas."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import Field

from app.core.schemas import HEX_COLOR_PATTERN, CamelModel, UtcDatetime


class TagCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    color: str = Field(..., pattern=HEX_COLOR_PATTERN)


class TagUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    color: Optional[str] = Field(None, pattern=HEX_COLOR_PATTERN)


class TagResponse(CamelModel):
    id: UUID
    name: str
    color: str
    created_at: datetime


class CommentCreate(CamelModel):
    title: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)
    visible_to_student: int = Field(0, ge=0, le=1)
    tag_ids: List[UUID] = Field(default_factory=list)


class CommentUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1)
    content: Optional[str] = Field(None, min_length=1)
    visible_to_student: Optional[int] = Field(None, ge=0, le=1)
    # None keeps the current tags; a list replaces them
    tag_ids: Optional[List[UUID]] = None


class CommentResponse(CamelModel):
    id: UUID
    lesson_id: UUID
    title: str
    content: str
    visible_to_student: int
    created_at: UtcDatetime
    last_edited: Optional[UtcDatetime] = None
    tags: List[TagResponse] = Field(default_factory=list)
