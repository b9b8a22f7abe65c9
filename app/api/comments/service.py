"""Comments on lessons, their tags, and the tag catalogue."""

from datetime import datetime, timezone
from typing import List, Sequence
from uuid import UUID

import structlog
from fastapi import status
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.exceptions import ServiceError
from app.core.models import Comment, Lesson, Tag

from .schemas import CommentCreate, CommentUpdate, TagCreate, TagUpdate

logger = structlog.get_logger(__name__)


# --- Tags ---
async def list_tags(db: AsyncSession) -> List[Tag]:
    result = await db.execute(select(Tag).order_by(Tag.name))
    return list(result.scalars().all())


async def create_tag(db: AsyncSession, payload: TagCreate) -> Tag:
    try:
        tag = Tag(name=payload.name.strip(), color=payload.color)
        db.add(tag)
        await db.commit()
        await db.refresh(tag)
    except IntegrityError:
        await db.rollback()
        raise ServiceError("A tag with this name already exists", status.HTTP_409_CONFLICT)
    return tag


async def update_tag(db: AsyncSession, tag_id: UUID, payload: TagUpdate) -> Tag:
    tag = await db.get(Tag, tag_id)
    if not tag:
        raise ServiceError("Tag not found", status.HTTP_404_NOT_FOUND)
    if payload.name is not None:
        tag.name = payload.name.strip()
    if payload.color is not None:
        tag.color = payload.color
    try:
        await db.commit()
        await db.refresh(tag)
    except IntegrityError:
        await db.rollback()
        raise ServiceError("A tag with this name already exists", status.HTTP_409_CONFLICT)
    return tag


async def delete_tag(db: AsyncSession, tag_id: UUID) -> None:
    await db.execute(delete(Tag).where(Tag.id == tag_id))
    await db.commit()


async def _resolve_tags(db: AsyncSession, tag_ids: Sequence[UUID]) -> List[Tag]:
    if not tag_ids:
        return []
    unique_ids = set(tag_ids)
    result = await db.execute(select(Tag).where(Tag.id.in_(unique_ids)))
    tags = list(result.scalars().all())
    if len(tags) != len(unique_ids):
        raise ServiceError("Invalid tag", status.HTTP_400_BAD_REQUEST)
    return tags


# --- Comments ---
async def _get_comment_or_404(db: AsyncSession, comment_id: UUID) -> Comment:
    result = await db.execute(
        select(Comment)
        .options(selectinload(Comment.tags))
        .where(Comment.id == comment_id)
        .execution_options(populate_existing=True)
    )
    comment = result.scalar_one_or_none()
    if not comment:
        raise ServiceError("Comment not found", status.HTTP_404_NOT_FOUND)
    return comment


async def list_comments(db: AsyncSession, lesson_id: UUID, visible_only: bool = False) -> List[Comment]:
    """Newest first. visible_only limits the list to what the student may see."""
    stmt = (
        select(Comment)
        .options(selectinload(Comment.tags))
        .where(Comment.lesson_id == lesson_id)
        .order_by(Comment.created_at.desc())
    )
    if visible_only:
        stmt = stmt.where(Comment.visible_to_student == 1)
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def create_comment(db: AsyncSession, lesson_id: UUID, payload: CommentCreate) -> Comment:
    if await db.get(Lesson, lesson_id) is None:
        raise ServiceError("Lesson not found", status.HTTP_404_NOT_FOUND)
    comment = Comment(
        lesson_id=lesson_id,
        title=payload.title,
        content=payload.content,
        visible_to_student=payload.visible_to_student,
        tags=await _resolve_tags(db, payload.tag_ids),
    )
    db.add(comment)
    await db.commit()
    return await _get_comment_or_404(db, comment.id)


async def update_comment(db: AsyncSession, comment_id: UUID, payload: CommentUpdate) -> Comment:
    comment = await _get_comment_or_404(db, comment_id)
    changes = payload.model_dump(exclude_unset=True)
    for field in ("title", "content", "visible_to_student"):
        if changes.get(field) is not None:
            setattr(comment, field, changes[field])
    if payload.tag_ids is not None:
        comment.tags = await _resolve_tags(db, payload.tag_ids)
    comment.last_edited = datetime.now(timezone.utc)
    await db.commit()
    return await _get_comment_or_404(db, comment_id)


async def delete_comment(db: AsyncSession, comment_id: UUID) -> None:
    await db.execute(delete(Comment).where(Comment.id == comment_id))
    await db.commit()
