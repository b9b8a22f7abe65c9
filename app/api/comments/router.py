"""Comments router: lesson comments (public read, filtered by login state) and tags."""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import is_authenticated, require_auth
from app.core.exceptions import ServiceError
from app.db.session import get_db

from . import service
from .schemas import (
    CommentCreate,
    CommentResponse,
    CommentUpdate,
    TagCreate,
    TagResponse,
    TagUpdate,
)

router = APIRouter(prefix="/api", tags=["comments"])


@router.get("/lessons/{lesson_id}/comments", response_model=List[CommentResponse])
async def list_lesson_comments(
    lesson_id: UUID,
    authenticated: bool = Depends(is_authenticated),
    db: AsyncSession = Depends(get_db),
) -> List[CommentResponse]:
    return await service.list_comments(db, lesson_id, visible_only=not authenticated)


@router.post(
    "/lessons/{lesson_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_auth)],
)
async def create_comment(
    lesson_id: UUID,
    payload: CommentCreate,
    db: AsyncSession = Depends(get_db),
) -> CommentResponse:
    try:
        return await service.create_comment(db, lesson_id, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.put("/comments/{comment_id}", response_model=CommentResponse, dependencies=[Depends(require_auth)])
async def update_comment(
    comment_id: UUID,
    payload: CommentUpdate,
    db: AsyncSession = Depends(get_db),
) -> CommentResponse:
    try:
        return await service.update_comment(db, comment_id, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.delete(
    "/comments/{comment_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_auth)],
)
async def delete_comment(comment_id: UUID, db: AsyncSession = Depends(get_db)) -> Response:
    await service.delete_comment(db, comment_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# --- Tags ---
@router.get("/tags", response_model=List[TagResponse], dependencies=[Depends(require_auth)])
async def list_tags(db: AsyncSession = Depends(get_db)) -> List[TagResponse]:
    return await service.list_tags(db)


@router.post(
    "/tags",
    response_model=TagResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_auth)],
)
async def create_tag(payload: TagCreate, db: AsyncSession = Depends(get_db)) -> TagResponse:
    try:
        return await service.create_tag(db, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.put("/tags/{tag_id}", response_model=TagResponse, dependencies=[Depends(require_auth)])
async def update_tag(tag_id: UUID, payload: TagUpdate, db: AsyncSession = Depends(get_db)) -> TagResponse:
    try:
        return await service.update_tag(db, tag_id, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.delete(
    "/tags/{tag_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_auth)],
)
async def delete_tag(tag_id: UUID, db: AsyncSession = Depends(get_db)) -> Response:
    await service.delete_tag(db, tag_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
