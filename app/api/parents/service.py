from typing import List
from uuid import UUID

from fastapi import status
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ServiceError
from app.core.models import Parent

from .schemas import ParentCreate, ParentUpdate


async def get_parent_or_404(db: AsyncSession, parent_id: UUID) -> Parent:
    parent = await db.get(Parent, parent_id)
    if not parent:
        raise ServiceError("Parent not found", status.HTTP_404_NOT_FOUND)
    return parent


async def list_parents(db: AsyncSession) -> List[Parent]:
    result = await db.execute(select(Parent).order_by(Parent.name))
    return list(result.scalars().all())


async def create_parent(db: AsyncSession, payload: ParentCreate) -> Parent:
    parent = Parent(**payload.model_dump())
    db.add(parent)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ServiceError("A parent with this email already exists", status.HTTP_409_CONFLICT)
    await db.refresh(parent)
    return parent


async def update_parent(db: AsyncSession, parent_id: UUID, payload: ParentUpdate) -> Parent:
    parent = await get_parent_or_404(db, parent_id)
    for field, value in payload.model_dump(exclude_unset=True).items():
        if field == "name" and value is None:
            continue
        setattr(parent, field, value)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ServiceError("A parent with this email already exists", status.HTTP_409_CONFLICT)
    await db.refresh(parent)
    return parent


async def delete_parent(db: AsyncSession, parent_id: UUID) -> None:
    """Students keep existing; their parent_id is nulled by the foreign key."""
    await db.execute(delete(Parent).where(Parent.id == parent_id))
    await db.commit()
