from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import require_auth
from app.core.exceptions import ServiceError
from app.db.session import get_db

from . import service
from .schemas import ParentCreate, ParentResponse, ParentUpdate

router = APIRouter(
    prefix="/api/parents",
    tags=["parents"],
    dependencies=[Depends(require_auth)],
)


@router.get("", response_model=List[ParentResponse])
async def list_parents(db: AsyncSession = Depends(get_db)) -> List[ParentResponse]:
    return await service.list_parents(db)


@router.get("/{parent_id}", response_model=ParentResponse)
async def get_parent(parent_id: UUID, db: AsyncSession = Depends(get_db)) -> ParentResponse:
    try:
        return await service.get_parent_or_404(db, parent_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.post("", response_model=ParentResponse, status_code=status.HTTP_201_CREATED)
async def create_parent(payload: ParentCreate, db: AsyncSession = Depends(get_db)) -> ParentResponse:
    try:
        return await service.create_parent(db, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.put("/{parent_id}", response_model=ParentResponse)
async def update_parent(
    parent_id: UUID,
    payload: ParentUpdate,
    db: AsyncSession = Depends(get_db),
) -> ParentResponse:
    try:
        return await service.update_parent(db, parent_id, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.delete("/{parent_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_parent(parent_id: UUID, db: AsyncSession = Depends(get_db)) -> Response:
    await service.delete_parent(db, parent_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
