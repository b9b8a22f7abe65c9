from typing import Optional

import structlog
from fastapi import APIRouter, Depends, HTTPException, Request, Response
from fastapi import status as http_status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import bearer_token
from app.auth.schemas import LoginRequest, LoginResponse, ValidateResponse
from app.auth.services import login_user, logout_session, validate_session
from app.core.config import settings
from app.core.exceptions import ServiceError
from app.core.rate_limit import limiter
from app.db.session import get_db

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post(
    "/login",
    response_model=LoginResponse,
    status_code=http_status.HTTP_200_OK,
)
@limiter.limit(settings.login_rate_limit)
async def login(
    request: Request,
    payload: LoginRequest,
    db: AsyncSession = Depends(get_db),
) -> LoginResponse:
    try:
        return await login_user(db, payload)
    except ServiceError as e:
        if e.status_code == http_status.HTTP_401_UNAUTHORIZED:
            raise HTTPException(status_code=e.status_code, detail=e.message)
        logger.exception("login_failed")
        raise HTTPException(status_code=e.status_code, detail="Login failed")


@router.post("/logout", status_code=http_status.HTTP_204_NO_CONTENT)
async def logout(
    token: Optional[str] = Depends(bearer_token),
    db: AsyncSession = Depends(get_db),
) -> Response:
    if token:
        await logout_session(db, token)
    return Response(status_code=http_status.HTTP_204_NO_CONTENT)


@router.get("/validate", response_model=ValidateResponse)
async def validate(
    token: Optional[str] = Depends(bearer_token),
    db: AsyncSession = Depends(get_db),
) -> ValidateResponse:
    if not token:
        raise HTTPException(
            status_code=http_status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    return ValidateResponse(authenticated=await validate_session(db, token))
