from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.services import validate_session
from app.db.session import get_db


bearer_scheme = HTTPBearer(auto_error=False)


def bearer_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[str]:
    if credentials is None or not credentials.credentials:
        return None
    return credentials.credentials


async def require_auth(
    token: Optional[str] = Depends(bearer_token),
    db: AsyncSession = Depends(get_db),
) -> str:
    """Reject the request unless it carries a live session id. Returns the session id."""
    if not token or not await validate_session(db, token):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return token


async def is_authenticated(
    token: Optional[str] = Depends(bearer_token),
    db: AsyncSession = Depends(get_db),
) -> bool:
    """For public endpoints whose output depends on whether the caller is logged in."""
    if not token:
        return False
    return await validate_session(db, token)
