from datetime import datetime, timezone
from typing import Optional

import structlog
from fastapi import status
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.models import AuthSession, User
from app.auth.schemas import LoginRequest, LoginResponse
from app.auth.security import create_session_token, hash_password, verify_password
from app.core.exceptions import ServiceError
from app.core.recurrence import as_utc

logger = structlog.get_logger(__name__)


async def ensure_admin_user(db: AsyncSession, username: str, password: str) -> User:
    """Create the admin user, or reset its password when it already exists."""
    result = await db.execute(select(User).where(User.username == username))
    user = result.scalar_one_or_none()
    if user is None:
        user = User(username=username, password_hash=hash_password(password))
        db.add(user)
        logger.info("admin_user_created", username=username)
    elif not verify_password(password, user.password_hash):
        user.password_hash = hash_password(password)
        logger.info("admin_password_updated", username=username)
    await db.commit()
    await db.refresh(user)
    return user


async def login_user(db: AsyncSession, payload: LoginRequest) -> LoginResponse:
    result = await db.execute(select(User).where(User.username == payload.username))
    user: Optional[User] = result.scalar_one_or_none()
    if not user or not verify_password(payload.password, user.password_hash):
        logger.info("login_rejected", username=payload.username)
        raise ServiceError("Invalid credentials", status.HTTP_401_UNAUTHORIZED)

    token, expires_at = create_session_token()
    db.add(AuthSession(user_id=user.id, token=token, expires_at=expires_at))
    await db.commit()
    logger.info("login_succeeded", user_id=str(user.id))
    return LoginResponse(session_id=token)


async def logout_session(db: AsyncSession, token: str) -> None:
    await db.execute(delete(AuthSession).where(AuthSession.token == token))
    await db.commit()


async def validate_session(db: AsyncSession, token: str) -> bool:
    """True for a live session; expired sessions are removed on sight."""
    result = await db.execute(select(AuthSession).where(AuthSession.token == token))
    session = result.scalar_one_or_none()
    if session is None:
        return False
    if as_utc(session.expires_at) <= datetime.now(timezone.utc):
        await db.delete(session)
        await db.commit()
        return False
    return True
