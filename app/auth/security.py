from datetime import datetime, timedelta, timezone
import secrets
from typing import Optional, Tuple

import bcrypt

from app.core.config import settings


def hash_password(plain_password: str) -> str:
    salt = bcrypt.gensalt()
    hashed = bcrypt.hashpw(plain_password.encode("utf-8"), salt)
    return hashed.decode("utf-8")


def verify_password(plain_password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # In case the stored hash is invalid/corrupted
        return False


def create_session_token(*, ttl_hours: Optional[int] = None) -> Tuple[str, datetime]:
    if ttl_hours is None:
        ttl_hours = settings.session_ttl_hours
    expire = datetime.now(timezone.utc) + timedelta(hours=ttl_hours)
    token = secrets.token_urlsafe(48)
    return token, expire
