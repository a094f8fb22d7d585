from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import HTTPException, status
from jose import JWTError
from jose.jwt import encode, decode

from portal.config import settings
from portal.schemas.auth_schemas import AuthTokenPayload
from portal.utils.logger import configure_logging

logger = configure_logging()


def create_access_token(user_id: int, role: str, expires_minutes: Optional[int] = None) -> str:
    """Issue a signed token for a user. Login lives elsewhere; this is shared with it and with tests."""
    ttl = expires_minutes if expires_minutes is not None else settings.access_token_expire_minutes
    payload = AuthTokenPayload(sub=str(user_id), role=role, exp=datetime.now(timezone.utc) + timedelta(minutes=ttl))
    return encode(payload.model_dump(), settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def verify_token(token: Optional[str]) -> AuthTokenPayload:
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing token")
    try:
        payload = decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
        return AuthTokenPayload(**payload)
    except JWTError as e:
        logger.warning("token rejected: %s", e)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
