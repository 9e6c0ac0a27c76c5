from datetime import datetime, timedelta, timezone
from typing import Any

from jose import jwt

from vidtube.core.config import configs


def _encode(claims: dict[str, Any], secret: str, expire_minutes: int) -> str:
    payload = dict(claims)
    payload["exp"] = datetime.now(timezone.utc) + timedelta(minutes=expire_minutes)
    return jwt.encode(payload, secret, algorithm=configs.JWT_ALGORITHM)


def create_access_token(claims: dict[str, Any]) -> str:
    """Short-lived token carrying the identity claims."""
    return _encode(claims, configs.ACCESS_TOKEN_SECRET, configs.ACCESS_TOKEN_EXPIRE_MINUTES)


def create_refresh_token(user_id: str) -> str:
    """Long-lived token carrying only the user id."""
    return _encode({"_id": user_id}, configs.REFRESH_TOKEN_SECRET, configs.REFRESH_TOKEN_EXPIRE_MINUTES)


def decode_access_token(token: str) -> dict[str, Any]:
    """Raises jose.JWTError on a bad signature or an expired token."""
    return jwt.decode(token, configs.ACCESS_TOKEN_SECRET, algorithms=[configs.JWT_ALGORITHM])


def decode_refresh_token(token: str) -> dict[str, Any]:
    return jwt.decode(token, configs.REFRESH_TOKEN_SECRET, algorithms=[configs.JWT_ALGORITHM])
