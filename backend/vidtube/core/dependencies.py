import logging
import uuid
from typing import Optional

from fastapi import Depends, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.core.db import get_db
from vidtube.core.exceptions import ApiError
from vidtube.models.orm.user import User
from vidtube.repository.user_repo import get_user_by_id
from vidtube.utils.jwt import decode_access_token

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    Resolve the requesting user from the accessToken cookie or a Bearer header.
    """
    token = request.cookies.get("accessToken") or (credentials.credentials if credentials else None)
    if not token:
        raise ApiError(status.HTTP_401_UNAUTHORIZED, "Unauthorized request")

    try:
        payload = decode_access_token(token)
    except JWTError as e:
        logger.warning("[AUTH] JWT decode error: %s", e)
        raise ApiError(status.HTTP_401_UNAUTHORIZED, "Invalid access token")

    try:
        user_id = uuid.UUID(str(payload.get("_id")))
    except ValueError:
        raise ApiError(status.HTTP_401_UNAUTHORIZED, "Invalid access token")

    user = await get_user_by_id(db, user_id)
    if not user:
        logger.warning("[AUTH] User not found for id: %s", user_id)
        raise ApiError(status.HTTP_401_UNAUTHORIZED, "Invalid access token")

    return user
