import logging
import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.core.db import get_db
from vidtube.core.dependencies import get_current_user
from vidtube.core.exceptions import ApiError
from vidtube.models.orm.user import User
from vidtube.repository import subscription_repo
from vidtube.repository.user_repo import get_user_by_id
from vidtube.schemas.base_schema import ApiResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/c/{channelId}")
async def toggle_subscription(
    channelId: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if channelId == current_user.id:
        raise ApiError(400, "You cannot subscribe to your own channel")

    channel = await get_user_by_id(db, channelId)
    if not channel:
        raise ApiError(404, "Channel does not exist")

    subscribed = await subscription_repo.toggle_subscription(db, current_user.id, channelId)
    logger.info("[SUBSCRIPTION] %s -> %s subscribed=%s", current_user.id, channelId, subscribed)

    return ApiResponse(
        statusCode=200,
        data={"subscribed": subscribed},
        message="Subscribed successfully" if subscribed else "Unsubscribed successfully",
    )


@router.get("/c/{channelId}")
async def get_channel_subscribers(
    channelId: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    subscribers = await subscription_repo.list_channel_subscribers(db, channelId)
    return ApiResponse(statusCode=200, data=subscribers, message="Subscribers fetched successfully")


@router.get("/u/{subscriberId}")
async def get_subscribed_channels(
    subscriberId: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    channels = await subscription_repo.list_subscribed_channels(db, subscriberId)
    return ApiResponse(statusCode=200, data=channels, message="Subscribed channels fetched successfully")
