# vidtube/repository/subscription_repo.py
import uuid

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.models.orm.subscription import Subscription
from vidtube.models.orm.user import User


def subscribers_count_of(user_id_col):
    """Correlated count of users subscribed to the given channel column."""
    return (
        select(func.count(Subscription.id))
        .where(Subscription.channel_id == user_id_col)
        .correlate_except(Subscription)
        .scalar_subquery()
    )


def subscribed_to_count_of(user_id_col):
    """Correlated count of channels the given user column subscribes to."""
    return (
        select(func.count(Subscription.id))
        .where(Subscription.subscriber_id == user_id_col)
        .correlate_except(Subscription)
        .scalar_subquery()
    )


def is_subscribed_to(channel_id_col, subscriber_id: uuid.UUID | None):
    return (
        select(Subscription.id)
        .where(
            Subscription.channel_id == channel_id_col,
            Subscription.subscriber_id == subscriber_id,
        )
        .correlate_except(Subscription)
        .exists()
    )


async def get_subscription(
    db: AsyncSession,
    subscriber_id: uuid.UUID,
    channel_id: uuid.UUID,
) -> Subscription | None:
    result = await db.execute(
        select(Subscription).where(
            Subscription.subscriber_id == subscriber_id,
            Subscription.channel_id == channel_id,
        )
    )
    return result.scalar_one_or_none()


async def toggle_subscription(
    db: AsyncSession,
    subscriber_id: uuid.UUID,
    channel_id: uuid.UUID,
) -> bool:
    """Subscribe if not yet subscribed, otherwise unsubscribe. Returns the new state."""
    existing = await get_subscription(db, subscriber_id, channel_id)
    if existing:
        await db.delete(existing)
        await db.commit()
        return False

    db.add(Subscription(subscriber_id=subscriber_id, channel_id=channel_id))
    await db.commit()
    return True


def _user_summary_columns(user_col=User):
    return (
        user_col.id.label("_id"),
        user_col.username.label("username"),
        user_col.fullname.label("fullname"),
        user_col.avatar.label("avatar"),
    )


async def list_channel_subscribers(db: AsyncSession, channel_id: uuid.UUID) -> list[dict]:
    """Users subscribed to a channel, newest subscription first"""
    result = await db.execute(
        select(
            *_user_summary_columns(),
            subscribers_count_of(User.id).label("subscribersCount"),
            Subscription.created_at.label("subscribedAt"),
        )
        .join(Subscription, Subscription.subscriber_id == User.id)
        .where(Subscription.channel_id == channel_id)
        .order_by(Subscription.created_at.desc(), Subscription.id)
    )
    return [dict(row) for row in result.mappings().all()]


async def list_subscribed_channels(db: AsyncSession, subscriber_id: uuid.UUID) -> list[dict]:
    """Channels a user subscribes to, newest subscription first"""
    result = await db.execute(
        select(
            *_user_summary_columns(),
            subscribers_count_of(User.id).label("subscribersCount"),
            Subscription.created_at.label("subscribedAt"),
        )
        .join(Subscription, Subscription.channel_id == User.id)
        .where(Subscription.subscriber_id == subscriber_id)
        .order_by(Subscription.created_at.desc(), Subscription.id)
    )
    return [dict(row) for row in result.mappings().all()]
