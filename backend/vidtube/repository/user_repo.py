# vidtube/repository/user_repo.py
import uuid

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.models.orm.user import User
from vidtube.models.orm.video import Video
from vidtube.models.orm.view import View
from vidtube.repository.subscription_repo import (
    is_subscribed_to,
    subscribed_to_count_of,
    subscribers_count_of,
)
from vidtube.repository.view_repo import views_count_of


def _normalize(value: str | None) -> str | None:
    return value.strip().lower() if value else None


async def get_user_by_id(db: AsyncSession, user_id: uuid.UUID) -> User | None:
    return await db.get(User, user_id)


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    result = await db.execute(
        select(User).where(User.email == _normalize(email))
    )
    return result.scalar_one_or_none()


async def get_user_by_username_or_email(
    db: AsyncSession,
    username: str | None = None,
    email: str | None = None,
) -> User | None:
    conditions = []
    if _normalize(username):
        conditions.append(User.username == _normalize(username))
    if _normalize(email):
        conditions.append(User.email == _normalize(email))
    if not conditions:
        return None

    result = await db.execute(select(User).where(or_(*conditions)).limit(1))
    return result.scalars().first()


async def create_user(
    db: AsyncSession,
    username: str,
    email: str,
    fullname: str,
    password: str,
    avatar: dict,
    cover_image: dict | None = None,
) -> User:
    user = User(
        username=username,
        email=email,
        fullname=fullname,
        password=password,
        avatar=avatar,
        cover_image=cover_image,
    )

    db.add(user)
    await db.commit()
    await db.refresh(user)

    return user


async def save_user(db: AsyncSession, user: User) -> User:
    await db.commit()
    await db.refresh(user)
    return user


async def get_channel_profile(
    db: AsyncSession,
    username: str,
    viewer_id: uuid.UUID | None,
) -> dict | None:
    """Public channel page of a user with subscription counters for the viewer."""
    result = await db.execute(
        select(
            User.id.label("_id"),
            User.fullname.label("fullname"),
            User.username.label("username"),
            User.email.label("email"),
            User.avatar.label("avatar"),
            User.cover_image.label("coverImage"),
            subscribers_count_of(User.id).label("subscribersCount"),
            subscribed_to_count_of(User.id).label("channelsSubscribedToCount"),
            is_subscribed_to(User.id, viewer_id).label("isSubscribed"),
        ).where(User.username == _normalize(username))
    )
    row = result.mappings().first()
    if row is None:
        return None

    profile = dict(row)
    profile["isSubscribed"] = bool(profile["isSubscribed"])
    return profile


async def get_watch_history(db: AsyncSession, viewer_id: uuid.UUID) -> list[dict]:
    """Videos the user watched, most recently watched first."""
    result = await db.execute(
        select(
            Video.id.label("_id"),
            Video.title.label("title"),
            Video.duration.label("duration"),
            Video.thumbnail.label("thumbnail"),
            views_count_of(Video.id).label("viewsCount"),
            User.avatar.label("publisherAvatar"),
            User.username.label("publisherUsername"),
            User.fullname.label("publisherFullname"),
            View.created_at.label("watchedAt"),
        )
        .join(Video, Video.id == View.video_id)
        .join(User, User.id == Video.publisher_id)
        .where(View.viewer_id == viewer_id)
        .order_by(View.created_at.desc(), View.id)
    )
    return [dict(row) for row in result.mappings().all()]
