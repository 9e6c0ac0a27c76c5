# vidtube/repository/video_repo.py
import uuid
from typing import Any

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.core.config import configs
from vidtube.models.orm.user import User
from vidtube.models.orm.video import Video
from vidtube.repository.subscription_repo import (
    is_subscribed_to,
    subscribed_to_count_of,
    subscribers_count_of,
)
from vidtube.repository.view_repo import delete_views_for_video, views_count_of
from vidtube.schemas.video_schema import VideoPage


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _listing_filters(query: str | None, channel_id: uuid.UUID | None) -> list:
    filters = []
    if query:
        pattern = f"%{_escape_like(query)}%"
        filters.append(or_(
            Video.title.ilike(pattern, escape="\\"),
            Video.description.ilike(pattern, escape="\\"),
        ))
    if channel_id:
        filters.append(Video.publisher_id == channel_id)
    return filters


async def list_videos(
    db: AsyncSession,
    page: int,
    limit: int,
    query: str | None = None,
    channel_id: uuid.UUID | None = None,
    sort_by: str | None = None,
    sort_type: str | None = None,
) -> VideoPage | None:
    """
    One page of videos with their view count and publisher summary.

    ``query`` matches title or description as a case-insensitive substring,
    ``channel_id`` restricts to one publisher. Sorting is ascending only when
    ``sort_type == "inc"``. Returns None when the total could not be computed.
    """
    filters = _listing_filters(query, channel_id)
    views_count = views_count_of(Video.id).label("viewsCount")

    sortable = {
        "createdAt": Video.created_at,
        "updatedAt": Video.updated_at,
        "title": Video.title,
        "duration": Video.duration,
        "viewsCount": views_count,
    }
    sort_column = sortable.get(sort_by or configs.ORDERING, sortable["createdAt"])
    ordering = sort_column.asc() if sort_type == "inc" else sort_column.desc()

    total = (await db.execute(
        select(func.count(Video.id))
        .select_from(Video)
        .join(User, User.id == Video.publisher_id)
        .where(*filters)
    )).scalar_one_or_none()
    if total is None:
        return None

    result = await db.execute(
        select(
            Video.id.label("_id"),
            Video.title.label("title"),
            Video.duration.label("duration"),
            Video.thumbnail.label("thumbnail"),
            views_count,
            User.avatar.label("publisherAvatar"),
            User.username.label("publisherUsername"),
            User.fullname.label("publisherFullname"),
            Video.created_at.label("createdAt"),
            Video.updated_at.label("updatedAt"),
        )
        .join(User, User.id == Video.publisher_id)
        .where(*filters)
        .order_by(ordering, Video.id)
        .offset((page - 1) * limit)
        .limit(limit)
    )
    items = [dict(row) for row in result.mappings().all()]
    return VideoPage.build(items, total=total, page=page, limit=limit)


async def get_video_detail(
    db: AsyncSession,
    video_id: uuid.UUID,
    viewer_id: uuid.UUID | None,
) -> dict | None:
    """A video with full publisher detail as seen by ``viewer_id``."""
    result = await db.execute(
        select(
            Video.id.label("_id"),
            Video.title.label("title"),
            Video.description.label("description"),
            Video.duration.label("duration"),
            Video.video_file.label("videoFile"),
            Video.thumbnail.label("thumbnail"),
            views_count_of(Video.id).label("viewsCount"),
            User.id.label("publisherId"),
            User.avatar.label("publisherAvatar"),
            User.username.label("publisherUsername"),
            User.fullname.label("publisherFullname"),
            subscribed_to_count_of(User.id).label("subscribesCount"),
            subscribers_count_of(User.id).label("subscribersCount"),
            is_subscribed_to(User.id, viewer_id).label("isSubscribed"),
            Video.created_at.label("createdAt"),
            Video.updated_at.label("updatedAt"),
        )
        .join(User, User.id == Video.publisher_id)
        .where(Video.id == video_id)
    )
    row = result.mappings().first()
    if row is None:
        return None

    video = dict(row)
    video["isSubscribed"] = bool(video["isSubscribed"])
    return video


async def get_video_by_id(db: AsyncSession, video_id: uuid.UUID) -> Video | None:
    return await db.get(Video, video_id)


async def create_video(
    db: AsyncSession,
    publisher_id: uuid.UUID,
    title: str,
    description: str,
    video_file: dict,
    thumbnail: dict,
    duration: float,
) -> Video:
    video = Video(
        publisher_id=publisher_id,
        title=title,
        description=description,
        video_file=video_file,
        thumbnail=thumbnail,
        duration=duration,
    )
    db.add(video)
    await db.commit()
    await db.refresh(video)
    return video


async def update_video(db: AsyncSession, video_id: uuid.UUID, **values: Any) -> Video | None:
    """Set the given columns; None when the video does not exist."""
    video = await db.get(Video, video_id)
    if video is None:
        return None

    for key, value in values.items():
        setattr(video, key, value)
    await db.commit()
    await db.refresh(video)
    return video


async def toggle_publish_status(db: AsyncSession, video_id: uuid.UUID) -> Video | None:
    video = await db.get(Video, video_id)
    if video is None:
        return None

    video.is_published = not video.is_published
    await db.commit()
    await db.refresh(video)
    return video


async def delete_video_with_views(db: AsyncSession, video_id: uuid.UUID) -> Video | None:
    """Delete a video and all of its views in one transaction."""
    video = await db.get(Video, video_id)
    if video is None:
        return None

    await delete_views_for_video(db, video_id)
    await db.delete(video)
    await db.commit()
    return video
