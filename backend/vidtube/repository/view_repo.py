# vidtube/repository/view_repo.py
import uuid

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.models.orm.view import View


def views_count_of(video_id_col):
    """Correlated count of view rows for the given video column."""
    return (
        select(func.count(View.id))
        .where(View.video_id == video_id_col)
        .correlate_except(View)
        .scalar_subquery()
    )


async def record_view(
    db: AsyncSession,
    video_id: uuid.UUID,
    owner_id: uuid.UUID,
    viewer_id: uuid.UUID,
) -> View | None:
    """
    Replace the viewer's previous view of this video with a fresh one,
    so a row means "last watched at", not one visit.
    """
    await db.execute(
        delete(View).where(
            View.video_id == video_id,
            View.owner_id == owner_id,
            View.viewer_id == viewer_id,
        )
    )
    view = View(video_id=video_id, owner_id=owner_id, viewer_id=viewer_id)
    db.add(view)
    await db.commit()
    await db.refresh(view)
    return view


async def get_views_for_video(db: AsyncSession, video_id: uuid.UUID) -> list[View]:
    result = await db.execute(
        select(View).where(View.video_id == video_id).order_by(View.created_at.desc())
    )
    return list(result.scalars().all())


async def delete_views_for_video(db: AsyncSession, video_id: uuid.UUID) -> int:
    """Delete every view of a video inside the caller's transaction; returns the row count."""
    result = await db.execute(delete(View).where(View.video_id == video_id))
    return result.rowcount
