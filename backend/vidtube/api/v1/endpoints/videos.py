import logging
import uuid
from typing import Optional

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.core.config import configs
from vidtube.core.container import Container
from vidtube.core.db import get_db
from vidtube.core.dependencies import get_current_user
from vidtube.core.exceptions import ApiError
from vidtube.models.orm.user import User
from vidtube.repository import video_repo
from vidtube.repository.view_repo import record_view
from vidtube.schemas.base_schema import ApiResponse
from vidtube.schemas.video_schema import ChangeDescriptionRequest, ChangeTitleRequest
from vidtube.services.storage_service import StorageService, to_media_ref
from vidtube.services.upload_service import save_upload_to_temp

logger = logging.getLogger(__name__)

router = APIRouter()


def parse_positive_int(value: Optional[str], default: int) -> int:
    """Lenient query-string int: missing, non-numeric and < 1 fall back to ``default``."""
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        return default
    return parsed if parsed >= 1 else default


@router.get("")
async def get_videos(
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    query: Optional[str] = Query(None),
    channelId: Optional[uuid.UUID] = Query(None),
    sortBy: Optional[str] = Query(None),
    sortType: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    videos = await video_repo.list_videos(
        db,
        page=parse_positive_int(page, configs.PAGE),
        limit=parse_positive_int(limit, configs.PAGE_SIZE),
        query=query,
        channel_id=channelId,
        sort_by=sortBy,
        sort_type=sortType,
    )

    if videos is None:
        raise ApiError(500, "Something went wrong while fetching all videos")

    return ApiResponse(statusCode=200, data=videos, message="Videos fetched successfully")


@router.post("", status_code=status.HTTP_201_CREATED)
@inject
async def publish_video(
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    videoFile: Optional[UploadFile] = File(None),
    thumbnail: Optional[UploadFile] = File(None),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    storage: StorageService = Depends(Provide[Container.storage_service]),
):
    if not title or not description:
        raise ApiError(400, "Title and Description both are required")

    if videoFile is None or thumbnail is None:
        raise ApiError(400, "Video and Thumbnail both are required")

    video_file_path = await save_upload_to_temp(videoFile)
    thumbnail_path = await save_upload_to_temp(thumbnail)

    uploaded_video = await storage.upload(video_file_path, probe_duration=True)
    uploaded_thumbnail = await storage.upload(thumbnail_path)

    if not uploaded_video or not uploaded_thumbnail:
        raise ApiError(500, "Something went wrong while uploading video and thumbnail")

    video = await video_repo.create_video(
        db,
        publisher_id=current_user.id,
        title=title,
        description=description,
        video_file=to_media_ref(uploaded_video),
        thumbnail=to_media_ref(uploaded_thumbnail),
        duration=uploaded_video.get("duration") or 0,
    )
    logger.info("[VIDEO] %s published %s", current_user.username, video.id)

    return ApiResponse(
        statusCode=status.HTTP_201_CREATED,
        data={"video": video.to_dict()},
        message="Video uploaded successfully",
    )


@router.get("/{videoId}")
async def get_video(
    videoId: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    video = await video_repo.get_video_detail(db, videoId, viewer_id=current_user.id)

    if not video:
        raise ApiError(500, "Something went wrong while fetching the video")

    new_view = await record_view(
        db,
        video_id=video["_id"],
        owner_id=video["publisherId"],
        viewer_id=current_user.id,
    )

    if not new_view:
        raise ApiError(500, "Something went wrong while creating new view of the video")

    return ApiResponse(statusCode=200, data={"video": video}, message="Video fetched successfully")


@router.patch("/{videoId}/video-file")
@inject
async def change_video_file(
    videoId: uuid.UUID,
    videoFile: Optional[UploadFile] = File(None),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    storage: StorageService = Depends(Provide[Container.storage_service]),
):
    if videoFile is None:
        raise ApiError(400, "Video file is missing")

    old_video = await video_repo.get_video_by_id(db, videoId)
    if not old_video:
        raise ApiError(500, "Something went wrong while fetching the old video")

    deleted = await storage.delete(old_video.video_file.get("publicId"))
    if not deleted:
        raise ApiError(500, "Something went wrong while deleting the old video file from storage")

    uploaded = await storage.upload(await save_upload_to_temp(videoFile), probe_duration=True)
    if not uploaded:
        raise ApiError(500, "Something went wrong while uploading the new video file to storage")

    updated_video = await video_repo.update_video(
        db,
        videoId,
        video_file=to_media_ref(uploaded),
        duration=uploaded.get("duration") or old_video.duration,
    )
    if not updated_video:
        raise ApiError(500, "Something went wrong while updating the video file")

    return ApiResponse(
        statusCode=200,
        data={"updatedVideo": updated_video.to_dict()},
        message="Video file updated successfully",
    )


@router.patch("/{videoId}/thumbnail")
@inject
async def change_thumbnail(
    videoId: uuid.UUID,
    thumbnail: Optional[UploadFile] = File(None),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    storage: StorageService = Depends(Provide[Container.storage_service]),
):
    if thumbnail is None:
        raise ApiError(400, "Thumbnail is missing")

    old_video = await video_repo.get_video_by_id(db, videoId)
    if not old_video:
        raise ApiError(500, "Something went wrong while fetching the old video")

    deleted = await storage.delete(old_video.thumbnail.get("publicId"))
    if not deleted:
        raise ApiError(500, "Something went wrong while deleting the old thumbnail from storage")

    uploaded = await storage.upload(await save_upload_to_temp(thumbnail))
    if not uploaded:
        raise ApiError(500, "Something went wrong while uploading the new thumbnail to storage")

    updated_video = await video_repo.update_video(db, videoId, thumbnail=to_media_ref(uploaded))
    if not updated_video:
        raise ApiError(500, "Something went wrong while updating the thumbnail")

    return ApiResponse(
        statusCode=200,
        data={"updatedVideo": updated_video.to_dict()},
        message="Thumbnail updated successfully",
    )


@router.patch("/{videoId}/title")
async def change_title(
    videoId: uuid.UUID,
    payload: ChangeTitleRequest,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if not payload.title:
        raise ApiError(400, "Title is missing")

    updated_video = await video_repo.update_video(db, videoId, title=payload.title)
    if not updated_video:
        raise ApiError(500, "Something went wrong while updating the video title")

    return ApiResponse(
        statusCode=200,
        data={"updatedVideo": updated_video.to_dict()},
        message="Video title updated successfully",
    )


@router.patch("/{videoId}/description")
async def change_description(
    videoId: uuid.UUID,
    payload: ChangeDescriptionRequest,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if not payload.description:
        raise ApiError(400, "Description is missing")

    updated_video = await video_repo.update_video(db, videoId, description=payload.description)
    if not updated_video:
        raise ApiError(500, "Something went wrong while updating the video description")

    return ApiResponse(
        statusCode=200,
        data={"updatedVideo": updated_video.to_dict()},
        message="Video description updated successfully",
    )


@router.patch("/{videoId}/toggle-publish")
async def toggle_publish_status(
    videoId: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    updated_video = await video_repo.toggle_publish_status(db, videoId)
    if not updated_video:
        raise ApiError(500, "Something went wrong while updating the video publish status")

    return ApiResponse(
        statusCode=200,
        data={"updatedVideo": updated_video.to_dict()},
        message="Publish status toggled successfully",
    )


@router.delete("/{videoId}")
@inject
async def delete_video(
    videoId: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    storage: StorageService = Depends(Provide[Container.storage_service]),
):
    old_video = await video_repo.get_video_by_id(db, videoId)
    if not old_video:
        raise ApiError(500, "Something went wrong while fetching the video")

    # storage results are not checked; the row goes either way
    await storage.delete(old_video.video_file.get("publicId"))
    await storage.delete(old_video.thumbnail.get("publicId"))

    deleted_video = await video_repo.delete_video_with_views(db, videoId)
    if not deleted_video:
        raise ApiError(500, "Something went wrong while deleting the video")

    logger.info("[VIDEO] %s deleted %s", current_user.username, videoId)
    return ApiResponse(statusCode=200, data={}, message="Video deleted successfully")
