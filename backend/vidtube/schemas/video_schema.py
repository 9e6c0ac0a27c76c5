from typing import Any, Optional

from pydantic import BaseModel


class ChangeTitleRequest(BaseModel):
    title: Optional[str] = None


class ChangeDescriptionRequest(BaseModel):
    description: Optional[str] = None


class VideoPage(BaseModel):
    """Page container returned by the video listing"""
    videoList: list[dict[str, Any]]
    totalVideos: int
    limit: int
    page: int
    totalPages: int
    pagingCounter: int
    hasPrevPage: bool
    hasNextPage: bool
    prevPage: Optional[int] = None
    nextPage: Optional[int] = None

    @classmethod
    def build(cls, items: list[dict[str, Any]], total: int, page: int, limit: int) -> "VideoPage":
        total_pages = max(1, -(-total // limit))
        return cls(
            videoList=items,
            totalVideos=total,
            limit=limit,
            page=page,
            totalPages=total_pages,
            pagingCounter=(page - 1) * limit + 1,
            hasPrevPage=page > 1,
            hasNextPage=page < total_pages,
            prevPage=page - 1 if page > 1 else None,
            nextPage=page + 1 if page < total_pages else None,
        )
