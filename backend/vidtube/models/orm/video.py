# vidtube/models/orm/video.py
import uuid

from sqlalchemy import JSON, Boolean, Float, ForeignKey, Text
from sqlalchemy.orm import Mapped, mapped_column

from vidtube.models.orm.base import Base, UUIDMixin, TimestampMixin


class Video(Base, UUIDMixin, TimestampMixin):
    __tablename__ = "videos"

    video_file: Mapped[dict] = mapped_column(JSON, nullable=False)
    thumbnail: Mapped[dict] = mapped_column(JSON, nullable=False)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    # seconds, probed from the uploaded file
    duration: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    is_published: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    publisher_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("users.id"), index=True, nullable=False)

    def to_dict(self) -> dict:
        return {
            "_id": self.id,
            "videoFile": self.video_file,
            "thumbnail": self.thumbnail,
            "title": self.title,
            "description": self.description,
            "duration": self.duration,
            "isPublished": self.is_published,
            "publisher": self.publisher_id,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }
