# vidtube/models/orm/view.py
import uuid

from sqlalchemy import ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from vidtube.models.orm.base import Base, UUIDMixin, TimestampMixin


class View(Base, UUIDMixin, TimestampMixin):
    """Latest view of a video by a viewer; replaced on every watch."""

    __tablename__ = "views"

    video_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("videos.id"), index=True, nullable=False)
    # publisher of the video at view time
    owner_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("users.id"), index=True, nullable=False)
    viewer_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("users.id"), index=True, nullable=False)
