"""
Shared fixtures for the unittest suites living next to each module.

Each test gets its own SQLite file (aiosqlite) so sessions opened by the
app and by the test see committed data the same way Postgres would.
"""
import os
import shutil
import tempfile
import unittest
import uuid
from datetime import datetime, timedelta, timezone
from unittest.mock import patch

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from vidtube.models.orm import Base, Subscription, User, Video, View


class FakeStorage:
    """In-memory stand-in for StorageService with switchable failures."""

    def __init__(self, duration: float = 42.5):
        self.duration = duration
        self.fail_upload = False
        self.fail_delete = False
        self.uploaded: list[str] = []
        self.deleted: list[str] = []
        self.probed: list[str] = []

    async def upload(self, local_path, probe_duration=False):
        if not local_path:
            return None
        if probe_duration:
            self.probed.append(local_path)
        if os.path.exists(local_path):
            os.remove(local_path)
        if self.fail_upload:
            return None
        public_id = f"{uuid.uuid4().hex}{os.path.splitext(local_path)[1]}"
        self.uploaded.append(public_id)
        return {
            "url": f"https://blob.test/media/{public_id}",
            "publicId": public_id,
            "duration": self.duration if probe_duration else None,
        }

    async def delete(self, public_id):
        if not public_id:
            return False
        self.deleted.append(public_id)
        return not self.fail_delete


def media_ref(name: str) -> dict:
    return {"url": f"https://blob.test/media/{name}", "publicId": name}


class DatabaseTestCase(unittest.IsolatedAsyncioTestCase):

    async def asyncSetUp(self):
        self.tmpdir = tempfile.mkdtemp(prefix="vidtube_test_")
        self.engine = create_async_engine(
            f"sqlite+aiosqlite:///{os.path.join(self.tmpdir, 'test.db')}",
            poolclass=NullPool,
        )
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

        self.session_factory = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        self.db = self.session_factory()

    async def asyncTearDown(self):
        await self.db.close()
        await self.engine.dispose()
        shutil.rmtree(self.tmpdir, ignore_errors=True)

    async def make_user(self, username: str, password: str = "secret123", **fields) -> User:
        user = User(
            username=username,
            email=fields.pop("email", f"{username}@example.com"),
            fullname=fields.pop("fullname", username.title()),
            password=password,
            avatar=fields.pop("avatar", media_ref(f"{username}-avatar.png")),
            **fields,
        )
        self.db.add(user)
        await self.db.commit()
        await self.db.refresh(user)
        return user

    async def make_video(
        self,
        publisher: User,
        title: str = "A video",
        description: str = "Some description",
        minutes_ago: int = 0,
        **fields,
    ) -> Video:
        created = datetime.now(timezone.utc) - timedelta(minutes=minutes_ago)
        video = Video(
            publisher_id=publisher.id,
            title=title,
            description=description,
            video_file=fields.pop("video_file", media_ref(f"{uuid.uuid4().hex}.mp4")),
            thumbnail=fields.pop("thumbnail", media_ref(f"{uuid.uuid4().hex}.png")),
            duration=fields.pop("duration", 60.0),
            created_at=created,
            updated_at=created,
            **fields,
        )
        self.db.add(video)
        await self.db.commit()
        await self.db.refresh(video)
        return video

    async def subscribe(self, subscriber: User, channel: User) -> Subscription:
        subscription = Subscription(subscriber_id=subscriber.id, channel_id=channel.id)
        self.db.add(subscription)
        await self.db.commit()
        return subscription

    async def add_view(self, video: Video, viewer: User) -> View:
        view = View(video_id=video.id, owner_id=video.publisher_id, viewer_id=viewer.id)
        self.db.add(view)
        await self.db.commit()
        return view


class ApiTestCase(DatabaseTestCase):
    """Runs requests through the real app with the DB and storage swapped out."""

    async def asyncSetUp(self):
        await super().asyncSetUp()

        import httpx
        from dependency_injector import providers

        from vidtube.core.config import configs
        from vidtube.core.db import get_db
        from vidtube.main import app, container

        async def override_get_db():
            async with self.session_factory() as session:
                yield session

        self.app = app
        self.container = container
        self.app.dependency_overrides[get_db] = override_get_db

        self.storage = FakeStorage()
        self.container.storage_service.override(providers.Object(self.storage))

        self.upload_dir = os.path.join(self.tmpdir, "uploads")
        self._patches = [
            patch.object(configs, "TEMP_UPLOAD_DIR", self.upload_dir),
            patch.object(configs, "COOKIE_SECURE", False),
        ]
        for p in self._patches:
            p.start()

        self.client = httpx.AsyncClient(
            transport=httpx.ASGITransport(app=self.app),
            base_url="http://test",
        )
        self.prefix = configs.API_V1_STR

    async def asyncTearDown(self):
        await self.client.aclose()
        for p in reversed(self._patches):
            p.stop()
        self.container.storage_service.reset_override()
        self.app.dependency_overrides.clear()
        await super().asyncTearDown()

    def auth(self, user: User) -> dict:
        return {"Authorization": f"Bearer {user.generate_access_token()}"}

    def url(self, path: str) -> str:
        return f"{self.prefix}{path}"
