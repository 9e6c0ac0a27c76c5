import asyncio

from vidtube.core.db import engine
from vidtube.models.orm import Base, Subscription, User, Video, View  # noqa: F401 - registers tables


async def init():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


if __name__ == "__main__":
    asyncio.run(init())
