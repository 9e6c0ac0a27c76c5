import unittest
import uuid

from vidtube.repository import video_repo
from vidtube.repository.view_repo import get_views_for_video
from vidtube.testing import DatabaseTestCase


class TestListVideos(DatabaseTestCase):

    async def asyncSetUp(self):
        await super().asyncSetUp()
        self.alice = await self.make_user("alice")
        self.bob = await self.make_user("bob")
        self.oldest = await self.make_video(self.alice, title="Cooking pasta", minutes_ago=30)
        self.middle = await self.make_video(self.bob, title="Guitar lesson", description="Learn PASTA chords", minutes_ago=20)
        self.newest = await self.make_video(self.alice, title="Morning run", minutes_ago=10)

    async def test_defaults_sort_newest_first(self):
        page = await video_repo.list_videos(self.db, page=1, limit=10)
        self.assertEqual(
            [item["_id"] for item in page.videoList],
            [self.newest.id, self.middle.id, self.oldest.id],
        )
        self.assertEqual(page.totalVideos, 3)
        self.assertEqual(page.totalPages, 1)
        self.assertFalse(page.hasNextPage)

    async def test_projection(self):
        page = await video_repo.list_videos(self.db, page=1, limit=1)
        item = page.videoList[0]
        self.assertEqual(
            set(item),
            {
                "_id", "title", "duration", "thumbnail", "viewsCount",
                "publisherAvatar", "publisherUsername", "publisherFullname",
                "createdAt", "updatedAt",
            },
        )
        self.assertEqual(item["publisherUsername"], "alice")

    async def test_sort_ascending_on_inc(self):
        page = await video_repo.list_videos(self.db, page=1, limit=10, sort_type="inc")
        self.assertEqual(page.videoList[0]["_id"], self.oldest.id)

    async def test_sort_by_title(self):
        page = await video_repo.list_videos(self.db, page=1, limit=10, sort_by="title", sort_type="inc")
        self.assertEqual(
            [item["title"] for item in page.videoList],
            ["Cooking pasta", "Guitar lesson", "Morning run"],
        )

    async def test_unknown_sort_field_falls_back(self):
        page = await video_repo.list_videos(self.db, page=1, limit=10, sort_by="password")
        self.assertEqual(page.videoList[0]["_id"], self.newest.id)

    async def test_query_matches_title_or_description_case_insensitive(self):
        page = await video_repo.list_videos(self.db, page=1, limit=10, query="pasta")
        self.assertEqual(
            {item["_id"] for item in page.videoList},
            {self.oldest.id, self.middle.id},
        )

    async def test_query_wildcards_are_literal(self):
        page = await video_repo.list_videos(self.db, page=1, limit=10, query="%")
        self.assertEqual(page.totalVideos, 0)
        self.assertEqual(page.videoList, [])

    async def test_channel_filter(self):
        page = await video_repo.list_videos(self.db, page=1, limit=10, channel_id=self.alice.id)
        self.assertEqual(page.totalVideos, 2)
        self.assertTrue(all(item["publisherUsername"] == "alice" for item in page.videoList))

    async def test_unknown_channel_gives_empty_page(self):
        page = await video_repo.list_videos(self.db, page=1, limit=10, channel_id=uuid.uuid4())
        self.assertIsNotNone(page)
        self.assertEqual(page.videoList, [])
        self.assertEqual(page.totalVideos, 0)

    async def test_pagination(self):
        page = await video_repo.list_videos(self.db, page=2, limit=2)
        self.assertEqual([item["_id"] for item in page.videoList], [self.oldest.id])
        self.assertEqual(page.totalPages, 2)
        self.assertTrue(page.hasPrevPage)
        self.assertEqual(page.prevPage, 1)
        self.assertIsNone(page.nextPage)
        self.assertEqual(page.pagingCounter, 3)

    async def test_views_count_and_sort(self):
        await self.add_view(self.middle, self.alice)
        await self.add_view(self.middle, self.bob)
        await self.add_view(self.oldest, self.bob)

        page = await video_repo.list_videos(self.db, page=1, limit=10, sort_by="viewsCount")
        counts = [(item["_id"], item["viewsCount"]) for item in page.videoList]
        self.assertEqual(counts, [(self.middle.id, 2), (self.oldest.id, 1), (self.newest.id, 0)])


class TestVideoDetail(DatabaseTestCase):

    async def asyncSetUp(self):
        await super().asyncSetUp()
        self.publisher = await self.make_user("publisher")
        self.viewer = await self.make_user("viewer")
        self.other = await self.make_user("other")
        self.video = await self.make_video(self.publisher)

    async def test_missing_video(self):
        self.assertIsNone(await video_repo.get_video_detail(self.db, uuid.uuid4(), self.viewer.id))

    async def test_publisher_counts_and_subscription_flag(self):
        await self.subscribe(self.viewer, self.publisher)
        await self.subscribe(self.other, self.publisher)
        await self.subscribe(self.publisher, self.other)
        await self.add_view(self.video, self.other)

        detail = await video_repo.get_video_detail(self.db, self.video.id, self.viewer.id)

        self.assertEqual(detail["publisherId"], self.publisher.id)
        self.assertEqual(detail["subscribersCount"], 2)
        self.assertEqual(detail["subscribesCount"], 1)
        self.assertEqual(detail["viewsCount"], 1)
        self.assertIs(detail["isSubscribed"], True)

    async def test_not_subscribed(self):
        await self.subscribe(self.other, self.publisher)
        detail = await video_repo.get_video_detail(self.db, self.video.id, self.viewer.id)
        self.assertIs(detail["isSubscribed"], False)
        self.assertEqual(detail["subscribersCount"], 1)


class TestVideoMutations(DatabaseTestCase):

    async def asyncSetUp(self):
        await super().asyncSetUp()
        self.publisher = await self.make_user("publisher")
        self.video = await self.make_video(self.publisher)

    async def test_toggle_twice_restores_value(self):
        self.assertTrue(self.video.is_published)

        toggled = await video_repo.toggle_publish_status(self.db, self.video.id)
        self.assertFalse(toggled.is_published)

        toggled = await video_repo.toggle_publish_status(self.db, self.video.id)
        self.assertTrue(toggled.is_published)

    async def test_update_missing_video(self):
        self.assertIsNone(await video_repo.update_video(self.db, uuid.uuid4(), title="x"))

    async def test_update_title(self):
        updated = await video_repo.update_video(self.db, self.video.id, title="New title")
        self.assertEqual(updated.title, "New title")

    async def test_delete_removes_views(self):
        viewer = await self.make_user("viewer")
        await self.add_view(self.video, viewer)
        await self.add_view(self.video, self.publisher)

        deleted = await video_repo.delete_video_with_views(self.db, self.video.id)

        self.assertEqual(deleted.id, self.video.id)
        self.assertIsNone(await video_repo.get_video_by_id(self.db, self.video.id))
        self.assertEqual(await get_views_for_video(self.db, self.video.id), [])

    async def test_delete_missing_video(self):
        self.assertIsNone(await video_repo.delete_video_with_views(self.db, uuid.uuid4()))


if __name__ == "__main__":
    unittest.main()
