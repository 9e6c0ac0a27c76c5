import unittest

from vidtube.repository.view_repo import get_views_for_video, record_view
from vidtube.testing import DatabaseTestCase


class TestRecordView(DatabaseTestCase):

    async def asyncSetUp(self):
        await super().asyncSetUp()
        self.publisher = await self.make_user("publisher")
        self.viewer = await self.make_user("viewer")
        self.video = await self.make_video(self.publisher)

    async def test_repeat_view_replaces_previous(self):
        first = await record_view(self.db, self.video.id, self.publisher.id, self.viewer.id)
        second = await record_view(self.db, self.video.id, self.publisher.id, self.viewer.id)

        views = await get_views_for_video(self.db, self.video.id)
        self.assertEqual([view.id for view in views], [second.id])
        self.assertNotEqual(first.id, second.id)

    async def test_distinct_viewers_each_keep_a_row(self):
        await record_view(self.db, self.video.id, self.publisher.id, self.viewer.id)
        await record_view(self.db, self.video.id, self.publisher.id, self.publisher.id)

        views = await get_views_for_video(self.db, self.video.id)
        self.assertEqual({view.viewer_id for view in views}, {self.viewer.id, self.publisher.id})


if __name__ == "__main__":
    unittest.main()
