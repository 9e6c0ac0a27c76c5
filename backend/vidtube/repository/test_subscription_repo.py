import unittest

from vidtube.repository import subscription_repo
from vidtube.repository.user_repo import get_channel_profile, get_watch_history
from vidtube.testing import DatabaseTestCase


class TestSubscriptions(DatabaseTestCase):

    async def asyncSetUp(self):
        await super().asyncSetUp()
        self.alice = await self.make_user("alice")
        self.bob = await self.make_user("bob")
        self.carol = await self.make_user("carol")

    async def test_toggle(self):
        self.assertTrue(await subscription_repo.toggle_subscription(self.db, self.alice.id, self.bob.id))
        self.assertIsNotNone(await subscription_repo.get_subscription(self.db, self.alice.id, self.bob.id))

        self.assertFalse(await subscription_repo.toggle_subscription(self.db, self.alice.id, self.bob.id))
        self.assertIsNone(await subscription_repo.get_subscription(self.db, self.alice.id, self.bob.id))

    async def test_lists(self):
        await self.subscribe(self.alice, self.bob)
        await self.subscribe(self.carol, self.bob)
        await self.subscribe(self.alice, self.carol)

        subscribers = await subscription_repo.list_channel_subscribers(self.db, self.bob.id)
        self.assertEqual({row["username"] for row in subscribers}, {"alice", "carol"})
        carol_row = next(row for row in subscribers if row["username"] == "carol")
        self.assertEqual(carol_row["subscribersCount"], 1)

        channels = await subscription_repo.list_subscribed_channels(self.db, self.alice.id)
        self.assertEqual({row["username"] for row in channels}, {"bob", "carol"})
        bob_row = next(row for row in channels if row["username"] == "bob")
        self.assertEqual(bob_row["subscribersCount"], 2)

    async def test_channel_profile(self):
        await self.subscribe(self.alice, self.bob)
        await self.subscribe(self.carol, self.bob)
        await self.subscribe(self.bob, self.carol)

        profile = await get_channel_profile(self.db, "BOB", viewer_id=self.alice.id)
        self.assertEqual(profile["subscribersCount"], 2)
        self.assertEqual(profile["channelsSubscribedToCount"], 1)
        self.assertIs(profile["isSubscribed"], True)

        profile = await get_channel_profile(self.db, "bob", viewer_id=self.bob.id)
        self.assertIs(profile["isSubscribed"], False)

        self.assertIsNone(await get_channel_profile(self.db, "nobody", viewer_id=self.alice.id))

    async def test_watch_history(self):
        video = await self.make_video(self.bob, title="Bob's clip")
        await self.add_view(video, self.alice)

        history = await get_watch_history(self.db, self.alice.id)
        self.assertEqual(len(history), 1)
        self.assertEqual(history[0]["_id"], video.id)
        self.assertEqual(history[0]["publisherUsername"], "bob")
        self.assertEqual(await get_watch_history(self.db, self.carol.id), [])


if __name__ == "__main__":
    unittest.main()
