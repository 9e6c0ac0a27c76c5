import unittest
import uuid

from vidtube.testing import ApiTestCase


class TestSubscriptionsApi(ApiTestCase):

    async def asyncSetUp(self):
        await super().asyncSetUp()
        self.alice = await self.make_user("alice")
        self.bob = await self.make_user("bob")

    async def test_toggle(self):
        url = self.url(f"/subscriptions/c/{self.bob.id}")

        first = await self.client.post(url, headers=self.auth(self.alice))
        self.assertEqual(first.status_code, 200)
        self.assertTrue(first.json()["data"]["subscribed"])

        subscribers = await self.client.get(url, headers=self.auth(self.alice))
        self.assertEqual([row["username"] for row in subscribers.json()["data"]], ["alice"])

        channels = await self.client.get(self.url(f"/subscriptions/u/{self.alice.id}"), headers=self.auth(self.alice))
        self.assertEqual([row["username"] for row in channels.json()["data"]], ["bob"])

        second = await self.client.post(url, headers=self.auth(self.alice))
        self.assertFalse(second.json()["data"]["subscribed"])

        subscribers = await self.client.get(url, headers=self.auth(self.alice))
        self.assertEqual(subscribers.json()["data"], [])

    async def test_cannot_subscribe_to_self(self):
        response = await self.client.post(
            self.url(f"/subscriptions/c/{self.alice.id}"),
            headers=self.auth(self.alice),
        )
        self.assertEqual(response.status_code, 400)

    async def test_unknown_channel(self):
        response = await self.client.post(
            self.url(f"/subscriptions/c/{uuid.uuid4()}"),
            headers=self.auth(self.alice),
        )
        self.assertEqual(response.status_code, 404)


if __name__ == "__main__":
    unittest.main()
