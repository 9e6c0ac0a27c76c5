"""
Unit tests for storage_service.py

Blob calls are mocked; no Azure credentials or ffprobe needed.
"""
import os
import shutil
import tempfile
import unittest
from unittest.mock import MagicMock, patch

from azure.core.exceptions import ResourceNotFoundError, ServiceRequestError

from vidtube.services.storage_service import StorageService, generate_blob_name, to_media_ref


class TestStorageService(unittest.IsolatedAsyncioTestCase):

    def setUp(self):
        self.tmpdir = tempfile.mkdtemp(prefix="test_storage_")
        self.blob_client = MagicMock()
        self.blob_client.url = "https://account.blob.core.windows.net/media/blob"

        service_client = MagicMock()
        service_client.get_blob_client.return_value = self.blob_client
        patcher = patch(
            "vidtube.services.storage_service.BlobServiceClient.from_connection_string",
            return_value=service_client,
        )
        self.from_connection_string = patcher.start()
        self.addCleanup(patcher.stop)

        self.storage = StorageService(connection_string="UseDevelopmentStorage=true", container="media")

    def tearDown(self):
        shutil.rmtree(self.tmpdir, ignore_errors=True)

    def make_file(self, name: str) -> str:
        path = os.path.join(self.tmpdir, name)
        with open(path, "wb") as f:
            f.write(b"data")
        return path

    async def test_upload_video_probes_duration_and_removes_temp(self):
        path = self.make_file("clip.mp4")

        with patch("vidtube.services.storage_service.get_media_duration", return_value=12.5) as probe:
            uploaded = await self.storage.upload(path)

        probe.assert_called_once_with(path)
        self.assertEqual(uploaded["duration"], 12.5)
        self.assertEqual(uploaded["url"], self.blob_client.url)
        self.assertTrue(uploaded["publicId"].endswith(".mp4"))
        self.blob_client.upload_blob.assert_called_once()
        self.assertFalse(os.path.exists(path))

    async def test_upload_image_skips_probe(self):
        path = self.make_file("avatar.png")

        with patch("vidtube.services.storage_service.get_media_duration") as probe:
            uploaded = await self.storage.upload(path)

        probe.assert_not_called()
        self.assertIsNone(uploaded["duration"])
        self.assertEqual(to_media_ref(uploaded), {"url": uploaded["url"], "publicId": uploaded["publicId"]})

    async def test_upload_probes_extensionless_video_on_request(self):
        path = self.make_file("blob")

        with patch("vidtube.services.storage_service.get_media_duration", return_value=12.5) as probe:
            uploaded = await self.storage.upload(path, probe_duration=True)

        probe.assert_called_once_with(path)
        self.assertEqual(uploaded["duration"], 12.5)
        self.assertFalse(os.path.exists(path))

    async def test_upload_failure_returns_none_and_removes_temp(self):
        path = self.make_file("avatar.png")
        self.blob_client.upload_blob.side_effect = ServiceRequestError("connection reset")

        self.assertIsNone(await self.storage.upload(path))
        self.assertFalse(os.path.exists(path))

    async def test_upload_without_path(self):
        self.assertIsNone(await self.storage.upload(None))
        self.assertIsNone(await self.storage.upload(os.path.join(self.tmpdir, "missing.png")))
        self.blob_client.upload_blob.assert_not_called()

    async def test_upload_without_connection_string(self):
        storage = StorageService(connection_string="", container="media")
        path = self.make_file("avatar.png")

        self.assertIsNone(await storage.upload(path))
        self.from_connection_string.assert_not_called()
        self.assertFalse(os.path.exists(path))

    async def test_delete(self):
        self.assertTrue(await self.storage.delete("abc.png"))
        self.blob_client.delete_blob.assert_called_once()

    async def test_delete_missing_blob(self):
        self.blob_client.delete_blob.side_effect = ResourceNotFoundError("gone")
        self.assertFalse(await self.storage.delete("abc.png"))

    async def test_delete_without_id(self):
        self.assertFalse(await self.storage.delete(None))
        self.blob_client.delete_blob.assert_not_called()


class TestGenerateBlobName(unittest.TestCase):

    def test_keeps_extension(self):
        name = generate_blob_name("/tmp/Some Clip.MOV")
        self.assertTrue(name.endswith(".mov"))
        self.assertNotEqual(name, generate_blob_name("/tmp/Some Clip.MOV"))


if __name__ == "__main__":
    unittest.main()
