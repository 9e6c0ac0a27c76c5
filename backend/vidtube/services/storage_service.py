"""Azure Blob Storage backend for user and video media."""
import logging
import mimetypes
import os
import uuid

from azure.core.exceptions import AzureError, ResourceNotFoundError
from azure.storage.blob import BlobServiceClient, ContentSettings
from starlette.concurrency import run_in_threadpool

from vidtube.services.media_probe import get_media_duration

logger = logging.getLogger(__name__)


def generate_blob_name(local_path: str) -> str:
    """Random blob name keeping the original extension."""
    ext = os.path.splitext(local_path)[1].lower()
    return f"{uuid.uuid4().hex}{ext}"


def _remove_local(local_path: str) -> None:
    try:
        os.remove(local_path)
    except FileNotFoundError:
        pass


class StorageService:
    """
    Uploads local files to a blob container and deletes them by public id.

    Both operations report failure through their return value (None / False)
    and never raise; callers decide which error to surface.
    """

    def __init__(self, connection_string: str, container: str):
        self.connection_string = connection_string
        self.container = container
        self._service_client: BlobServiceClient | None = None

    def _client(self) -> BlobServiceClient:
        if self._service_client is None:
            if not self.connection_string:
                raise ValueError("Missing AZURE_STORAGE_CONNECTION_STRING")
            self._service_client = BlobServiceClient.from_connection_string(self.connection_string)
        return self._service_client

    def _upload(self, local_path: str, probe_duration: bool) -> dict | None:
        if not local_path or not os.path.exists(local_path):
            return None

        content_type, _ = mimetypes.guess_type(local_path)
        duration = None
        if probe_duration or (content_type and content_type.startswith("video/")):
            duration = get_media_duration(local_path)

        blob_name = generate_blob_name(local_path)
        try:
            blob_client = self._client().get_blob_client(container=self.container, blob=blob_name)
            with open(local_path, "rb") as f:
                blob_client.upload_blob(
                    f,
                    overwrite=True,
                    blob_type="BlockBlob",
                    content_settings=ContentSettings(content_type=content_type or "application/octet-stream"),
                )
            logger.info("[STORAGE] Uploaded %s as %s", local_path, blob_name)
            return {"url": blob_client.url, "publicId": blob_name, "duration": duration}
        except (AzureError, ValueError, OSError) as e:
            logger.error("[STORAGE] Upload failed for %s: %s", local_path, e)
            return None
        finally:
            _remove_local(local_path)

    def _delete(self, public_id: str) -> bool:
        if not public_id:
            return False
        try:
            self._client().get_blob_client(container=self.container, blob=public_id).delete_blob()
            logger.info("[STORAGE] Deleted %s", public_id)
            return True
        except ResourceNotFoundError:
            logger.warning("[STORAGE] Blob %s not found", public_id)
            return False
        except (AzureError, ValueError) as e:
            logger.error("[STORAGE] Delete failed for %s: %s", public_id, e)
            return False

    async def upload(self, local_path: str | None, probe_duration: bool = False) -> dict | None:
        """
        Upload a spooled file; returns {url, publicId, duration} or None.

        Video mime types are always probed, ``probe_duration`` forces it for
        files whose name says nothing about their type.
        """
        if not local_path:
            return None
        return await run_in_threadpool(self._upload, local_path, probe_duration)

    async def delete(self, public_id: str | None) -> bool:
        if not public_id:
            return False
        return await run_in_threadpool(self._delete, public_id)


def to_media_ref(uploaded: dict) -> dict:
    """Strip an upload result down to the {url, publicId} pair stored on rows."""
    return {"url": uploaded["url"], "publicId": uploaded["publicId"]}
