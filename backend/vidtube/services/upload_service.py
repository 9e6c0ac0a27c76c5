import logging
import os
import shutil
import uuid

from fastapi import UploadFile
from starlette.concurrency import run_in_threadpool

from vidtube.core.config import configs

logger = logging.getLogger(__name__)


def _write_temp(file: UploadFile, destination: str) -> None:
    os.makedirs(os.path.dirname(destination), exist_ok=True)
    file.file.seek(0)
    with open(destination, "wb") as out:
        shutil.copyfileobj(file.file, out)


async def save_upload_to_temp(file: UploadFile | None) -> str | None:
    """Spool an uploaded file into TEMP_UPLOAD_DIR and return its path, None when no file was sent."""
    if file is None or not file.filename:
        return None

    ext = os.path.splitext(file.filename)[1]
    destination = os.path.join(configs.TEMP_UPLOAD_DIR, f"{uuid.uuid4().hex}{ext}")
    await run_in_threadpool(_write_temp, file, destination)
    logger.info("[UPLOAD] %s spooled to %s", file.filename, destination)
    return destination
