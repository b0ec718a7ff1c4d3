import logging
import mimetypes
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

import aiohttp

from grouphub import env
from grouphub.models.data import UploadFile
from grouphub.utils import raise_for_status

logger = logging.getLogger(__name__)


class UploadError(Exception):
    """Raised when the upload service does not hand back a stored file id."""


@dataclass
class UploadResult:
    uuid: str


def load_file(path: str) -> UploadFile:
    """Read a local file into an UploadFile, guessing its MIME type from the name."""
    file_path = Path(path).expanduser()
    content_type = mimetypes.guess_type(file_path.name)[0] or "application/octet-stream"
    return UploadFile(name=file_path.name, content=file_path.read_bytes(), content_type=content_type)


class Uploader:
    """Multipart client for the file upload service."""

    def __init__(
        self,
        upload_url: str = env.UPLOAD_URL,
        public_key: str = env.UPLOAD_PUBLIC_KEY,
        timeout: float = env.HTTP_TIMEOUT_SECONDS,
        session_factory: Callable[..., aiohttp.ClientSession] = aiohttp.ClientSession,
    ):
        self.upload_url = upload_url
        self.public_key = public_key
        self.timeout = timeout
        self.session_factory = session_factory

    async def upload_file(self, upload: UploadFile) -> UploadResult:
        form = aiohttp.FormData()
        form.add_field("UPLOADCARE_PUB_KEY", self.public_key)
        form.add_field("UPLOADCARE_STORE", "auto")
        form.add_field("file", upload.content, filename=upload.name, content_type=upload.content_type)

        logger.debug(f"Uploading {upload.name} ({upload.size} bytes)")
        try:
            async with self.session_factory(timeout=aiohttp.ClientTimeout(total=self.timeout)) as session:
                async with session.post(self.upload_url, data=form) as response:
                    await raise_for_status(response)
                    body = await response.json()
        except aiohttp.ClientError as e:
            raise UploadError(f"Uploading {upload.name} failed: {e}") from e

        uuid = (body or {}).get("file") or (body or {}).get("uuid")
        if not uuid:
            raise UploadError(f"Upload service returned no file id for {upload.name}")
        logger.info(f"Uploaded {upload.name} as {uuid}")
        return UploadResult(uuid=uuid)
