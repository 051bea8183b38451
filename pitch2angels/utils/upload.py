import os
import re
import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional, Union
from uuid import uuid4

from fastapi import HTTPException, UploadFile, status

from pitch2angels.config import settings

logger = logging.getLogger(__name__)

ALLOWED_UPLOAD_TYPES = re.compile(r"jpeg|jpg|png|gif|pdf")
_UNSAFE_NAME_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


@dataclass
class IncomingFile:
    """An uploaded file fully read into memory."""
    filename: str
    content: bytes
    content_type: str = "application/octet-stream"

    @property
    def size(self) -> int:
        return len(self.content)

    @property
    def extension(self) -> str:
        return os.path.splitext(self.filename)[1].lower()


def _file_too_large(max_size: int) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail={
            "error": "File too large",
            "message": f"File size should not exceed {max_size // (1024 * 1024)}MB"
        }
    )


async def read_upload(upload: Optional[UploadFile], max_size: Optional[int] = None) -> Optional[IncomingFile]:
    """
    Read a multipart upload into memory; missing or unnamed parts become None.

    At most max_size + 1 bytes are read, so an oversized part is rejected
    without being buffered in full.
    """
    if upload is None or not upload.filename:
        return None
    max_size = max_size or settings.MAX_UPLOAD_SIZE
    content = await upload.read(max_size + 1)
    if len(content) > max_size:
        logger.warning(f"Rejected upload {upload.filename}: larger than {max_size} bytes")
        raise _file_too_large(max_size)
    return IncomingFile(
        filename=upload.filename,
        content=content,
        content_type=upload.content_type or "application/octet-stream"
    )


def is_allowed_upload(filename: str, content_type: Optional[str]) -> bool:
    """Images and PDFs only; both the extension and the content type must agree."""
    extension = os.path.splitext(filename or "")[1].lower()
    return bool(ALLOWED_UPLOAD_TYPES.search(extension)) and bool(
        ALLOWED_UPLOAD_TYPES.search(content_type or "")
    )


def validate_upload(file: IncomingFile, max_size: Optional[int] = None) -> None:
    max_size = max_size or settings.MAX_UPLOAD_SIZE

    if not is_allowed_upload(file.filename, file.content_type):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "error": "File upload error",
                "message": "Only image and PDF files are allowed"
            }
        )

    if file.size > max_size:
        raise _file_too_large(max_size)


def safe_filename(filename: str) -> str:
    name = os.path.basename(filename.replace("\\", "/"))
    name = _UNSAFE_NAME_CHARS.sub("_", name).strip("._")
    return name or uuid4().hex


class LocalBlobStore:
    """
    Stores uploaded bytes on local disk and hands back a public URL.

    Files land in <root>/<folder>/<name>; the app serves <root> under
    /static/uploads, so URLs are <base_url>/<folder>/<name>.
    Existing files are never overwritten.
    """

    backend = "local"

    def __init__(self, root: Union[str, Path], base_url: str = "/static/uploads"):
        self.root = Path(root)
        self.base_url = base_url.rstrip("/")

    def store(self, content: bytes, folder: str, filename: str, content_type: Optional[str] = None) -> str:
        folder_path = self.root / safe_filename(folder)
        folder_path.mkdir(parents=True, exist_ok=True)

        name = safe_filename(filename)
        path = folder_path / name
        if path.exists():
            stem, ext = os.path.splitext(name)
            path = folder_path / f"{stem}-{uuid4().hex[:8]}{ext}"

        with open(path, "wb") as buffer:
            buffer.write(content)

        logger.info(f"Stored {len(content)} bytes ({content_type or 'unknown type'}) at {path}")
        return f"{self.base_url}/{folder_path.name}/{path.name}"

    def delete(self, url: str) -> bool:
        if not url or not url.startswith(self.base_url + "/"):
            return False

        relative = url[len(self.base_url) + 1:]
        path = (self.root / relative).resolve()
        if self.root.resolve() not in path.parents:
            logger.warning(f"Refusing to delete outside upload root: {url}")
            return False

        try:
            path.unlink()
        except FileNotFoundError:
            return False
        logger.info(f"Deleted stored file {path}")
        return True


@lru_cache()
def get_blob_store() -> LocalBlobStore:
    base_url = f"{settings.PUBLIC_BASE_URL.rstrip('/')}/static/uploads"
    return LocalBlobStore(settings.UPLOAD_DIR, base_url=base_url)
