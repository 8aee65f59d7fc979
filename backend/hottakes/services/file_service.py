"""
HotTakes API: Image Storage Service
====================================

What:  Validation, storage and removal of sauce images.
How:   Uploads are checked against the declared MIME type and the size
       limit, then written with aiofiles under storage_root using a
       generated name. Files are served back by the /images static mount,
       so the image reference of a sauce is <base-url>/images/<filename>.
Who:   SauceService (create/update store a file; update/delete remove the
       previous one in a background task; a failed insert removes the new
       one).

Upload checks (all raise FileUploadError, 400):
    - no file              → FILE_MISSING
    - MIME type not listed → INVALID_FILE_TYPE
    - empty / too large    → FILE_TOO_LARGE or INVALID_FILE_TYPE

Stored filenames are <uuid4 hex>.<extension>, the extension taken from the
MIME type map, never from the client filename. No user input reaches the
filesystem path.
"""

import logging
import uuid
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse

import aiofiles
import aiofiles.os

from hottakes.config import settings
from hottakes.exceptions import ErrorKind, FileStorageError, FileUploadError

logger = logging.getLogger(__name__)

IMAGE_FIELD = "image"
IMAGES_URL_PATH = "/images/"


class FileService:
    """
    Manages the lifecycle of stored images.

    Lifecycle of an uploaded image:
        1. validate_upload(): declared type and size
        2. store_file(): written as storage_root/<uuid>.<ext>, using the
           extension validate_upload() returned
        3. referenced by the sauce through its image URL
        4. cleanup_file(): removed when the sauce is deleted, when a new
           image replaces it, or when the sauce insert failed
    """

    def __init__(self, storage_root: Optional[str] = None):
        """
        Args:
            storage_root: Override the configured directory (used in tests).
        """
        self.storage_root = Path(storage_root or settings.storage_root).resolve()
        self.storage_root.mkdir(parents=True, exist_ok=True)
        logger.info("FileService initialized with storage_root=%s", self.storage_root)

    def validate_upload(
        self,
        filename: Optional[str],
        content_type: Optional[str],
        size: int,
    ) -> str:
        """
        Check an uploaded file before it is written.

        Args:
            filename:     Client filename (only used to detect "no file")
            content_type: MIME type declared by the client
            size:         Byte count of the uploaded content

        Returns:
            The extension the file will be stored with (e.g. "png")

        Raises:
            FileUploadError with kind FILE_MISSING, INVALID_FILE_TYPE or
            FILE_TOO_LARGE
        """
        if not filename:
            raise FileUploadError(field=IMAGE_FIELD)

        mime_type = (content_type or "").split(";", 1)[0].strip().lower()
        extension = settings.allowed_mime_types.get(mime_type)
        if extension is None:
            raise FileUploadError(
                f"File type '{mime_type or 'unknown'}' is not supported. "
                f"Allowed types: {', '.join(sorted(settings.allowed_mime_types))}",
                kind=ErrorKind.INVALID_FILE_TYPE,
                field=IMAGE_FIELD,
                context={"content_type": content_type},
            )

        if size <= 0:
            raise FileUploadError(
                "The uploaded image is empty",
                kind=ErrorKind.INVALID_FILE_TYPE,
                field=IMAGE_FIELD,
            )
        if size > settings.max_file_size:
            max_mb = settings.max_file_size / (1024 * 1024)
            raise FileUploadError(
                f"File size ({size / (1024 * 1024):.1f}MB) exceeds maximum of {max_mb:.0f}MB.",
                kind=ErrorKind.FILE_TOO_LARGE,
                field=IMAGE_FIELD,
                context={"size": size, "max_size": settings.max_file_size},
            )
        return extension

    def _generate_filename(self, extension: str) -> str:
        return f"{uuid.uuid4().hex}.{extension}"

    def path_for(self, filename: str) -> Path:
        return self.storage_root / Path(filename).name

    async def store_file(self, content: bytes, extension: str) -> str:
        """
        Write an image under a generated name.

        Args:
            content:   Image bytes, already accepted by validate_upload()
            extension: The extension validate_upload() returned

        Returns:
            The stored filename (relative to storage_root)

        Raises:
            FileStorageError if the write fails
        """
        filename = self._generate_filename(extension)
        path = self.path_for(filename)

        try:
            async with aiofiles.open(path, "wb") as f:
                await f.write(content)
        except OSError as e:
            logger.error("Failed to store file at %s: %s", path, e)
            raise FileStorageError(context={"path": str(path), "os_error": str(e)}) from e

        logger.info("File stored: %s (%d bytes)", filename, len(content))
        return filename

    async def cleanup_file(self, filename: Optional[str]) -> None:
        """
        Remove a stored image. Best-effort: failures are logged, never raised.

        Runs as a background task after update/delete, so there is no
        caller left to report an error to.
        """
        if not filename:
            return
        path = self.path_for(filename)
        try:
            await aiofiles.os.remove(path)
            logger.info("Removed image: %s", path.name)
        except FileNotFoundError:
            logger.debug("Cleanup: file already gone: %s", path.name)
        except OSError as e:
            logger.warning("Failed to remove image %s: %s", path.name, e)

    @staticmethod
    def filename_from_url(image_url: Optional[str]) -> Optional[str]:
        """
        Extract the stored filename from an image URL.

        "http://host/images/abc.png" → "abc.png"; None for URLs that do not
        point into the images mount.
        """
        if not image_url:
            return None
        path = urlparse(image_url).path
        if IMAGES_URL_PATH not in path:
            return None
        filename = path.rsplit(IMAGES_URL_PATH, 1)[1]
        if not filename or "/" in filename:
            return None
        return filename


# ── Singleton Instance ────────────────────────────────────────────────────
file_service = FileService()
