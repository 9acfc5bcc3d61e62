"""
Featured image storage.

Uploaded images are validated and kept as-is: no resizing and no
re-encoding. The bytes live inline on the owning post.
"""

from dataclasses import dataclass
from io import BytesIO
from typing import Any

from fastapi import UploadFile
from PIL import Image

from postdesk.configs import IMAGE_ALLOWED_EXTENSIONS, settings
from postdesk.errors import (
    ImageTooLargeError,
    InvalidImageError,
    RecordNotFoundError,
    TooManyFilesError,
    UnsupportedImageTypeError,
)
from postdesk.monitoring import get_logger
from postdesk.repositories import StoredImage

logger = get_logger(__name__)

# Pillow format name -> MIME type
_FORMAT_MIME = {
    "JPEG": "image/jpeg",
    "PNG": "image/png",
    "GIF": "image/gif",
    "WEBP": "image/webp",
}


@dataclass(frozen=True)
class Attachment:
    """An accepted image, ready to be embedded in a post."""

    data: bytes
    content_type: str
    filename: str

    def columns(self) -> dict[str, Any]:
        """Post column values holding this attachment."""
        return {
            "featured_image_data": self.data,
            "featured_image_content_type": self.content_type,
            "featured_image_filename": self.filename,
        }


class ImageStore:
    """
    Validates featured image uploads and maps attachments to post columns.

    Args:
        max_bytes: Size cap, defaults to ``POST_IMAGE_MAX_SIZE_MB``
        allowed: Extension to MIME type allow-set
    """

    def __init__(
        self,
        max_bytes: int | None = None,
        allowed: dict[str, str] | None = None,
    ) -> None:
        self.max_bytes = max_bytes or settings.post_image_max_bytes
        self.allowed = allowed or IMAGE_ALLOWED_EXTENSIONS

    def _validate_type(self, file: UploadFile) -> str:
        """Check the extension and declared MIME type against each other and the allow-set."""
        filename = file.filename or ""
        content_type = (file.content_type or "").split(";")[0].strip().lower()
        extension = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""

        expected = self.allowed.get(extension)
        if expected is None or content_type != expected:
            raise UnsupportedImageTypeError(content_type=content_type or "unknown", filename=filename)
        return content_type

    def _too_large(self, size: int) -> ImageTooLargeError:
        return ImageTooLargeError(
            max_size_mb=self.max_bytes // (1024 * 1024),
            actual_size_mb=size / (1024 * 1024),
        )

    async def _read(self, file: UploadFile) -> bytes:
        """Read the payload, refusing anything over the cap."""
        # Multipart parsing already spooled the body, so the size is usually known up front
        if file.size is not None and file.size > self.max_bytes:
            raise self._too_large(file.size)
        data = await file.read(self.max_bytes + 1)
        if len(data) > self.max_bytes:
            raise self._too_large(file.size or len(data))
        return data

    def _validate_content(self, data: bytes, content_type: str) -> None:
        """Make sure the bytes decode as an image of the declared type."""
        try:
            img = Image.open(BytesIO(data))
            img.verify()
        except Exception as e:
            mssg = f"Invalid or corrupted image file: {e!s}"
            raise InvalidImageError(mssg) from e
        if _FORMAT_MIME.get(img.format or "") != content_type:
            raise InvalidImageError(
                f"File content is {img.format or 'unknown'}, not {content_type}",
            )

    async def store(self, file: UploadFile) -> Attachment:
        """
        Validate an upload and turn it into an attachment.

        Raises:
            UnsupportedImageTypeError: Extension or MIME type not allowed, or mismatched
            ImageTooLargeError: Payload over the size cap
            InvalidImageError: Bytes are not a readable image of the declared type
        """
        content_type = self._validate_type(file)
        data = await self._read(file)
        self._validate_content(data, content_type)
        logger.info(f"Accepted featured image {file.filename} ({len(data)} bytes, {content_type})")
        return Attachment(data=data, content_type=content_type, filename=file.filename or "")

    async def store_one(self, files: list[UploadFile]) -> Attachment | None:
        """Store the single file of a request, if any."""
        if len(files) > 1:
            raise TooManyFilesError
        return await self.store(files[0]) if files else None

    @staticmethod
    def image_of(image: StoredImage | None) -> StoredImage:
        """
        Return a post's image or fail.

        Raises:
            RecordNotFoundError: If the post has no featured image
        """
        if image is None:
            mssg = "Featured image not found"
            raise RecordNotFoundError(mssg)
        return image

    @staticmethod
    def removal() -> dict[str, Any]:
        """Post column values that clear the attachment."""
        return {
            "featured_image_data": None,
            "featured_image_content_type": None,
            "featured_image_filename": None,
        }
