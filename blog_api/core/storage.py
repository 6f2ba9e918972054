# blog_api/core/storage.py
"""
Filesystem storage for blog cover images.
"""
import io
import uuid
import logging
import aiofiles
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional
from datetime import datetime, timedelta, timezone

from PIL import Image, UnidentifiedImageError

from blog_api.core.assets import AssetRef
from blog_api.core.exceptions import StorageError, UploadRejectedError

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
}


@dataclass
class ImageUpload:
    """An uploaded file, fully read into memory."""
    filename: str
    content: bytes
    content_type: Optional[str] = None

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass
class ImageInfo:
    filename: str
    size: int
    created: datetime
    type: str
    url: str


class ImageStore:
    """
    Stores one cover image per blog post under a single upload directory.
    """

    def __init__(
        self,
        upload_dir: str = "./uploads",
        url_prefix: str = "/uploads",
        max_file_size: int = 10 * 1024 * 1024,  # 10MB default
        allowed_types: Optional[Iterable[str]] = None,
    ):
        """
        Initialize image store.

        Args:
            upload_dir: Directory the images are written to
            url_prefix: Public URL prefix the directory is served under
            max_file_size: Maximum file size in bytes
            allowed_types: Accepted image MIME types
        """
        self.upload_dir = Path(upload_dir)
        self.url_prefix = url_prefix
        self.max_file_size = max_file_size
        self.allowed_types = set(allowed_types or ["image/jpeg", "image/png", "image/gif", "image/webp"])

        self.upload_dir.mkdir(parents=True, exist_ok=True)

    def ref(self, value: str) -> AssetRef:
        """Turn a stored cover_image value into a reference under this store."""
        return AssetRef.from_url(value, url_prefix=self.url_prefix)

    def detect_mime_type(self, content: bytes) -> Optional[str]:
        """
        Sniff the image format from the file content.

        Returns:
            MIME type (e.g. image/png), or None if the bytes are not an image
        """
        try:
            with Image.open(io.BytesIO(content)) as image:
                return Image.MIME.get(image.format)
        except (UnidentifiedImageError, OSError):
            return None

    def validate(self, upload: ImageUpload) -> str:
        """
        Check an upload against the size and type limits.

        Returns:
            The detected MIME type

        Raises:
            UploadRejectedError: if the file is empty, too large or not an allowed image
        """
        if upload.size == 0:
            raise UploadRejectedError("Uploaded file is empty")

        if upload.size > self.max_file_size:
            raise UploadRejectedError(
                f"File size exceeds maximum {self.max_file_size / 1024 / 1024:g}MB"
            )

        mime_type = self.detect_mime_type(upload.content)
        if mime_type not in self.allowed_types:
            raise UploadRejectedError("Only image files are allowed (JPEG, PNG, GIF, WEBP)")

        return mime_type

    def generate_filename(self, mime_type: str) -> str:
        """
        Generate a unique filename.

        Format: {timestamp}_{uuid}{ext}. The extension always follows the
        detected image type, never the client supplied name, so a stored file
        is only ever served with an image content type.
        """
        ext = IMAGE_EXTENSIONS.get(mime_type, "." + mime_type.split("/")[-1])

        timestamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
        unique_id = uuid.uuid4().hex

        return f"{timestamp}_{unique_id}{ext}"

    async def save(self, upload: ImageUpload) -> AssetRef:
        """
        Validate and write an upload.

        Returns:
            Reference to the stored file

        Raises:
            UploadRejectedError: if the upload fails validation
            StorageError: if the file cannot be written
        """
        mime_type = self.validate(upload)

        ref = AssetRef(self.generate_filename(mime_type), url_prefix=self.url_prefix)
        file_path = ref.path(self.upload_dir)

        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(file_path, "wb") as f:
                await f.write(upload.content)
        except OSError as e:
            logger.error(f"Failed to save image {file_path}: {e}")
            raise StorageError("Failed to store uploaded image", detail=str(e)) from e

        logger.info(f"Saved image: {file_path} ({upload.size} bytes)")
        return ref

    async def delete(self, ref: AssetRef) -> bool:
        """
        Delete a stored image. A missing file is not an error.

        Returns:
            True if a file was removed
        """
        file_path = ref.path(self.upload_dir)
        try:
            file_path.unlink()
        except FileNotFoundError:
            logger.info(f"Image already absent: {file_path}")
            return False
        except OSError as e:
            logger.error(f"Failed to delete image {file_path}: {e}")
            return False

        logger.info(f"Deleted image: {file_path}")
        return True

    def exists(self, ref: AssetRef) -> bool:
        return ref.path(self.upload_dir).is_file()

    def info(self, filename: str) -> Optional[ImageInfo]:
        """Describe a stored image, or None if there is no such file."""
        try:
            ref = AssetRef.from_url(filename, url_prefix=self.url_prefix)
        except ValueError:
            return None

        file_path = ref.path(self.upload_dir)
        if not file_path.is_file():
            return None

        stats = file_path.stat()
        return ImageInfo(
            filename=ref.filename,
            size=stats.st_size,
            created=datetime.fromtimestamp(stats.st_mtime, tz=timezone.utc),
            type=ref.extension,
            url=ref.url,
        )

    def sweep_orphans(
        self,
        referenced: Iterable[str],
        older_than: timedelta = timedelta(hours=1),
        dry_run: bool = False,
    ) -> List[str]:
        """
        Remove files no blog post references.

        Files younger than ``older_than`` are kept so an upload whose row is
        still being written is not swept.

        Args:
            referenced: Filenames currently referenced by rows
            older_than: Grace period
            dry_run: Only report what would be removed

        Returns:
            Filenames removed (or that would be removed)
        """
        keep = set(referenced)
        cutoff = datetime.now(timezone.utc) - older_than
        removed = []

        for file_path in sorted(self.upload_dir.iterdir()):
            if not file_path.is_file() or file_path.name in keep:
                continue
            if datetime.fromtimestamp(file_path.stat().st_mtime, tz=timezone.utc) > cutoff:
                continue

            if not dry_run:
                try:
                    file_path.unlink()
                except OSError as e:
                    logger.error(f"Failed to remove orphaned image {file_path}: {e}")
                    continue
            removed.append(file_path.name)

        logger.info(f"Orphan sweep {'found' if dry_run else 'removed'} {len(removed)} file(s)")
        return removed
