"""
Media Service Module

Repository for the media gallery. Images are uploaded to object storage
first and the row is inserted only after the upload succeeded; the two
steps are separate calls with no rollback, so a failed insert leaves the
uploaded file behind. Deleting an image removes its file on a best-effort
basis before the row.
"""

import time
from dataclasses import dataclass
from typing import Optional, List, Dict, Any, Callable

from config import settings
from data.forms import MediaForm, parse_form
from data.models import MediaItem, MediaType, ImageMedia, ALL_CATEGORIES, media_item_from_row
from data.protocols import Filter, Order
from services.content_service import TableRepository
from utils.exceptions import RemoteError, ValidationError
from utils.helpers import build_upload_path, storage_path_from_url
from utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class UploadedFile:
    """A file chosen in the media form."""
    filename: str
    data: bytes
    content_type: Optional[str] = None


def _now_ms() -> int:
    return int(time.time() * 1000)


class MediaRepository(TableRepository):
    """Repository for the media table and its stored image files."""
    table = settings.MEDIA_TABLE
    default_order = Order("date_uploaded", ascending=False)
    cache_key = "admin-media"
    invalidates = ("media",)
    label = "media"

    def __init__(self, *args, timestamp_ms: Callable[[], int] = _now_ms, **kwargs):
        super().__init__(*args, **kwargs)
        self.timestamp_ms = timestamp_ms
        self.bucket = settings.MEDIA_BUCKET

    def _to_entity(self, row: Dict[str, Any]) -> Optional[MediaItem]:
        try:
            return media_item_from_row(row)
        except (ValueError, KeyError) as e:
            logger.warning(f"Skipping malformed media row {row.get('id')}: {e}")
            return None

    def list_all(self) -> List[MediaItem]:
        """Every media item, newest first."""
        return self.list(order=Order("date_uploaded", ascending=False), cache_key="admin-media")

    def list_gallery(self, category: Optional[str] = None) -> List[MediaItem]:
        """
        Media for the public gallery, newest first.

        Args:
            category: Only items in this category; None or "All" for every item.
        """
        filters = []
        if category and category != ALL_CATEGORIES:
            filters.append(Filter("category", "eq", category))
        return self.list(
            filters=filters,
            order=Order("date_uploaded", ascending=False),
            cache_key=f"media:{category or ALL_CATEGORIES}",
        )

    def get(self, item_id: str) -> Optional[MediaItem]:
        """Fetch a single media item by id, or None if it does not exist."""
        rows = self.backend.select(self.table, "*", filters=[Filter("id", "eq", item_id)], limit=1)
        if not rows:
            return None
        return self._to_entity(rows[0])

    def _upload_image(self, file: UploadedFile) -> str:
        """
        Upload an image and return its public URL.

        Raises:
            StorageError: If the upload fails.
        """
        path = build_upload_path(file.filename, settings.UPLOAD_PREFIX, self.timestamp_ms())
        self.backend.upload(
            self.bucket,
            path,
            file.data,
            content_type=file.content_type,
            cache_control=settings.UPLOAD_CACHE_CONTROL,
            upsert=False,
        )
        return self.backend.public_url(self.bucket, path)

    def create(self, fields: Dict[str, Any], file: Optional[UploadedFile] = None) -> bool:
        """
        Add a media item.

        For images the file is uploaded first; if that fails no row is
        inserted. If the insert fails after a successful upload, the file
        stays in storage.

        Args:
            fields: Raw media form values (media_type, category, video_url, text_content).
            file: The chosen image, required when media_type is Image.

        Returns:
            bool: True if the row was inserted.

        Raises:
            ValidationError: If the form is invalid or an image has no file.
        """
        form = parse_form(MediaForm, fields)

        image_url = None
        if form.media_type is MediaType.IMAGE:
            if file is None:
                raise ValidationError({"file": "Please choose an image"})
            try:
                image_url = self._upload_image(file)
            except RemoteError as e:
                logger.error(f"Image upload failed, media row not created: {e}")
                self.notifier.error("Failed to upload media", f"Upload failed: {e}")
                return False

        row = form.to_row(image_url=image_url)
        created = self._mutate(
            "created",
            lambda: self.backend.insert(self.table, [row]),
            success_title="Media uploaded successfully",
            failure_title="Failed to upload media",
        )
        if not created and image_url:
            logger.warning(f"Uploaded file left without a media row: {image_url}")
        return created

    def delete(self, item_id: str) -> bool:
        """
        Delete a media item, removing its stored image first when it has one.

        A failed file removal is logged and does not stop the row delete.

        Returns:
            bool: True if the row was deleted.
        """
        try:
            item = self.get(item_id)
        except RemoteError as e:
            logger.warning(f"Could not look up media {item_id} before delete: {e}")
            item = None

        if isinstance(item, ImageMedia):
            path = storage_path_from_url(item.image_url)
            try:
                self.backend.remove(self.bucket, [path])
            except RemoteError as e:
                logger.warning(f"Failed to remove stored file {path}, deleting row anyway: {e}")

        return self._mutate(
            "deleted",
            lambda: self.backend.delete(self.table, {"id": item_id}),
            success_title="Media deleted successfully",
            failure_title="Failed to delete media",
        )
