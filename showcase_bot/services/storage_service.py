"""Cloud Storage uploads and access URLs for PDFs and thumbnails."""

import re
from datetime import datetime, timedelta, timezone
from typing import Optional, Sequence
from urllib.parse import quote

from showcase_bot.logging_config import get_logger
from showcase_bot.schemas.telegram import TelegramDocument, TelegramPhotoSize
from showcase_bot.services.clock import now_ms as current_ms
from showcase_bot.services.result import ErrorCode, Result

logger = get_logger("storage_service")

PUBLIC_HOST = "https://storage.googleapis.com"
PDF_CONTENT_TYPE = "application/pdf"
THUMBNAIL_CONTENT_TYPE = "image/jpeg"
DEFAULT_SIGNED_URL_TTL = timedelta(hours=24)

_GS_URL_RE = re.compile(r"^gs://([^/]+)/(.+)$")


def public_url(bucket: str, name: str) -> str:
    return f"{PUBLIC_HOST}/{bucket}/{quote(name, safe='')}"


def normalize_thumbnail_url(url: Optional[str]) -> Optional[str]:
    """Convert gs://bucket/object locators to their public HTTPS form."""
    if not url:
        return url
    match = _GS_URL_RE.match(url)
    if not match:
        return url
    return public_url(match.group(1), match.group(2))


def document_object_name(file_name: Optional[str], timestamp_ms: int) -> str:
    base = (file_name or "document.pdf").replace("/", "_").strip() or "document.pdf"
    return f"{timestamp_ms}-{base}"


def thumbnail_object_name(timestamp_ms: int) -> str:
    return f"{timestamp_ms}-thumbnail.jpg"


def select_largest_photo(photos: Sequence[TelegramPhotoSize]) -> TelegramPhotoSize:
    # Ties go to the later entry; the platform lists sizes smallest first.
    _, photo = max(enumerate(photos), key=lambda item: (item[1].width * item[1].height, item[0]))
    return photo


class StorageService:
    def __init__(
        self,
        client,
        pdf_bucket: str,
        thumbnail_bucket: str,
        signed_url_ttl: timedelta = DEFAULT_SIGNED_URL_TTL,
    ):
        self.client = client
        self.pdf_bucket = pdf_bucket
        self.thumbnail_bucket = thumbnail_bucket
        self.signed_url_ttl = signed_url_ttl

    def upload_file(self, data: bytes, name: str, bucket: str, content_type: str) -> str:
        """Upload bytes. Thumbnails are made public and get an HTTPS URL, others a gs:// locator."""
        logger.info(
            f"Uploading {name} to bucket {bucket}",
            extra={"context": {"content_type": content_type, "size": len(data)}},
        )
        blob = self.client.bucket(bucket).blob(name)
        blob.upload_from_string(data, content_type=content_type)

        if bucket == self.thumbnail_bucket:
            blob.make_public()
            return public_url(bucket, name)
        return f"gs://{bucket}/{name}"

    def generate_signed_url(
        self,
        name: str,
        ttl: Optional[timedelta] = None,
        bucket: Optional[str] = None,
    ) -> str:
        """Read-only v4 signed URL. Generate per request; never cache past its expiry."""
        expires_at = datetime.now(timezone.utc) + (ttl or self.signed_url_ttl)
        blob = self.client.bucket(bucket or self.pdf_bucket).blob(name)
        return blob.generate_signed_url(version="v4", expiration=expires_at, method="GET")

    def store_document(self, telegram, document: TelegramDocument, now_ms: Optional[int] = None) -> Result[str]:
        """Download a PDF from the platform and upload it privately. Returns the object name."""
        try:
            data = telegram.download_file(document.file_id)
        except Exception as e:
            logger.error(f"PDF download failed: {e}", extra={"context": {"file_id": document.file_id}})
            return Result.from_exception(e, ErrorCode.DOWNLOAD_ERROR)

        name = document_object_name(document.file_name, current_ms() if now_ms is None else now_ms)
        try:
            self.upload_file(data, name, self.pdf_bucket, PDF_CONTENT_TYPE)
        except Exception as e:
            logger.error(f"PDF upload failed: {e}", exc_info=True, extra={"context": {"object": name}})
            return Result.from_exception(e, ErrorCode.UPLOAD_ERROR)

        return Result.success(name)

    def store_thumbnail(
        self,
        telegram,
        photos: Sequence[TelegramPhotoSize],
        now_ms: Optional[int] = None,
    ) -> Result[str]:
        """Download the highest-resolution photo and publish it. Returns the public URL."""
        photo = select_largest_photo(photos)
        try:
            data = telegram.download_file(photo.file_id)
        except Exception as e:
            logger.error(f"Photo download failed: {e}", extra={"context": {"file_id": photo.file_id}})
            return Result.from_exception(e, ErrorCode.DOWNLOAD_ERROR)

        name = thumbnail_object_name(current_ms() if now_ms is None else now_ms)
        try:
            url = self.upload_file(data, name, self.thumbnail_bucket, THUMBNAIL_CONTENT_TYPE)
        except Exception as e:
            logger.error(f"Thumbnail upload failed: {e}", exc_info=True, extra={"context": {"object": name}})
            return Result.from_exception(e, ErrorCode.UPLOAD_ERROR)

        return Result.success(url)
