from typing import Optional
import io
import os
import uuid
from datetime import timedelta
from urllib.parse import urlparse
from fastapi import UploadFile
from google.cloud import storage
from google.cloud.exceptions import GoogleCloudError, NotFound
from PIL import Image, UnidentifiedImageError

from wellness.config import settings
from wellness.core.logging import logger
from wellness.shared.exceptions import BadRequestException, StorageException


ALLOWED_IMAGE_TYPES = ("image/jpeg", "image/jpg", "image/png")
MAX_LOGO_BYTES = 2 * 1024 * 1024
MAX_LOGO_SIZE = 512


def normalise_image(content: bytes, max_size: int, quality: int = 90) -> bytes:
    """
    Re-encode an uploaded image as JPEG.

    Transparent and palette images are flattened onto white, and images
    larger than ``max_size`` on either side are scaled down.
    """
    try:
        image = Image.open(io.BytesIO(content))
        image.load()
    except (UnidentifiedImageError, OSError) as e:
        logger.warning(f"Rejected unreadable image upload: {e}")
        raise BadRequestException("Invalid image file. Please upload a valid image.")

    if image.mode in ("RGBA", "LA", "P"):
        image = image.convert("RGBA")
        rgb_image = Image.new("RGB", image.size, (255, 255, 255))
        rgb_image.paste(image, mask=image.split()[3])
        image = rgb_image
    elif image.mode != "RGB":
        image = image.convert("RGB")

    if image.width > max_size or image.height > max_size:
        image.thumbnail((max_size, max_size), Image.Resampling.LANCZOS)

    output = io.BytesIO()
    image.save(output, format="JPEG", quality=quality, optimize=True)
    return output.getvalue()


class FileService:
    """Service for storing practice files in Google Cloud Storage."""

    _client: Optional[storage.Client] = None

    @classmethod
    def get_client(cls) -> storage.Client:
        """Get or create the GCS client."""
        if cls._client is None:
            if not settings.GCP_PROJECT_ID or not settings.GCP_STORAGE_BUCKET_NAME:
                logger.error("GCP_PROJECT_ID and GCP_STORAGE_BUCKET_NAME must be set for file uploads")
                raise StorageException("File storage is not configured")

            credentials = settings.GOOGLE_APPLICATION_CREDENTIALS
            if credentials:
                if not os.path.exists(credentials):
                    logger.error(f"Service account key file not found: {credentials}")
                    raise StorageException("File storage is not configured")
                cls._client = storage.Client.from_service_account_json(
                    credentials,
                    project=settings.GCP_PROJECT_ID,
                )
                logger.info(f"GCS client initialized with service account: {credentials}")
            else:
                cls._client = storage.Client(project=settings.GCP_PROJECT_ID)
                logger.info("GCS client initialized with default credentials")
        return cls._client

    @classmethod
    def extract_blob_path_from_url(cls, url: Optional[str]) -> Optional[str]:
        """
        Blob path inside the bucket for a public or signed GCS URL.

        ``https://storage.googleapis.com/<bucket>/<path>?X-Goog-...`` gives ``<path>``.
        """
        if not url:
            return None

        parsed = urlparse(url)
        if "storage.googleapis.com" not in parsed.netloc:
            return None

        path_parts = parsed.path.strip("/").split("/", 1)
        if len(path_parts) > 1 and path_parts[1]:
            return path_parts[1]
        return None

    @classmethod
    async def delete_file(cls, url: str) -> bool:
        """
        Delete a stored file by its URL.

        Returns:
            bool: True when the file is gone, False when it could not be removed
        """
        blob_path = cls.extract_blob_path_from_url(url)
        if not blob_path:
            logger.warning(f"Could not extract blob path from URL: {url}")
            return False

        try:
            bucket = cls.get_client().bucket(settings.GCP_STORAGE_BUCKET_NAME)
            bucket.blob(blob_path).delete()
        except NotFound:
            logger.warning(f"File not found for deletion: {blob_path}")
            return True
        except GoogleCloudError as e:
            logger.error(f"Error deleting file {blob_path}: {e}")
            return False

        logger.info(f"Deleted file: {blob_path}")
        return True

    @classmethod
    async def upload_practice_logo(cls, file: UploadFile, old_logo_url: Optional[str] = None) -> str:
        """
        Upload the practice logo and return a signed URL for it.

        Only JPG and PNG files up to 2MB are accepted. The previous logo is
        deleted once the new one is stored.
        """
        if file.content_type not in ALLOWED_IMAGE_TYPES:
            raise BadRequestException("Invalid file type. Only JPG and PNG images are allowed.")

        file_content = await file.read()
        if len(file_content) > MAX_LOGO_BYTES:
            raise BadRequestException("File size exceeds 2MB limit. Please upload a smaller image.")

        file_content = normalise_image(file_content, MAX_LOGO_SIZE)
        blob_path = f"practice-logos/{uuid.uuid4()}.jpg"

        try:
            bucket = cls.get_client().bucket(settings.GCP_STORAGE_BUCKET_NAME)
            blob = bucket.blob(blob_path)
            blob.cache_control = "public, max-age=31536000"
            blob.upload_from_string(file_content, content_type="image/jpeg")

            signed_url = blob.generate_signed_url(
                version="v4",
                expiration=timedelta(days=7),
                method="GET",
            )
        except GoogleCloudError as e:
            logger.error(f"Error uploading practice logo to GCS: {e}")
            raise StorageException("Failed to upload logo")

        logger.info(f"Uploaded practice logo: {blob_path}")

        if old_logo_url:
            if await cls.delete_file(old_logo_url):
                logger.info("Deleted previous practice logo")
            else:
                logger.warning("Could not delete previous practice logo")

        return signed_url
