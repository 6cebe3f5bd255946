"""Cloud storage service for report photos using Apache Libcloud."""

import hashlib
import logging
import os
import uuid
from threading import Lock
from libcloud.storage.types import Provider
from libcloud.storage.providers import get_driver

from shared.enums import StorageProvider

from ..settings import Settings


logger = logging.getLogger(__name__)

CHUNK_SIZE = 8192  # 8KB chunks
DEFAULT_EXTENSION = '.jpg'


class StorageError(Exception):
    """Raised when a photo cannot be stored."""
    pass


class CloudStorageService:
    """Cloud storage service using Apache Libcloud."""

    def __init__(self, settings=None):
        """Initialize cloud storage service from settings (environment by default)."""
        settings = settings or Settings()
        self.provider_name = settings.cloud_storage_provider
        self.access_key = settings.cloud_storage_access_key
        self.secret_key = settings.cloud_storage_secret_key
        self.bucket_name = settings.cloud_storage_bucket
        self.region = settings.cloud_storage_region
        self.host = settings.cloud_storage_host
        self.public_base_url = (settings.cloud_storage_public_base_url or '').rstrip('/') or None

        if self.provider_name == StorageProvider.LOCAL.value:
            if not all([self.access_key, self.bucket_name]):
                raise ValueError("Local storage needs CLOUD_STORAGE_ACCESS_KEY (base directory) and CLOUD_STORAGE_BUCKET.")
        elif not all([self.access_key, self.secret_key, self.bucket_name]):
            raise ValueError("Cloud storage configuration incomplete. Check environment variables.")

        self.driver = self._get_driver()
        self.container = self._get_container()

        logger.info(f"Cloud storage initialized with provider: {self.provider_name}")

    def _get_driver(self):
        """Get the appropriate libcloud driver based on provider."""
        provider_map = {
            StorageProvider.S3: Provider.S3,
            StorageProvider.GCS: Provider.GOOGLE_STORAGE,
            StorageProvider.AZURE: Provider.AZURE_BLOBS,
            StorageProvider.MINIO: Provider.S3,  # MinIO uses S3 driver
            StorageProvider.LOCAL: Provider.LOCAL,
        }

        try:
            kind = StorageProvider(self.provider_name)
        except ValueError:
            raise ValueError(f"Unsupported provider: {self.provider_name}")

        provider = provider_map[kind]

        if kind == StorageProvider.LOCAL:
            # The local driver stores containers as directories under `key`
            os.makedirs(self.access_key, exist_ok=True)
            return get_driver(provider)(self.access_key)

        kwargs = {
            'key': self.access_key,
            'secret': self.secret_key,
        }

        if kind == StorageProvider.S3:
            kwargs['region'] = self.region
        elif kind == StorageProvider.MINIO and self.host:
            kwargs['host'] = self.host

        return get_driver(provider)(**kwargs)

    def _get_container(self):
        """Get or create the storage container/bucket."""
        try:
            return self.driver.get_container(container_name=self.bucket_name)
        except Exception:
            logger.info(f"Creating container: {self.bucket_name}")
            return self.driver.create_container(container_name=self.bucket_name)

    @staticmethod
    def build_object_name(filename):
        """Object name for a new upload: ``reports/<uuid><ext>``."""
        ext = os.path.splitext(filename or '')[1].lower() or DEFAULT_EXTENSION
        return f"reports/{uuid.uuid4().hex}{ext}"

    def public_url(self, obj, object_name):
        if self.public_base_url:
            return f"{self.public_base_url}/{object_name}"
        return obj.get_cdn_url() if hasattr(obj, 'get_cdn_url') else obj.public_url

    def upload_file(self, stream, filename, content_type=None):
        """
        Upload a photo stream to cloud storage in one attempt.

        The stream is read in chunks; its hash and size are computed on the way.

        Args:
            stream: Readable binary file-like object
            filename: Original filename (used for the extension only)
            content_type: MIME type sent with the object (optional)

        Returns:
            dict: {'image_url', 'object_name', 'sha256', 'size_bytes', 'content_type'}

        Raises:
            StorageError: If the upload fails
        """
        object_name = self.build_object_name(filename)
        hasher = hashlib.sha256()
        size = 0

        def file_chunk_iterator():
            """Generator that yields file chunks for streaming upload."""
            nonlocal size
            while True:
                chunk = stream.read(CHUNK_SIZE)
                if not chunk:
                    break
                hasher.update(chunk)
                size += len(chunk)
                yield chunk

        extra = {'content_type': content_type} if content_type else None

        logger.info(f"Uploading {filename!r} to {object_name} (streaming)")
        try:
            obj = self.driver.upload_object_via_stream(
                iterator=file_chunk_iterator(),
                container=self.container,
                object_name=object_name,
                extra=extra,
            )
            url = self.public_url(obj, object_name)
        except Exception as e:
            logger.error(f"Failed to upload {object_name}: {e}", exc_info=True)
            raise StorageError(f"Upload failed: {e}") from e

        return {
            'image_url': url,
            'object_name': object_name,
            'sha256': hasher.hexdigest(),
            'size_bytes': size,
            'content_type': content_type,
        }


# Global instance
_cloud_storage = None
_cloud_storage_lock = Lock()

def get_cloud_storage():
    """Get or create cloud storage service instance (thread-safe)."""
    global _cloud_storage
    if _cloud_storage is None:
        with _cloud_storage_lock:
            # Double-check pattern for thread safety
            if _cloud_storage is None:
                try:
                    _cloud_storage = CloudStorageService()
                except ValueError as e:
                    logger.error(f"Cloud storage is not configured: {e}")
                    raise
                except Exception as e:
                    # Driver or bucket errors raised while connecting
                    logger.error(f"Failed to initialize cloud storage: {e}")
                    raise StorageError(f"Storage unavailable: {e}") from e
    return _cloud_storage
