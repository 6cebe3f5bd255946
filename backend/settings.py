"""Backend settings loaded from the environment."""
from typing import Optional
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Backend configuration using Pydantic BaseSettings.

    Variable names match the environment names, case-insensitively
    (e.g. ``BACKEND_BASE_URL``).
    """

    # External report-generation backend
    backend_base_url: str = ''
    backend_api_key: str = ''

    # External 311 backend (draft / submit)
    submit_backend_url: str = ''

    # Outbound request timeout in seconds
    proxy_timeout: float = 30.0

    # Database
    database_url: str = 'sqlite+pysqlite:///snap_report.db'

    # Uploads
    max_upload_mb: int = 16

    # Browser geolocation timeout for the upload page
    geolocation_timeout_ms: int = 10000

    # Object storage
    cloud_storage_provider: str = 's3'
    cloud_storage_access_key: Optional[str] = None
    cloud_storage_secret_key: Optional[str] = None
    cloud_storage_bucket: Optional[str] = None
    cloud_storage_region: str = 'us-east-1'
    cloud_storage_host: Optional[str] = None
    cloud_storage_public_base_url: Optional[str] = None

    class Config:
        env_prefix = ''
        case_sensitive = False

    def to_flask_config(self):
        """Map settings to the Flask config keys used throughout the backend."""
        return {
            'BACKEND_BASE_URL': self.backend_base_url.rstrip('/'),
            'BACKEND_API_KEY': self.backend_api_key,
            'SUBMIT_BACKEND_URL': self.submit_backend_url.rstrip('/'),
            'PROXY_TIMEOUT': self.proxy_timeout,
            'SQLALCHEMY_DATABASE_URI': self.database_url,
            'MAX_CONTENT_LENGTH': self.max_upload_mb * 1024 * 1024,
            'GEOLOCATION_TIMEOUT_MS': self.geolocation_timeout_ms,
        }
