"""Storage service for handling Supabase storage operations."""

from typing import Optional

import httpx

from insurance_api.core.config import StorageSettings, settings
from insurance_api.core.exceptions import APIClientError, ConfigurationError
from insurance_api.utils.logging import get_logger

LOGGER = get_logger(__name__)

CONTENT_TYPES = {
    ".pdf": "application/pdf",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
}


class StorageService:
    """Service for saving generated documents to Supabase storage."""

    def __init__(
        self,
        storage_settings: Optional[StorageSettings] = None,
        timeout: Optional[int] = None,
    ):
        storage_settings = storage_settings or settings.storage
        self.url = storage_settings.supabase_url.rstrip("/")
        self.service_role_key = storage_settings.service_role_key
        self.bucket = storage_settings.bucket
        self.timeout = timeout or settings.http_timeout
        self.base_api_url = f"{self.url}/storage/v1"
        self.headers = {
            "Authorization": f"Bearer {self.service_role_key}",
            "apikey": self.service_role_key,
        }

    @property
    def is_configured(self) -> bool:
        return bool(self.url and self.service_role_key)

    def public_url(self, path: str) -> str:
        return f"{self.base_api_url}/object/public/{self.bucket}/{path}"

    async def save_document(self, content: bytes, file_name: str) -> str:
        """Upload bytes and return the stored file's URL.

        Args:
            content: File content
            file_name: Object path within the bucket

        Returns:
            Public URL of the stored object

        Raises:
            ConfigurationError: If storage credentials are missing
            APIClientError: If the upload fails
        """
        if not self.is_configured:
            raise ConfigurationError("Supabase storage is not configured")

        upload_url = f"{self.base_api_url}/object/{self.bucket}/{file_name}"
        extension = "." + file_name.rsplit(".", 1)[-1].lower() if "." in file_name else ""
        content_type = CONTENT_TYPES.get(extension, "application/octet-stream")

        try:
            async with httpx.AsyncClient() as client:
                response = await client.post(
                    upload_url,
                    headers={**self.headers, "Content-Type": content_type, "x-upsert": "true"},
                    content=content,
                    timeout=self.timeout,
                )
        except httpx.HTTPError as e:
            LOGGER.error(f"Error uploading file to Supabase: {str(e)}", exc_info=True)
            raise APIClientError(f"Storage upload error: {str(e)}", original_error=e)

        if response.status_code != 200:
            LOGGER.error(
                f"Failed to upload file to Supabase: {response.text}",
                extra={"bucket": self.bucket, "path": file_name, "status_code": response.status_code},
            )
            raise APIClientError(f"Upload failed: {response.text}")

        LOGGER.info("Document stored", extra={"bucket": self.bucket, "path": file_name})
        return self.public_url(file_name)
