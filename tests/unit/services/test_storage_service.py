from unittest.mock import AsyncMock, Mock, patch

import httpx
import pytest

from insurance_api.core.config import StorageSettings
from insurance_api.core.exceptions import APIClientError, ConfigurationError
from insurance_api.services.storage_service import StorageService


@pytest.fixture
def storage_service():
    storage_settings = StorageSettings(
        SUPABASE_URL="https://project.supabase.co/",
        SUPABASE_SERVICE_ROLE_KEY="service-key",
        STORAGE_BUCKET="documents",
    )
    return StorageService(storage_settings=storage_settings, timeout=5)


@pytest.mark.asyncio
async def test_save_document_success(storage_service):
    with patch("httpx.AsyncClient.post", new_callable=AsyncMock) as mock_post:
        mock_post.return_value = Mock(status_code=200, text="{}")

        url = await storage_service.save_document(b"%PDF", "policies/POL-1.pdf")

    assert url == (
        "https://project.supabase.co/storage/v1/object/public/documents/policies/POL-1.pdf"
    )
    args, kwargs = mock_post.call_args
    assert args[0] == "https://project.supabase.co/storage/v1/object/documents/policies/POL-1.pdf"
    assert kwargs["headers"]["Content-Type"] == "application/pdf"
    assert kwargs["headers"]["x-upsert"] == "true"
    assert kwargs["headers"]["Authorization"] == "Bearer service-key"
    assert kwargs["content"] == b"%PDF"
    assert kwargs["timeout"] == 5


@pytest.mark.asyncio
async def test_save_document_rejected(storage_service):
    with patch("httpx.AsyncClient.post", new_callable=AsyncMock) as mock_post:
        mock_post.return_value = Mock(status_code=403, text="forbidden")

        with pytest.raises(APIClientError, match="Upload failed: forbidden"):
            await storage_service.save_document(b"%PDF", "policies/POL-1.pdf")


@pytest.mark.asyncio
async def test_save_document_network_error(storage_service):
    with patch("httpx.AsyncClient.post", new_callable=AsyncMock) as mock_post:
        mock_post.side_effect = httpx.ConnectError("connection refused")

        with pytest.raises(APIClientError, match="Storage upload error"):
            await storage_service.save_document(b"%PDF", "policies/POL-1.pdf")


@pytest.mark.asyncio
async def test_save_document_not_configured():
    service = StorageService(
        storage_settings=StorageSettings(SUPABASE_URL="", SUPABASE_SERVICE_ROLE_KEY="")
    )
    assert service.is_configured is False

    with pytest.raises(ConfigurationError):
        await service.save_document(b"%PDF", "policies/POL-1.pdf")
