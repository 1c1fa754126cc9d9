"""Factory for creating blob provider instances."""

from .azure import AzureBlobProvider
from .azure_async import AsyncAzureBlobProvider
from .base import BlobProvider
from ..config import ProviderSettings
from ..constants import CONNECTION_STRING_ENV
from ..naming import container_name_for


def validate_azure_config(settings: ProviderSettings) -> None:
    """
    Early validation of Azure configuration.

    Args:
        settings: Provider settings to validate

    Raises:
        ValueError: If no connection string is configured
        NamingError: If prefix and tenant id form an invalid container name
    """
    if not settings.connection_string:
        raise ValueError(
            f"Set {CONNECTION_STRING_ENV} or connection_string in the provider "
            f"config for Azure blob storage"
        )
    container_name_for(settings.container_prefix, settings.tenant_id)


def make_blob_provider(settings: ProviderSettings) -> BlobProvider:
    """
    Create a synchronous provider from settings.

    Raises:
        ValueError: If configuration is invalid
    """
    validate_azure_config(settings)
    return AzureBlobProvider.from_connection_string(
        settings.connection_string,
        chunk_size=settings.chunk_size,
        tenant_id=settings.tenant_id,
        prefix=settings.container_prefix,
        retry_total=settings.retry_total,
        retry_backoff=settings.retry_backoff,
    )


def make_async_blob_provider(settings: ProviderSettings) -> AsyncAzureBlobProvider:
    """Create an asyncio provider from settings (container ensured on ``async with``)."""
    validate_azure_config(settings)
    return AsyncAzureBlobProvider.from_connection_string(
        settings.connection_string,
        chunk_size=settings.chunk_size,
        tenant_id=settings.tenant_id,
        prefix=settings.container_prefix,
        retry_total=settings.retry_total,
        retry_backoff=settings.retry_backoff,
    )
