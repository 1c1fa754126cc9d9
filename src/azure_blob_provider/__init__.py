"""Azure Blob Storage provider for chunked binary content."""

from .constants import PROVIDER_VERSION
from .context import BlobStorageContext
from .errors import (
    BlobProviderError,
    ConfigurationMismatchError,
    NamingError,
    NotFoundError,
    RequestRejectedError,
    SerializationError,
    TransferStateError,
    TransientStoreError,
)
from .storage import (
    AsyncAzureBlobProvider,
    AzureBlobProvider,
    BlobProvider,
    make_async_blob_provider,
    make_blob_provider,
)
from .storage_models import ProviderData, deserialize_provider_data, serialize_provider_data

__version__ = PROVIDER_VERSION

__all__ = [
    "AsyncAzureBlobProvider",
    "AzureBlobProvider",
    "BlobProvider",
    "BlobProviderError",
    "BlobStorageContext",
    "ConfigurationMismatchError",
    "NamingError",
    "NotFoundError",
    "ProviderData",
    "RequestRejectedError",
    "SerializationError",
    "TransferStateError",
    "TransientStoreError",
    "deserialize_provider_data",
    "make_async_blob_provider",
    "make_blob_provider",
    "serialize_provider_data",
]
