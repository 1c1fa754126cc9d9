"""Storage package for Azure blob providers."""

from .azure import AzureBlobProvider
from .azure_async import AsyncAzureBlobProvider
from .base import BlobProvider
from .factory import make_async_blob_provider, make_blob_provider

__all__ = [
    "AsyncAzureBlobProvider",
    "AzureBlobProvider",
    "BlobProvider",
    "make_async_blob_provider",
    "make_blob_provider",
]
