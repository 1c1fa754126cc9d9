"""Custom exceptions for azure-blob-provider.

This module defines typed exceptions for better error handling and clearer
error messages throughout the provider. Errors raised by the Azure SDK are
translated into these types at the provider boundary.
"""

from typing import Optional


class BlobProviderError(RuntimeError):
    """Base class for all provider errors."""
    pass


# Transfer Errors
class ConfigurationMismatchError(BlobProviderError):
    """Chunk size recorded for a transfer disagrees with a write call.

    Never retried: the same sizes reproduce the same corrupt block boundaries.
    """

    def __init__(self, message: str, blob_id: Optional[str] = None,
                 offset: Optional[int] = None, buffer_length: Optional[int] = None,
                 chunk_size: Optional[int] = None):
        self.blob_id = blob_id
        self.offset = offset
        self.buffer_length = buffer_length
        self.chunk_size = chunk_size
        super().__init__(
            f"{message} Blob: {blob_id}. Offset: {offset}. "
            f"Buffer length: {buffer_length}. Blob chunk size: {chunk_size}."
        )


class TransferStateError(BlobProviderError):
    """Operation called on a context that is not in the required state."""
    pass


# Naming Errors
class NamingError(BlobProviderError, ValueError):
    """Container or blob name violates the store's naming rules."""

    def __init__(self, name: str, reason: str):
        self.name = name
        self.reason = reason
        super().__init__(f"Invalid name '{name}': {reason}")


# Store Errors
class StoreError(BlobProviderError):
    """Base class for errors reported by the remote store."""
    pass


class TransientStoreError(StoreError):
    """Network or service fault that outlived the client retry policy."""
    pass


class RequestRejectedError(StoreError):
    """Store refused the request (4xx); sending it again will not succeed."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class NotFoundError(StoreError):
    """Blob does not exist in the container (404)."""

    def __init__(self, blob_id: str, container: Optional[str] = None):
        self.blob_id = blob_id
        self.container = container
        where = f" in container '{container}'" if container else ""
        super().__init__(f"Blob not found: {blob_id}{where}")


# Serialization Errors
class SerializationError(BlobProviderError, ValueError):
    """Provider data text could not be parsed."""

    def __init__(self, text: str, reason: str):
        self.text = text
        super().__init__(f"Malformed provider data {text!r}: {reason}")
