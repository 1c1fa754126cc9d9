"""Base protocol for blob provider implementations."""

from typing import BinaryIO, Iterator, Protocol

from ..context import BlobStorageContext
from ..storage_models import ProviderData


class BlobProvider(Protocol):
    """
    Protocol for external blob providers used by the content repository.

    The repository never touches the store directly: it allocates a
    transfer, pushes chunks or uses a stream, and keeps the serialized
    provider data to find the content again later.
    """

    chunk_size: int

    def allocate(self, context: BlobStorageContext) -> ProviderData:
        """
        Assign a blob id and chunk size to a transfer.

        Args:
            context: Transfer context; its provider_data is replaced

        Returns:
            The new provider data
        """
        ...

    def write(self, context: BlobStorageContext, offset: int, buffer: bytes) -> None:
        """
        Write one chunk of an allocated transfer.

        The chunk that completes the transfer commits the blob.
        """
        ...

    def delete(self, context: BlobStorageContext) -> None:
        """Delete the blob named by the context's provider data."""
        ...

    def get_stream_for_read(self, context: BlobStorageContext) -> BinaryIO:
        """Open a read stream over the committed blob."""
        ...

    def get_stream_for_write(self, context: BlobStorageContext) -> BinaryIO:
        """Open a write stream that replaces the blob's content on close."""
        ...

    def clone_stream(self, context: BlobStorageContext, stream: BinaryIO) -> BinaryIO:
        """Open a fresh stream of the same kind over the same blob."""
        ...

    def parse_data(self, provider_data: str) -> ProviderData:
        """Parse serialized provider data."""
        ...

    def blob_exists(self, blob_id: str) -> bool:
        """Check whether a committed blob exists."""
        ...

    def get_blob_ids(self) -> Iterator[str]:
        """List blob ids in the container."""
        ...
