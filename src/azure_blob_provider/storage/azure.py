"""Azure block blob provider (synchronous)."""

import logging
from typing import BinaryIO, Iterator, List

from azure.core.exceptions import ResourceExistsError
from azure.storage.blob import BlobBlock, BlobServiceClient, LinearRetry

from ..chunking import ChunkPlan, plan_chunk, require_provider_data
from ..constants import (
    CONTAINER_NAME_PREFIX,
    DEFAULT_CHUNK_SIZE,
    DEFAULT_RETRY_BACKOFF,
    DEFAULT_RETRY_TOTAL,
)
from ..context import BlobStorageContext
from ..naming import container_name_for, validate_blob_name
from ..storage_models import ProviderData, allocate_provider_data, deserialize_provider_data
from ..streams import BlobReadStream, BlobWriteStream
from ..translate import store_errors

logger = logging.getLogger(__name__)


def to_blob_blocks(block_ids: List[str]) -> List[BlobBlock]:
    """Wrap block ids for commit_block_list (latest staged version wins)."""
    return [BlobBlock(block_id=block_id) for block_id in block_ids]


def linear_retry(retry_total: int = DEFAULT_RETRY_TOTAL,
                 backoff: int = DEFAULT_RETRY_BACKOFF) -> LinearRetry:
    """Retry policy applied by the client to every request."""
    return LinearRetry(backoff=backoff, retry_total=retry_total, random_jitter_range=0)


class AzureBlobProvider:
    """
    Azure Blob Storage provider for chunked binary uploads.

    Each transfer is one block blob in the container "<prefix><tenant_id>".
    Chunks are staged as blocks and the final chunk commits the block list,
    so a blob becomes readable only once every chunk has arrived.

    The tenant id is fixed per instance; use for_tenant() to address another
    tenant's container.
    """

    def __init__(
        self,
        service_client: BlobServiceClient,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        tenant_id: str = "",
        prefix: str = CONTAINER_NAME_PREFIX,
        ensure_container: bool = True,
    ):
        """
        Initialize the provider.

        Args:
            service_client: Azure BlobServiceClient (shared across tenants)
            chunk_size: Bytes per block; must equal the application chunk size
            tenant_id: Tenant id appended to the container prefix
            prefix: Container name prefix
            ensure_container: Create the container if it does not exist

        Raises:
            NamingError: If the container name is invalid (before any I/O)
            ValueError: If chunk_size is not positive
        """
        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")

        self.chunk_size = chunk_size
        self.tenant_id = tenant_id or ""
        self.prefix = prefix
        self.container_name = container_name_for(prefix, self.tenant_id)
        self.service_client = service_client
        self.container = service_client.get_container_client(self.container_name)

        if ensure_container:
            self._ensure_container()

    @classmethod
    def from_connection_string(
        cls,
        connection_string: str,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        tenant_id: str = "",
        prefix: str = CONTAINER_NAME_PREFIX,
        retry_total: int = DEFAULT_RETRY_TOTAL,
        retry_backoff: int = DEFAULT_RETRY_BACKOFF,
    ) -> "AzureBlobProvider":
        """
        Build a provider from an Azure Storage connection string.

        Args:
            connection_string: Azure Storage connection string
            chunk_size: Bytes per block
            tenant_id: Tenant id appended to the container prefix
            prefix: Container name prefix
            retry_total: Retries per request before an error is surfaced
            retry_backoff: Seconds between retries (linear)
        """
        # Fail on a bad tenant id before building a client
        container_name_for(prefix, tenant_id)
        client = BlobServiceClient.from_connection_string(
            connection_string,
            retry_policy=linear_retry(retry_total, retry_backoff),
        )
        return cls(client, chunk_size=chunk_size, tenant_id=tenant_id, prefix=prefix)

    def for_tenant(self, tenant_id: str) -> "AzureBlobProvider":
        """Return a provider for another tenant sharing this service client."""
        return type(self)(
            self.service_client,
            chunk_size=self.chunk_size,
            tenant_id=tenant_id,
            prefix=self.prefix,
        )

    def _ensure_container(self) -> None:
        with store_errors(container=self.container_name, operation="create container"):
            if self.container.exists():
                return
            try:
                self.container.create_container()
                logger.info("Created container %s", self.container_name)
            except ResourceExistsError:
                logger.debug("Container %s created concurrently", self.container_name)

    def _blob_client(self, blob_id: str):
        return self.container.get_blob_client(validate_blob_name(blob_id))

    def close(self) -> None:
        """Close the underlying service client (shared with for_tenant() copies)."""
        self.service_client.close()

    def __enter__(self) -> "AzureBlobProvider":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # ===== Existence and enumeration =====

    def blob_exists(self, blob_id: str) -> bool:
        """
        Check whether a committed blob exists.

        Blobs with only staged (uncommitted) blocks do not exist.
        """
        blob = self._blob_client(blob_id)
        with store_errors(blob_id, self.container_name, "exists"):
            return blob.exists()

    def get_blob_ids(self) -> Iterator[str]:
        """
        Lazily list blob ids in the container.

        Each call issues a fresh listing.
        """
        with store_errors(container=self.container_name, operation="list blobs"):
            yield from self.container.list_blob_names()

    # ===== Chunked upload =====

    def allocate(self, context: BlobStorageContext) -> ProviderData:
        """
        Assign a blob id and the configured chunk size to a transfer.

        An existing blob id on the context is kept. A zero-length transfer is
        committed immediately as an empty blob, since no chunk call will ever
        arrive to commit it.

        Args:
            context: Transfer context; provider_data is replaced

        Returns:
            The new provider data
        """
        logger.debug("Allocate: %s", context.provider_data)
        data = allocate_provider_data(context.blob_id, self.chunk_size)
        context.provider_data = data

        if context.length == 0:
            blob = self._blob_client(data.blob_id)
            with store_errors(data.blob_id, self.container_name, "commit block list"):
                blob.commit_block_list([], metadata=context.metadata())
            logger.info("Committed empty blob %s", data.blob_id)

        return data

    def write(self, context: BlobStorageContext, offset: int, buffer: bytes) -> None:
        """
        Stage one chunk and commit the blob if it is the last one.

        Args:
            context: Allocated transfer context
            offset: Byte offset of the chunk; a multiple of the chunk size
            buffer: Chunk bytes; at most the chunk size

        Raises:
            ConfigurationMismatchError: If offset or buffer length disagree
                with the chunk size recorded at allocation
            TransferStateError: If the context was not allocated
            TransientStoreError: If the store failed after retries
        """
        logger.debug("Write: %s offset=%d length=%d", context.provider_data, offset, len(buffer))
        plan = plan_chunk(context, offset, len(buffer))
        blob = self._blob_client(plan.blob_id)

        with store_errors(plan.blob_id, self.container_name, "stage block"):
            blob.stage_block(plan.block_id, buffer, length=len(buffer), validate_content=True)

        if not plan.is_final:
            return

        self._commit(blob, plan, context)

    def _commit(self, blob, plan: ChunkPlan, context: BlobStorageContext) -> None:
        with store_errors(plan.blob_id, self.container_name, "commit block list"):
            blob.commit_block_list(to_blob_blocks(plan.block_list()), metadata=context.metadata())
        logger.info("Committed %d blocks to %s", plan.block_count, plan.blob_id)

    def delete(self, context: BlobStorageContext) -> None:
        """
        Delete the transfer's blob.

        Raises:
            NotFoundError: If the blob does not exist
        """
        data = require_provider_data(context)
        logger.debug("Delete: %s", data)
        blob = self._blob_client(data.blob_id)
        with store_errors(data.blob_id, self.container_name, "delete"):
            blob.delete_blob()
        logger.debug("Deleted %s", data.blob_id)

    # ===== Streams =====

    def get_stream_for_read(self, context: BlobStorageContext) -> BinaryIO:
        """
        Open a seekable read stream over the committed blob.

        Raises:
            NotFoundError: If the blob does not exist
        """
        data = require_provider_data(context)
        logger.debug("GetStreamForRead: %s", data)
        return BlobReadStream(self._blob_client(data.blob_id), data.blob_id)

    def get_stream_for_write(self, context: BlobStorageContext) -> BinaryIO:
        """
        Open a write stream for the blob.

        Metadata is taken from the context now and committed with the block
        list when the stream is closed.
        """
        data = require_provider_data(context)
        logger.debug("GetStreamForWrite: %s", data)
        return BlobWriteStream(
            self._blob_client(data.blob_id),
            data.blob_id,
            block_size=data.chunk_size or self.chunk_size,
            metadata=context.metadata(),
        )

    def clone_stream(self, context: BlobStorageContext, stream: BinaryIO) -> BinaryIO:
        """Open a new stream of the same mode as ``stream`` over the same blob."""
        if isinstance(stream, BlobWriteStream):
            return self.get_stream_for_write(context)
        return self.get_stream_for_read(context)

    def parse_data(self, provider_data: str) -> ProviderData:
        """Parse serialized provider data."""
        logger.debug("ParseData: %s", provider_data)
        return deserialize_provider_data(provider_data)
