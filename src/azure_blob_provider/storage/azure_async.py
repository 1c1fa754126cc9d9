"""Azure block blob provider (asyncio).

Same protocol as AzureBlobProvider; every store call is awaited and nothing
else is buffered or scheduled. Cancelling a task mid-transfer leaves the
already staged blocks uncommitted.
"""

import logging
from typing import AsyncIterator

from azure.core.exceptions import ResourceExistsError
from azure.storage.blob.aio import BlobServiceClient, LinearRetry

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
from ..translate import store_errors
from .azure import to_blob_blocks

logger = logging.getLogger(__name__)


class AsyncAzureBlobProvider:
    """
    Asyncio Azure Blob Storage provider for chunked binary uploads.

    Usage:
        async with AsyncAzureBlobProvider.from_connection_string(conn) as provider:
            await provider.allocate(context)
            await provider.write(context, 0, chunk)

    Entering the context creates the container if needed; leaving it closes
    the service client.
    """

    def __init__(
        self,
        service_client: BlobServiceClient,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        tenant_id: str = "",
        prefix: str = CONTAINER_NAME_PREFIX,
    ):
        """
        Initialize the provider (no I/O).

        Raises:
            NamingError: If the container name is invalid
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

    @classmethod
    def from_connection_string(
        cls,
        connection_string: str,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        tenant_id: str = "",
        prefix: str = CONTAINER_NAME_PREFIX,
        retry_total: int = DEFAULT_RETRY_TOTAL,
        retry_backoff: int = DEFAULT_RETRY_BACKOFF,
    ) -> "AsyncAzureBlobProvider":
        """Build a provider from an Azure Storage connection string."""
        container_name_for(prefix, tenant_id)
        client = BlobServiceClient.from_connection_string(
            connection_string,
            retry_policy=LinearRetry(
                backoff=retry_backoff, retry_total=retry_total, random_jitter_range=0
            ),
        )
        return cls(client, chunk_size=chunk_size, tenant_id=tenant_id, prefix=prefix)

    def for_tenant(self, tenant_id: str) -> "AsyncAzureBlobProvider":
        """Return a provider for another tenant sharing this service client."""
        return type(self)(
            self.service_client,
            chunk_size=self.chunk_size,
            tenant_id=tenant_id,
            prefix=self.prefix,
        )

    async def ensure_container(self) -> None:
        """Create the container if it does not exist."""
        with store_errors(container=self.container_name, operation="create container"):
            if await self.container.exists():
                return
            try:
                await self.container.create_container()
                logger.info("Created container %s", self.container_name)
            except ResourceExistsError:
                logger.debug("Container %s created concurrently", self.container_name)

    def _blob_client(self, blob_id: str):
        return self.container.get_blob_client(validate_blob_name(blob_id))

    async def close(self) -> None:
        await self.service_client.close()

    async def __aenter__(self) -> "AsyncAzureBlobProvider":
        await self.ensure_container()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def blob_exists(self, blob_id: str) -> bool:
        blob = self._blob_client(blob_id)
        with store_errors(blob_id, self.container_name, "exists"):
            return await blob.exists()

    async def get_blob_ids(self) -> AsyncIterator[str]:
        with store_errors(container=self.container_name, operation="list blobs"):
            async for name in self.container.list_blob_names():
                yield name

    async def allocate(self, context: BlobStorageContext) -> ProviderData:
        """See AzureBlobProvider.allocate()."""
        logger.debug("AllocateAsync: %s", context.provider_data)
        data = allocate_provider_data(context.blob_id, self.chunk_size)
        context.provider_data = data

        if context.length == 0:
            blob = self._blob_client(data.blob_id)
            with store_errors(data.blob_id, self.container_name, "commit block list"):
                await blob.commit_block_list([], metadata=context.metadata())
            logger.info("Committed empty blob %s", data.blob_id)

        return data

    async def write(self, context: BlobStorageContext, offset: int, buffer: bytes) -> None:
        """See AzureBlobProvider.write()."""
        logger.debug("WriteAsync: %s offset=%d length=%d", context.provider_data, offset, len(buffer))
        plan = plan_chunk(context, offset, len(buffer))
        blob = self._blob_client(plan.blob_id)

        with store_errors(plan.blob_id, self.container_name, "stage block"):
            await blob.stage_block(plan.block_id, buffer, length=len(buffer), validate_content=True)

        if not plan.is_final:
            return

        await self._commit(blob, plan, context)

    async def _commit(self, blob, plan: ChunkPlan, context: BlobStorageContext) -> None:
        with store_errors(plan.blob_id, self.container_name, "commit block list"):
            await blob.commit_block_list(to_blob_blocks(plan.block_list()), metadata=context.metadata())
        logger.info("Committed %d blocks to %s", plan.block_count, plan.blob_id)

    async def delete(self, context: BlobStorageContext) -> None:
        """See AzureBlobProvider.delete()."""
        data = require_provider_data(context)
        logger.debug("DeleteAsync: %s", data)
        blob = self._blob_client(data.blob_id)
        with store_errors(data.blob_id, self.container_name, "delete"):
            await blob.delete_blob()
        logger.debug("Deleted %s", data.blob_id)

    def parse_data(self, provider_data: str) -> ProviderData:
        return deserialize_provider_data(provider_data)
