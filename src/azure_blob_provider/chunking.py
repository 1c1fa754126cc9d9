"""Chunked upload protocol shared by the sync and async providers.

A transfer of ``length`` bytes is written as a sequence of chunk calls, each
staged as one block. The chunk size agreed at allocation fixes the block
boundaries for the whole transfer:

    index       = offset // chunk_size + 1
    block_count = ceil(length / chunk_size)

Each chunk must fill its block: every chunk but the last carries exactly
chunk_size bytes and the last one ends at length, so the committed blob is
always exactly length bytes.

The call whose index equals block_count commits the block list for indexes
1..block_count. The list is rebuilt from the indexes at commit time, so no
state is carried between chunk calls and a resent chunk simply restages the
same block id.
"""

from dataclasses import dataclass
from typing import List

from .block_ids import block_id_list, encode_block_id
from .constants import MAX_BLOCK_COUNT
from .context import BlobStorageContext
from .errors import ConfigurationMismatchError, TransferStateError
from .storage_models import ProviderData


@dataclass(frozen=True)
class ChunkPlan:
    """What a single chunk call must do against the store."""
    blob_id: str
    index: int          # 1-based
    block_id: str
    block_count: int

    @property
    def is_final(self) -> bool:
        """True when this chunk completes the transfer."""
        return self.index == self.block_count

    def block_list(self) -> List[str]:
        """Ordered block ids to commit."""
        return block_id_list(self.block_count)


def expected_block_count(length: int, chunk_size: int) -> int:
    """Integer ceiling of length / chunk_size (exact for any int length)."""
    return (length + chunk_size - 1) // chunk_size


def require_provider_data(context: BlobStorageContext) -> ProviderData:
    """Return the context's provider data or fail if it was never allocated."""
    if context.provider_data is None:
        raise TransferStateError("Context has no provider data; call allocate() first")
    return context.provider_data


def plan_chunk(context: BlobStorageContext, offset: int, buffer_length: int) -> ChunkPlan:
    """
    Validate a chunk call and compute its block placement.

    Args:
        context: Transfer context carrying total length and provider data
        offset: Byte offset of the chunk within the blob
        buffer_length: Number of bytes in the chunk

    Returns:
        ChunkPlan for the chunk

    Raises:
        TransferStateError: If the context was not allocated
        ConfigurationMismatchError: If the chunk does not line up with the
            chunk size recorded at allocation
    """
    data = require_provider_data(context)
    chunk_size = data.chunk_size

    def mismatch(message: str) -> ConfigurationMismatchError:
        return ConfigurationMismatchError(
            message,
            blob_id=data.blob_id,
            offset=offset,
            buffer_length=buffer_length,
            chunk_size=chunk_size,
        )

    if chunk_size <= 0:
        raise mismatch("Provider data has no chunk size recorded.")

    # The application chunk size must equal the blob chunk size, otherwise the
    # generated block ids would not match the block boundaries.
    if buffer_length > chunk_size or offset < 0 or offset % chunk_size != 0:
        raise mismatch(
            "Incorrect chunk size configuration. Azure blob chunk size must be "
            "the same as the configured application chunk size."
        )

    block_count = expected_block_count(context.length, chunk_size)
    if block_count > MAX_BLOCK_COUNT:
        raise mismatch(
            f"Content length {context.length} needs {block_count} blocks; "
            f"the store accepts at most {MAX_BLOCK_COUNT}."
        )

    index = offset // chunk_size + 1
    if index > block_count:
        raise mismatch(f"Offset is past the declared content length {context.length}.")

    # Every chunk but the last is full and the last one ends exactly at length
    expected_length = min(chunk_size, context.length - offset)
    if buffer_length != expected_length:
        raise mismatch(
            f"Chunk {index} of {block_count} must be {expected_length} bytes "
            f"for declared content length {context.length}."
        )

    return ChunkPlan(
        blob_id=data.blob_id,
        index=index,
        block_id=encode_block_id(index),
        block_count=block_count,
    )
