"""File-like streams over a single block blob.

BlobReadStream serves range reads against the blob version seen when the
stream was opened. BlobWriteStream stages fixed-size blocks as bytes arrive
and commits them, together with the metadata captured at open, on close.
"""

import io
import logging
from typing import Dict

from azure.core import MatchConditions
from azure.storage.blob import BlobBlock

from .block_ids import block_id_list, encode_block_id
from .translate import store_errors

logger = logging.getLogger(__name__)


class BlobReadStream(io.RawIOBase):
    """Readable, seekable stream over a committed blob."""

    def __init__(self, blob_client, blob_id: str):
        """
        Open a blob for reading.

        Args:
            blob_client: azure.storage.blob.BlobClient for the blob
            blob_id: Blob id (used in error messages)

        Raises:
            NotFoundError: If the blob does not exist
        """
        super().__init__()
        self.blob_id = blob_id
        self._blob = blob_client
        with store_errors(blob_id, operation="get properties"):
            props = blob_client.get_blob_properties()
        self._length = props.size
        self._etag = props.etag
        self._pos = 0

    @property
    def length(self) -> int:
        """Total blob length in bytes."""
        return self._length

    def readable(self) -> bool:
        return True

    def seekable(self) -> bool:
        return True

    def tell(self) -> int:
        self._checkClosed()
        return self._pos

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        self._checkClosed()
        if whence == io.SEEK_SET:
            pos = offset
        elif whence == io.SEEK_CUR:
            pos = self._pos + offset
        elif whence == io.SEEK_END:
            pos = self._length + offset
        else:
            raise ValueError(f"Invalid whence: {whence}")
        if pos < 0:
            raise ValueError(f"Negative seek position {pos}")
        self._pos = pos
        return self._pos

    def _download(self, size: int) -> bytes:
        with store_errors(self.blob_id, operation="download"):
            downloader = self._blob.download_blob(
                offset=self._pos,
                length=size,
                etag=self._etag,
                match_condition=MatchConditions.IfNotModified,
            )
            return downloader.readall()

    def readinto(self, b) -> int:
        self._checkClosed()
        size = min(len(b), self._length - self._pos)
        if size <= 0:
            return 0
        data = self._download(size)
        n = len(data)
        b[:n] = data
        self._pos += n
        return n

    def readall(self) -> bytes:
        """Read to the end of the blob in a single range request."""
        self._checkClosed()
        size = self._length - self._pos
        if size <= 0:
            return b""
        data = self._download(size)
        self._pos += len(data)
        return data


class BlobWriteStream(io.RawIOBase):
    """Write-only stream that assembles a block blob.

    Used as a context manager, an exception inside the ``with`` block aborts
    the upload: staged blocks are left uncommitted and the blob is unchanged.
    """

    def __init__(self, blob_client, blob_id: str, block_size: int, metadata: Dict[str, str]):
        """
        Open a blob for writing.

        Args:
            blob_client: azure.storage.blob.BlobClient for the blob
            blob_id: Blob id (used in error messages)
            block_size: Bytes per staged block
            metadata: Metadata committed with the block list
        """
        super().__init__()
        if block_size <= 0:
            raise ValueError(f"block_size must be positive, got {block_size}")
        self.blob_id = blob_id
        self.metadata = dict(metadata)
        self._blob = blob_client
        self._block_size = block_size
        self._buffer = bytearray()
        self._block_count = 0

    def writable(self) -> bool:
        return True

    def write(self, b) -> int:
        self._checkClosed()
        data = bytes(b)
        self._buffer.extend(data)
        while len(self._buffer) >= self._block_size:
            self._stage(bytes(self._buffer[:self._block_size]))
            del self._buffer[:self._block_size]
        return len(data)

    def _stage(self, chunk: bytes) -> None:
        # Counted only once staged; a failed chunk stays buffered for the next try
        with store_errors(self.blob_id, operation="stage block"):
            self._blob.stage_block(
                encode_block_id(self._block_count + 1), chunk,
                length=len(chunk), validate_content=True,
            )
        self._block_count += 1

    def _commit(self) -> None:
        if self._buffer:
            self._stage(bytes(self._buffer))
            self._buffer.clear()
        blocks = [BlobBlock(block_id=b) for b in block_id_list(self._block_count)]
        with store_errors(self.blob_id, operation="commit block list"):
            self._blob.commit_block_list(blocks, metadata=self.metadata)
        logger.debug("Committed %d blocks to %s via write stream", self._block_count, self.blob_id)

    def abort(self) -> None:
        """Close without committing; staged blocks stay uncommitted."""
        if not self.closed:
            self._buffer = bytearray()
            super().close()

    def close(self) -> None:
        if self.closed:
            return
        try:
            self._commit()
        finally:
            super().close()

    def __exit__(self, exc_type, exc, tb):
        if exc_type is not None:
            self.abort()
        else:
            self.close()

    def __del__(self):
        # An unclosed stream is abandoned, never committed during collection
        self.abort()
