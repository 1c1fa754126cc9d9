"""Utility functions for azure-blob-provider."""

from typing import BinaryIO, Iterator, Tuple


def humanize_size(size: float) -> str:
    """Convert bytes to human-readable format."""
    for unit in ["B", "KB", "MB", "GB"]:
        if size < 1024.:
            return f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} TB"


def iter_chunks(stream: BinaryIO, chunk_size: int) -> Iterator[Tuple[int, bytes]]:
    """Yield (offset, chunk) pairs of at most chunk_size bytes from a stream.

    Every chunk except the last is exactly chunk_size bytes, which is what
    the chunked upload protocol expects from its callers.
    """
    offset = 0
    while True:
        chunk = stream.read(chunk_size)
        if not chunk:
            return
        # Short reads from pipes/sockets are topped up to a full chunk
        while len(chunk) < chunk_size:
            more = stream.read(chunk_size - len(chunk))
            if not more:
                break
            chunk += more
        yield offset, chunk
        offset += len(chunk)
