"""Translation of Azure SDK exceptions into provider errors."""

from contextlib import contextmanager
from typing import Iterator, Optional

from azure.core.exceptions import AzureError, HttpResponseError, ResourceNotFoundError

from .errors import NotFoundError, RequestRejectedError, TransientStoreError

# Client-side statuses that a later attempt may still get past
_RETRYABLE_4XX = {408, 429}


def is_rejected(error: AzureError) -> bool:
    """True for a 4xx response the store will give again on retry."""
    status = getattr(error, "status_code", None)
    if not isinstance(error, HttpResponseError) or status is None:
        return False
    return 400 <= status < 500 and status not in _RETRYABLE_4XX


@contextmanager
def store_errors(blob_id: Optional[str] = None, container: Optional[str] = None,
                 operation: str = "request") -> Iterator[None]:
    """
    Map exceptions raised by the Azure client inside the block.

    The client has already applied its retry policy by the time an error
    escapes. A 404 becomes NotFoundError, other 4xx responses (an invalid
    block list, a failed etag condition) become RequestRejectedError, and
    everything else is reported as TransientStoreError.

    Raises:
        NotFoundError: For ResourceNotFoundError
        RequestRejectedError: For a non-retryable 4xx HttpResponseError
        TransientStoreError: For any other AzureError
    """
    try:
        yield
    except ResourceNotFoundError as e:
        raise NotFoundError(blob_id or "", container) from e
    except AzureError as e:
        target = f" blob {blob_id}" if blob_id else ""
        where = f" in container '{container}'" if container else ""
        message = f"Azure {operation} failed for{target}{where}: {e}"
        if is_rejected(e):
            raise RequestRejectedError(message, status_code=e.status_code) from e
        raise TransientStoreError(message) from e
