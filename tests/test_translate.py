"""Tests for mapping azure.core exceptions onto provider errors."""

import pytest
from azure.core.exceptions import (
    HttpResponseError,
    ResourceModifiedError,
    ResourceNotFoundError,
    ServiceRequestError,
)

from azure_blob_provider.errors import (
    NotFoundError,
    RequestRejectedError,
    StoreError,
    TransientStoreError,
)
from azure_blob_provider.translate import store_errors


def _http_error(status_code: int, cls=HttpResponseError):
    error = cls(message=f"status {status_code}")
    error.status_code = status_code
    return error


def test_not_found():
    with pytest.raises(NotFoundError) as exc:
        with store_errors("b1", "snc", "delete"):
            raise ResourceNotFoundError("gone")
    assert exc.value.blob_id == "b1"
    assert exc.value.container == "snc"


@pytest.mark.parametrize("error", [
    _http_error(400),
    _http_error(409),
    _http_error(412, ResourceModifiedError),
])
def test_client_errors_are_rejected(error):
    with pytest.raises(RequestRejectedError, match="Azure commit block list failed for blob b1") as exc:
        with store_errors("b1", "snc", "commit block list"):
            raise error
    assert exc.value.status_code == error.status_code
    assert exc.value.__cause__ is error
    assert not isinstance(exc.value, TransientStoreError)


@pytest.mark.parametrize("error", [
    _http_error(408),
    _http_error(429),
    _http_error(500),
    _http_error(503),
    HttpResponseError(message="no response"),
    ServiceRequestError("connection reset"),
])
def test_other_errors_are_transient(error):
    with pytest.raises(TransientStoreError) as exc:
        with store_errors("b1", "snc", "stage block"):
            raise error
    assert isinstance(exc.value, StoreError)
    assert exc.value.__cause__ is error


def test_other_exceptions_pass_through():
    with pytest.raises(KeyError):
        with store_errors("b1"):
            raise KeyError("not from the client")
