"""Shared test fixtures and utilities."""

import itertools
from typing import Optional

import pytest

from azure_blob_provider.context import BlobStorageContext
from azure_blob_provider.storage import AzureBlobProvider
from azure_blob_provider.storage_models import ProviderData

from fakes import FakeBlobServiceClient

_file_ids = itertools.count(1)


@pytest.fixture
def service_client():
    """Fresh in-memory blob service (no Azurite needed)."""
    return FakeBlobServiceClient()


@pytest.fixture
def make_provider(service_client):
    """Factory fixture building providers over the shared fake service."""
    def _make(chunk_size: int = 4096, tenant_id: str = "") -> AzureBlobProvider:
        return AzureBlobProvider(service_client, chunk_size=chunk_size, tenant_id=tenant_id)
    return _make


@pytest.fixture
def provider(make_provider):
    """Provider with a 4 KiB chunk size in the default container."""
    return make_provider()


@pytest.fixture
def container_state(service_client, provider):
    """Fake container state behind the default provider."""
    return service_client.state(provider.container_name)


@pytest.fixture
def make_context():
    """Factory fixture for transfer contexts with unique file ids."""
    def _make(length: int, blob_id: Optional[str] = None) -> BlobStorageContext:
        return BlobStorageContext(
            length=length,
            provider_data=ProviderData(blob_id=blob_id) if blob_id else None,
            file_id=next(_file_ids),
            version_id=7,
            property_type_id=3,
        )
    return _make


def _write_in_chunks(provider, context, content: bytes, upload_chunk_size: int) -> None:
    """Push content through write() the way the repository does."""
    offset = 0
    while offset < len(content):
        chunk = content[offset:offset + upload_chunk_size]
        provider.write(context, offset, chunk)
        offset += len(chunk)


@pytest.fixture
def upload():
    """Chunked writer: upload(provider, context, content, upload_chunk_size)."""
    return _write_in_chunks


@pytest.fixture
def write_new_blob(make_provider, make_context):
    """Allocate and fully write a blob; returns (provider, context, content)."""
    def _write(content_size: int, chunk_size: int, blob_id: Optional[str] = None):
        provider = make_provider(chunk_size=chunk_size)
        context = make_context(content_size, blob_id)
        content = bytes(i % 251 for i in range(content_size))
        provider.allocate(context)
        _write_in_chunks(provider, context, content, chunk_size)
        return provider, context, content
    return _write
