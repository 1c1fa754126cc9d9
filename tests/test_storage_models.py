"""Tests for provider data allocation and serialization."""

import json
import uuid

import pytest
from pydantic import ValidationError

from azure_blob_provider.errors import NamingError, SerializationError
from azure_blob_provider.storage_models import (
    ProviderData,
    allocate_provider_data,
    deserialize_provider_data,
    new_blob_id,
    serialize_provider_data,
)

BLOB_ID = "314a97b1-aaf8-4325-b677-1d25b8353935"


class TestAllocate:

    def test_mints_new_id(self):
        data = allocate_provider_data(None, 262144)
        assert uuid.UUID(data.blob_id)
        assert data.chunk_size == 262144

    def test_new_ids_are_unique(self):
        assert len({new_blob_id() for _ in range(100)}) == 100

    def test_reuses_existing_id(self):
        data = allocate_provider_data(BLOB_ID, 4096)
        assert data.blob_id == BLOB_ID
        assert data.chunk_size == 4096

    def test_rejects_bad_existing_id(self):
        with pytest.raises(NamingError):
            allocate_provider_data("bad/", 4096)


class TestSerialization:

    def test_parse_existing_text(self):
        """Text written by earlier releases parses unchanged."""
        data = deserialize_provider_data(
            '{"BlobId":"314a97b1-aaf8-4325-b677-1d25b8353935","ChunkSize":262144}'
        )
        assert data.blob_id == BLOB_ID
        assert data.chunk_size == 262144

    def test_serialize_uses_wire_names(self):
        text = serialize_provider_data(ProviderData(blob_id=BLOB_ID, chunk_size=4096))
        assert json.loads(text) == {"BlobId": BLOB_ID, "ChunkSize": 4096}

    @pytest.mark.parametrize("chunk_size", [0, 1, 4096, 262144, 2**31 - 1])
    def test_round_trip(self, chunk_size):
        data = ProviderData(blob_id=BLOB_ID, chunk_size=chunk_size)
        assert deserialize_provider_data(serialize_provider_data(data)) == data

    def test_missing_chunk_size_defaults(self):
        data = deserialize_provider_data('{"BlobId":"abc"}')
        assert data.chunk_size == 0

    def test_unknown_fields_ignored(self):
        data = deserialize_provider_data('{"BlobId":"abc","ChunkSize":10,"Extra":true}')
        assert data == ProviderData(blob_id="abc", chunk_size=10)

    @pytest.mark.parametrize("text", [
        "",
        "   ",
        "not json",
        "{}",
        '{"ChunkSize": 10}',
        '{"BlobId": "abc", "ChunkSize": "big"}',
        '{"BlobId": "abc", "ChunkSize": -1}',
        '{"BlobId": ""}',
    ])
    def test_malformed(self, text):
        with pytest.raises(SerializationError):
            deserialize_provider_data(text)

    def test_provider_data_is_immutable(self):
        data = ProviderData(blob_id=BLOB_ID, chunk_size=1)
        with pytest.raises(ValidationError):
            data.chunk_size = 2
