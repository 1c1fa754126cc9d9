"""Tests for provider settings and the provider factory."""

from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from azure_blob_provider.config import ProviderSettings, load_settings
from azure_blob_provider.constants import DEFAULT_CHUNK_SIZE
from azure_blob_provider.errors import NamingError
from azure_blob_provider.storage.factory import (
    make_async_blob_provider,
    make_blob_provider,
    validate_azure_config,
)

CONN = "DefaultEndpointsProtocol=http;AccountName=devstoreaccount1;AccountKey=a2V5;BlobEndpoint=http://127.0.0.1:10000/devstoreaccount1;"


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep real credentials out of these tests."""
    for var in (
        "AZURE_STORAGE_CONNECTION_STRING",
        "AZURE_BLOB_PROVIDER_CHUNK_SIZE",
        "AZURE_BLOB_PROVIDER_TENANT_ID",
    ):
        monkeypatch.delenv(var, raising=False)


class TestProviderSettings:

    def test_defaults(self):
        settings = ProviderSettings()
        assert settings.chunk_size == DEFAULT_CHUNK_SIZE == 262144
        assert settings.tenant_id == ""
        assert settings.container_prefix == "snc"
        assert settings.retry_total == 3
        assert settings.retry_backoff == 1

    @pytest.mark.parametrize("chunk_size", [0, -1])
    def test_invalid_chunk_size(self, chunk_size):
        with pytest.raises(ValidationError):
            ProviderSettings(chunk_size=chunk_size)

    def test_invalid_retry(self):
        with pytest.raises(ValidationError):
            ProviderSettings(retry_total=-1)


class TestLoadSettings:

    def test_no_file_no_env(self):
        assert load_settings() == ProviderSettings()

    def test_yaml_file(self, tmp_path):
        cfg = tmp_path / "provider.yaml"
        cfg.write_text(f"connection_string: '{CONN}'\nchunk_size: 4096\ntenant_id: acme\n")
        settings = load_settings(cfg)
        assert settings.connection_string == CONN
        assert settings.chunk_size == 4096
        assert settings.tenant_id == "acme"

    def test_yaml_section(self, tmp_path):
        cfg = tmp_path / "app.yaml"
        cfg.write_text("azure_blob:\n  chunk_size: 1024\nother: 1\n")
        assert load_settings(cfg).chunk_size == 1024

    def test_env_overrides_file(self, tmp_path, monkeypatch):
        cfg = tmp_path / "provider.yaml"
        cfg.write_text("chunk_size: 4096\ntenant_id: file\n")
        monkeypatch.setenv("AZURE_STORAGE_CONNECTION_STRING", CONN)
        monkeypatch.setenv("AZURE_BLOB_PROVIDER_CHUNK_SIZE", "8192")
        monkeypatch.setenv("AZURE_BLOB_PROVIDER_TENANT_ID", "env")
        settings = load_settings(cfg)
        assert settings.connection_string == CONN
        assert settings.chunk_size == 8192
        assert settings.tenant_id == "env"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_settings(tmp_path / "nope.yaml")

    def test_non_mapping_file(self, tmp_path):
        cfg = tmp_path / "list.yaml"
        cfg.write_text("- a\n- b\n")
        with pytest.raises(ValueError, match="mapping"):
            load_settings(cfg)

    def test_empty_section(self, tmp_path):
        cfg = tmp_path / "app.yaml"
        cfg.write_text("azure_blob:\nother: 1\n")
        assert load_settings(cfg) == ProviderSettings()

    def test_non_mapping_section(self, tmp_path):
        cfg = tmp_path / "app.yaml"
        cfg.write_text("azure_blob: 5\n")
        with pytest.raises(ValueError, match="azure_blob section"):
            load_settings(cfg)

    def test_empty_file(self, tmp_path):
        cfg = tmp_path / "empty.yaml"
        cfg.write_text("")
        assert load_settings(Path(cfg)) == ProviderSettings()


class TestFactory:

    def test_requires_connection_string(self):
        with pytest.raises(ValueError, match="AZURE_STORAGE_CONNECTION_STRING"):
            validate_azure_config(ProviderSettings())

    def test_invalid_tenant_rejected_early(self):
        with pytest.raises(NamingError):
            validate_azure_config(ProviderSettings(connection_string=CONN, tenant_id="Bad_Tenant"))

    def test_make_blob_provider(self):
        settings = ProviderSettings(connection_string=CONN, chunk_size=4096, tenant_id="acme")
        with patch("azure_blob_provider.storage.factory.AzureBlobProvider.from_connection_string") as build:
            make_blob_provider(settings)
        build.assert_called_once_with(
            CONN, chunk_size=4096, tenant_id="acme", prefix="snc", retry_total=3, retry_backoff=1,
        )

    def test_make_async_blob_provider_does_no_io(self):
        provider = make_async_blob_provider(ProviderSettings(connection_string=CONN, tenant_id="acme"))
        assert provider.container_name == "sncacme"
        assert provider.chunk_size == DEFAULT_CHUNK_SIZE
