"""Provider configuration helpers."""

import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, field_validator

from .constants import (
    CHUNK_SIZE_ENV,
    CONNECTION_STRING_ENV,
    CONTAINER_NAME_PREFIX,
    DEFAULT_CHUNK_SIZE,
    DEFAULT_RETRY_BACKOFF,
    DEFAULT_RETRY_TOTAL,
    TENANT_ID_ENV,
)


class ProviderSettings(BaseModel):
    """Configuration for an Azure blob provider.

    chunk_size must equal the chunk size the host repository uses for every
    write, for the lifetime of each blob.
    """

    connection_string: str = ""
    chunk_size: int = DEFAULT_CHUNK_SIZE
    tenant_id: str = ""
    container_prefix: str = CONTAINER_NAME_PREFIX
    retry_total: int = DEFAULT_RETRY_TOTAL
    retry_backoff: int = DEFAULT_RETRY_BACKOFF

    @field_validator("chunk_size")
    @classmethod
    def validate_chunk_size(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("chunk_size must be positive")
        return v

    @field_validator("retry_total", "retry_backoff")
    @classmethod
    def validate_retry(cls, v: int) -> int:
        if v < 0:
            raise ValueError("retry settings must not be negative")
        return v


def load_settings(path: Optional[Path] = None) -> ProviderSettings:
    """
    Load provider settings from an optional YAML file and the environment.

    Environment variables override values from the file:
    AZURE_STORAGE_CONNECTION_STRING, AZURE_BLOB_PROVIDER_CHUNK_SIZE and
    AZURE_BLOB_PROVIDER_TENANT_ID.

    Args:
        path: YAML file with a top-level mapping (or an ``azure_blob`` section)

    Returns:
        ProviderSettings

    Raises:
        FileNotFoundError: If path is given but does not exist
        ValueError: If the file or environment holds invalid values
    """
    data = {}
    if path is not None:
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Provider config not found: {path}")
        loaded = yaml.safe_load(path.read_text()) or {}
        if not isinstance(loaded, dict):
            raise ValueError(f"Provider config must be a mapping: {path}")
        section = (loaded["azure_blob"] or {}) if "azure_blob" in loaded else loaded
        if not isinstance(section, dict):
            raise ValueError(f"azure_blob section must be a mapping: {path}")
        data = dict(section)

    if CONNECTION_STRING_ENV in os.environ:
        data["connection_string"] = os.environ[CONNECTION_STRING_ENV]
    if CHUNK_SIZE_ENV in os.environ:
        data["chunk_size"] = os.environ[CHUNK_SIZE_ENV]
    if TENANT_ID_ENV in os.environ:
        data["tenant_id"] = os.environ[TENANT_ID_ENV]

    return ProviderSettings(**data)
