"""Provider data model persisted by the host repository.

ProviderData is the only provider state that survives a process restart: the
repository stores its serialized text next to its own binary records and
hands it back when the content is read or deleted.
"""

import uuid
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import SerializationError
from .naming import validate_blob_name


class ProviderData(BaseModel):
    """Locates one blob and records the chunk size its transfer agreed on."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    blob_id: str = Field(alias="BlobId")
    chunk_size: int = Field(default=0, alias="ChunkSize")  # 0 = not recorded

    @field_validator("blob_id")
    @classmethod
    def validate_blob_id(cls, v: str) -> str:
        """Reject ids the store could never address."""
        return validate_blob_name(v)

    @field_validator("chunk_size")
    @classmethod
    def validate_chunk_size(cls, v: int) -> int:
        if v < 0:
            raise ValueError("ChunkSize must not be negative")
        return v


def new_blob_id() -> str:
    """Mint a globally unique blob id."""
    return str(uuid.uuid4())


def allocate_provider_data(existing_blob_id: Optional[str], chunk_size: int) -> ProviderData:
    """
    Allocate provider data for a transfer.

    Args:
        existing_blob_id: Blob id to reuse, or None to mint a new one
        chunk_size: Provider's configured chunk size (always stamped)

    Returns:
        ProviderData for the transfer
    """
    blob_id = validate_blob_name(existing_blob_id) if existing_blob_id else new_blob_id()
    return ProviderData(blob_id=blob_id, chunk_size=chunk_size)


def serialize_provider_data(data: ProviderData) -> str:
    """Serialize provider data to its JSON text form."""
    return data.model_dump_json(by_alias=True)


def deserialize_provider_data(text: str) -> ProviderData:
    """
    Parse provider data text.

    Fields missing from older text fall back to their defaults; unknown
    fields are ignored.

    Raises:
        SerializationError: If the text is not valid provider data
    """
    if not text or not text.strip():
        raise SerializationError(text, "empty input")
    try:
        return ProviderData.model_validate_json(text)
    except ValidationError as e:
        errors = "; ".join(err["msg"] for err in e.errors())
        raise SerializationError(text, errors) from e
