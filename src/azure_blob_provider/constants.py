"""Constants for azure-blob-provider."""

# Container names are "<prefix><tenant_id>"
CONTAINER_NAME_PREFIX = "snc"

# Default bytes per staged block (256 KiB)
DEFAULT_CHUNK_SIZE = 256 * 1024

# Block ids are zero-padded to this many digits before encoding
BLOCK_ID_WIDTH = 6
MAX_BLOCK_INDEX = 10 ** BLOCK_ID_WIDTH - 1

# Azure rejects a block list with more committed blocks than this
MAX_BLOCK_COUNT = 50_000

# Metadata keys stamped onto committed blobs
FILE_ID_KEY = "fileId"
VERSION_ID_KEY = "versionId"
PROPERTY_TYPE_ID_KEY = "propertyTypeId"

# Retry policy defaults (linear backoff)
DEFAULT_RETRY_TOTAL = 3
DEFAULT_RETRY_BACKOFF = 1

# Environment variables
CONNECTION_STRING_ENV = "AZURE_STORAGE_CONNECTION_STRING"
CHUNK_SIZE_ENV = "AZURE_BLOB_PROVIDER_CHUNK_SIZE"
TENANT_ID_ENV = "AZURE_BLOB_PROVIDER_TENANT_ID"

# Version
PROVIDER_VERSION = "0.1.0"
