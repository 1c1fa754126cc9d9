"""Per-transfer context handed to the provider by the host repository."""

from dataclasses import dataclass
from typing import Dict, Optional

from .constants import FILE_ID_KEY, PROPERTY_TYPE_ID_KEY, VERSION_ID_KEY
from .storage_models import ProviderData


@dataclass
class BlobStorageContext:
    """Caller-owned record describing one binary transfer.

    The provider reads ``length`` and ``provider_data`` and replaces
    ``provider_data`` on allocation. The three ids are only used to tag the
    committed blob.
    """

    length: int = 0
    provider_data: Optional[ProviderData] = None
    file_id: int = 0
    version_id: int = 0
    property_type_id: int = 0

    @property
    def blob_id(self) -> Optional[str]:
        """Blob id of the allocated transfer, if any."""
        return self.provider_data.blob_id if self.provider_data else None

    def metadata(self) -> Dict[str, str]:
        """Metadata entries stamped onto the blob at commit."""
        return {
            FILE_ID_KEY: str(self.file_id),
            VERSION_ID_KEY: str(self.version_id),
            PROPERTY_TYPE_ID_KEY: str(self.property_type_id),
        }
