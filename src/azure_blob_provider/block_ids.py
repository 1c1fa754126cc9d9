"""Block id encoding for staged block blob chunks.

Chunk indexes are 1-based. Each index is zero-padded to a fixed width and
base64 encoded, so every id in a blob has the same length (an Azure
requirement) and ids sort in index order.
"""

import base64
from typing import List

from .constants import BLOCK_ID_WIDTH, MAX_BLOCK_INDEX


def encode_block_id(index: int) -> str:
    """Encode a 1-based chunk index as a block id.

    Args:
        index: Chunk index, 1..999999

    Returns:
        Base64 text of the zero-padded index, e.g. 1 -> "MDAwMDAx"

    Raises:
        ValueError: If index is outside the encodable range
    """
    if index < 1 or index > MAX_BLOCK_INDEX:
        raise ValueError(f"Block index {index} out of range 1..{MAX_BLOCK_INDEX}")
    padded = f"{index:0{BLOCK_ID_WIDTH}d}"
    return base64.b64encode(padded.encode("utf-8")).decode("ascii")


def block_id_list(block_count: int) -> List[str]:
    """Rebuild the ordered block id list for indexes 1..block_count."""
    return [encode_block_id(i) for i in range(1, block_count + 1)]
