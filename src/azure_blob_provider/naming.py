"""Container and blob name resolution and validation.

Validation runs before any request reaches the store, so a bad tenant id
surfaces as NamingError instead of a generic 400 from the service.
"""

import re

from .constants import CONTAINER_NAME_PREFIX
from .errors import NamingError

# Lowercase letters, digits and single hyphens; starts and ends alphanumeric
_CONTAINER_NAME_RE = re.compile(r"^[a-z0-9](?:[a-z0-9]|-(?=[a-z0-9]))*$")

CONTAINER_NAME_MIN = 3
CONTAINER_NAME_MAX = 63
BLOB_NAME_MAX = 1024


def resolve_container_name(prefix: str = CONTAINER_NAME_PREFIX, tenant_id: str = "") -> str:
    """Build the tenant-scoped container name ("<prefix><tenant_id>")."""
    return f"{prefix}{tenant_id or ''}"


def validate_container_name(name: str) -> str:
    """
    Check a container name against Azure's naming grammar.

    Args:
        name: Candidate container name

    Returns:
        The name unchanged

    Raises:
        NamingError: If the name is too short, too long or contains
            characters Azure does not accept
    """
    if len(name) < CONTAINER_NAME_MIN or len(name) > CONTAINER_NAME_MAX:
        raise NamingError(
            name,
            f"container names must be {CONTAINER_NAME_MIN}-{CONTAINER_NAME_MAX} characters long",
        )
    if not _CONTAINER_NAME_RE.match(name):
        raise NamingError(
            name,
            "container names may contain only lowercase letters, digits and "
            "single hyphens, and must start and end with a letter or digit",
        )
    return name


def container_name_for(prefix: str = CONTAINER_NAME_PREFIX, tenant_id: str = "") -> str:
    """Resolve and validate a container name in one step."""
    return validate_container_name(resolve_container_name(prefix, tenant_id))


def validate_blob_name(name: str) -> str:
    """
    Check a blob id before it is used to address the store.

    Raises:
        NamingError: If the name is empty, longer than 1024 characters or
            ends with a dot or slash
    """
    if not name:
        raise NamingError(name, "blob names must not be empty")
    if len(name) > BLOB_NAME_MAX:
        raise NamingError(name[:32] + "...", f"blob names are limited to {BLOB_NAME_MAX} characters")
    if name.endswith((".", "/")):
        raise NamingError(name, "blob names must not end with a dot or slash")
    return name
