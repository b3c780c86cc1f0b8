"""ID Generation.

ULID-based identifiers for requests and artifact versions.

- K-sortable: versions order by creation time without a separate timestamp
- Prefixed: ``req_*`` / ``ver_*`` make logs readable
"""

from typing import NewType
from ulid import ULID

RequestID = NewType("RequestID", str)
"""Generation request identifier"""

VersionID = NewType("VersionID", str)
"""Artifact version identifier"""


class Prefix:
    """ID prefix constants."""

    REQUEST = "req"
    VERSION = "ver"


def generate_raw() -> str:
    """Generate ULID without prefix."""
    return str(ULID())


def generate_prefixed(prefix: str) -> str:
    """Generate ULID with type prefix."""
    return f"{prefix}_{generate_raw()}"


def new_request_id() -> RequestID:
    """Generate new request ID."""
    return RequestID(generate_prefixed(Prefix.REQUEST))


def new_version_id() -> VersionID:
    """Generate new artifact version ID."""
    return VersionID(generate_prefixed(Prefix.VERSION))


def _ulid_part(id_str: str) -> str:
    return id_str.split("_", 1)[1] if "_" in id_str else id_str


def is_valid(id_str: str) -> bool:
    """Check if string is a valid (optionally prefixed) ULID.

    Args:
        id_str: ID string to validate

    Returns:
        True if valid ULID format
    """
    ulid_part = _ulid_part(id_str)
    if len(ulid_part) != 26:
        return False
    try:
        ULID.from_str(ulid_part)
        return True
    except ValueError:
        return False


def is_version_id(id_str: str) -> bool:
    """Check if ID is an artifact version ID."""
    return id_str.startswith(f"{Prefix.VERSION}_") and is_valid(id_str)
