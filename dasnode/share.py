"""Shares: fixed-size chunks of namespaced data."""

from __future__ import annotations

# Maximum size supported for unerasured data in an extended data square.
MAX_SQUARE_SIZE = 128
# System-wide size of NMT namespaces.
NAMESPACE_SIZE = 8
# System-wide size of a share, including both data and namespace ID.
SHARE_SIZE = 256


def share_id(share: bytes) -> bytes:
    """Return the namespace ID of a share."""
    return share[:NAMESPACE_SIZE]


def share_data(share: bytes) -> bytes:
    """Return the data of a share without its namespace ID."""
    return share[NAMESPACE_SIZE:]


def sanity_check_nid(nid: bytes) -> None:
    """Raise ValueError unless ``nid`` has the namespace size."""
    if len(nid) != NAMESPACE_SIZE:
        raise ValueError(
            f"expected namespace ID of size {NAMESPACE_SIZE}, got {len(nid)}"
        )