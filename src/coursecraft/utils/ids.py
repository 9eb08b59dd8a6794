"""ID utilities."""

from __future__ import annotations

import uuid


def new_node_id(prefix: str = "node_") -> str:
    """Return a fresh random node id.

    Args:
        prefix: ID prefix.

    Returns:
        An id like ``node_3f2a9c0d1e4b``. Uniqueness within a tree relies on randomness and is
        never re-validated.
    """

    return f"{prefix}{uuid.uuid4().hex[:12]}"


def new_session_id() -> str:
    """Return an id for a chat session, used as logging context."""

    return uuid.uuid4().hex
