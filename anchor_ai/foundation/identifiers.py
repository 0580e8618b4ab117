"""ID generation for stored records."""

from __future__ import annotations

from uuid import uuid4


def new_id() -> str:
    """Generate a new random UUID v4 string for a stored record.

    Record IDs are strings because they round-trip through JSON columns
    (decision context, task modification lists) unchanged.
    """
    return str(uuid4())
