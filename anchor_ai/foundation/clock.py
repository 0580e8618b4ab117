"""Timezone-aware clock utilities.

All timestamps in anchor-ai MUST be UTC-aware, and "today" is the UTC
calendar date.  This module is the single source of "now" so tests can
monkey-patch it trivially.
"""

from __future__ import annotations

from datetime import date, datetime, timezone


def utc_now() -> datetime:
    """Return the current UTC time as a timezone-aware datetime."""
    return datetime.now(timezone.utc)


def utc_today() -> date:
    """Return the current UTC calendar date."""
    return utc_now().date()
