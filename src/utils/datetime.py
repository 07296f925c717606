# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""DateTime utilities for the session core.

All timestamps produced by the core are timezone-aware UTC and are
rendered as ISO 8601 strings. Timestamps are data only: no planner or
updater decision may depend on them.

Usage:
------
    from src.utils.datetime import iso_timestamp

    created_at = iso_timestamp(now)
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Get current UTC time as timezone-aware datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """Ensure a datetime is timezone-aware UTC.

    Naive datetimes are taken to be UTC already; aware ones are converted.

    Args:
        dt: A naive or aware datetime.

    Returns:
        Timezone-aware UTC datetime.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def iso_timestamp(dt: datetime | None = None) -> str:
    """Render a clock reading as an ISO 8601 UTC string.

    Args:
        dt: Clock reading supplied by the caller. The current time is
            used when omitted.

    Returns:
        ISO 8601 string with an explicit UTC offset.
    """
    return ensure_utc(dt or utc_now()).isoformat()
