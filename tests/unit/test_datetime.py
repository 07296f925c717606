# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for datetime helpers."""

from datetime import datetime, timedelta, timezone

import pytest

from src.utils.datetime import ensure_utc, iso_timestamp, utc_now


@pytest.mark.unit
class TestDatetimeHelpers:
    """Tests for UTC helpers."""

    def test_utc_now_is_aware(self) -> None:
        """Test that the current time carries UTC."""
        assert utc_now().tzinfo == timezone.utc

    def test_ensure_utc_naive(self) -> None:
        """Test that naive datetimes are taken as UTC."""
        assert ensure_utc(datetime(2025, 1, 1, 12)).tzinfo == timezone.utc

    def test_ensure_utc_converts(self) -> None:
        """Test that aware datetimes are converted to UTC."""
        local = datetime(2025, 1, 1, 14, tzinfo=timezone(timedelta(hours=2)))

        assert ensure_utc(local) == datetime(2025, 1, 1, 12, tzinfo=timezone.utc)

    def test_iso_timestamp(self) -> None:
        """Test rendering of a supplied clock reading."""
        assert iso_timestamp(datetime(2025, 1, 1, 12)) == "2025-01-01T12:00:00+00:00"
