"""Timestamp helpers shared by the store and the answer encoder."""

from __future__ import annotations

from datetime import datetime, timezone


def utc_now_iso(dt: datetime | None = None) -> str:
    """Format an RFC3339 UTC timestamp with trailing 'Z'."""
    base = (dt or datetime.now(timezone.utc)).isoformat(timespec="seconds")
    return base.replace("+00:00", "Z")


__all__ = ["utc_now_iso"]
