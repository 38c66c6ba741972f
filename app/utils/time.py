"""Time utility helpers."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta


def now_utc() -> datetime:
    """Return current timezone-aware UTC datetime."""
    return datetime.now(tz=UTC)


def ensure_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes (SQLite drops tzinfo on the way back)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def expires_at(lifetime: timedelta, issued_at: datetime | None = None) -> datetime:
    """Return the instant a credential issued at ``issued_at`` stops being valid."""
    return (issued_at or now_utc()) + lifetime


def iso_timestamp(value: datetime | None = None) -> str:
    """Format a datetime (default: now) as an ISO-8601 UTC string with ``Z``."""
    target = ensure_utc(value or now_utc())
    return target.isoformat(timespec="milliseconds").replace("+00:00", "Z")
