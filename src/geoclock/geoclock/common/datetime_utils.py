from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional
from zoneinfo import ZoneInfo


def parse_iso_datetime(value: str, tz: ZoneInfo) -> datetime:
    """Parse an ISO-8601 timestamp; naive values are taken as local time in ``tz``."""
    text = value.strip()
    # JS Date.toISOString() ends with "Z", which fromisoformat only accepts from 3.11.
    if text[-1:] in ("Z", "z"):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=tz)
    return parsed.astimezone(tz)


def now_local(tz: ZoneInfo) -> datetime:
    """Current time in the organization's timezone.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now(tz)


def to_utc_naive(value: datetime) -> datetime:
    """Storage form: MySQL DATETIME columns hold UTC without tzinfo."""
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def from_utc_naive(value: Optional[datetime], tz: ZoneInfo) -> Optional[datetime]:
    if value is None:
        return None
    return value.replace(tzinfo=timezone.utc).astimezone(tz)


def split_local(value: Optional[datetime], tz: ZoneInfo) -> tuple[str, str]:
    """Wire form: ('YYYY-MM-DD', 'HH:MM:SS') in ``tz``; empty strings for None."""
    if value is None:
        return "", ""
    local = value.astimezone(tz)
    return local.strftime("%Y-%m-%d"), local.strftime("%H:%M:%S")
