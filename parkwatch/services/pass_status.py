# parkwatch/services/pass_status.py
"""
Visitor pass status derivation.

Pure functions only: they read a pass (ORM row or plain dict) and a clock
value and return display state. Nothing here touches the database, so the
same (pass, now) always yields the same answer.

  valid_until = stored valid_until, or created_at + hours for rows without one
  status      = "active" if valid_until > now else "expired"   ("Unknown" if unparsable)
  remaining   = "Expired" | "{d}d {h}h" (>= 24h) | "{h}h {m}m"
"""

import re
from datetime import datetime, timedelta, timezone
from typing import Union

from parkwatch.config import settings

STATUS_ACTIVE = "active"
STATUS_EXPIRED = "expired"
STATUS_UNKNOWN = "Unknown"
EXPIRED_LABEL = "Expired"

_DAYS_RE = re.compile(r"^(\d+)d (\d+)h$")
_HOURS_RE = re.compile(r"^(\d+)h (\d+)m$")

Timestamp = Union[datetime, str]


def _field(record, name):
    if isinstance(record, dict):
        return record.get(name)
    return getattr(record, name, None)


def to_datetime(value: Timestamp) -> datetime:
    """
    Coerce a datetime or ISO-8601 string to a naive UTC datetime.
    Raises ValueError for anything else.
    """
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, str) and value.strip():
        dt = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    else:
        raise ValueError(f"Unparsable timestamp: {value!r}")

    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt


def resolve_valid_until(record) -> datetime:
    """Stored valid_until wins; legacy rows fall back to created_at + hours."""
    valid_until = _field(record, "valid_until")
    if valid_until is not None:
        return to_datetime(valid_until)
    created_at = to_datetime(_field(record, "created_at"))
    return created_at + timedelta(hours=int(_field(record, "hours")))


def derive_status(record, now: Timestamp) -> str:
    try:
        valid_until = resolve_valid_until(record)
        now = to_datetime(now)
    except (ValueError, TypeError):
        return STATUS_UNKNOWN
    return STATUS_ACTIVE if valid_until > now else STATUS_EXPIRED


def format_time_remaining(valid_until: Timestamp, now: Timestamp) -> str:
    try:
        diff = to_datetime(valid_until) - to_datetime(now)
    except (ValueError, TypeError):
        return STATUS_UNKNOWN

    seconds = diff.total_seconds()
    if seconds <= 0:
        return EXPIRED_LABEL

    total_minutes = int(seconds // 60)
    hours, minutes = divmod(total_minutes, 60)
    if hours >= 24:
        return f"{hours // 24}d {hours % 24}h"
    return f"{hours}h {minutes}m"


def parse_time_remaining(text: str) -> int:
    """Inverse of format_time_remaining, in whole minutes. "Expired" is 0."""
    if text == EXPIRED_LABEL:
        return 0
    match = _DAYS_RE.match(text)
    if match:
        return int(match.group(1)) * 24 * 60 + int(match.group(2)) * 60
    match = _HOURS_RE.match(text)
    if match:
        return int(match.group(1)) * 60 + int(match.group(2))
    raise ValueError(f"Not a time-remaining string: {text!r}")


def pass_type_label(hours) -> str:
    tier = settings.tier_for_hours(hours)
    return tier["type"] if tier else f"{hours} hour"
