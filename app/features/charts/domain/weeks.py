"""
ISO-8601 week keys used to address chart snapshots and weekly analytics.

Keys look like ``2025-W40``: ISO week-numbering year, then the ISO week
number zero-padded to two digits. Historical snapshots were written with
this exact format, and keys compare correctly as plain strings.
"""

import re
from datetime import UTC, date, datetime, timedelta

_WEEK_KEY_RE = re.compile(r"^(\d{4})-W(\d{2})$")


def week_key(moment: date | datetime) -> str:
    iso = moment.isocalendar()
    return f"{iso.year}-W{iso.week:02d}"


def current_and_previous_week(now: datetime | None = None) -> tuple[str, str]:
    """Keys for the week containing ``now`` and the week seven days before it."""
    now = now or datetime.now(UTC)
    return week_key(now), week_key(now - timedelta(days=7))


def week_start(key: str) -> date:
    """Monday of the given ISO week."""
    match = _WEEK_KEY_RE.match(key)
    if not match:
        raise ValueError(f"Invalid ISO week key: {key!r}")
    year, week = int(match.group(1)), int(match.group(2))
    return date.fromisocalendar(year, week, 1)


def is_week_key(value: str) -> bool:
    return bool(_WEEK_KEY_RE.match(value))


def previous_week(key: str) -> str:
    """Key of the ISO week before ``key``."""
    return week_key(week_start(key) - timedelta(days=7))
