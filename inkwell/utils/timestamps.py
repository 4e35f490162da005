"""
Timestamp helpers.

Sort-key timestamps are stored in UTC at millisecond precision so that a
cursor (which only carries epoch milliseconds) compares exactly against the
stored value. SQLite hands back naive datetimes; they are always UTC here.
"""

from datetime import UTC, datetime


def as_utc(value: datetime) -> datetime:
    """Return `value` as an aware UTC datetime (naive values are taken as UTC)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def truncate_ms(value: datetime) -> datetime:
    """Convert to UTC and drop sub-millisecond precision."""
    value = as_utc(value)
    return value.replace(microsecond=value.microsecond - value.microsecond % 1000)


def utc_now() -> datetime:
    return truncate_ms(datetime.now(UTC))
