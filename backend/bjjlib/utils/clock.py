"""Wall-clock helpers.

Timestamps are stored as naive UTC datetimes so that SQLite and PostgreSQL
compare them the same way.
"""

from datetime import datetime, timezone


def utcnow() -> datetime:
    """Current UTC time without tzinfo."""
    return datetime.now(timezone.utc).replace(tzinfo=None)
