"""Staleness policy for persisted source content."""

from datetime import datetime, timedelta

DEFAULT_MAX_AGE = timedelta(hours=24)


def is_stale(
    last_synced_at: datetime | None,
    now: datetime,
    max_age: timedelta = DEFAULT_MAX_AGE,
) -> bool:
    """A source never synced is stale; otherwise stale once older than max_age."""
    if last_synced_at is None:
        return True
    return now - last_synced_at > max_age
