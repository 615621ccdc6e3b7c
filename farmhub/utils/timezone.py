"""Timezone helpers for reading the farm-local clock."""

from datetime import datetime, timezone
from functools import lru_cache
from zoneinfo import ZoneInfo


@lru_cache(maxsize=8)
def _get_tz(tz_name):
    return ZoneInfo(tz_name)


def to_farm_time(dt, tz_name=None):
    """Convert a datetime to the farm's local timezone.

    Args:
        dt: A datetime. Naive values are assumed to be UTC.
        tz_name: IANA timezone name. Falls back to the configured SCHEDULE_TIMEZONE.

    Returns:
        Timezone-aware datetime in the farm's local time.
    """
    if tz_name is None:
        from farmhub.config import get_config
        tz_name = get_config().SCHEDULE_TIMEZONE
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(_get_tz(tz_name))


def minutes_of_day(dt, tz_name=None):
    """Return the farm-local minute of day (0-1439) for a datetime."""
    local_dt = to_farm_time(dt, tz_name)
    return local_dt.hour * 60 + local_dt.minute


def farm_now(tz_name=None):
    """Current farm-local datetime."""
    return to_farm_time(datetime.now(timezone.utc), tz_name)
