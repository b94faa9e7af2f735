from datetime import datetime, timedelta, timezone
import math
from zoneinfo import ZoneInfo


def get_utc_now() -> datetime:
    """
    Get the current date and time in UTC.

    This function returns the current time with timezone information set to UTC,
    ensuring that the returned datetime object is offset-aware.

    Returns:
        datetime: The current date and time in UTC with tzinfo set to ZoneInfo("UTC").
    """
    return datetime.now(ZoneInfo("UTC"))


def ensure_aware_utc(dt: datetime) -> datetime:
    # Naive datetimes are taken as UTC
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def to_unix_seconds(dt: datetime) -> int:
    """Whole seconds since the epoch, rounded down."""
    return math.floor(ensure_aware_utc(dt).timestamp())


def from_unix_seconds(seconds: int | float) -> datetime:
    """
    Convert a unix timestamp into an aware UTC datetime.

    Raises:
        OverflowError, OSError, ValueError: if the timestamp is out of the
            range supported by the platform.
    """
    return datetime.fromtimestamp(seconds, tz=timezone.utc)


def duration_to_seconds(duration: timedelta) -> int:
    return int(duration.total_seconds())


def is_within_expiration_date(
    expires_at: datetime, now: datetime | None = None
) -> bool:
    """
    Check whether the current instant is strictly earlier than `expires_at`.

    Args:
        expires_at: The absolute expiration time
        now: Reference instant, defaults to the current UTC time

    Returns:
        bool: True while the expiration time has not been reached
    """
    if now is None:
        now = get_utc_now()
    return ensure_aware_utc(now) < ensure_aware_utc(expires_at)
