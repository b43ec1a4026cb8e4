"""
Blog Backend — Local Time Helpers
===================================

What:  Conversion between stored publish timestamps and their API rendering.
How:   Timestamps are stored as naive wall-clock values in a fixed UTC offset
       (settings.timezone_offset_hours, +08:00 by default). Timezone-aware
       values, e.g. from a TIMESTAMPTZ column, are converted into that offset.
       The API always renders `YYYY-MM-DD HH:MM:SS`.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional, Union

from app.config import settings

LOCAL_TZ = timezone(timedelta(hours=settings.timezone_offset_hours))

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def to_local(value: datetime) -> datetime:
    """Return a naive datetime expressed in local wall-clock time."""
    if value.tzinfo is not None:
        value = value.astimezone(LOCAL_TZ).replace(tzinfo=None)
    return value


def now_local() -> datetime:
    """Current local time, truncated to whole seconds."""
    return to_local(datetime.now(timezone.utc)).replace(microsecond=0)


def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    return to_local(value).strftime(TIMESTAMP_FORMAT)


def parse_timestamp(value: Union[str, datetime]) -> datetime:
    """
    Parse a client-supplied publish date into a naive local datetime.

    Accepts `YYYY-MM-DD HH:MM:SS`, `YYYY-MM-DD` and ISO-8601 strings (with
    an optional offset, which is converted to local time).

    Raises:
        ValueError: the value is not a recognizable timestamp
    """
    if isinstance(value, datetime):
        parsed = value
    else:
        text = value.strip()
        if not text:
            raise ValueError("publish_date must not be empty")
        # Python < 3.11 fromisoformat does not understand a trailing Z
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            raise ValueError(
                f"Invalid publish_date '{value}'. Expected format YYYY-MM-DD HH:MM:SS"
            ) from None
    try:
        return to_local(parsed).replace(microsecond=0)
    except OverflowError:
        # Shifting to the local offset crossed year 1 or year 9999
        raise ValueError(f"publish_date '{value}' is out of range") from None
