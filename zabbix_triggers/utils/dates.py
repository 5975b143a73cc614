"""Conversion of user-supplied date strings to Unix timestamps.

Accepts Unix timestamps, the keywords `now`, `today` and `yesterday`,
ISO 8601 and a handful of legacy timestamp formats, as well as relative
durations (`2h`, `1d12h`, `30 minutes`, `1 day ago`) that are
interpreted as "that long before now".
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime
from datetime import timedelta
from typing import NamedTuple

from zabbix_triggers.exceptions import DateParseError

logger = logging.getLogger(__name__)


class TimeUnit(NamedTuple):
    """Time value."""

    unit: str
    tokens: Iterable[str]
    value: int
    """The value of the time unit in seconds."""


# NOTE: PLURAL TOKEN MUST BE LISTED FIRST
TIME_VALUE_DAY = TimeUnit("D", ["days", "day"], value=60 * 60 * 24)
TIME_VALUE_HOUR = TimeUnit("H", ["hours", "hour"], value=60 * 60)
TIME_VALUE_MINUTE = TimeUnit("M", ["minutes", "minute"], value=60)
TIME_VALUE_SECOND = TimeUnit("S", ["seconds", "second"], value=1)
TIME_VALUES = [
    TIME_VALUE_DAY,
    TIME_VALUE_HOUR,
    TIME_VALUE_MINUTE,
    TIME_VALUE_SECOND,
]

TIMESTAMP_FORMATS = [
    "%Y-%m-%dT%H:%M",  # Legacy format (no seconds)
    "%Y-%m-%dT%H:%M:%S",  # with T separator
    "%Y-%m-%d %H:%M:%S",  # without T separator
    "%Y-%m-%d %H:%M",
    "%Y-%m-%d",
]

RELATIVE_SUFFIX = "ago"


def start_of_day(dt: datetime) -> datetime:
    return dt.replace(hour=0, minute=0, second=0, microsecond=0)


def convert_timestamp(ts: str) -> datetime:
    """Convert an ISO 8601 or legacy timestamp string to a datetime.

    Naive timestamps are interpreted in local time.
    """
    try:
        return datetime.fromisoformat(ts)
    except ValueError:
        pass

    for fmt in TIMESTAMP_FORMATS:
        try:
            return datetime.strptime(ts, fmt)
        except ValueError:
            pass
    raise DateParseError(f"Invalid timestamp: {ts}")


def convert_duration(time: str) -> timedelta:
    """Convert duration to timedelta.

    `time` is a string that specifies a duration of time in
    one of the following formats:

    - `1d1h30m30s`
    - `1 day 1 hour 30 minutes 30 seconds`

    Any combination of the above is also valid, e.g.:

    - `1d1h30m`
    - `2 days 30 minutes`
    - `1 hour`
    """

    def try_convert_int(s: str) -> int:
        if not s:
            return 0
        try:
            return int(s)
        except ValueError as e:
            raise DateParseError(f"Invalid time value: {s}") from e

    if not any(c.isdigit() for c in time):
        raise DateParseError(f"Invalid duration: {time}")

    time = time.replace(" ", "")
    for time_value in TIME_VALUES:
        # First replace full words (days, hours, minutes, seconds)
        for token in time_value.tokens:
            time = time.replace(token, time_value.unit)
    # Then replace abbreviations (d, h, m, s) with uppercase
    time = time.upper()

    days, sep, rest = time.partition(TIME_VALUE_DAY.unit)
    if not sep:
        days, rest = rest, days
    hours, sep, rest = rest.partition(TIME_VALUE_HOUR.unit)
    if not sep:
        hours, rest = rest, hours
    minutes, sep, rest = rest.partition(TIME_VALUE_MINUTE.unit)
    if not sep:
        minutes, rest = rest, minutes
    seconds, sep, rest = rest.partition(TIME_VALUE_SECOND.unit)
    if rest:
        raise DateParseError(f"Invalid time value: {time}")

    return timedelta(
        days=try_convert_int(days),
        hours=try_convert_int(hours),
        minutes=try_convert_int(minutes),
        seconds=try_convert_int(seconds),
    )


def parse_datetime(value: str) -> int:
    """Parse a date string into a Unix timestamp (seconds).

    Raises:
        DateParseError: The string is not in any of the accepted formats.
    """
    value = value.strip()
    if not value:
        raise DateParseError("Empty date string")
    if value.isdigit():
        return int(value)

    now = datetime.now()
    keyword = value.lower()
    if keyword == "now":
        return int(now.timestamp())
    elif keyword == "today":
        return int(start_of_day(now).timestamp())
    elif keyword == "yesterday":
        return int((start_of_day(now) - timedelta(days=1)).timestamp())

    try:
        return int(convert_timestamp(value).timestamp())
    except DateParseError:
        logger.debug("%r is not a timestamp, trying as a duration", value)

    duration = keyword
    if duration.endswith(RELATIVE_SUFFIX):
        duration = duration[: -len(RELATIVE_SUFFIX)]
    try:
        td = convert_duration(duration)
    except DateParseError as e:
        raise DateParseError(f"Unable to parse date: {value}") from e
    return int((now - td).timestamp())
