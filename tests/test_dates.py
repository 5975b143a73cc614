from __future__ import annotations

from datetime import datetime
from datetime import timedelta

import pytest
from freezegun import freeze_time
from zabbix_triggers.exceptions import DateParseError
from zabbix_triggers.utils.dates import convert_duration
from zabbix_triggers.utils.dates import convert_timestamp
from zabbix_triggers.utils.dates import parse_datetime


@pytest.mark.parametrize(
    "input,expect",
    [
        ("1 hour", timedelta(hours=1)),
        ("1 hour 30 minutes", timedelta(hours=1, minutes=30)),
        (
            "1 day 1 hour 30 minutes 30 seconds",
            timedelta(days=1, hours=1, minutes=30, seconds=30),
        ),
        ("2 hour 30 minute 30 second", timedelta(hours=2, minutes=30, seconds=30)),
        ("2h30m30s", timedelta(hours=2, minutes=30, seconds=30)),
        ("1d12h", timedelta(days=1, hours=12)),
        ("9030s", timedelta(seconds=9030)),
        ("9030", timedelta(seconds=9030)),
    ],
)
def test_convert_duration(input: str, expect: timedelta) -> None:
    assert convert_duration(input) == expect


@pytest.mark.parametrize("input", ["", "hours", "1x", "1 fortnight"])
def test_convert_duration_invalid(input: str) -> None:
    with pytest.raises(DateParseError):
        convert_duration(input)


@pytest.mark.parametrize(
    "input,expect",
    [
        ("2016-11-21T22:00", datetime(2016, 11, 21, 22, 0)),
        ("2016-11-21T22:00:30", datetime(2016, 11, 21, 22, 0, 30)),
        ("2016-11-21 22:00:30", datetime(2016, 11, 21, 22, 0, 30)),
        ("2016-11-21 22:00", datetime(2016, 11, 21, 22, 0)),
        ("2016-11-21", datetime(2016, 11, 21)),
    ],
)
def test_convert_timestamp(input: str, expect: datetime) -> None:
    assert convert_timestamp(input) == expect


def test_parse_datetime_unix_timestamp() -> None:
    assert parse_datetime("1700000000") == 1700000000
    assert parse_datetime("  1700000000 ") == 1700000000


def test_parse_datetime_iso_with_offset() -> None:
    assert parse_datetime("2024-01-01T00:00:00+00:00") == 1704067200
    assert parse_datetime("2024-01-01T02:00:00+02:00") == 1704067200


def test_parse_datetime_naive_is_local_time() -> None:
    expect = int(datetime(2024, 1, 1, 12, 30).timestamp())
    assert parse_datetime("2024-01-01 12:30") == expect
    assert parse_datetime("2024-01-01T12:30") == expect


@freeze_time("2016-11-21 22:00:00")
def test_parse_datetime_keywords() -> None:
    now = parse_datetime("now")
    assert now == int(datetime(2016, 11, 21, 22, 0, 0).timestamp())
    assert parse_datetime("NOW") == now
    assert parse_datetime("today") == int(datetime(2016, 11, 21).timestamp())
    assert parse_datetime("yesterday") == int(datetime(2016, 11, 20).timestamp())


@freeze_time("2016-11-21 22:00:00")
@pytest.mark.parametrize(
    "input,expect_ago",
    [
        ("2h", timedelta(hours=2)),
        ("1d12h", timedelta(days=1, hours=12)),
        ("30 minutes", timedelta(minutes=30)),
        ("1 day ago", timedelta(days=1)),
        ("3 hours ago", timedelta(hours=3)),
    ],
)
def test_parse_datetime_relative(input: str, expect_ago: timedelta) -> None:
    now = parse_datetime("now")
    assert now - parse_datetime(input) == int(expect_ago.total_seconds())


@pytest.mark.parametrize(
    "input", ["not-a-date", "", "   ", "2016-13-45", "ago", "tomorrow"]
)
def test_parse_datetime_invalid(input: str) -> None:
    with pytest.raises(DateParseError):
        parse_datetime(input)
