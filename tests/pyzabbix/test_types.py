from __future__ import annotations

from datetime import datetime
from datetime import timezone

import pytest
from inline_snapshot import snapshot
from zabbix_triggers.pyzabbix.types import Host
from zabbix_triggers.pyzabbix.types import LastEvent
from zabbix_triggers.pyzabbix.types import Trigger
from zabbix_triggers.pyzabbix.types import format_datetime

from tests.utils import make_trigger


def test_trigger_from_api() -> None:
    trigger = Trigger.model_validate(make_trigger("7", "700", "db01", "Disk full"))
    assert trigger.triggerid == "7"
    assert trigger.lastchange == datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc)
    assert trigger.priority == 4
    assert trigger.hosts == [Host(hostid="107", host="db01")]
    assert trigger.last_event == LastEvent(
        eventid="700",
        acknowledged=0,
        clock=datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc),
        value=1,
    )


@pytest.mark.parametrize("last_event", [[], {}, None])
def test_trigger_without_last_event(last_event: object) -> None:
    trigger = Trigger.model_validate(
        {"triggerid": "1", "description": "foo", "lastEvent": last_event}
    )
    assert trigger.last_event is None
    assert trigger.event_id == ""
    assert trigger.status_acknowledge == "NACK"


def test_trigger_without_hosts() -> None:
    trigger = Trigger(triggerid="1")
    assert trigger.hostname == ""


@pytest.mark.parametrize(
    "priority, expect",
    [
        (0, "Unclassified"),
        (1, "Information"),
        (2, "Warning"),
        (3, "Average"),
        (4, "High"),
        (5, "Disaster"),
        (9, "Unknown"),
        (None, "Unknown"),
    ],
)
def test_trigger_severity(priority: int | None, expect: str) -> None:
    assert Trigger(triggerid="1", priority=priority).severity == expect


def test_trigger_status() -> None:
    trigger = Trigger.model_validate(make_trigger(value=0, acknowledged=1))
    assert trigger.status_problem == "OK"
    assert trigger.status_acknowledge == "ACK"


def test_trigger_row_and_str() -> None:
    trigger = Trigger.model_validate(
        make_trigger("1", "101", "db01", "Disk full on /var")
    )
    row = trigger.row()
    assert len(row) == 7
    assert row[0] == "101"
    assert row[1] == format_datetime(trigger.lastchange)
    assert row[2:] == snapshot(["High", "PROBLEM", "NACK", "db01", "Disk full on /var"])
    assert str(trigger) == " ".join(row)


def test_format_datetime() -> None:
    assert format_datetime(None) == ""
    dt = datetime(2024, 1, 1, 12, 0, 0).astimezone()
    assert format_datetime(dt) == "2024-01-01 12:00:00"
