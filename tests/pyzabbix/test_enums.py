from __future__ import annotations

import pytest
from zabbix_triggers.exceptions import ZabbixTriggersError
from zabbix_triggers.pyzabbix.enums import AckStatus
from zabbix_triggers.pyzabbix.enums import APIStr
from zabbix_triggers.pyzabbix.enums import APIStrEnum
from zabbix_triggers.pyzabbix.enums import TriggerPriority
from zabbix_triggers.pyzabbix.enums import TriggerValue

APISTR_ENUMS = [AckStatus, TriggerPriority, TriggerValue]


@pytest.mark.parametrize("enum", APISTR_ENUMS)
def test_apistrenum(enum: type[APIStrEnum]) -> None:
    assert enum.__members__
    for member in enum:
        assert isinstance(member.value, APIStr)
        assert isinstance(member.value.api_value, int)
        # Instantiate with name, API value and API value as string
        assert enum(member.value) == member
        assert enum(member.as_api_value()) == member
        assert enum(str(member.as_api_value())) == member


def test_choice_case_insensitive() -> None:
    assert TriggerPriority("HIGH") == TriggerPriority.HIGH
    assert TriggerPriority.choices() == [
        "unclassified",
        "information",
        "warning",
        "average",
        "high",
        "disaster",
    ]


def test_choice_invalid() -> None:
    with pytest.raises(ZabbixTriggersError, match="Invalid trigger priority"):
        TriggerPriority("critical")


@pytest.mark.parametrize(
    "value, with_code, expect",
    [
        (1, False, "ACK"),
        ("0", False, "NACK"),
        (1, True, "ACK (1)"),
        (7, False, "Unknown"),
        (7, True, "Unknown (7)"),
    ],
)
def test_string_from_value(value: object, with_code: bool, expect: str) -> None:
    assert AckStatus.string_from_value(value, with_code=with_code) == expect
