"""Compatibility functions to support different Zabbix API versions."""

from __future__ import annotations

from typing import Literal

from packaging.version import Version

# Compatibility methods for Zabbix API method parameters.
#
# NOTE: All functions follow the same pattern:
# Early return if the version is older than the version where the property
# was deprecated, otherwise return the new property name as the default.


def login_user_name(version: Version) -> Literal["user", "username"]:
    # https://support.zabbix.com/browse/ZBXNEXT-8085
    # Deprecated in 5.4.0, removed in 6.4.0
    if version.release < (5, 4, 0):
        return "user"
    return "username"


def auth_header(version: Version) -> bool:
    """Whether the auth token is sent as a Bearer header instead of in the body."""
    # https://www.zabbix.com/documentation/6.4/en/manual/api#authentication
    return version.release >= (6, 4, 0)


def event_acknowledge_action(version: Version) -> bool:
    """Whether `event.acknowledge` takes an `action` bitmask."""
    # https://www.zabbix.com/documentation/4.0/en/manual/api/reference/event/acknowledge
    return version.release >= (4, 0, 0)
