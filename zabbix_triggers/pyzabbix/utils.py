from __future__ import annotations

from typing import Final

ACKNOWLEDGE_ACTION_BITMASK: Final[dict[str, int]] = {
    "acknowledge": 0b000000010,
    "message": 0b000000100,
}


def get_acknowledge_action_value(
    acknowledge: bool = False,
    message: bool = False,
) -> int:
    """Get the `action` bitmask for `event.acknowledge`.

    See: https://www.zabbix.com/documentation/current/en/manual/api/reference/event/acknowledge
    """
    value = 0
    if acknowledge:
        value += ACKNOWLEDGE_ACTION_BITMASK["acknowledge"]
    if message:
        value += ACKNOWLEDGE_ACTION_BITMASK["message"]
    return value
