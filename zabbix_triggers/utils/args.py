"""Parsing of command line argument values."""

from __future__ import annotations

from typing import Optional

from zabbix_triggers.exceptions import ZabbixTriggersError


def parse_list_arg(arg: Optional[str], keep_empty: bool = False) -> list[str]:
    """Convert comma-separated string to list."""
    try:
        args = arg.strip().split(",") if arg else []
        if not keep_empty:
            args = [a for a in args if a]
        return args
    except ValueError as e:
        raise ZabbixTriggersError(f"Invalid comma-separated string value: {arg}") from e
