from __future__ import annotations

from zabbix_triggers.__about__ import __version__

__all__ = ["__version__"]
