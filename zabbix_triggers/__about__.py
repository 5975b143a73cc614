from __future__ import annotations

APP_NAME = "zabbix-triggers"
AUTHOR = "unioslo"
DESCRIPTION = "Show and acknowledge Zabbix triggers from the terminal"
__version__ = "1.0.0"
