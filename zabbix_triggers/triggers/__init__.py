"""Querying, filtering and acknowledging Zabbix triggers."""
