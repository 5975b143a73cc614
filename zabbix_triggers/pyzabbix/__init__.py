"""Zabbix JSON-RPC API client.

Based on PyZabbix (https://github.com/lukecyca/pyzabbix), via Zabbix-CLI,
reduced to the API methods needed to list and acknowledge triggers.
"""
