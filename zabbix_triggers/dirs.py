"""Defines directories for the application.

Follows the XDG Base Directory Specification on Linux: <https://specifications.freedesktop.org/basedir-spec/basedir-spec-latest.html>
See <https://pypi.org/project/platformdirs/> for other platforms.
"""

from __future__ import annotations

from platformdirs import PlatformDirs

from zabbix_triggers.__about__ import APP_NAME
from zabbix_triggers.__about__ import AUTHOR

_PLATFORM_DIR = PlatformDirs(APP_NAME, AUTHOR)

CONFIG_DIR = _PLATFORM_DIR.user_config_path
"""Directory for user configuration files."""

LOGS_DIR = _PLATFORM_DIR.user_log_path
"""Directory to store user log files."""

SITE_CONFIG_DIR = _PLATFORM_DIR.site_config_path
"""Directory for site-wide configuration files, i.e. `/etc/xdg/zabbix-triggers`."""
