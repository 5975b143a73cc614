from __future__ import annotations

from pathlib import Path

from strenum import StrEnum

from zabbix_triggers.dirs import CONFIG_DIR
from zabbix_triggers.dirs import LOGS_DIR
from zabbix_triggers.dirs import SITE_CONFIG_DIR

# Config file basename
CONFIG_FILENAME = "zabbix-triggers.toml"
DEFAULT_CONFIG_FILE = CONFIG_DIR / CONFIG_FILENAME


CONFIG_PRIORITY = (
    Path() / CONFIG_FILENAME,  # current directory
    DEFAULT_CONFIG_FILE,  # local config directory
    SITE_CONFIG_DIR / CONFIG_FILENAME,  # system config directory
)

LOG_FILE = LOGS_DIR / "zabbix-triggers.log"


# Environment variable names
class ConfigEnvVars:
    API_TOKEN = "ZABBIX_API_TOKEN"
    PASSWORD = "ZABBIX_PASSWORD"
    URL = "ZABBIX_URL"
    USERNAME = "ZABBIX_USERNAME"


class OutputFormat(StrEnum):
    JSON = "json"
    TABLE = "table"
