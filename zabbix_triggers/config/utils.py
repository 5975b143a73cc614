from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING
from typing import Any
from typing import Optional

from zabbix_triggers.config.constants import CONFIG_PRIORITY
from zabbix_triggers.config.constants import ConfigEnvVars
from zabbix_triggers.exceptions import ConfigError

if TYPE_CHECKING:
    from zabbix_triggers.config.model import Config

logger = logging.getLogger(__name__)


def load_config_toml(filename: Path) -> dict[str, Any]:
    """Load a TOML configuration file."""
    import tomli

    try:
        return tomli.loads(filename.read_text())
    except tomli.TOMLDecodeError as e:
        raise ConfigError(f"Error decoding TOML file {filename}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Error reading TOML file {filename}: {e}") from e


def find_config(
    filename: Optional[Path] = None,
    priority: tuple[Path, ...] = CONFIG_PRIORITY,
) -> Optional[Path]:
    """Find the first available configuration file.

    :param filename: An optional user supplied file, checked before the defaults
    """
    filename_prio = list(priority)
    if filename:
        filename_prio.insert(0, filename)
    for fp in filename_prio:
        if fp.exists():
            logger.debug("found config %r", fp)
            return fp
    return None


def apply_env_overrides(config: Config) -> Config:
    """Override API connection options with values from environment variables."""
    from pydantic import SecretStr

    if url := os.environ.get(ConfigEnvVars.URL):
        config.api.url = url
    if username := os.environ.get(ConfigEnvVars.USERNAME):
        config.api.username = username
    if password := os.environ.get(ConfigEnvVars.PASSWORD):
        config.api.password = SecretStr(password)
    if token := os.environ.get(ConfigEnvVars.API_TOKEN):
        config.api.auth_token = SecretStr(token)
    return config


def get_config(filename: Optional[Path] = None) -> Config:
    """Get a configuration object.

    Args:
        filename (Optional[Path], optional): An optional user supplied file. Defaults to None.

    Returns:
        Config: Config object loaded from file, with environment overrides applied
    """
    from zabbix_triggers.config.model import Config

    return apply_env_overrides(Config.from_file(filename))
