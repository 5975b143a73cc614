from __future__ import annotations

from collections.abc import Generator
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest
from packaging.version import Version
from zabbix_triggers.config.model import APIConfig
from zabbix_triggers.config.model import Config
from zabbix_triggers.pyzabbix.client import ZabbixAPI
from zabbix_triggers.pyzabbix.types import Trigger

from tests.utils import make_trigger

TOML_CONFIG_STR = """
[api]
url = "https://zabbix.example.com"
username = "Admin"
password = "zabbix"
verify_ssl = false
timeout = 5

[triggers]
sort = "priority"
order = "asc"
limit = "50"
acknowledge_message = "On it"
output_format = "JSON"

[logging]
enabled = true
log_level = "debug"
log_file = ""
"""


@pytest.fixture()
def triggers() -> list[Trigger]:
    return [
        Trigger.model_validate(make_trigger("1", "101", "db01", "Disk full on /var")),
        Trigger.model_validate(
            make_trigger("2", "102", "web01", "High load", priority=2)
        ),
        Trigger.model_validate(
            make_trigger("3", "103", "db02", "Replication lag", acknowledged=1)
        ),
    ]


@pytest.fixture()
def config_path(tmp_path: Path) -> Iterator[Path]:
    config_copy = tmp_path / "zabbix-triggers.toml"
    config_copy.write_text(TOML_CONFIG_STR)
    yield config_copy


@pytest.fixture(name="config")
def config(tmp_path: Path) -> Iterator[Config]:
    """Return a config for a test server."""
    conf = Config(api=APIConfig(url="https://zabbix.example.com"))
    # Set up logging for the test environment
    log_file = tmp_path / "zabbix-triggers.log"
    conf.logging.log_file = log_file
    conf.logging.log_level = "DEBUG"  # we want to see all logs
    yield conf


@pytest.fixture(name="zabbix_client")
def zabbix_client() -> Iterator[ZabbixAPI]:
    """Client for a server that cannot be reached."""
    config = Config(api=APIConfig(url="http://some-url-that-will-fail.gg"))
    client = ZabbixAPI.from_config(config)
    yield client
    client.close()


@pytest.fixture(name="zabbix_client_mock_version")
def zabbix_client_mock_version(
    zabbix_client: ZabbixAPI, monkeypatch: pytest.MonkeyPatch
) -> Iterator[ZabbixAPI]:
    monkeypatch.setattr(zabbix_client, "api_version", lambda: Version("7.0.0"))
    yield zabbix_client


@pytest.fixture(name="no_color")
def no_color() -> Generator[Any, Any, Any]:
    """Disable color in a test."""
    import os

    os.environ.pop("FORCE_COLOR", None)
    os.environ["NO_COLOR"] = "1"
    yield
    os.environ.pop("NO_COLOR", None)
